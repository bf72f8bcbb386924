"""Normalized feed and item models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedItem(BaseModel):
    """One normalized syndication entry."""

    model_config = ConfigDict(frozen=True)

    title: str = Field("Untitled", description="Item title")
    link: str = Field("", description="Canonical article URL")
    published_at: str = Field("", description="Publication date as found in the feed")
    content_snippet: str = Field("", description="Short plain description")
    full_content: str = Field("", description="Full content, HTML allowed")
    guid: str = Field(..., description="Stable identifier")
    categories: List[str] = Field(default_factory=list, description="Item categories")
    creator: str = Field("", description="Author name")
    source_feed_title: str = Field("", description="Title of the feed the item came from")
    source_feed_url: str = Field("", description="Link of the feed the item came from")


class NormalizedFeed(BaseModel):
    """A feed with items sorted newest first."""

    title: str = Field("Unknown Feed", description="Feed title")
    description: str = Field("", description="Feed description or subtitle")
    link: str = Field("", description="Feed home page")
    items: List[FeedItem] = Field(default_factory=list, description="Items, newest first")
    last_build_date: str = Field("", description="Last build or update date")


class FeedResult(BaseModel):
    """Outcome of fetching one feed during aggregation."""

    url: str = Field(..., description="Requested feed URL")
    success: bool = Field(..., description="Whether fetch and parse succeeded")
    feed: Optional[NormalizedFeed] = Field(None, description="Parsed feed on success")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of items fetched")
    duration: float = Field(0.0, description="Seconds spent on this feed")
