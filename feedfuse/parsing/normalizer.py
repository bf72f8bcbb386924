"""Map RSS items and Atom entries onto `FeedItem`."""

import logging
from typing import Any, Iterable, List, Mapping, NamedTuple, Sequence

from pydantic import ValidationError

from ..models import FeedItem
from .links import is_hn_discussion_link, resolve_hn_link, resolve_link
from .tree import XmlNode, as_node, extract_text

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"
SNIPPET_LENGTH = 200

CONTENT_FIELDS = ("content:encoded", "content", "description", "summary")
SNIPPET_FIELDS = ("description", "summary")
DATE_FIELDS = ("pubDate", "published", "updated", "dc:date")
ID_FIELDS = ("guid", "id")
CREATOR_FIELDS = ("dc:creator", "creator", "author")
HN_SEARCH_FIELDS = ("description", "content:encoded", "content")


class ChannelContext(NamedTuple):
    """Feed-level values stamped onto every item."""

    title: str = ""
    link: str = ""


def _get(item: Any, name: str) -> Any:
    if isinstance(item, (XmlNode, Mapping)):
        return item.get(name)
    return None


def _first_text(item: Any, names: Sequence[str]) -> str:
    for name in names:
        text = extract_text(_get(item, name)).strip()
        if text:
            return text
    return ""


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _categories(item: Any) -> List[str]:
    categories = []
    for value in _as_list(_get(item, "category")):
        if isinstance(value, XmlNode) and not value.text and "term" in value.attributes:
            text = value.attributes["term"]
        elif isinstance(value, Mapping) and "@term" in value:
            text = str(value["@term"])
        else:
            text = extract_text(value)
        text = text.strip()
        if text:
            categories.append(text)
    return categories


def _creator(item: Any) -> str:
    for name in CREATOR_FIELDS:
        value = _get(item, name)
        if isinstance(value, (XmlNode, Mapping)) and value.get("name") is not None:
            value = value.get("name")
        text = extract_text(value).strip()
        if text:
            return text
    return ""


def normalize_item(raw_item: Any, channel: ChannelContext = ChannelContext(), index: int = 0) -> FeedItem:
    """Normalize one raw item.

    `raw_item` is an `XmlNode` from the parser or a plain mapping of field
    names to values. Missing fields become empty strings or lists.
    """
    item = raw_item if isinstance(raw_item, Mapping) else as_node(raw_item, "item")

    link = resolve_link(_get(item, "link"))
    content = _first_text(item, CONTENT_FIELDS)
    if is_hn_discussion_link(link):
        link = resolve_hn_link(link, _first_text(item, HN_SEARCH_FIELDS))

    return FeedItem(
        title=_first_text(item, ("title",)) or DEFAULT_TITLE,
        link=link,
        published_at=_first_text(item, DATE_FIELDS),
        content_snippet=_first_text(item, SNIPPET_FIELDS) or content[:SNIPPET_LENGTH],
        full_content=content,
        guid=_first_text(item, ID_FIELDS) or f"item-{index}",
        categories=_categories(item),
        creator=_creator(item),
        source_feed_title=channel.title,
        source_feed_url=channel.link,
    )


def normalize_items(raw_items: Iterable[Any], channel: ChannelContext = ChannelContext()) -> List[FeedItem]:
    """Normalize items in source order; a broken item never drops the feed."""
    items = []
    for index, raw_item in enumerate(raw_items):
        try:
            items.append(normalize_item(raw_item, channel, index))
        except (ValidationError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not normalize item %d of %r: %s", index, channel.title, e)
            items.append(
                FeedItem(
                    guid=f"item-{index}",
                    source_feed_title=channel.title,
                    source_feed_url=channel.link,
                )
            )
    return items
