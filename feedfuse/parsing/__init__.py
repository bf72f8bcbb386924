"""Feed parsing and item normalization."""

from .dates import parse_timestamp, sort_items
from .links import (
    extract_article_link,
    is_hn_discussion_link,
    resolve_feed_link,
    resolve_hn_link,
    resolve_link,
)
from .normalizer import ChannelContext, normalize_item, normalize_items
from .parser import parse_feed
from .tree import XmlNode, extract_text, parse_xml

__all__ = [
    "ChannelContext",
    "XmlNode",
    "extract_article_link",
    "extract_text",
    "is_hn_discussion_link",
    "normalize_item",
    "normalize_items",
    "parse_feed",
    "parse_timestamp",
    "parse_xml",
    "resolve_feed_link",
    "resolve_hn_link",
    "resolve_link",
    "sort_items",
]
