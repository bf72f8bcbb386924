"""RSS 2.0, RSS 1.0 and Atom feed parser."""

import logging
from typing import List, Tuple, Union

from ..errors import ParseError
from ..models import NormalizedFeed
from .dates import sort_items
from .links import resolve_feed_link
from .normalizer import ChannelContext, normalize_items
from .tree import Value, XmlNode, as_node, extract_text, parse_xml

logger = logging.getLogger(__name__)

UNKNOWN_FEED_TITLE = "Unknown Feed"


def _local_name(tag: str) -> str:
    return tag.rsplit(":", 1)[-1]


def _locate(root: XmlNode) -> Tuple[str, XmlNode, List[Value]]:
    """Find the channel element and the raw item list for each dialect."""
    tag = root.tag
    if tag == "rss":
        channel = root.first("channel")
        if channel is None:
            raise ParseError("RSS document has no <channel>")
        channel = as_node(channel, "channel")
        return "rss", channel, channel.all("item")
    if _local_name(tag) == "RDF":
        channel = root.first("channel")
        if channel is None:
            raise ParseError("RDF document has no <channel>")
        return "rdf", as_node(channel, "channel"), root.all("item")
    if tag == "feed":
        return "atom", root, root.all("entry")
    if tag == "entry":
        return "atom", XmlNode("feed"), [root]
    raise ParseError(f"Unrecognized feed format: root element <{tag}>")


def parse_feed(raw_xml: Union[str, bytes]) -> NormalizedFeed:
    """Parse a feed document into a `NormalizedFeed`.

    Raises:
        ParseError: the input is not well-formed XML or is neither an RSS
            channel nor an Atom feed.
    """
    root = parse_xml(raw_xml)
    dialect, channel, raw_items = _locate(root)

    title = extract_text(channel.get("title")).strip() or UNKNOWN_FEED_TITLE
    link = resolve_feed_link(channel.get("link"))
    description = (
        extract_text(channel.get("description")).strip()
        or extract_text(channel.get("subtitle")).strip()
    )
    last_build_date = (
        extract_text(channel.get("lastBuildDate")).strip()
        or extract_text(channel.get("updated")).strip()
    )

    items = normalize_items(raw_items, ChannelContext(title=title, link=link))
    logger.debug("Parsed %s feed %r with %d items", dialect, title, len(items))

    return NormalizedFeed(
        title=title,
        description=description,
        link=link,
        items=sort_items(items),
        last_build_date=last_build_date,
    )
