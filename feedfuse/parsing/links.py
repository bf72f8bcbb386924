"""Link resolution, including the Hacker News article-link heuristic."""

import re
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from .tree import XmlNode

HN_DISCUSSION_PATTERN = re.compile(r"ycombinator\.com/item\?id=")
HN_DOMAIN = "ycombinator.com"

# Tried in order; looser patterns only run when stricter ones found nothing usable
HREF_PATTERNS = (
    re.compile(r'href="([^"]+)"'),
    re.compile(r"href='([^']+)'"),
    re.compile(r"href=([^\s>]+)"),
    re.compile(r"""<a[^>]+href=["']([^"']+)["'][^>]*>"""),
)


def _href(value: Any) -> str:
    if isinstance(value, XmlNode):
        return value.attributes.get("href") or value.text
    if isinstance(value, Mapping):
        for key in ("@href", "href", "#text"):
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate:
                return candidate
    return ""


def resolve_link(value: Any) -> str:
    """Return the first usable URL from a link field.

    The field may be a plain string, an element carrying an ``href``
    attribute (Atom), or a list of those.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        for candidate in value:
            link = resolve_link(candidate)
            if link:
                return link
        return ""
    return _href(value).strip()


def resolve_feed_link(value: Any) -> str:
    """Like `resolve_link`, but prefer the Atom ``alternate`` link over ``self``."""
    if isinstance(value, (list, tuple)):
        for candidate in value:
            if isinstance(candidate, XmlNode) and candidate.attributes.get("rel", "alternate") == "alternate":
                link = resolve_link(candidate)
                if link:
                    return link
    return resolve_link(value)


def is_hn_discussion_link(link: str) -> bool:
    return bool(link) and HN_DISCUSSION_PATTERN.search(link) is not None


def _is_external_article(url: str) -> bool:
    if not url.startswith(("http://", "https://")):
        return False
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return False
    return host != HN_DOMAIN and not host.endswith("." + HN_DOMAIN)


def extract_article_link(html: str) -> Optional[str]:
    """Find the first absolute, non-ycombinator href in an HTML fragment."""
    if not html or "href=" not in html:
        return None
    for pattern in HREF_PATTERNS:
        for match in pattern.finditer(html):
            candidate = match.group(1).strip().strip("\"'")
            if _is_external_article(candidate):
                return candidate
    return None


def resolve_hn_link(link: str, html: str) -> str:
    """Swap a Hacker News discussion link for the article it points to.

    The original link is kept when the markup has no qualifying href.
    """
    if not is_hn_discussion_link(link):
        return link
    return extract_article_link(html) or link
