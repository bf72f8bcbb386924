"""Publication date parsing and newest-first ordering."""

from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Iterable, List, Optional, Tuple

import pendulum

from ..models import FeedItem


def parse_timestamp(value: Optional[str]) -> Optional[float]:
    """Parse an RSS (RFC 822) or Atom (ISO 8601) date to epoch seconds.

    Returns None for anything unparsable. Naive values are taken as UTC.
    """
    value = (value or "").strip()
    if not value:
        return None

    parsed = None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        # ISO 8601 starts with the year; pendulum would also accept keywords like "now"
        if not value[0].isdigit():
            return None
        try:
            parsed = pendulum.parse(value)
        except (TypeError, ValueError, OverflowError):
            return None

    if isinstance(parsed, datetime):
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
    elif isinstance(parsed, date):
        parsed = datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)
    else:
        # Durations and bare times are valid ISO 8601 but not dates
        return None

    try:
        return parsed.timestamp()
    except (OverflowError, OSError, ValueError):
        return None


def _sort_key(item: FeedItem) -> Tuple[int, float]:
    timestamp = parse_timestamp(item.published_at)
    if timestamp is None:
        return (1, 0.0)
    return (0, -timestamp)


def sort_items(items: Iterable[FeedItem]) -> List[FeedItem]:
    """Newest first; undated items last, keeping their relative order."""
    return sorted(items, key=_sort_key)
