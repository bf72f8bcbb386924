"""Exception taxonomy for feed ingestion."""

from typing import Dict, Optional


class FeedFuseError(Exception):
    """Base class for all feedfuse errors."""


class ParseError(FeedFuseError):
    """Feed document is malformed or not RSS/Atom."""


class TransportError(FeedFuseError):
    """Fetching a document failed (network, HTTP status or timeout)."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FeedTimeoutError(TransportError):
    """Fetching a document took longer than its timeout."""


class AggregationError(FeedFuseError):
    """Base class for failures of a multi-feed fetch."""


class NoFeedsError(AggregationError):
    """No feed URLs were given."""

    def __init__(self) -> None:
        super().__init__("No feed URLs provided")


class AllFeedsFailedError(AggregationError):
    """Every requested feed failed."""

    def __init__(self, failures: Dict[str, str]) -> None:
        self.failures = dict(failures)
        details = "; ".join(f"{url}: {reason}" for url, reason in self.failures.items())
        super().__init__(f"No feeds could be loaded ({len(self.failures)} failed): {details}")


class CacheError(FeedFuseError):
    """Base class for internal cache failures."""


class CacheQuotaError(CacheError):
    """Serialized cache namespace does not fit its budget."""


class CacheCorruptionError(CacheError):
    """Persisted cache namespace could not be decoded."""


class StorageQuotaError(FeedFuseError):
    """Key-value store refused a write because it is full."""


class AlreadyInFlightError(FeedFuseError):
    """Work for this key is already in progress."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Work already in progress for {key}")
        self.key = key


class SummarizerError(FeedFuseError):
    """The summarization backend failed."""
