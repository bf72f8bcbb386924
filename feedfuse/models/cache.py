"""Cache record models."""

from typing import Any

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """A cached value with its storage time and time-to-live."""

    value: Any = Field(..., description="JSON-serializable cached value")
    stored_at: float = Field(..., description="Epoch seconds when stored")
    ttl: float = Field(..., description="Time to live in seconds", ge=0.0)

    @property
    def expires_at(self) -> float:
        return self.stored_at + self.ttl

    def is_expired(self, now: float) -> bool:
        """Entries are absent once now is past stored_at + ttl."""
        return now > self.expires_at


class CacheStats(BaseModel):
    """Entry counts for one cache namespace."""

    total_items: int = Field(0, description="All stored entries")
    expired_items: int = Field(0, description="Entries past their TTL")
    valid_items: int = Field(0, description="Entries still fresh")
