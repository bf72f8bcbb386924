"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CacheConfig(BaseModel):
    """Feed cache configuration."""

    backend: str = Field("file", description="Persistence backend (file, memory)")
    directory: str = Field("~/.cache/feedfuse", description="Directory for the file backend")
    max_bytes: int = Field(4 * 1024 * 1024, description="Serialized size ceiling per namespace", ge=1024)
    eviction_fraction: float = Field(0.25, description="Share of oldest entries evicted on overflow", gt=0.0, le=1.0)
    feed_ttl: float = Field(600.0, description="TTL for single feeds in seconds", ge=0.0)
    merged_ttl: float = Field(600.0, description="TTL for merged feeds in seconds", ge=0.0)
    summary_ttl: float = Field(86400.0, description="TTL for AI summaries in seconds", ge=0.0)
    preview_ttl: float = Field(1800.0, description="TTL for article previews in seconds", ge=0.0)
    app_state_ttl: float = Field(120.0, description="TTL for UI state snapshots in seconds", ge=0.0)

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Only the built-in stores are selectable."""
        if v not in ("file", "memory"):
            raise ValueError(f"Unknown cache backend '{v}', expected 'file' or 'memory'")
        return v


class FetchConfig(BaseModel):
    """Feed fetching configuration."""

    timeout_per_feed: float = Field(10.0, description="Per-feed timeout in seconds", gt=0.0)
    max_concurrent: int = Field(10, description="Feeds fetched at the same time", ge=1, le=100)
    user_agent: str = Field("feedfuse/0.1 (RSS reader)", description="User-Agent header")
    proxy_template: Optional[str] = Field(
        None,
        description="Proxy URL with a {url} placeholder, e.g. https://proxy.example/?url={url}",
    )

    @field_validator("proxy_template")
    @classmethod
    def validate_proxy_template(cls, v: Optional[str]) -> Optional[str]:
        """The placeholder receives the URL-encoded feed URL."""
        if v is not None and "{url}" not in v:
            raise ValueError("proxy_template must contain a {url} placeholder")
        return v


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field("openai", description="LLM provider (openai, mock)")
    model: str = Field("gpt-4o-mini", description="Model name")
    api_key_env: Optional[str] = Field("OPENAI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for API (e.g., for Ollama)")
    max_tokens: int = Field(300, description="Completion token limit", ge=1, le=4000)
    temperature: float = Field(0.7, ge=0.0, le=2.0)


class ConfigModel(BaseModel):
    """Main configuration model."""

    cache: CacheConfig = Field(default_factory=CacheConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)


class SourceConfig(BaseModel):
    """Feed source from sources.yaml."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="RSS or Atom feed URL")
    enabled: bool = Field(True, description="Whether source is enabled")
