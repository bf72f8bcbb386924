"""Configuration management for feedfuse."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import CacheConfig, ConfigModel, FetchConfig, LLMConfig, SourceConfig

__all__ = [
    "CacheConfig",
    "Config",
    "ConfigModel",
    "FetchConfig",
    "LLMConfig",
    "SourceConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
