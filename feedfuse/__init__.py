"""Feed ingestion, normalization, merging and caching."""

__version__ = "0.1.0"
