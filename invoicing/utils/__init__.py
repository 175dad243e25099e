"""Utility functions for the invoicing app."""

from .cache import cached_view_data, revalidate_path, view_cache_key

__all__ = [
    "cached_view_data",
    "revalidate_path",
    "view_cache_key",
]
