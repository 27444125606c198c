"""
Utilities package for JSON SQL Search.

Exports shared helpers for logging, profiling, and async initialization.
Keep this package lightweight and free of domain-specific logic.
"""

from jsonsql.utils.logging import configure_logging, get_logger
from jsonsql.utils.once import AsyncOnce
from jsonsql.utils.profiler import ProfileStats, profile_block

__all__ = [
    "AsyncOnce",
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
