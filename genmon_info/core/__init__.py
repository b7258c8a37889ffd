"""
Core of the sample/cache/delta cycle shared by all monitor programs.

The cache store lives in ``genmon_info.core.cache_store`` and is imported
from there directly.
"""
from genmon_info.core.errors import (
    GenmonError,
    UsageError,
    PreconditionError,
    DataFormatError,
    CacheFormatError,
    ResourceUnavailable
)

__all__ = [
    'GenmonError',
    'UsageError',
    'PreconditionError',
    'DataFormatError',
    'CacheFormatError',
    'ResourceUnavailable'
]
