"""In-process key-value cache with TTL expiry and hit/miss stats."""

from .core.cache import MISSING, TTLCache, memoize
from .core.errors import CacheError, InvalidAmount, InvalidParams, InvalidTTL, InvalidUnit
from .core.scheduler import JobScheduler, ManualScheduler
from .core.schemas import CacheStats
from .core.ttl import parse_ttl

__all__ = [
    "MISSING",
    "TTLCache",
    "memoize",
    "CacheError",
    "InvalidAmount",
    "InvalidParams",
    "InvalidTTL",
    "InvalidUnit",
    "JobScheduler",
    "ManualScheduler",
    "CacheStats",
    "parse_ttl",
]
