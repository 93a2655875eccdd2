"""
Error types raised by the cache.
Why: one base class so callers can catch everything from the cache at once.
"""


class CacheError(Exception):
    """Base class for cache errors."""


class InvalidTTL(CacheError, ValueError):
    def __init__(self, ttl: str, reason: str) -> None:
        super().__init__(f"Invalid TTL {ttl!r}: {reason}")
        self.ttl = ttl


class InvalidUnit(InvalidTTL):
    """Unit token is not one of second(s), minute(s), hour(s), day(s)."""


class InvalidAmount(InvalidTTL):
    """Amount is not a non-negative base-10 integer."""


class InvalidParams(CacheError, TypeError):
    """Memoization params cannot be encoded into a cache key."""
