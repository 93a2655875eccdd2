"""
In-memory key-value cache with optional per-entry TTL and hit/miss stats.
Why: memoize expensive lookups inside one process without a cache server.

Expiry is eager: each TTL entry owns one scheduled task that deletes it, so a
key present in the store is always live.
"""

import functools
import threading
from typing import Any, Callable, Dict, Generic, Optional, Sequence, TypeVar, Union

from ..config.settings import Settings
from .keys import composite_key
from .logging import get_logger
from .metrics import CacheMetrics
from .scheduler import Handle, Scheduler, default_scheduler
from .schemas import CacheStats
from .ttl import parse_ttl

_LOG = get_logger(__name__)

T = TypeVar("T")


class _Missing:
    """Type of MISSING; tells "no entry" apart from a cached None."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "<MISSING>"


MISSING = _Missing()


class CacheEntry(Generic[T]):
    __slots__ = ("value", "handle")

    def __init__(self, value: T, handle: Optional[Handle] = None) -> None:
        self.value = value
        self.handle = handle

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()
            self.handle = None


class TTLCache(Generic[T]):
    """Maps string keys to values of one type, expiring entries on a schedule.

    Every public operation holds one lock for its whole duration, so expiry
    callbacks fired from scheduler threads never see a half-updated store.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        default_ttl: Optional[str] = None,
    ) -> None:
        if default_ttl is not None:
            parse_ttl(default_ttl)
        self._scheduler: Scheduler = scheduler if scheduler is not None else default_scheduler()
        self._default_ttl = default_ttl
        self._store: Dict[str, CacheEntry[T]] = {}
        self._metrics = CacheMetrics()
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, scheduler: Optional[Scheduler] = None
    ) -> "TTLCache[Any]":
        settings = settings if settings is not None else Settings.from_env()
        return cls(scheduler=scheduler, default_ttl=settings.cache.default_ttl)

    def put(self, key: str, value: T, ttl: Optional[str] = None) -> None:
        if not ttl:
            ttl = self._default_ttl
        delay_ms = parse_ttl(ttl) if ttl else None
        entry: CacheEntry[T] = CacheEntry(value)
        with self._lock:
            # schedule first: if the scheduler raises, the old entry is untouched
            if delay_ms is not None:
                entry.handle = self._scheduler.call_later(
                    delay_ms, lambda: self._expire(key, entry)
                )
                _LOG.debug(f"put key={key} ttl_ms={delay_ms}")
            previous = self._store.pop(key, None)
            if previous is not None:
                previous.cancel()
            self._store[key] = entry

    def get(self, key: str, default: Any = MISSING) -> Union[T, Any]:
        """Return the value for ``key``, or ``default`` (MISSING) if absent.

        The only operation that moves the hit/miss counters.
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._metrics.record_miss()
                return default
            self._metrics.record_hit()
            return entry.value

    def delete(self, key: str) -> None:
        with self._lock:
            entry = self._store.pop(key, None)
            if entry is not None:
                entry.cancel()

    def get_all(self) -> Dict[str, T]:
        with self._lock:
            return {key: entry.value for key, entry in self._store.items()}

    def clear_all(self) -> None:
        with self._lock:
            for entry in self._store.values():
                entry.cancel()
            count = len(self._store)
            self._store.clear()
        _LOG.debug(f"cleared entries={count}")

    def cache_function(
        self,
        key: str,
        func: Callable[..., T],
        params: Sequence[Any] = (),
        ttl: Optional[str] = None,
    ) -> T:
        """Return ``func(*params)``, memoized under ``key`` plus the params.

        A cached falsy result (0, "", None) still counts as a hit.
        """
        cache_key = composite_key(key, params)
        cached = self.get(cache_key)
        if cached is not MISSING:
            return cached
        _LOG.debug(f"memo miss key={cache_key}")
        result = func(*params)
        self.put(cache_key, result, ttl)
        return result

    def get_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._store), **self._metrics.snapshot())

    def get_hit_rate(self) -> float:
        with self._lock:
            return self._metrics.hit_rate()

    def get_miss_rate(self) -> float:
        with self._lock:
            return self._metrics.miss_rate()

    def reset_stats(self) -> None:
        with self._lock:
            self._metrics.reset()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def _expire(self, key: str, entry: CacheEntry[T]) -> None:
        with self._lock:
            # a stale timer must not remove a newer entry under the same key
            if self._store.get(key) is not entry:
                return
            del self._store[key]
            entry.handle = None
        _LOG.debug(f"expired key={key}")


def memoize(
    cache: TTLCache[T], key: Optional[str] = None, ttl: Optional[str] = None
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of ``TTLCache.cache_function``.

    ``key`` defaults to the function's qualified name.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        prefix = key or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args: Any) -> T:
            return cache.cache_function(prefix, func, args, ttl)

        return wrapper

    return decorator
