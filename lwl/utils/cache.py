"""Caching utilities with optional Redis backing."""

from __future__ import annotations

import asyncio
import hashlib
import importlib
import importlib.util
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from loguru import logger

from lwl.config import settings

T = TypeVar("T")


def _json_default(value: Any) -> Any:
    """Serialize values not supported by ``json`` out of the box."""

    if hasattr(value, "isoformat"):
        return value.isoformat()  # datetime and date objects
    if isinstance(value, set):
        return sorted(value)
    if hasattr(value, "hex") and callable(getattr(value, "hex")):
        return value.hex()
    if hasattr(value, "__str__"):
        return str(value)
    raise TypeError(f"Object of type {type(value)!r} is not JSON serializable")


def build_cache_key(**components: Any) -> str:
    """Return a stable hash for the provided components."""

    def normalize_value(val: Any) -> Any:
        if isinstance(val, dict):
            return {k: normalize_value(v) for k, v in sorted(val.items())}
        if isinstance(val, (list, tuple)):
            return [normalize_value(item) for item in val]
        return val

    normalized = normalize_value(components)
    payload = json.dumps(normalized, sort_keys=True, default=_json_default)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


_redis_module = None
if importlib.util.find_spec("redis") is not None:
    _redis_module = importlib.import_module("redis")


@dataclass
class _CacheEntry:
    expires_at: float | None
    payload: str


class CacheBackend:
    """Simple cache backend writing to Redis when available."""

    def __init__(self, redis_url: str | None = None) -> None:
        self._lock = threading.Lock()
        self._local: dict[str, _CacheEntry] = {}
        self._redis = None
        if redis_url and _redis_module is not None:
            self._redis = _redis_module.Redis.from_url(redis_url, decode_responses=True)

    @staticmethod
    def _compose(namespace: str, key: str) -> str:
        return f"{namespace}:{key}"

    def get(self, namespace: str, key: str) -> Any | None:
        namespaced = self._compose(namespace, key)
        if self._redis is not None:
            try:
                value = self._redis.get(namespaced)
            except Exception as exc:
                logger.warning("Redis unavailable, falling back to local cache", error=str(exc))
                self._redis = None
            else:
                if value is not None:
                    return json.loads(value)
        with self._lock:
            entry = self._local.get(namespaced)
            if not entry:
                return None
            if entry.expires_at is not None and entry.expires_at < time.time():
                self._local.pop(namespaced, None)
                return None
            return json.loads(entry.payload)

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int) -> None:
        namespaced = self._compose(namespace, key)
        payload = json.dumps(value, default=_json_default)
        if self._redis is not None:
            try:
                self._redis.set(namespaced, payload, ex=ttl_seconds)
            except Exception as exc:
                logger.warning("Redis unavailable, falling back to local cache", error=str(exc))
                self._redis = None
        with self._lock:
            expires_at = time.time() + ttl_seconds if ttl_seconds else None
            self._local[namespaced] = _CacheEntry(expires_at=expires_at, payload=payload)

    def invalidate(self, namespace: str, *, key: str | None = None, prefix: str | None = None) -> None:
        if key is not None:
            namespaced = self._compose(namespace, key)
            if self._redis is not None:
                try:
                    self._redis.delete(namespaced)
                except Exception:
                    self._redis = None
            with self._lock:
                self._local.pop(namespaced, None)
            return

        if prefix is None:
            return

        pattern = self._compose(namespace, prefix)
        if self._redis is not None:
            try:
                for cache_key in self._redis.scan_iter(f"{pattern}*"):
                    self._redis.delete(cache_key)
            except Exception:
                self._redis = None
        with self._lock:
            for cache_key in list(self._local.keys()):
                if cache_key.startswith(pattern):
                    self._local.pop(cache_key, None)

    def clear(self, *, include_redis: bool = False) -> None:
        """Reset the in-memory cache (and optionally Redis) for test environments."""

        with self._lock:
            self._local.clear()
        if include_redis and self._redis is not None:
            try:
                self._redis.flushdb()
            except Exception:
                self._redis = None


@dataclass
class ApiCacheEntry(Generic[T]):
    data: T
    timestamp: float
    is_stale: bool = False


class ApiCache:
    """Fixed-TTL read-through cache for outbound API calls.

    Entries are keyed by request string. Concurrent misses for the same key
    are not coalesced: each caller runs its own fetch.
    """

    def __init__(
        self,
        default_ttl: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl if default_ttl is not None else float(settings.API_CACHE_TTL_SECONDS)
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, ApiCacheEntry[Any]] = {}

    def _fresh(self, entry: ApiCacheEntry[Any] | None, ttl: float) -> bool:
        return entry is not None and (self._clock() - entry.timestamp) < ttl

    def _store(self, key: str, data: Any) -> None:
        with self._lock:
            self._entries[key] = ApiCacheEntry(data=data, timestamp=self._clock())

    def _entry(self, key: str) -> ApiCacheEntry[Any] | None:
        with self._lock:
            return self._entries.get(key)

    def _mark_stale(self, key: str) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                entry.is_stale = True

    def get(
        self,
        key: str,
        fetch: Callable[[], T],
        *,
        ttl: float | None = None,
        allow_stale: bool = False,
    ) -> T:
        """Return cached data for ``key`` or call ``fetch`` and cache the result."""

        ttl = ttl if ttl is not None else self.default_ttl
        entry = self._entry(key)
        if self._fresh(entry, ttl):
            return entry.data

        if allow_stale and entry is not None:
            self._mark_stale(key)
            threading.Thread(
                target=self._refresh_in_background, args=(key, fetch), daemon=True
            ).start()
            return entry.data

        return self._fetch_and_cache(key, fetch)

    def _fetch_and_cache(self, key: str, fetch: Callable[[], T]) -> T:
        try:
            data = fetch()
        except Exception:
            entry = self._entry(key)
            if entry is not None:
                logger.warning("Failed to fetch fresh data, using stale data", key=key)
                return entry.data
            raise
        self._store(key, data)
        return data

    def _refresh_in_background(self, key: str, fetch: Callable[[], Any]) -> None:
        try:
            self._fetch_and_cache(key, fetch)
        except Exception as exc:
            logger.error("Background refresh failed", key=key, error=str(exc))

    async def aget(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        *,
        ttl: float | None = None,
        allow_stale: bool = False,
    ) -> T:
        """Async counterpart of :meth:`get` for coroutine fetchers."""

        ttl = ttl if ttl is not None else self.default_ttl
        entry = self._entry(key)
        if self._fresh(entry, ttl):
            return entry.data

        if allow_stale and entry is not None:
            self._mark_stale(key)
            asyncio.get_running_loop().create_task(self._arefresh(key, fetch))
            return entry.data

        return await self._afetch_and_cache(key, fetch)

    async def _afetch_and_cache(self, key: str, fetch: Callable[[], Awaitable[T]]) -> T:
        try:
            data = await fetch()
        except Exception:
            entry = self._entry(key)
            if entry is not None:
                logger.warning("Failed to fetch fresh data, using stale data", key=key)
                return entry.data
            raise
        self._store(key, data)
        return data

    async def _arefresh(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> None:
        try:
            await self._afetch_and_cache(key, fetch)
        except Exception as exc:
            logger.error("Background refresh failed", key=key, error=str(exc))

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


cache_backend = CacheBackend(str(settings.REDIS_URL) if settings.REDIS_URL else None)
api_cache = ApiCache()


__all__ = ["api_cache", "ApiCache", "cache_backend", "CacheBackend", "build_cache_key"]
