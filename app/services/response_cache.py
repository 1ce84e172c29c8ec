"""
Response Cache - short-TTL memoization of read responses.

Only routes built with `CachedRoute` are cached, and `CachedRoute` refuses
to register anything but GET/HEAD endpoints. A handler that writes can
therefore never sit behind the cache, where a hit would silently skip its
side effects.

On a hit the stored body, status and media type are replayed verbatim and
the endpoint does not run. Entries expire `ttl_seconds` after they were
stored. Writes do not evict cached reads.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from urllib.parse import urlencode

from fastapi import Request, Response
from fastapi.routing import APIRoute

from app.core.settings import settings

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD"})
LOCK_STRIPES = 64


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: bytes
    status_code: int
    media_type: Optional[str]
    stored_at: float


def cache_key(method: str, path: str, query_items) -> str:
    """method + path + query parameters sorted by name, then value."""
    query = urlencode(sorted(query_items))
    return f"{method.upper()} {path}?{query}" if query else f"{method.upper()} {path}"


class ResponseCache:
    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._stripes: List[threading.Lock] = [threading.Lock() for _ in range(LOCK_STRIPES)]
        self._sweep_lock = threading.Lock()
        self._last_sweep = clock()

    def _lock_for(self, key: str) -> threading.Lock:
        return self._stripes[hash(key) % LOCK_STRIPES]

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now < entry.stored_at + self.ttl_seconds

    def get(self, key: str) -> Optional[CacheEntry]:
        now = self._clock()
        with self._lock_for(key):
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_fresh(entry, now):
                del self._entries[key]
                return None
            return entry

    def put(self, key: str, payload: bytes, status_code: int = 200, media_type: Optional[str] = None) -> CacheEntry:
        now = self._clock()
        entry = CacheEntry(key=key, payload=payload, status_code=status_code, media_type=media_type, stored_at=now)
        with self._lock_for(key):
            self._entries[key] = entry
        self._maybe_sweep(now)
        return entry

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self.ttl_seconds:
            return
        if not self._sweep_lock.acquire(blocking=False):
            return
        try:
            self._last_sweep = now
            for key in list(self._entries):
                with self._lock_for(key):
                    entry = self._entries.get(key)
                    if entry is not None and not self._is_fresh(entry, now):
                        del self._entries[key]
        finally:
            self._sweep_lock.release()

    def clear(self) -> None:
        for lock in self._stripes:
            lock.acquire()
        try:
            self._entries.clear()
        finally:
            for lock in self._stripes:
                lock.release()

    def __len__(self) -> int:
        return len(self._entries)


# Global cache instance (singleton pattern)
_response_cache: Optional[ResponseCache] = None


def get_response_cache() -> ResponseCache:
    global _response_cache
    if _response_cache is None:
        _response_cache = ResponseCache(ttl_seconds=settings.CACHE_TTL_SECONDS)
    return _response_cache


class CachedRoute(APIRoute):
    """
    APIRoute whose endpoint output is memoized in the response cache.

    Usage:
        router = APIRouter(prefix="/api/alerts", route_class=CachedRoute)

    Raises TypeError at registration for any non-read method.
    """

    def __init__(self, path: str, endpoint: Callable, **kwargs):
        super().__init__(path, endpoint, **kwargs)
        unsafe = set(self.methods or ()) - SAFE_METHODS
        if unsafe:
            raise TypeError(
                f"Route {path} cannot be cached: {sorted(unsafe)} may have side effects. "
                f"Only {sorted(SAFE_METHODS)} routes can use CachedRoute."
            )

    def get_route_handler(self) -> Callable:
        original_handler = super().get_route_handler()

        async def cached_handler(request: Request) -> Response:
            cache = get_response_cache()
            key = cache_key(request.method, request.url.path, request.query_params.multi_items())

            entry = cache.get(key)
            if entry is not None:
                logger.debug(f"Cache hit: {key}")
                return Response(content=entry.payload, status_code=entry.status_code, media_type=entry.media_type)

            response = await original_handler(request)
            body = getattr(response, "body", None)
            if 200 <= response.status_code < 300 and body is not None:
                cache.put(key, bytes(body), response.status_code, response.media_type)
                logger.debug(f"Cache store: {key}")
            return response

        return cached_handler
