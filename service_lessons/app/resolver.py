"""
Cache-aside content resolution for the Lessons Service.
"""

from typing import Optional, Protocol, Union, Any, TYPE_CHECKING

from shared.logging import get_logger
from shared.errors import EmptyResultError, TransportError
from shared.tracing import trace_operation, add_span_attributes

from .cache.redis_cache import ContentCache, cache_key, DEFAULT_TTL_SECONDS
from .models import ContentResult, LessonPath, ManyContent, parse_content_result

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class ContentOrigin(Protocol):
    """Source of truth queried on a cache miss."""

    async def fetch(self, canonical_path: str) -> Any:
        ...


class ContentResolver:
    """Resolve lesson paths through the cache, falling back to the origin.

    Each resolve does at most one cache read, one origin call and one
    cache write, in that order. Concurrent misses on the same key are not
    coalesced: each one reaches the origin and the last write wins.
    """

    def __init__(
        self,
        cache: ContentCache,
        origin: ContentOrigin,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        allow_empty_listings: bool = False,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.cache = cache
        self.origin = origin
        self.ttl_seconds = ttl_seconds
        self.allow_empty_listings = allow_empty_listings
        self.metrics = metrics
        self.logger = get_logger("lessons.resolver")

    async def resolve(self, path: Union[LessonPath, str]) -> ContentResult:
        """Return the content listing for ``path``."""
        if not isinstance(path, LessonPath):
            path = LessonPath.parse(path)
        canonical = path.canonical
        key = cache_key(canonical)

        with trace_operation("lessons.resolve", **{"lessons.path": canonical}):
            result = self._from_cache(key, await self._cache_get(key))
            if result is not None:
                self.logger.info("Serving from cache", cache_key=key)
                self._count("cache_hits_total")
                add_span_attributes(**{"lessons.cache_hit": True})
                return result

            self._count("cache_misses_total")
            add_span_attributes(**{"lessons.cache_hit": False})
            self.logger.info("Fetching from origin", path=canonical)

            payload = await self.origin.fetch(canonical)
            result = parse_content_result(payload)

            if result is None:
                raise EmptyResultError(details={"path": canonical})
            if isinstance(result, ManyContent) and len(result) == 0:
                if not self.allow_empty_listings:
                    raise EmptyResultError(details={"path": canonical})
                # Empty listings are served but never cached
                return result

            await self._cache_set(key, result.to_payload())
            return result

    async def _cache_get(self, key: str) -> Optional[Any]:
        try:
            return await self.cache.get(key)
        except Exception as exc:
            self.logger.warning("Cache read failed", cache_key=key, error=str(exc))
            self._count_error("get")
            return None

    def _from_cache(self, key: str, cached: Any) -> Optional[ContentResult]:
        if cached is None:
            return None
        try:
            result = parse_content_result(cached)
        except TransportError:
            self.logger.warning("Discarding unreadable cache entry", cache_key=key)
            return None
        if isinstance(result, ManyContent) and len(result) == 0:
            return None
        return result

    async def _cache_set(self, key: str, value: Any) -> None:
        try:
            await self.cache.set(key, value, self.ttl_seconds)
        except Exception as exc:
            self.logger.warning("Cache write failed", cache_key=key, error=str(exc))
            self._count_error("set")

    def _count(self, metric_name: str):
        if self.metrics is not None:
            self.metrics.increment_counter(metric_name, cache_type="github")

    def _count_error(self, operation: str):
        if self.metrics is not None:
            self.metrics.increment_counter("cache_errors_total", operation=operation)
