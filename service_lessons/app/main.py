"""
Lessons service for the Lessons Proxy.
"""

from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import ProxyException

from .cache.redis_cache import ContentCache, RedisCache
from .models import LessonPath
from .origin.github_client import GitHubContentsClient
from .resolver import ContentOrigin, ContentResolver


SERVICE_NAME = "lessons"
SERVICE_PORT = 8020
LIVENESS_TEXT = "Hello Python + Redis!"


class LessonsService(BaseService):
    """Lessons service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        cache: Optional[ContentCache] = None,
        origin: Optional[ContentOrigin] = None,
    ):
        super().__init__(SERVICE_NAME, SERVICE_PORT, config=config)

        # Only the Redis cache owns a connection lifecycle
        self.redis_cache: Optional[RedisCache] = None
        if cache is None:
            self.redis_cache = RedisCache(self.config.redis_url)
            cache = self.redis_cache

        if origin is None:
            origin = GitHubContentsClient(
                self.config.origin_base_url,
                self.config.require_token(),
                timeout=self.config.origin_timeout_seconds,
                metrics=self.metrics,
            )

        self.resolver = ContentResolver(
            cache,
            origin,
            ttl_seconds=self.config.cache_ttl_seconds,
            allow_empty_listings=self.config.allow_empty_listings,
            metrics=self.metrics,
        )

        self._setup_lessons_routes()

    def _setup_lessons_routes(self):
        """Set up lesson lookup routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Lessons Proxy - Lessons Service",
                "version": "1.0.0",
                "capabilities": ["lessons", "caching"]
            }

        router = APIRouter(prefix="/api")

        @router.get("/test", response_class=PlainTextResponse)
        async def liveness():
            """Plain-text liveness probe."""
            return LIVENESS_TEXT

        @router.get("/lessons")
        async def get_lessons_root():
            """Reject requests that name no language."""
            return await self._serve(LessonPath.from_segments(None))

        @router.get("/lessons/{language}")
        async def get_language(language: str):
            """List quarters for a language."""
            return await self._serve(LessonPath.from_segments(language))

        @router.get("/lessons/{language}/{quarter}")
        async def get_quarter(language: str, quarter: str):
            """List lessons in a quarter."""
            return await self._serve(LessonPath.from_segments(language, quarter, depth=2))

        @router.get("/lessons/{language}/{quarter}/{lesson}")
        async def get_lesson(language: str, quarter: str, lesson: str):
            """List days in a lesson."""
            return await self._serve(LessonPath.from_segments(language, quarter, lesson, depth=3))

        @router.get("/lessons/{language}/{quarter}/{lesson}/{day}")
        async def get_day(language: str, quarter: str, lesson: str, day: str):
            """Get the content entry for a lesson day."""
            return await self._serve(LessonPath.from_segments(language, quarter, lesson, day, depth=4))

        self.app.include_router(router)

    async def _serve(self, path: LessonPath) -> JSONResponse:
        """Resolve a path and render the result or the error envelope."""
        try:
            result = await self.resolver.resolve(path)
        except ProxyException as e:
            self.logger.error("Error resolving lessons", path=path.canonical, code=e.code, error=e.message)
            self.metrics.record_error(e.code)
            return JSONResponse(
                status_code=500,
                content=e.to_response(prefix="Error fetching data").model_dump()
            )

        return JSONResponse(content=result.to_payload())

    async def _check_dependencies(self):
        """Check lessons service dependencies."""
        if self.redis_cache is None:
            return {}
        return {"redis": "ok" if await self.redis_cache.health_check() else "error"}

    async def start(self):
        """Start lessons service components."""
        if self.redis_cache is not None:
            await self.redis_cache.start()
        self.logger.info("Lessons service started", origin=self.config.origin_base_url)

    async def stop(self):
        """Stop lessons service components."""
        if self.redis_cache is not None:
            await self.redis_cache.stop()
        self.logger.info("Lessons service stopped")


def create_app(config: Optional[ServiceConfig] = None):
    """Create lessons service application."""
    service = LessonsService(config)
    return service.app


if __name__ == "__main__":
    service = LessonsService()
    service.run()
