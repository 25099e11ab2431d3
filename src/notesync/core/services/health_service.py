"""Health service implementation."""

import time
from typing import Any, Dict, Optional

import redis.asyncio as redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ... import __version__
from ...config import get_settings
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, hub=None):
        self.session = session
        self.hub = hub
        self.settings = get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        """Database is required; Redis only degrades the service."""
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()

        if not db_health["connected"]:
            overall_status = "unhealthy"
        elif not redis_health["connected"]:
            overall_status = "degraded"
        else:
            overall_status = "healthy"

        return HealthCheckResponse(
            status=overall_status,
            version=__version__,
            checks={
                "database": db_health,
                "redis": redis_health,
                "collab": self.check_collab_health(),
            },
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        try:
            start_time = time.perf_counter()
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
            response_time = (time.perf_counter() - start_time) * 1000

            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
            }
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": None,
            }

    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
        client: Optional[redis.Redis] = None
        try:
            client = redis.from_url(self.settings.redis_url)
            start_time = time.perf_counter()
            await client.ping()
            response_time = (time.perf_counter() - start_time) * 1000

            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
            }
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": None,
            }
        finally:
            if client is not None:
                await client.aclose()

    def check_collab_health(self) -> Dict[str, Any]:
        """Live connection and presence counts."""
        if self.hub is None:
            return {"status": "unavailable"}
        return {"status": "healthy", **self.hub.stats()}
