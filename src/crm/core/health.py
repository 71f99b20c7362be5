"""Health check endpoint and Prometheus metrics."""

import secrets
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator

from src.crm.core.config import get_settings
from src.crm.core.logging import get_logger

logger = get_logger(__name__)

# Health check caching
_health_cache: dict[str, Any] | None = None
_health_cache_time: float = 0
HEALTH_CACHE_TTL = 10  # seconds


def reset_health_cache() -> None:
    """Reset health cache (for testing)."""
    global _health_cache, _health_cache_time
    _health_cache = None
    _health_cache_time = 0


def setup_health_endpoint(app: FastAPI) -> None:
    """Configure the liveness endpoint at /health."""
    app.state.started_at = time.time()

    @app.get("/health", tags=["health"])
    async def health(request: Request) -> JSONResponse:
        """Liveness with a database round trip; the database result is cached briefly."""
        global _health_cache, _health_cache_time

        now = time.time()
        if _health_cache is None or (now - _health_cache_time) >= HEALTH_CACHE_TTL:
            database = "healthy"
            try:
                await request.app.state.db.ping()
            except Exception as e:
                logger.warning("Health check database ping failed", error=str(e))
                database = f"unhealthy: {e!s}"
            _health_cache = {"database": database}
            _health_cache_time = now

        healthy = _health_cache["database"] == "healthy"
        return JSONResponse(
            content={
                "status": "healthy" if healthy else "unhealthy",
                "timestamp": datetime.now(UTC).isoformat(),
                "uptime_seconds": round(now - request.app.state.started_at, 1),
                "database": _health_cache["database"],
            },
            status_code=200 if healthy else 503,
        )


def setup_metrics(app: FastAPI) -> None:
    """Configure Prometheus metrics with optional API key protection."""
    settings = get_settings()
    instrumentator = Instrumentator().instrument(app)

    if settings.metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(
            api_key: str | None = Depends(api_key_header),
        ) -> None:
            if (
                api_key is None
                or settings.metrics_api_key is None
                or not secrets.compare_digest(api_key, settings.metrics_api_key)
            ):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
    else:
        instrumentator.expose(app, endpoint="/metrics")
