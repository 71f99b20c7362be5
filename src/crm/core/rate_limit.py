"""Rate limiting.

Two layers:
1. Global middleware: a per-IP token bucket over every `/api` request
   (default 100 requests per 15 minutes).
2. Endpoint decorators (slowapi): stricter limits on login and registration.

Both are disabled when APP_ENV=testing. Buckets live in process memory, so
limits are per worker; buckets that have refilled completely are dropped once
MAX_TRACKED_CLIENTS clients are tracked.
"""

import asyncio
import math
import time
from collections import defaultdict

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.crm.core.config import get_settings
from src.crm.core.exceptions import error_response
from src.crm.core.logging import get_logger

logger = get_logger(__name__)

RATE_LIMITED_PREFIX = "/api"
# Full buckets are pruned once this many clients are tracked
MAX_TRACKED_CLIENTS = 10_000

_rate_limit_buckets: dict[str, dict[str, float]] = defaultdict(dict)
_rate_limit_lock = asyncio.Lock()


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key: client IP only.

    Never derive the key from user-controlled headers; rotating them would
    create unlimited fresh buckets.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the endpoint limiter (in-memory storage, disabled in testing)."""
    settings = get_settings()

    if settings.is_testing:
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; reconfiguring requires a restart.
limiter = create_limiter()


async def check_rate_limit(client_ip: str, now: float | None = None) -> tuple[bool, float]:
    """Take one token from the client's bucket.

    Tokens refill continuously at `requests / window` per second up to a
    burst capacity of `requests`.

    Returns:
        (allowed, retry_after_seconds)
    """
    settings = get_settings()
    burst = float(settings.global_rate_limit_requests)
    rate = burst / settings.global_rate_limit_window_seconds
    now = time.time() if now is None else now

    async with _rate_limit_lock:
        if len(_rate_limit_buckets) >= MAX_TRACKED_CLIENTS:
            _prune_full_buckets(now, burst, rate)

        bucket = _rate_limit_buckets[client_ip]
        if not bucket:
            bucket["tokens"] = burst
            bucket["last_update"] = now

        elapsed = max(0.0, now - bucket["last_update"])
        bucket["tokens"] = min(burst, bucket["tokens"] + elapsed * rate)
        bucket["last_update"] = now

        if bucket["tokens"] >= 1:
            bucket["tokens"] -= 1
            return True, 0.0
        return False, (1 - bucket["tokens"]) / rate


def _prune_full_buckets(now: float, burst: float, rate: float) -> None:
    """Drop buckets that have refilled completely; they equal a fresh bucket."""
    full = [
        client_ip
        for client_ip, bucket in _rate_limit_buckets.items()
        if bucket["tokens"] + (now - bucket["last_update"]) * rate >= burst
    ]
    for client_ip in full:
        del _rate_limit_buckets[client_ip]


def reset_rate_limits() -> None:
    """Forget all buckets."""
    _rate_limit_buckets.clear()


async def global_rate_limit_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Reject `/api` requests from clients that exhausted their bucket with 429."""
    if get_settings().is_testing or not request.url.path.startswith(RATE_LIMITED_PREFIX):
        return await call_next(request)

    client_ip = get_rate_limit_key(request)
    allowed, retry_after = await check_rate_limit(client_ip)
    if not allowed:
        logger.warning(
            "Global rate limit exceeded",
            client_ip=client_ip,
            path=request.url.path,
        )
        retry_after_header = str(max(1, math.ceil(retry_after)))
        return error_response(
            429,
            "Too many requests from this IP, please try again later.",
            headers={"Retry-After": retry_after_header},
        )

    return await call_next(request)
