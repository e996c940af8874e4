"""In-memory fixed-window rate limiting for API endpoints.

Counters live in process memory, so each worker enforces its own window.
A shared store (Redis) is needed once the API runs with several workers.
"""

from __future__ import annotations

import hashlib
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request

from carenav.common.exceptions import RateLimitExceededError
from carenav.common.logging import get_logger
from carenav.config import settings

logger = get_logger("rate_limit")


@dataclass(frozen=True)
class RateLimitRule:
    max_requests: int
    window_seconds: int


@dataclass
class RateLimitResult:
    success: bool
    remaining: int
    reset_in: int  # seconds until the window resets


@dataclass
class _Window:
    count: int
    reset_at: float


RATE_LIMITS: dict[str, RateLimitRule] = {
    # Issue creation may call the AI provider
    "create_issue": RateLimitRule(max_requests=10, window_seconds=60 * 60),
    "chat": RateLimitRule(max_requests=30, window_seconds=60 * 60),
    "generate_document": RateLimitRule(max_requests=20, window_seconds=60 * 60),
    "upload_document": RateLimitRule(max_requests=20, window_seconds=60 * 60),
    "general": RateLimitRule(max_requests=100, window_seconds=60),
}


class RateLimiter:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str, rule: RateLimitRule) -> RateLimitResult:
        now = self._clock()
        self._purge(now)

        window = self._windows.get(key)
        if window is None or now >= window.reset_at:
            window = _Window(count=0, reset_at=now + rule.window_seconds)
            self._windows[key] = window

        window.count += 1
        remaining = max(0, rule.max_requests - window.count)
        reset_in = max(0, int(window.reset_at - now + 0.999))

        return RateLimitResult(
            success=window.count <= rule.max_requests,
            remaining=remaining,
            reset_in=reset_in,
        )

    def reset(self) -> None:
        self._windows.clear()

    def _purge(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now >= w.reset_at]
        for key in expired:
            del self._windows[key]


limiter = RateLimiter()


def client_identifier(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    ua = request.headers.get("user-agent", "unknown")
    lang = request.headers.get("accept-language", "unknown")
    digest = hashlib.sha256(f"{ua}{lang}".encode()).hexdigest()[:12]
    return f"anonymous-{digest}"


def rate_limit(name: str):
    """Build a FastAPI dependency enforcing the named limit from ``RATE_LIMITS``."""
    rule = RATE_LIMITS[name]

    async def checker(request: Request) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        client_id = client_identifier(request)
        result = limiter.hit(f"{name}:{client_id}", rule)
        if not result.success:
            logger.warning("Rate limit '%s' exceeded for %s", name, client_id)
            raise RateLimitExceededError(retry_after=result.reset_in)

    return checker
