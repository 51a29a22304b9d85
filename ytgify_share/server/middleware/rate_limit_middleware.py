"""
Request throttling middleware.

Requests are counted in a sliding window per throttle and client key. A
``Throttle`` decides which requests it applies to and the key they are
counted under (client IP or authenticated user id). The first throttle over
its limit answers 429 with ``RateLimit-*`` and ``Retry-After`` headers.
Loopback clients are never throttled.
"""

import math
import re
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ytgify_share.core.errors import AuthenticationError, RateLimitedError
from ytgify_share.core.logging_config import get_logger
from ytgify_share.core.security import decode_token
from ytgify_share.server.core.constant import API_PREFIX

logger = get_logger(__name__)

LOOPBACK_IPS = frozenset({"127.0.0.1", "::1"})
SWEEP_INTERVAL = 60.0

UPLOAD_PATH = re.compile(rf"^{API_PREFIX}/gifs(/upload|/[^/]+/remix)?$")
COMMENT_PATH = re.compile(rf"^{API_PREFIX}/gifs/[^/]+/comments$")


@dataclass(frozen=True)
class Throttle:
    """A limit of ``limit`` requests per ``period`` seconds for each key ``key`` returns."""

    name: str
    limit: int
    period: int
    key: Callable[[Request], Optional[str]]


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def user_id(request: Request) -> Optional[str]:
    """Subject of a valid bearer token, or None for anonymous requests."""
    if not hasattr(request.state, "rate_limit_user"):
        subject = None
        header = request.headers.get("Authorization", "")
        if header.startswith("Bearer "):
            try:
                subject = str(decode_token(header[len("Bearer "):].strip())["sub"])
            except AuthenticationError:
                subject = None
        request.state.rate_limit_user = subject
    return request.state.rate_limit_user


def _auth_by_ip(request: Request) -> Optional[str]:
    if request.url.path.startswith(f"{API_PREFIX}/auth") and request.method in ("POST", "PUT"):
        return client_ip(request)
    return None


def _uploads_by_user(request: Request) -> Optional[str]:
    if request.method == "POST" and UPLOAD_PATH.match(request.url.path):
        return user_id(request)
    return None


def _uploads_by_ip(request: Request) -> Optional[str]:
    if request.method == "POST" and UPLOAD_PATH.match(request.url.path) and user_id(request) is None:
        return client_ip(request)
    return None


def _comments_by_user(request: Request) -> Optional[str]:
    if request.method == "POST" and COMMENT_PATH.match(request.url.path):
        return user_id(request)
    return None


def _api_by_user(request: Request) -> Optional[str]:
    if request.url.path.startswith(f"{API_PREFIX}/"):
        return user_id(request)
    return None


def _api_by_ip(request: Request) -> Optional[str]:
    if request.url.path.startswith(f"{API_PREFIX}/"):
        return client_ip(request)
    return None


DEFAULT_THROTTLES: Tuple[Throttle, ...] = (
    Throttle("auth/ip", limit=5, period=60, key=_auth_by_ip),
    Throttle("uploads/user", limit=10, period=60 * 60, key=_uploads_by_user),
    Throttle("uploads/ip", limit=3, period=60 * 60, key=_uploads_by_ip),
    Throttle("comments/user", limit=10, period=60, key=_comments_by_user),
    Throttle("api/user", limit=300, period=5 * 60, key=_api_by_user),
    Throttle("api/ip", limit=100, period=5 * 60, key=_api_by_ip),
)


class SlidingWindow:
    """Per-bucket request timestamps within the last ``period`` seconds."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._hits: Dict[str, Tuple[int, Deque[float]]] = {}
        self._clock = clock
        self._last_sweep = clock()

    def hit(self, bucket: str, limit: int, period: int) -> Optional[float]:
        """Record a request in ``bucket``.

        Returns:
            None when the request is allowed, otherwise seconds until it would be allowed
        """
        now = self._clock()
        self._sweep(now)
        _, hits = self._hits.setdefault(bucket, (period, deque()))
        while hits and hits[0] <= now - period:
            hits.popleft()
        if len(hits) >= limit:
            return hits[0] + period - now
        hits.append(now)
        return None

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < SWEEP_INTERVAL:
            return
        self._last_sweep = now
        stale = [bucket for bucket, (period, hits) in self._hits.items() if not hits or hits[-1] <= now - period]
        for bucket in stale:
            del self._hits[bucket]

    def __len__(self) -> int:
        return len(self._hits)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed any of ``throttles`` with 429 Too Many Requests."""

    def __init__(
        self,
        app,
        throttles: Iterable[Throttle] = DEFAULT_THROTTLES,
        enabled: bool = True,
        safelist: Iterable[str] = LOOPBACK_IPS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.throttles = tuple(throttles)
        self.enabled = enabled
        self.safelist = frozenset(safelist)
        self.window = SlidingWindow(clock)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled or client_ip(request) in self.safelist:
            return await call_next(request)

        for throttle in self.throttles:
            key = throttle.key(request)
            if key is None:
                continue
            retry_after = self.window.hit(f"{throttle.name}:{key}", throttle.limit, throttle.period)
            if retry_after is not None:
                return self._reject(request, throttle, retry_after)
        return await call_next(request)

    @staticmethod
    def _reject(request: Request, throttle: Throttle, retry_after: float) -> JSONResponse:
        wait = max(math.ceil(retry_after), 1)
        logger.warning(
            f"Rate limit {throttle.name} exceeded: IP {client_ip(request)}, path {request.url.path}",
            extra={"throttle": throttle.name, "path": request.url.path, "retry_after": wait},
        )
        error = RateLimitedError(details=[{"throttle": throttle.name, "retry_after": wait}])
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_dict(),
            headers={
                "RateLimit-Limit": str(throttle.limit),
                "RateLimit-Remaining": "0",
                "RateLimit-Reset": str(wait),
                "Retry-After": str(wait),
            },
        )
