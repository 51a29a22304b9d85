"""
Middleware for the ytgify-share server.
"""

from .logfire_middleware import LogfireMiddleware
from .rate_limit_middleware import RateLimitMiddleware

__all__ = ["LogfireMiddleware", "RateLimitMiddleware"]
