"""
Per-client admission control.

- limiter.py: SlidingWindowRateLimiter (admit / sweep / periodic sweeper)
"""

from trivia_service.ratelimit.limiter import SlidingWindowRateLimiter, client_key_from_headers

__all__ = [
    "SlidingWindowRateLimiter",
    "client_key_from_headers",
]
