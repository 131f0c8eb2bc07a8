"""
Sliding‑window request limiter for credential endpoints.

Only ``/register`` and ``/login`` are limited, to blunt credential
guessing.  Attempts are counted per scope and client host.
"""

import threading
import time
from typing import Callable, Dict, List

from fastapi import HTTPException, Request, status


class RateLimiter:
    def __init__(self, limit: int, window_seconds: int, sweep_every: int = 100) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        # Keys whose window emptied are dropped once every ``sweep_every`` checks.
        self.sweep_every = max(1, sweep_every)
        self.hits: Dict[str, List[float]] = {}
        self._checks = 0
        self._lock = threading.Lock()

    def check(self, key: str) -> None:
        """Record an attempt for ``key``; raise 429 once the window is full."""
        now = time.time()
        window_start = now - self.window_seconds
        with self._lock:
            self._checks += 1
            if self._checks % self.sweep_every == 0:
                self._sweep_locked(window_start)
            timestamps = [ts for ts in self.hits.get(key, []) if ts > window_start]
            if len(timestamps) >= self.limit:
                self.hits[key] = timestamps
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail="Too many attempts. Try again later.",
                )
            timestamps.append(now)
            self.hits[key] = timestamps

    def _sweep_locked(self, window_start: float) -> None:
        stale = [k for k, stamps in self.hits.items() if not stamps or stamps[-1] <= window_start]
        for key in stale:
            del self.hits[key]


def rate_limited(scope: str) -> Callable[[Request], None]:
    """Dependency factory applying the app's limiter to one route."""

    def _dependency(request: Request) -> None:
        host = request.client.host if request.client else "unknown"
        request.app.state.rate_limiter.check(f"{scope}:{host}")

    return _dependency
