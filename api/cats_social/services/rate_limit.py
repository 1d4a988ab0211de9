"""
Request budgets kept in process memory.

Anonymous auth routes are budgeted per client address. Match requests are
budgeted per authenticated user, so owners behind one proxy do not share a
budget. Buckets whose window has fully drained are dropped.
"""

import threading
import time
from collections import deque
from typing import Any, Callable

from fastapi import Depends, HTTPException, Request

from ..auth.deps import get_current_user

SWEEP_INTERVAL_SECONDS = 60.0


class RequestBudget:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._buckets: dict[str, tuple[float, deque[float]]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._buckets)

    def spend(self, key: str, limit: int, window_seconds: float) -> int:
        """Record one request under ``key``; returns 0 if allowed, else seconds to wait."""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= SWEEP_INTERVAL_SECONDS:
                self._sweep(now)
            _, stamps = self._buckets.setdefault(key, (window_seconds, deque()))
            while stamps and stamps[0] <= now - window_seconds:
                stamps.popleft()
            if len(stamps) >= limit:
                return max(1, int(stamps[0] + window_seconds - now))
            stamps.append(now)
            return 0

    def _sweep(self, now: float) -> None:
        drained = [key for key, (window, stamps) in self._buckets.items() if not stamps or stamps[-1] <= now - window]
        for key in drained:
            del self._buckets[key]
        self._last_sweep = now

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._last_sweep = self._clock()


budget = RequestBudget()


def _client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "").strip()
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client and request.client.host else "unknown"


def _enforce(key: str, limit: int, window_seconds: int) -> None:
    wait = budget.spend(key, limit, window_seconds)
    if wait:
        raise HTTPException(
            status_code=429,
            detail=f"Too many requests. Retry in {wait}s",
            headers={"Retry-After": str(wait)},
        )


def limit_per_client(route_key: str, limit: int, window_seconds: int):
    def _dep(request: Request) -> None:
        _enforce(f"{route_key}:ip:{_client_address(request)}", limit, window_seconds)

    return Depends(_dep)


def limit_per_user(route_key: str, limit: int, window_seconds: int):
    def _dep(current_user: dict[str, Any] = Depends(get_current_user)) -> None:
        _enforce(f"{route_key}:user:{current_user['id']}", limit, window_seconds)

    return Depends(_dep)
