"""Shared testing utilities for the studio proxy test suite.

Exports:
    - assert_true(condition: bool, message: str) -> None
    - json_transport(handler) -> httpx.MockTransport
    - run(coro) -> result of ``asyncio.run``
    - model_record(...) -> raw upstream model record
    - StaticFetcher: scripted catalog source counting its calls
    - ManualClock: injectable clock for staleness tests
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from studio_proxy.catalog.models import FetchResult


def assert_true(condition: bool, message: str) -> None:
    """Raise AssertionError with the provided message if condition is False."""
    if not condition:
        raise AssertionError(message)


def run(coro: Any) -> Any:
    return asyncio.run(coro)


def json_transport(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
    """Wrap ``handler`` and record every request it receives on ``.requests``."""
    seen: List[httpx.Request] = []

    def _wrapped(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    transport = httpx.MockTransport(_wrapped)
    transport.requests = seen  # type: ignore[attr-defined]
    return transport


def model_record(model_id: str, **fields: Any) -> Dict[str, Any]:
    return {"id": model_id, **fields}


class StaticFetcher:
    """Catalog source returning scripted results in order (last one repeats)."""

    def __init__(self, *results: FetchResult, enabled: bool = True) -> None:
        self._results = list(results)
        self.calls = 0
        self.enabled = enabled

    async def fetch_catalog(self) -> FetchResult:
        self.calls += 1
        idx = min(self.calls, len(self._results)) - 1
        return self._results[idx]


class ManualClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)
