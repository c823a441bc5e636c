"""
Background refresh of the catalog cache.

``start()`` blocks on one non-forced refresh so the first model-list read is
served from the populated cache, then (when a models endpoint is configured)
spawns a task that refreshes on a fixed interval for the rest of the
application's lifetime. A failing tick is logged and the loop keeps going.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional

from ..base.errors import classify_exception
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import CATALOG_REFRESH_INTERVAL_SECONDS
from .cache import CatalogCache

_logger = get_logger("studio.catalog.scheduler")


class RefreshScheduler:
    def __init__(
        self,
        cache: CatalogCache,
        *,
        interval_seconds: float = CATALOG_REFRESH_INTERVAL_SECONDS,
        enabled: bool = True,
    ) -> None:
        self._cache = cache
        self._interval = interval_seconds
        self._enabled = enabled
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Run the startup refresh, then spawn the periodic task when enabled."""
        await self.tick()
        if self._enabled and self._interval > 0 and not self.running:
            self._task = asyncio.create_task(self._loop(), name="catalog_refresh_loop")

    async def tick(self) -> None:
        """One scheduled refresh; exceptions are logged, never raised."""
        ctx = LogContext(component="catalog")
        try:
            catalog = await self._cache.refresh(False)
        except Exception as exc:
            normalized_log_event(
                _logger,
                "catalog.scheduler.error",
                ctx,
                phase="schedule",
                outcome="error",
                error_code=classify_exception(exc).value,
                level=logging.ERROR,
                error=str(exc) or type(exc).__name__,
            )
            return
        normalized_log_event(
            _logger,
            "catalog.scheduler.tick",
            ctx,
            phase="schedule",
            outcome="ok",
            last_update=catalog.last_update,
        )

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.tick()

    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


__all__ = ["RefreshScheduler"]
