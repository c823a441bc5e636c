"""
Catalog cache: the owned, process-lifetime catalog state.

The cache starts from the static defaults and is mutated only by a fetch
whose result came from the upstream API. Each category is replaced wholesale
and only when the new list is non-empty, so a category that produced no
candidates keeps its previous entries. A fallback result leaves the state,
``last_update`` included, untouched.

There is no lock around ``refresh``: overlapping refreshes each await their
own fetch and the last one to complete wins.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Protocol

from ..base.errors import classify_exception
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import CATALOG_STALENESS_SECONDS
from .defaults import default_chat_models, default_image_models
from .models import Catalog, FetchResult

_logger = get_logger("studio.catalog.cache")


class CatalogSource(Protocol):
    async def fetch_catalog(self) -> FetchResult: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CatalogCache:
    """Holds the current :class:`Catalog` and decides when to refetch.

    Args:
        fetcher: Object exposing ``async fetch_catalog() -> FetchResult``.
        staleness_seconds: Maximum age before a non-forced read refreshes.
        clock: Callable returning an aware ``datetime``; injectable for tests.
    """

    def __init__(
        self,
        fetcher: CatalogSource,
        *,
        staleness_seconds: int = CATALOG_STALENESS_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._fetcher = fetcher
        self._staleness = timedelta(seconds=staleness_seconds)
        self._clock = clock or _utcnow
        self._catalog = Catalog(image=default_image_models(), chat=default_chat_models())
        self._updated_at: Optional[datetime] = None

    def get(self) -> Catalog:
        return self._catalog

    @property
    def updated_at(self) -> Optional[datetime]:
        return self._updated_at

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        """True before the first update or once the staleness window elapsed."""
        if self._updated_at is None:
            return True
        return (now or self._clock()) - self._updated_at > self._staleness

    def _apply(self, result: FetchResult) -> None:
        image = result.image_models or self._catalog.image
        chat = result.chat_models or self._catalog.chat
        now = self._clock()
        self._catalog = Catalog(image=list(image), chat=list(chat), last_update=format_timestamp(now))
        self._updated_at = now
        normalized_log_event(
            _logger,
            "catalog.cache.update",
            LogContext(component="catalog"),
            phase="cache",
            outcome="updated",
            fallback_used=False,
            image_count=len(self._catalog.image),
            chat_count=len(self._catalog.chat),
            image_replaced=bool(result.image_models),
            chat_replaced=bool(result.chat_models),
            last_update=self._catalog.last_update,
        )

    async def refresh(self, force: bool = False) -> Catalog:
        """Refetch when forced or stale; return the (possibly updated) catalog.

        Never raises: an unexpected fetcher failure is logged and the current
        state is returned unchanged.
        """
        if not force and not self.is_stale():
            normalized_log_event(
                _logger,
                "catalog.cache.hit",
                LogContext(component="catalog"),
                phase="cache",
                outcome="fresh",
                level=logging.DEBUG,
                last_update=self._catalog.last_update,
            )
            return self._catalog
        try:
            result = await self._fetcher.fetch_catalog()
        except Exception as exc:
            normalized_log_event(
                _logger,
                "catalog.cache.update",
                LogContext(component="catalog"),
                phase="cache",
                outcome="error",
                error_code=classify_exception(exc).value,
                fallback_used=True,
                level=logging.ERROR,
                error=str(exc) or type(exc).__name__,
            )
            return self._catalog
        if result.from_api:
            self._apply(result)
        return self._catalog

    async def models_payload(self, force: bool = False) -> Dict[str, Any]:
        """Body of the models read endpoint: ``{success, data, cached}``."""
        was_populated = self._catalog.last_update is not None
        catalog = await self.refresh(force)
        return {
            "success": True,
            "data": catalog.to_dict(),
            "cached": (not force) and was_populated,
        }

    def health(self) -> Dict[str, Any]:
        return {
            "imageCount": len(self._catalog.image),
            "chatCount": len(self._catalog.chat),
            "lastUpdate": self._catalog.last_update,
        }


__all__ = ["CatalogCache", "CatalogSource", "format_timestamp"]
