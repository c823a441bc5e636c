"""
Catalog fetcher: one upstream models listing call turned into catalog entries.

Behavior
- Short-circuits to the static defaults, without any network call, when no
  models endpoint or no credential is configured.
- Otherwise issues a single ``GET`` with a bearer credential, bounded as a
  whole by the catalog timeout (10 s by default). Timeouts,
  connection errors and non-2xx statuses fall back to the static defaults;
  so does a body that is not JSON or not a list once a ``{"data": [...]}``
  wrapper is removed.
- A usable list is partitioned into image and chat candidates, normalized,
  optionally sorted (chat, by descending context window) and capped.

``fetch_catalog`` never raises; the outcome is visible through
``FetchResult.source`` / ``FetchResult.reason`` and the structured log.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import httpx

from ..base.errors import ErrorCode, classify_exception
from ..base.http import ClientPool
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.timeouts import get_timeout_config
from ..config import StudioSettings
from .defaults import default_chat_models, default_image_models
from .models import SOURCE_API, SOURCE_DEFAULTS, ChatModelEntry, FetchResult, ImageModelEntry
from .normalizer import normalize_chat, normalize_image
from .variants import CatalogVariant, resolve_models_endpoint, variant_for_settings

REASON_NO_ENDPOINT = "no_endpoint"
REASON_NO_CREDENTIAL = "no_credential"
REASON_TRANSPORT = "transport_failure"
REASON_MALFORMED = "malformed_response"

_logger = get_logger("studio.catalog.fetcher")


def unwrap_model_list(body: Any) -> Optional[List[Any]]:
    """Return the model list from a bare list or a ``{"data": [...]}`` wrapper.

    Returns ``None`` when the body has neither shape.
    """
    if isinstance(body, list):
        return body
    if isinstance(body, Mapping):
        data = body.get("data")
        if isinstance(data, list):
            return data
    return None


def _record_id(record: Any) -> Optional[str]:
    if not isinstance(record, Mapping):
        return None
    model_id = record.get("id")
    if isinstance(model_id, str) and model_id.strip():
        return model_id
    return None


def partition_models(
    records: Sequence[Any], variant: CatalogVariant
) -> Tuple[List[Mapping[str, Any]], List[Mapping[str, Any]]]:
    """Split raw records into ``(image_candidates, chat_candidates)``.

    Items that are not mappings or carry no usable id are skipped. Tokens and
    ``type`` values match case-sensitively, so ``DALL-E-3`` or ``type: "IMAGE"``
    select nothing. The image and chat tests run independently; input order is
    preserved in both.
    """
    image: List[Mapping[str, Any]] = []
    chat: List[Mapping[str, Any]] = []
    for record in records:
        model_id = _record_id(record)
        if model_id is None:
            continue
        kind = record.get("type")
        if kind in variant.image_types or any(t in model_id for t in variant.image_tokens):
            image.append(record)
        if kind in variant.chat_types or any(t in model_id for t in variant.chat_tokens):
            chat.append(record)
    return image, chat


def build_entries(
    records: Sequence[Any], variant: CatalogVariant
) -> Tuple[List[ImageModelEntry], List[ChatModelEntry]]:
    """Partition, normalize, order and cap a raw model list."""
    image_raw, chat_raw = partition_models(records, variant)
    image = [normalize_image(r, derive_free=variant.derive_free) for r in image_raw]
    chat = [normalize_chat(r, derive_free=variant.derive_free) for r in chat_raw]
    if variant.sort_chat_by_context:
        # sorted() is stable: equal windows keep input order
        chat = sorted(chat, key=lambda m: m.context_window, reverse=True)
    return image[: variant.image_cap], chat[: variant.chat_cap]


class CatalogFetcher:
    """Fetch and normalize the upstream model listing for one variant.

    Args:
        settings: Resolved settings (endpoint, credentials, variant knobs).
        client: Optional shared ``httpx.AsyncClient``.
        pool: Optional application client pool; its ``catalog`` client is
            used when no explicit ``client`` is given. With neither, a short
            lived client is opened per fetch.
        variant: Explicit variant; defaults to the one named by
            ``settings.api_provider`` with configured overrides applied.
    """

    def __init__(
        self,
        settings: StudioSettings,
        client: Optional[httpx.AsyncClient] = None,
        variant: Optional[CatalogVariant] = None,
        *,
        pool: Optional[ClientPool] = None,
    ) -> None:
        self.settings = settings
        self.variant = variant or variant_for_settings(settings)
        self.endpoint = resolve_models_endpoint(settings, self.variant)
        self._client = client
        self._pool = pool

    @property
    def enabled(self) -> bool:
        """Whether a models endpoint is configured at all."""
        return bool(self.endpoint)

    def _ctx(self) -> LogContext:
        return LogContext(component="catalog", variant=self.variant.name, endpoint=self.endpoint)

    def _fallback(
        self,
        reason: str,
        *,
        failure_class: str,
        error_code: Optional[str] = None,
        level: int = logging.INFO,
        error: Optional[str] = None,
    ) -> FetchResult:
        normalized_log_event(
            _logger,
            "catalog.fetch.fallback",
            self._ctx(),
            phase="fetch",
            outcome="fallback",
            error_code=error_code,
            fallback_used=True,
            level=level,
            reason=reason,
            failure_class=failure_class,
            error=error,
        )
        return FetchResult(
            image_models=default_image_models(),
            chat_models=default_chat_models(),
            source=SOURCE_DEFAULTS,
            reason=reason,
        )

    async def _get(self, api_key: str) -> httpx.Response:
        headers = {"Authorization": f"Bearer {api_key}", "Accept": "application/json"}
        client = self._client or (self._pool.get("catalog") if self._pool is not None else None)
        if client is not None:
            return await client.get(self.endpoint, headers=headers)
        timeout = get_timeout_config().catalog_timeout_seconds
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.get(self.endpoint, headers=headers)

    async def _get_within_deadline(self, api_key: str) -> httpx.Response:
        # httpx timeouts apply per phase; this bounds the whole exchange, body included
        deadline = get_timeout_config().catalog_timeout_seconds
        return await asyncio.wait_for(self._get(api_key), timeout=deadline)

    async def fetch_catalog(self) -> FetchResult:
        """Return freshly fetched entries, or the static defaults on any failure."""
        if not self.endpoint:
            return self._fallback(REASON_NO_ENDPOINT, failure_class="configuration_absent")
        api_key = self.settings.catalog_api_key
        if not api_key:
            return self._fallback(REASON_NO_CREDENTIAL, failure_class="configuration_absent")

        normalized_log_event(
            _logger, "catalog.fetch.start", self._ctx(), phase="fetch", outcome="started"
        )
        try:
            response = await self._get_within_deadline(api_key)
            response.raise_for_status()
        except Exception as exc:
            return self._fallback(
                REASON_TRANSPORT,
                failure_class="transport",
                error_code=classify_exception(exc).value,
                level=logging.WARNING,
                error=str(exc) or type(exc).__name__,
            )

        try:
            body = response.json()
        except ValueError as exc:
            return self._fallback(
                REASON_MALFORMED,
                failure_class="malformed_response",
                error_code=ErrorCode.MALFORMED.value,
                level=logging.WARNING,
                error=str(exc),
            )
        records = unwrap_model_list(body)
        if records is None:
            return self._fallback(
                REASON_MALFORMED,
                failure_class="malformed_response",
                error_code=ErrorCode.MALFORMED.value,
                level=logging.WARNING,
                error=f"unexpected body type {type(body).__name__}",
            )

        image, chat = build_entries(records, self.variant)
        normalized_log_event(
            _logger,
            "catalog.fetch.ok",
            self._ctx(),
            phase="fetch",
            outcome="ok",
            fallback_used=False,
            received=len(records),
            image_count=len(image),
            chat_count=len(chat),
        )
        return FetchResult(image_models=image, chat_models=chat, source=SOURCE_API)


__all__ = [
    "CatalogFetcher",
    "unwrap_model_list",
    "partition_models",
    "build_entries",
    "REASON_NO_ENDPOINT",
    "REASON_NO_CREDENTIAL",
    "REASON_TRANSPORT",
    "REASON_MALFORMED",
]
