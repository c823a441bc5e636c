from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from studio_proxy import __version__
from studio_proxy.base.errors import ProviderError
from studio_proxy.base.http import ClientPool
from studio_proxy.base.logging import LogContext, get_logger, log_event
from studio_proxy.catalog.cache import CatalogCache, CatalogSource
from studio_proxy.catalog.fetcher import CatalogFetcher
from studio_proxy.catalog.scheduler import RefreshScheduler
from studio_proxy.config import StudioSettings, get_settings

from .app_parts.app_core import (
    ChatRequestBody,
    ImageRequestBody,
    _build_config_response,
    _build_health_response,
    _build_models_error_response,
)
from .proxy import UpstreamProxy

_logger = get_logger("studio.service.app")


def create_app(
    settings: Optional[StudioSettings] = None,
    *,
    fetcher: Optional[CatalogSource] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the FastAPI application and the state it owns.

    Parameters
    ----------
    settings: Optional[StudioSettings]
        Resolved settings; :func:`get_settings` is used when omitted.
    fetcher: Optional[CatalogSource]
        Replacement catalog source (anything with ``async fetch_catalog()``).
        Defaults to a :class:`CatalogFetcher` using the app's client pool.
    transport: Optional[httpx.AsyncBaseTransport]
        Transport handed to every pooled upstream client (tests pass
        ``httpx.MockTransport``).

    The catalog cache, refresh scheduler, client pool and upstream proxy are
    attached to ``app.state``. Startup blocks on the first catalog refresh;
    shutdown stops the scheduler and closes the pool.
    """
    settings = settings or get_settings()
    pool = ClientPool(transport=transport)
    catalog_fetcher = CatalogFetcher(settings, pool=pool)
    source: CatalogSource = fetcher or catalog_fetcher
    models_endpoint = catalog_fetcher.endpoint
    cache = CatalogCache(source, staleness_seconds=settings.staleness_seconds)
    scheduler = RefreshScheduler(
        cache,
        interval_seconds=settings.refresh_interval_seconds,
        enabled=bool(getattr(source, "enabled", models_endpoint)),
    )
    proxy = UpstreamProxy(settings, pool)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log_event(
            _logger,
            "service.startup",
            LogContext(component="service", variant=catalog_fetcher.variant.name),
            has_image_api=bool(settings.image_api_key),
            has_chat_api=bool(settings.chat_api_key),
            models_endpoint=models_endpoint,
        )
        await scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            await pool.aclose()

    app = FastAPI(title="Studio Proxy", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.cache = cache
    app.state.scheduler = scheduler
    app.state.pool = pool
    app.state.proxy = proxy

    # -----------------------------------------------------------------------
    # CORS configuration
    # -----------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProviderError)
    async def _provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    # -----------------------------------------------------------------------
    # Catalog, config and health endpoints
    # -----------------------------------------------------------------------

    @app.get("/api/models")
    async def get_models(refresh: Optional[str] = None) -> Any:
        """Return the cached catalog, refreshing first when forced or stale.

        Only the literal ``refresh=true`` forces a refetch; any other value is
        an ordinary read.
        """
        try:
            return await cache.models_payload(force=refresh == "true")
        except Exception as e:
            return JSONResponse(status_code=500, content=_build_models_error_response(e))

    @app.get("/api/config")
    def get_config() -> Dict[str, Any]:
        """Feature flags the browser client uses to enable its panels."""
        return _build_config_response(settings, models_endpoint)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return _build_health_response(settings, cache, models_endpoint)

    # -----------------------------------------------------------------------
    # Upstream proxy endpoints
    # -----------------------------------------------------------------------

    @app.post("/api/generate-image")
    async def post_generate_image(body: ImageRequestBody) -> Dict[str, Any]:
        """Forward an image generation request to the configured image API."""
        return await proxy.generate_image(body.prompt, body.model, body.width, body.height)

    @app.post("/api/chat")
    async def post_chat(body: ChatRequestBody) -> Dict[str, Any]:
        """Forward a chat turn (with history) to the configured chat API."""
        return await proxy.chat(body.message, body.model, body.history)

    # -----------------------------------------------------------------------
    # Browser client
    # -----------------------------------------------------------------------

    # Mounted last so the API routes above take precedence over "/".
    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()


def get_app() -> FastAPI:
    """Return the module-level FastAPI application instance.

    Provides access to the configured app for uvicorn or testing; tests
    usually build their own instance with :func:`create_app`.
    """
    return app
