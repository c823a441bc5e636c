from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from studio_proxy.catalog.cache import CatalogCache, format_timestamp
from studio_proxy.catalog.defaults import default_chat_models, default_image_models
from studio_proxy.config import StudioSettings

NOT_CONFIGURED = "not configured"


class ImageRequestBody(BaseModel):
    """Body of an image generation request.

    ``width`` and ``height`` default to 1024 when omitted; ``model`` defaults
    to the endpoint's house model.
    """

    prompt: str
    model: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ChatRequestBody(BaseModel):
    """Body of a chat request.

    ``history`` holds earlier turns as ``{"role", "content"}`` mappings and is
    sent between the system prompt and the new user message.
    """

    message: str
    model: Optional[str] = None
    history: Optional[List[Dict[str, Any]]] = None


def _build_config_response(settings: StudioSettings, models_endpoint: Optional[str]) -> Dict[str, Any]:
    """Return the client feature flags payload."""
    return {
        "hasImageApi": bool(settings.image_api_key),
        "hasChatApi": bool(settings.chat_api_key),
        "provider": settings.api_provider,
        "features": {
            "autoUpdateModels": bool(models_endpoint),
            "batchGeneration": False,
            "historyStorage": True,
        },
    }


def _build_health_response(
    settings: StudioSettings, cache: CatalogCache, models_endpoint: Optional[str]
) -> Dict[str, Any]:
    """Return the health payload: configuration summary plus catalog counts."""
    return {
        "status": "ok",
        "timestamp": format_timestamp(datetime.now(timezone.utc)),
        "config": {
            "hasImageApi": bool(settings.image_api_key),
            "hasChatApi": bool(settings.chat_api_key),
            "provider": settings.api_provider,
            "endpoints": {
                "image": settings.image_endpoint or NOT_CONFIGURED,
                "chat": settings.chat_endpoint or NOT_CONFIGURED,
                "models": models_endpoint or NOT_CONFIGURED,
            },
        },
        "models": cache.health(),
    }


def _build_models_error_response(exc: Exception) -> Dict[str, Any]:
    """Failure body of the models endpoint, built from the static defaults."""
    return {
        "success": False,
        "error": str(exc) or type(exc).__name__,
        "data": {
            "image": [m.to_dict() for m in default_image_models()],
            "chat": [m.to_dict() for m in default_chat_models()],
        },
    }


__all__ = [
    "ImageRequestBody",
    "ChatRequestBody",
    "NOT_CONFIGURED",
    "_build_config_response",
    "_build_health_response",
    "_build_models_error_response",
]
