"""
Upstream forwarding for image generation and chat completion.

Behavior
- Each call attaches the role's bearer credential (``IMAGE_API_KEY`` /
  ``CHAT_API_KEY``); a missing credential is a configuration error (HTTP 500)
  raised before any network traffic.
- Image requests use the Together body shape when the endpoint URL points at
  Together, the OpenAI-compatible shape otherwise.
- Upstream 4xx responses are relayed with their status, the upstream error
  message and the upstream body as ``details``. 5xx responses keep their
  status without ``details``. Timeouts and connection failures become 500.

Every failure is raised as :class:`ProviderError`; the application turns it
into the ``{"success": false, "error": ...}`` body.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..base.errors import ErrorCode, ProviderError, classify_exception
from ..base.http import ClientPool
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event
from ..config import StudioSettings
from ..config.defaults import (
    CHAT_MAX_TOKENS,
    CHAT_SYSTEM_PROMPT,
    CHAT_TEMPERATURE,
    DEFAULT_CHAT_ENDPOINT,
    DEFAULT_CHAT_MODEL,
    DEFAULT_IMAGE_ENDPOINT,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_SIZE,
    TOGETHER_DEFAULT_IMAGE_MODEL,
    TOGETHER_HOST_MARKER,
    TOGETHER_IMAGE_STEPS,
)
from ..config.env import get_env_var_name

TIMEOUT_MESSAGE = "Request timed out, please retry"
IMAGE_FAILED_MESSAGE = "Image generation failed"
CHAT_FAILED_MESSAGE = "Chat request failed"
PREVIEW_CHARS = 50

_logger = get_logger("studio.service.proxy")


def is_together_endpoint(endpoint: str) -> bool:
    return TOGETHER_HOST_MARKER in (endpoint or "")


def build_image_payload(
    endpoint: str,
    prompt: str,
    model: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> Dict[str, Any]:
    """Request body for the image endpoint; dimensions default to 1024."""
    w = width or DEFAULT_IMAGE_SIZE
    h = height or DEFAULT_IMAGE_SIZE
    if is_together_endpoint(endpoint):
        return {
            "model": model or TOGETHER_DEFAULT_IMAGE_MODEL,
            "prompt": prompt,
            "width": w,
            "height": h,
            "steps": TOGETHER_IMAGE_STEPS,
            "n": 1,
            "response_format": "b64_json",
        }
    return {
        "prompt": prompt,
        "model": model or DEFAULT_IMAGE_MODEL,
        "n": 1,
        "size": f"{w}x{h}",
        "response_format": "b64_json",
    }


def build_chat_payload(
    message: str,
    model: Optional[str] = None,
    history: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Request body for the chat endpoint: system prompt, history, user turn."""
    messages: List[Dict[str, Any]] = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
    messages.extend(history or [])
    messages.append({"role": "user", "content": message})
    return {
        "model": model or DEFAULT_CHAT_MODEL,
        "messages": messages,
        "temperature": CHAT_TEMPERATURE,
        "max_tokens": CHAT_MAX_TOKENS,
    }


def extract_error_message(body: Any, fallback: str) -> str:
    """Pull ``error`` (a string) or ``error.message`` out of an upstream body."""
    if not isinstance(body, dict):
        return fallback
    err = body.get("error")
    if isinstance(err, str) and err:
        return err
    if isinstance(err, dict):
        msg = err.get("message")
        if isinstance(msg, str) and msg:
            return msg
    return fallback


def _code_for_status(response: httpx.Response) -> ErrorCode:
    exc = httpx.HTTPStatusError(
        f"HTTP {response.status_code}", request=response.request, response=response
    )
    return classify_exception(exc)


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class UpstreamProxy:
    """Forwards browser requests to the configured image and chat APIs."""

    def __init__(self, settings: StudioSettings, pool: ClientPool) -> None:
        self.settings = settings
        self.pool = pool

    def _require_key(self, role: str, key: Optional[str]) -> str:
        if key:
            return key
        raise ProviderError(
            code=ErrorCode.CONFIG,
            message=f"{get_env_var_name(role)} is not configured",
            provider=role,
            status_code=500,
        )

    async def _post(
        self,
        role: str,
        endpoint: str,
        api_key: str,
        payload: Dict[str, Any],
        *,
        failed_message: str,
    ) -> Any:
        ctx = LogContext(component="proxy", endpoint=endpoint, model=payload.get("model"))
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        try:
            response = await self.pool.get(role).post(endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            raise self._failure(role, ctx, ErrorCode.TIMEOUT, TIMEOUT_MESSAGE, exc=exc) from exc
        except httpx.HTTPError as exc:
            raise self._failure(
                role, ctx, classify_exception(exc), str(exc) or failed_message, exc=exc
            ) from exc

        body = _decode(response)
        if response.status_code >= 400:
            raise self._failure(
                role,
                ctx,
                _code_for_status(response),
                extract_error_message(body, failed_message),
                status_code=response.status_code,
                details=body if response.status_code < 500 else None,
            )
        return body

    def _failure(
        self,
        role: str,
        ctx: LogContext,
        code: ErrorCode,
        message: str,
        *,
        status_code: int = 500,
        details: Any = None,
        exc: Optional[Exception] = None,
    ) -> ProviderError:
        normalized_log_event(
            _logger,
            "proxy.upstream.error",
            ctx,
            phase=role,
            outcome="error",
            error_code=code.value,
            level=logging.WARNING,
            status=status_code,
            error=message,
        )
        return ProviderError(
            code=code,
            message=message,
            provider=role,
            model=ctx.model,
            retryable=code in (ErrorCode.TIMEOUT, ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT),
            raw=exc,
            status_code=status_code,
            details=details,
        )

    async def generate_image(
        self,
        prompt: str,
        model: Optional[str] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Forward an image generation request; returns ``{success, data}``."""
        api_key = self._require_key("image", self.settings.image_api_key)
        endpoint = self.settings.image_endpoint or DEFAULT_IMAGE_ENDPOINT
        payload = build_image_payload(endpoint, prompt, model, width, height)
        log_event(
            _logger,
            "proxy.image.request",
            LogContext(component="proxy", endpoint=endpoint, model=payload["model"]),
            prompt_preview=prompt[:PREVIEW_CHARS],
            width=width or DEFAULT_IMAGE_SIZE,
            height=height or DEFAULT_IMAGE_SIZE,
        )
        body = await self._post("image", endpoint, api_key, payload, failed_message=IMAGE_FAILED_MESSAGE)
        data = body.get("data") if isinstance(body, dict) else None
        return {"success": True, "data": data or body}

    async def chat(
        self,
        message: str,
        model: Optional[str] = None,
        history: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Forward a chat completion request; returns ``{success, data}``."""
        api_key = self._require_key("chat", self.settings.chat_api_key)
        endpoint = self.settings.chat_endpoint or DEFAULT_CHAT_ENDPOINT
        payload = build_chat_payload(message, model, history)
        log_event(
            _logger,
            "proxy.chat.request",
            LogContext(component="proxy", endpoint=endpoint, model=payload["model"]),
            message_preview=message[:PREVIEW_CHARS],
            message_count=len(payload["messages"]),
        )
        body = await self._post("chat", endpoint, api_key, payload, failed_message=CHAT_FAILED_MESSAGE)
        return {"success": True, "data": body}


__all__ = [
    "UpstreamProxy",
    "build_image_payload",
    "build_chat_payload",
    "extract_error_message",
    "is_together_endpoint",
    "TIMEOUT_MESSAGE",
]
