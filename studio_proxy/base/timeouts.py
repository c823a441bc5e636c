"""Unified timeout configuration for upstream calls.

Every upstream request (catalog listing, image generation, chat completion)
takes its timeout from :func:`get_timeout_config`; no other module carries
numeric timeout literals.

Supported environment variables (all optional, positive floats):
    STUDIO_TIMEOUT_CATALOG_SECONDS   models listing call (default 10)
    STUDIO_TIMEOUT_IMAGE_SECONDS     image generation call (default 120)
    STUDIO_TIMEOUT_CHAT_SECONDS      chat completion call (default 60)

The configuration is cached per process and recomputed only when one of the
variables above changes, so tests can adjust them with ``monkeypatch``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

CATALOG_TIMEOUT_ENV = "STUDIO_TIMEOUT_CATALOG_SECONDS"
IMAGE_TIMEOUT_ENV = "STUDIO_TIMEOUT_IMAGE_SECONDS"
CHAT_TIMEOUT_ENV = "STUDIO_TIMEOUT_CHAT_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        catalog_timeout_seconds: Models listing request. A timeout routes the
            catalog to its fallback path; it is never retried.
        image_timeout_seconds: Image generation request.
        chat_timeout_seconds: Chat completion request.
    """

    catalog_timeout_seconds: float = 10.0
    image_timeout_seconds: float = 120.0
    chat_timeout_seconds: float = 60.0

    def for_purpose(self, purpose: str) -> float:
        """Return the timeout for a client pool purpose (``catalog``, ``image``, ``chat``)."""
        return {
            "catalog": self.catalog_timeout_seconds,
            "image": self.image_timeout_seconds,
            "chat": self.chat_timeout_seconds,
        }.get(purpose, self.catalog_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(
        os.getenv(name, "") for name in (CATALOG_TIMEOUT_ENV, IMAGE_TIMEOUT_ENV, CHAT_TIMEOUT_ENV)
    )
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED

    _CACHED = TimeoutConfig(
        catalog_timeout_seconds=_parse_env_float(CATALOG_TIMEOUT_ENV, 10.0),
        image_timeout_seconds=_parse_env_float(IMAGE_TIMEOUT_ENV, 120.0),
        chat_timeout_seconds=_parse_env_float(CHAT_TIMEOUT_ENV, 60.0),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
