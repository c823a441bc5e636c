"""Unified configuration layer for the studio proxy.

Goals
-----
* Centralize defaults (endpoints, catalog windows, server binding).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults (:class:`StudioSettings` field defaults)
    2. Optional config file (JSON or YAML) pointed to by ``STUDIO_CONFIG_FILE``
    3. Environment variables (``MODELS_API_ENDPOINT``, ``IMAGE_API_KEY``, ...)
    4. In-code overrides passed to :func:`get_settings`
* Load a ``.env`` file once before reading the environment.

External Config File (Optional)
-------------------------------
A flat mapping of field names, for example::

    api_provider: together
    models_endpoint: https://api.together.xyz/v1/models
    chat_model_cap: 40

Public API
----------
* StudioSettings
* get_settings(overrides: dict | None = None) -> StudioSettings
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union, get_args, get_origin, get_type_hints

import yaml

from .defaults import (
    CATALOG_REFRESH_INTERVAL_SECONDS,
    CATALOG_STALENESS_SECONDS,
    DEFAULT_API_PROVIDER,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_STATIC_DIR,
)
from .env import ENV_MAP, is_placeholder

CONFIG_FILE_ENV = "STUDIO_CONFIG_FILE"
DOTENV_FILE_ENV = "DOTENV_FILE"


@dataclass
class StudioSettings:
    """Resolved runtime settings.

    ``models_endpoint`` left unset disables catalog refreshes for the generic
    variant (variants may supply their own default endpoint). Unset image and
    chat endpoints are forwarded to the OpenAI URLs but reported as unset. Catalog caps and
    ``derive_free_from_pricing`` left at ``None`` use the variant's values.
    """

    models_endpoint: Optional[str] = None
    image_endpoint: Optional[str] = None
    chat_endpoint: Optional[str] = None
    image_api_key: Optional[str] = None
    chat_api_key: Optional[str] = None
    api_provider: str = DEFAULT_API_PROVIDER
    image_model_cap: Optional[int] = None
    chat_model_cap: Optional[int] = None
    derive_free_from_pricing: Optional[bool] = None
    staleness_seconds: int = CATALOG_STALENESS_SECONDS
    refresh_interval_seconds: int = CATALOG_REFRESH_INTERVAL_SECONDS
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    static_dir: str = DEFAULT_STATIC_DIR
    cors_origins: str = DEFAULT_CORS_ORIGINS

    @property
    def catalog_api_key(self) -> Optional[str]:
        """Credential used for the models listing (image key, else chat key)."""
        return self.image_api_key or self.chat_api_key

    @property
    def allow_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def with_overrides(self, **changes: Any) -> "StudioSettings":
        return replace(self, **changes)


# field name → environment variable
ENV_FIELD_MAP: Dict[str, str] = {
    "models_endpoint": "MODELS_API_ENDPOINT",
    "image_endpoint": "IMAGE_API_ENDPOINT",
    "chat_endpoint": "CHAT_API_ENDPOINT",
    "image_api_key": ENV_MAP["image"],
    "chat_api_key": ENV_MAP["chat"],
    "api_provider": "API_PROVIDER",
    "image_model_cap": "MODELS_IMAGE_CAP",
    "chat_model_cap": "MODELS_CHAT_CAP",
    "derive_free_from_pricing": "MODELS_DERIVE_FREE",
    "staleness_seconds": "MODELS_CACHE_TTL_SECONDS",
    "refresh_interval_seconds": "MODELS_REFRESH_INTERVAL_SECONDS",
    "host": "HOST",
    "port": "PORT",
    "static_dir": "STATIC_DIR",
    "cors_origins": "STUDIO_CORS_ORIGINS",
}


_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    environment variables win unless their value looks like a placeholder.
    """
    global _DOTENV_LOADED  # noqa: PLW0603
    if _DOTENV_LOADED:
        return
    path = os.getenv(DOTENV_FILE_ENV, ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_config_file() -> Dict[str, Any]:
    """Read the optional config file; JSON first, then YAML."""
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path).expanduser()
    if not p.is_file():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.safe_load(text) or {}
    return data if isinstance(data, dict) else {}


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _coerce_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float):
        return int(value)
    return int(str(value).strip())


def _coerce_str(value: Any) -> str:
    return "" if value is None else str(value).strip()


_CASTERS: Dict[Any, Callable[[Any], Any]] = {
    bool: _coerce_bool,
    int: _coerce_int,
    str: _coerce_str,
}


def _coerce_value(field_type: Any, value: Any) -> Any:
    """Cast a raw config value to the declared field type.

    ``Optional[X]`` fields map empty strings and ``None`` to ``None``.
    """
    if get_origin(field_type) is Union:
        args = [arg for arg in get_args(field_type) if arg is not type(None)]
        if value in ("", None):
            return None
        field_type = args[0] if len(args) == 1 else str
    caster = _CASTERS.get(field_type)
    return caster(value) if caster else value


def _apply(settings: StudioSettings, raw: Dict[str, Any], source: str) -> StudioSettings:
    hints = get_type_hints(StudioSettings)
    known = {f.name for f in fields(StudioSettings)}
    changes: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            continue
        try:
            changes[key] = _coerce_value(hints[key], value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {key!r} from {source}: {value!r}") from exc
    return replace(settings, **changes) if changes else settings


def _env_values() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field_name, env_name in ENV_FIELD_MAP.items():
        val = os.getenv(env_name)
        if val is not None:
            out[field_name] = val
    return out


def get_settings(overrides: Optional[Dict[str, Any]] = None) -> StudioSettings:
    """Return merged settings.

    Merge order (later wins): defaults -> config file -> env vars -> overrides.
    Raises ``ValueError`` when a numeric field cannot be parsed.
    """
    _load_dotenv_once()
    settings = StudioSettings()
    settings = _apply(settings, _load_config_file(), CONFIG_FILE_ENV)
    settings = _apply(settings, _env_values(), "environment")
    if overrides:
        settings = _apply(
            settings, {k: v for k, v in overrides.items() if v is not None}, "overrides"
        )
    return settings


__all__ = [
    "StudioSettings",
    "ENV_FIELD_MAP",
    "get_settings",
]
