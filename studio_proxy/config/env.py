"""studio_proxy.config.env
=======================

Environment variable mapping for upstream credentials.

Purpose
-------
- Single source of truth mapping an upstream role (``image``, ``chat``) to
  the environment variable holding its bearer credential.
- The catalog listing has no key of its own: it borrows the image key and,
  failing that, the chat key (see ``StudioSettings.catalog_api_key``).

Failure Modes
-------------
Helpers never raise on unknown roles; they return ``None``.
"""

from __future__ import annotations

from typing import Dict, Optional

# Role → env var mapping
ENV_MAP: Dict[str, str] = {
    "image": "IMAGE_API_KEY",
    "chat": "CHAT_API_KEY",
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder rather than a real key.

    Heuristics (case-insensitive): contains 'placeholder', 'changeme',
    'your-api-key' or 'example', or starts with 'test_'.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "your-api-key" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(role: str) -> Optional[str]:
    """Return the environment variable name for a role, or None if unknown."""
    return ENV_MAP.get(role.lower()) if role else None


__all__ = [
    "ENV_MAP",
    "is_placeholder",
    "get_env_var_name",
]
