"""
Normalization of raw upstream model records into catalog entries.

Raw records are provider-defined mappings with no guaranteed shape; only the
``id`` is required (records without one are dropped by the fetcher's
partition step before they get here). Every optional field degrades to a
default; nothing in this module raises on malformed input.
"""

from __future__ import annotations

import contextlib
import re
from typing import Any, Mapping, Optional

from ..config.defaults import DEFAULT_CONTEXT_WINDOW, DEFAULT_IMAGE_MAX_DIMENSION
from .classifier import classify_provider, classify_speed, describe_model
from .models import ChatModelEntry, ImageModelEntry


def _text(value: Any) -> Optional[str]:
    """Return ``value`` as a stripped string, or ``None`` when blank or not text."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _best_name(raw: Mapping[str, Any], model_id: str) -> str:
    """Pick the display name: ``name``, then ``display_name``, then the id."""
    return _text(raw.get("name")) or _text(raw.get("display_name")) or model_id


def _best_description(raw: Mapping[str, Any], model_id: str) -> str:
    return _text(raw.get("description")) or describe_model(model_id)


_CTX_SUFFIX_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}
_CTX_TRAILING_TOKENS = ("tokens", "token", "ctx", "context")


def _parse_ctx_string(raw: str) -> Optional[int]:
    """Parse human-readable context lengths such as ``"8192"``, ``"32,000 tokens"`` or ``"128k"``."""
    s = raw.strip().lower()
    for token in _CTX_TRAILING_TOKENS:
        if s.endswith(token):
            s = s[: -len(token)].strip()
    plain = s.replace(",", "").replace("_", "")
    if m := re.match(r"^(\d+(?:\.\d+)?)\s*([km])?$", plain):
        num_s, suf = m.groups()
        val = float(num_s)
        if suf:
            val *= _CTX_SUFFIX_MULTIPLIERS[suf]
        return int(val)
    return None


def positive_int(value: Any) -> Optional[int]:
    """Coerce numbers and numeric strings to a positive int; ``None`` otherwise."""
    if value is None or isinstance(value, bool):
        return None
    parsed: Optional[int] = None
    if isinstance(value, (int, float)):
        with contextlib.suppress(ValueError, OverflowError):
            parsed = int(value)
    elif isinstance(value, str):
        parsed = _parse_ctx_string(value)
    return parsed if parsed is not None and parsed > 0 else None


def is_free(raw: Mapping[str, Any]) -> bool:
    """Pricing-derived free detection.

    A model is free when it carries no pricing mapping at all, or when the
    pricing's ``input`` price equals zero.
    """
    pricing = raw.get("pricing")
    if not isinstance(pricing, Mapping):
        return True
    price = pricing.get("input")
    if isinstance(price, bool):
        return False
    if isinstance(price, (int, float)):
        return price == 0
    if isinstance(price, str):
        with contextlib.suppress(ValueError):
            return float(price) == 0
    return False


def normalize_image(raw: Mapping[str, Any], *, derive_free: bool = False) -> ImageModelEntry:
    """Map a raw record to an :class:`ImageModelEntry`."""
    model_id = str(raw.get("id") or "")
    return ImageModelEntry(
        id=model_id,
        name=_best_name(raw, model_id),
        description=_best_description(raw, model_id),
        provider=classify_provider(model_id),
        max_width=positive_int(raw.get("max_width")) or DEFAULT_IMAGE_MAX_DIMENSION,
        max_height=positive_int(raw.get("max_height")) or DEFAULT_IMAGE_MAX_DIMENSION,
        free=is_free(raw) if derive_free else False,
        speed=classify_speed(model_id),
    )


def normalize_chat(raw: Mapping[str, Any], *, derive_free: bool = False) -> ChatModelEntry:
    """Map a raw record to a :class:`ChatModelEntry`."""
    model_id = str(raw.get("id") or "")
    return ChatModelEntry(
        id=model_id,
        name=_best_name(raw, model_id),
        description=_best_description(raw, model_id),
        provider=classify_provider(model_id),
        context_window=positive_int(raw.get("context_length")) or DEFAULT_CONTEXT_WINDOW,
        free=is_free(raw) if derive_free else False,
    )


__all__ = [
    "normalize_image",
    "normalize_chat",
    "is_free",
    "positive_int",
]
