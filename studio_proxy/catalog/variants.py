"""
Deployment variants of the catalog pipeline.

The same fetch/partition/normalize pipeline serves every deployment; what
differs is captured by a :class:`CatalogVariant`: the default models endpoint,
the id tokens and ``type`` values that admit a record into each category, the
per-category caps, whether chat models are ordered by context window, and
whether ``free`` is derived from pricing data.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from ..config import StudioSettings
from ..config.defaults import TOGETHER_MODELS_ENDPOINT


@dataclass(frozen=True)
class CatalogVariant:
    name: str
    image_tokens: Tuple[str, ...]
    chat_tokens: Tuple[str, ...]
    image_types: Tuple[str, ...] = ("image",)
    chat_types: Tuple[str, ...] = ("chat", "text")
    image_cap: int = 20
    chat_cap: int = 30
    sort_chat_by_context: bool = False
    derive_free: bool = False
    default_endpoint: Optional[str] = None


GENERIC = CatalogVariant(
    name="generic",
    image_tokens=("dall-e", "flux", "stable-diffusion", "sdxl"),
    chat_tokens=("gpt", "llama", "claude", "qwen", "grok", "mixtral"),
)

TOGETHER = CatalogVariant(
    name="together",
    image_tokens=("flux", "stable-diffusion", "sdxl"),
    chat_tokens=("llama", "qwen", "mixtral", "mistral", "deepseek", "gemma"),
    chat_types=("chat", "language"),
    image_cap=15,
    chat_cap=25,
    sort_chat_by_context=True,
    derive_free=True,
    default_endpoint=TOGETHER_MODELS_ENDPOINT,
)

MINIMAL = CatalogVariant(
    name="minimal",
    image_tokens=("dall-e", "flux"),
    chat_tokens=("gpt", "claude", "llama"),
    chat_types=("chat",),
    image_cap=10,
    chat_cap=15,
)

VARIANTS: Dict[str, CatalogVariant] = {v.name: v for v in (GENERIC, TOGETHER, MINIMAL)}


def get_variant(name: Optional[str]) -> CatalogVariant:
    """Return the named variant; unknown or empty names map to ``generic``."""
    return VARIANTS.get((name or "").strip().lower(), GENERIC)


def variant_for_settings(settings: StudioSettings) -> CatalogVariant:
    """Resolve the variant for ``settings`` and apply its configured overrides."""
    variant = get_variant(settings.api_provider)
    changes: Dict[str, object] = {}
    if settings.image_model_cap and settings.image_model_cap > 0:
        changes["image_cap"] = settings.image_model_cap
    if settings.chat_model_cap and settings.chat_model_cap > 0:
        changes["chat_cap"] = settings.chat_model_cap
    if settings.derive_free_from_pricing is not None:
        changes["derive_free"] = settings.derive_free_from_pricing
    return replace(variant, **changes) if changes else variant


def resolve_models_endpoint(settings: StudioSettings, variant: CatalogVariant) -> Optional[str]:
    """Return the configured endpoint, else the variant default, else ``None``."""
    return (settings.models_endpoint or "").strip() or variant.default_endpoint


__all__ = [
    "CatalogVariant",
    "GENERIC",
    "TOGETHER",
    "MINIMAL",
    "VARIANTS",
    "get_variant",
    "variant_for_settings",
    "resolve_models_endpoint",
]
