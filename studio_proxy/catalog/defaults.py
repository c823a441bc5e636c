"""Static fallback catalog.

Served before the first successful refresh and whenever the fetcher cannot
reach (or make sense of) the upstream listing. Callers always receive fresh
copies so mutating a returned list never alters the fallback itself.
"""
from __future__ import annotations

from typing import List, Tuple

from .models import ChatModelEntry, ImageModelEntry

DEFAULT_IMAGE_MODELS: Tuple[ImageModelEntry, ...] = (
    ImageModelEntry(
        id="dall-e-3",
        name="DALL-E 3",
        description="🎨 High-quality image generation",
        provider="openai",
        max_width=1024,
        max_height=1024,
        free=False,
        speed="medium",
    ),
)

DEFAULT_CHAT_MODELS: Tuple[ChatModelEntry, ...] = (
    ChatModelEntry(
        id="gpt-3.5-turbo",
        name="GPT-3.5 Turbo",
        description="⚡ Fast responses",
        provider="openai",
        context_window=4096,
        free=False,
    ),
)


def default_image_models() -> List[ImageModelEntry]:
    return [ImageModelEntry(**vars(m)) for m in DEFAULT_IMAGE_MODELS]


def default_chat_models() -> List[ChatModelEntry]:
    return [ChatModelEntry(**vars(m)) for m in DEFAULT_CHAT_MODELS]


__all__ = [
    "DEFAULT_IMAGE_MODELS",
    "DEFAULT_CHAT_MODELS",
    "default_image_models",
    "default_chat_models",
]
