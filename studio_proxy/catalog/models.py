"""
Catalog DTOs: normalized model entries, the cached catalog and fetch results.

Entries are plain dataclasses; ``to_dict`` produces the camelCase shape the
browser client consumes (``maxWidth``, ``contextWindow``, ``lastUpdate``).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SOURCE_API = "api"
SOURCE_DEFAULTS = "defaults"


@dataclass
class ImageModelEntry:
    """A normalized image-generation model.

    Attributes:
        id: Stable provider identifier, unique within the image category.
        name: Display name (never empty).
        description: Display description (never empty, may carry an emoji).
        provider: Provider tag from the classifier vocabulary.
        max_width: Largest supported width in pixels.
        max_height: Largest supported height in pixels.
        free: Whether the model is free to use.
        speed: One of ``fast``, ``medium``, ``slow``.
    """

    id: str
    name: str
    description: str
    provider: str
    max_width: int = 2048
    max_height: int = 2048
    free: bool = False
    speed: str = "medium"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "provider": self.provider,
            "maxWidth": self.max_width,
            "maxHeight": self.max_height,
            "free": self.free,
            "speed": self.speed,
        }


@dataclass
class ChatModelEntry:
    """A normalized chat-completion model.

    Attributes:
        id: Stable provider identifier, unique within the chat category.
        name: Display name (never empty).
        description: Display description (never empty).
        provider: Provider tag from the classifier vocabulary.
        context_window: Maximum context length in tokens.
        free: Whether the model is free to use.
    """

    id: str
    name: str
    description: str
    provider: str
    context_window: int = 4096
    free: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "provider": self.provider,
            "contextWindow": self.context_window,
            "free": self.free,
        }


@dataclass
class Catalog:
    """Snapshot of the cached catalog.

    ``last_update`` is an ISO-8601 UTC timestamp, ``None`` until the first
    successful refresh.
    """

    image: List[ImageModelEntry] = field(default_factory=list)
    chat: List[ChatModelEntry] = field(default_factory=list)
    last_update: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": [m.to_dict() for m in self.image],
            "chat": [m.to_dict() for m in self.chat],
            "lastUpdate": self.last_update,
        }


@dataclass
class FetchResult:
    """Outcome of one catalog fetch.

    ``source`` is ``"api"`` when the upstream listing was retrieved and parsed
    (the lists may still be empty), ``"defaults"`` when the fetcher fell back
    to the static catalog. ``reason`` names the fallback cause.
    """

    image_models: List[ImageModelEntry]
    chat_models: List[ChatModelEntry]
    source: str = SOURCE_API
    reason: Optional[str] = None

    @property
    def from_api(self) -> bool:
        return self.source == SOURCE_API


__all__ = [
    "ImageModelEntry",
    "ChatModelEntry",
    "Catalog",
    "FetchResult",
    "SOURCE_API",
    "SOURCE_DEFAULTS",
]
