"""Structured logging context carried by catalog and proxy log events."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Common fields merged into every structured event.

    ``component`` names the emitting part of the service (``catalog``,
    ``proxy``), ``endpoint`` the upstream URL involved and ``variant`` the
    catalog variant in effect. ``extra`` is flattened into the payload.
    """

    component: Optional[str] = None
    variant: Optional[str] = None
    endpoint: Optional[str] = None
    model: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
