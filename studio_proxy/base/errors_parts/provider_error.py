"""
Structured upstream error exception type.

Wraps failures of a third-party API (or of our own preconditions for calling
one) with a normalized :class:`ErrorCode` plus the HTTP status and payload the
service should relay to the browser.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured upstream error.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message relayed as ``error`` to the client.
        provider: Upstream role where the error originated (``"image"``,
            ``"chat"``, ``"catalog"``).
        model: Optional model id associated with the failure.
        retryable: Hint for callers (not authoritative).
        raw: Optional original exception for diagnostics.
        status_code: HTTP status the service responds with.
        details: Optional upstream error body relayed as ``details``.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None
    status_code: int = 500
    details: Any = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    def to_payload(self) -> dict:
        """Return the JSON body sent to the browser for this error."""
        payload: dict = {"success": False, "error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


__all__ = ["ProviderError"]
