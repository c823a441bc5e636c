"""Pooled ``httpx.AsyncClient`` instances for upstream calls.

Purpose:
    Reuse one async client per purpose (``catalog``, ``image``, ``chat``) for
    the lifetime of the application instead of opening a connection pool per
    request. Timeouts derive exclusively from :func:`get_timeout_config`.

Lifecycle & cleanup:
    - The pool is owned by the application object (see
      ``studio_proxy.service.app.create_app``) and closed from its lifespan
      shutdown hook via :meth:`ClientPool.aclose`.
    - Clients are created lazily on first use. An optional ``transport`` is
      handed to every client, which lets tests substitute
      ``httpx.MockTransport`` for the network.
"""

from __future__ import annotations

import contextlib
from typing import Dict, Optional

import httpx

from ..timeouts import get_timeout_config


class ClientPool:
    """Lazily created async clients keyed by purpose.

    The pool runs inside a single event loop, so client creation needs no
    lock: there is no await between the lookup and the insert.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._transport = transport
        self._clients: Dict[str, httpx.AsyncClient] = {}

    def get(self, purpose: str) -> httpx.AsyncClient:
        """Return the client for ``purpose``, creating it on first use."""
        client = self._clients.get(purpose)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().for_purpose(purpose)
        if self._transport is not None:
            client = httpx.AsyncClient(timeout=timeout, transport=self._transport)
        else:
            client = httpx.AsyncClient(timeout=timeout)
        self._clients[purpose] = client
        return client

    def __contains__(self, purpose: object) -> bool:
        return purpose in self._clients

    async def aclose(self) -> None:
        """Close and forget every pooled client."""
        clients = list(self._clients.values())
        self._clients.clear()
        for c in clients:
            # Shutdown path: a failing close must not block closing the rest.
            with contextlib.suppress(Exception):
                await c.aclose()


__all__ = ["ClientPool"]
