from __future__ import annotations

import os
import uvicorn

from studio_proxy.config import get_settings


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def main() -> None:
    """Start the studio proxy under uvicorn.

    Host and port come from the settings layer (``HOST`` / ``PORT``, default
    ``0.0.0.0:3000``). ``STUDIO_RELOAD=true`` enables auto-reload for local
    development.
    """
    settings = get_settings()
    uvicorn.run(
        "studio_proxy.service.app:app",
        host=settings.host,
        port=settings.port,
        reload=_parse_bool(os.getenv("STUDIO_RELOAD"), False),
    )


if __name__ == "__main__":
    main()
