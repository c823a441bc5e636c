"""studio_proxy.config.defaults
===========================

Central place for small, stable default values used by the catalog pipeline
and the service layer. Everything here can be overridden through the settings
layer (config file, environment, explicit overrides); this module performs no
I/O and imports nothing from the rest of the package.
"""

from __future__ import annotations

# ---- Service / HTTP layer ----

DEFAULT_HOST = "0.0.0.0"  # nosec B104 - the proxy is meant to be reachable from the LAN
DEFAULT_PORT = 3000
# Comma-separated list of allowed CORS origins.
DEFAULT_CORS_ORIGINS = "*"
# Directory holding the browser client (index.html, app.js, ...).
DEFAULT_STATIC_DIR = "public"

# ---- Upstream endpoints ----

DEFAULT_IMAGE_ENDPOINT = "https://api.openai.com/v1/images/generations"
DEFAULT_CHAT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
TOGETHER_MODELS_ENDPOINT = "https://api.together.xyz/v1/models"
# Substring identifying Together-hosted endpoints (different request body).
TOGETHER_HOST_MARKER = "together.xyz"

# ---- Catalog ----

DEFAULT_API_PROVIDER = "generic"
# Cached catalog older than this is refreshed on the next non-forced read.
CATALOG_STALENESS_SECONDS = 60 * 60
# Period of the background refresh task.
CATALOG_REFRESH_INTERVAL_SECONDS = 60 * 60
DEFAULT_IMAGE_MAX_DIMENSION = 2048
DEFAULT_CONTEXT_WINDOW = 4096

# ---- Proxy request defaults ----

DEFAULT_IMAGE_MODEL = "dall-e-3"
TOGETHER_DEFAULT_IMAGE_MODEL = "black-forest-labs/FLUX.1-schnell"
TOGETHER_IMAGE_STEPS = 4
DEFAULT_IMAGE_SIZE = 1024
DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"
CHAT_SYSTEM_PROMPT = "You are a helpful AI assistant."
CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 2048


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_CORS_ORIGINS",
    "DEFAULT_STATIC_DIR",
    "DEFAULT_IMAGE_ENDPOINT",
    "DEFAULT_CHAT_ENDPOINT",
    "TOGETHER_MODELS_ENDPOINT",
    "TOGETHER_HOST_MARKER",
    "DEFAULT_API_PROVIDER",
    "CATALOG_STALENESS_SECONDS",
    "CATALOG_REFRESH_INTERVAL_SECONDS",
    "DEFAULT_IMAGE_MAX_DIMENSION",
    "DEFAULT_CONTEXT_WINDOW",
    "DEFAULT_IMAGE_MODEL",
    "TOGETHER_DEFAULT_IMAGE_MODEL",
    "TOGETHER_IMAGE_STEPS",
    "DEFAULT_IMAGE_SIZE",
    "DEFAULT_CHAT_MODEL",
    "CHAT_SYSTEM_PROMPT",
    "CHAT_TEMPERATURE",
    "CHAT_MAX_TOKENS",
]
