"""studio_proxy: model catalog and upstream proxy for the image/chat studio.

Subpackages:
- ``catalog``: fetch, normalize, cache and periodically refresh the model list.
- ``service``: FastAPI application forwarding image and chat requests.
- ``base``: logging, error taxonomy, timeouts and HTTP client pooling.
- ``config``: settings resolution from files, environment and overrides.
"""

__version__ = "0.1.0"
