"""HTTP service: FastAPI application, upstream proxy and dev server."""
