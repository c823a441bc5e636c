"""Infrastructure shared by the catalog pipeline and the HTTP service.

Logging, the error taxonomy, timeout configuration and the pooled upstream
HTTP clients live here; nothing in this package imports the service layer.
"""
