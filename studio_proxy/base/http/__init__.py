"""HTTP utilities package.

Exposes the pooled async clients used for upstream calls.
"""

from .client import ClientPool

__all__ = ["ClientPool"]
