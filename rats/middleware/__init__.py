"""
RATS Middleware.

All middleware components are imported here.
"""

from rats.middleware.auth import AuthMiddleware

__all__ = [
    "AuthMiddleware",
]
