"""
Middleware modules for the AFFiNE Cloud server.

This package contains custom middleware for request/response logging.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
