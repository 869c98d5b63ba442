"""
HTTP middleware for the ADHD Todo API.

Only request timing and logging live here; CORS comes from Starlette.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
