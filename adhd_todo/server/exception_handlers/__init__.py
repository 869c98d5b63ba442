"""
Exception handlers for the ADHD Todo API.

``setup_exception_handlers`` registers the domain error, integrity error and
catch-all handlers on the application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
