"""
ADHD Todo Server Package.

This package contains the web server implementation for ADHD Todo.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings and constants.
    services: Business logic shared by several routers.
    middleware: Request timing and logging.
    exception_handlers: Mapping of domain and unhandled errors to responses.
"""
