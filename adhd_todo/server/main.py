"""
Main Application Entry Point.

This module builds the FastAPI application: logging, the database lifespan,
CORS and request timing middleware, exception handlers and every v1 router.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adhd_todo.core.database import init_db
from adhd_todo.core.logging_config import get_logger, setup_logging
from adhd_todo.core.monitoring import initialize_logfire

from .api.v1 import (
    ai,
    auth,
    categories,
    focus_sessions,
    goals,
    health,
    projects,
    recurring_tasks,
    tasks,
    templates,
    user,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

setup_logging(log_level=settings.log_level, log_format=settings.log_format, enable_file=settings.enable_file_logging)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup; log shutdown."""
    try:
        logger.info(f"Starting up {constant.PROJECT_NAME} ({settings.environment})...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info(f"Shutting down {constant.PROJECT_NAME}...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ADHD Todo API

    Backend for an ADHD-friendly task manager: tasks with categories and history,
    templates and recurring schedules, focus sessions, projects and goals,
    user preferences and AI help for writing task text.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.add_middleware(LogfireMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router)
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth")
app.include_router(tasks.router, prefix=f"{constant.API_V1_STR}/tasks")
app.include_router(categories.router, prefix=f"{constant.API_V1_STR}/categories")
app.include_router(templates.router, prefix=f"{constant.API_V1_STR}/templates")
app.include_router(recurring_tasks.router, prefix=f"{constant.API_V1_STR}/recurring-tasks")
app.include_router(focus_sessions.router, prefix=f"{constant.API_V1_STR}/focus-sessions")
app.include_router(projects.router, prefix=f"{constant.API_V1_STR}/projects")
app.include_router(goals.router, prefix=f"{constant.API_V1_STR}/goals")
app.include_router(user.router, prefix=f"{constant.API_V1_STR}/user")
app.include_router(ai.router, prefix=f"{constant.API_V1_STR}/ai")
