"""
Core utilities for ADHD Todo.

This package provides core functionality including logging configuration,
database setup, recurrence calculation and other shared utilities.
"""

from adhd_todo.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
