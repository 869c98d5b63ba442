"""
Repository layer.

Each repository wraps one aggregate and takes an ``AsyncSession``. They add
and flush; services decide when to commit.
"""

from .base import AsyncBaseRepository, QueryBuilder, UserOwnedRepository
from .categories import CategoryRepository
from .focus_sessions import FocusSessionRepository
from .projects import GoalRepository, ProjectRepository
from .recurring_tasks import RecurringTaskRepository
from .task_history import TaskHistoryRepository
from .tasks import TaskRepository
from .templates import TaskTemplateRepository
from .user_settings import UserSettingsRepository
from .users import UserRepository, UserSessionRepository, VerificationTokenRepository

__all__ = [
    "AsyncBaseRepository",
    "CategoryRepository",
    "FocusSessionRepository",
    "GoalRepository",
    "ProjectRepository",
    "QueryBuilder",
    "RecurringTaskRepository",
    "TaskHistoryRepository",
    "TaskRepository",
    "TaskTemplateRepository",
    "UserOwnedRepository",
    "UserRepository",
    "UserSessionRepository",
    "UserSettingsRepository",
    "VerificationTokenRepository",
]
