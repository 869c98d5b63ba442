"""
Database entity models.

Each module represents either a single table or a small group of tables that
belong to one business concept.

Modules:
- users: accounts, login sessions, password reset tokens
- user_settings: per-user preferences
- categories: categories plus task/template association tables
- tasks: tasks and subtasks
- task_history: audit trail of task changes
- templates: reusable task templates
- recurring_tasks: recurring schedules built on templates
- focus_sessions: focused work sessions
- projects: projects and goals
"""

from . import (
    categories,
    focus_sessions,
    projects,
    recurring_tasks,
    task_history,
    tasks,
    templates,
    user_settings,
    users,
)
from .categories import Category, TaskCategoryLink, TemplateCategoryLink
from .focus_sessions import FocusSession
from .projects import Goal, Project
from .recurring_tasks import RecurringTask
from .task_history import TaskHistory
from .tasks import Task
from .templates import TaskTemplate
from .user_settings import UserSettings
from .users import User, UserSession, VerificationToken

__all__ = [
    "Category",
    "FocusSession",
    "Goal",
    "Project",
    "RecurringTask",
    "Task",
    "TaskCategoryLink",
    "TaskHistory",
    "TaskTemplate",
    "TemplateCategoryLink",
    "User",
    "UserSession",
    "UserSettings",
    "VerificationToken",
    "categories",
    "focus_sessions",
    "projects",
    "recurring_tasks",
    "task_history",
    "tasks",
    "templates",
    "user_settings",
    "users",
]
