"""
Starter data created for new users.

New accounts get five categories at signup; the eight templates are seeded
the first time a user lists templates and has none.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from adhd_todo.core.database.entities import Category, TaskTemplate
from adhd_todo.core.models.domain.enums import Emotion, Priority

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Work", "color": "#4A90E2"},
    {"name": "Personal", "color": "#50E3C2"},
    {"name": "Health", "color": "#FF5A5F"},
    {"name": "Shopping", "color": "#FFB400"},
    {"name": "Learning", "color": "#8E44AD"},
]

DEFAULT_TEMPLATES = [
    {
        "name": "Quick Task",
        "description": "A simple task that can be completed quickly",
        "priority": Priority.medium,
        "estimated_duration": 15,
        "emotion": Emotion.neutral,
        "is_recurring": False,
    },
    {
        "name": "Work Meeting",
        "description": "Prepare agenda and notes for team meeting",
        "priority": Priority.high,
        "estimated_duration": 60,
        "emotion": Emotion.neutral,
        "is_recurring": True,
        "recurrence": {"frequency": "weekly", "interval": 1, "days_of_week": [1]},
    },
    {
        "name": "Workout Session",
        "description": "Regular exercise routine for fitness goals",
        "priority": Priority.medium,
        "estimated_duration": 45,
        "emotion": Emotion.excited,
        "is_recurring": True,
        "recurrence": {"frequency": "daily", "interval": 1},
    },
    {
        "name": "Study Session",
        "description": "Focused learning time for professional development",
        "priority": Priority.high,
        "estimated_duration": 90,
        "emotion": Emotion.neutral,
        "is_recurring": False,
    },
    {
        "name": "Weekly Review",
        "description": "Review progress, update goals, and plan for next week",
        "priority": Priority.high,
        "estimated_duration": 30,
        "emotion": Emotion.neutral,
        "is_recurring": True,
        "recurrence": {"frequency": "weekly", "interval": 1, "days_of_week": [5]},
    },
    {
        "name": "Pay Bills",
        "description": "Monthly payment of recurring bills and financial review",
        "priority": Priority.high,
        "estimated_duration": 30,
        "emotion": Emotion.anxious,
        "is_recurring": True,
        "recurrence": {"frequency": "monthly", "interval": 1, "day_of_month": 1},
    },
    {
        "name": "Project Deadline",
        "description": "Final review and submission of project deliverables",
        "priority": Priority.high,
        "estimated_duration": 120,
        "emotion": Emotion.anxious,
        "is_recurring": False,
    },
    {
        "name": "Family Call",
        "description": "Regular catch-up with family members",
        "priority": Priority.medium,
        "estimated_duration": 45,
        "emotion": Emotion.excited,
        "is_recurring": True,
        "recurrence": {"frequency": "weekly", "interval": 1, "days_of_week": [6]},
    },
]


def build_default_categories(user_id: str) -> List[Category]:
    return [Category(user_id=user_id, **values) for values in DEFAULT_CATEGORIES]


async def seed_default_templates(session: AsyncSession, user_id: str) -> List[TaskTemplate]:
    """
    Create the starter templates for a user.

    The caller commits. Templates are created without categories.

    Args:
        session: Open database session
        user_id: Owner of the new templates

    Returns:
        The created templates in definition order
    """
    templates = []
    for values in DEFAULT_TEMPLATES:
        fields = {key: value for key, value in values.items() if key != "recurrence"}
        template = TaskTemplate(user_id=user_id, categories=[], **fields)
        template.set_recurrence(values.get("recurrence"))
        session.add(template)
        templates.append(template)
    await session.flush()
    logger.info(f"Created {len(templates)} default templates for user {user_id}")
    return templates
