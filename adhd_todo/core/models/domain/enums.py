"""Domain enums shared by entities, schemas and services."""

from __future__ import annotations

from enum import Enum


class Priority(str, Enum):
    """Task priority, lowest to highest."""

    none = "NONE"
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    urgent = "URGENT"


class Emotion(str, Enum):
    """
    How the user feels about a task.

    Used to surface tasks that cause anxiety or overwhelm so they can be
    broken down before they are avoided.
    """

    excited = "EXCITED"
    neutral = "NEUTRAL"
    anxious = "ANXIOUS"
    overwhelmed = "OVERWHELMED"
    confident = "CONFIDENT"


class RecurrenceFrequency(str, Enum):
    """How often a recurring task produces a new occurrence."""

    daily = "DAILY"
    weekly = "WEEKLY"
    monthly = "MONTHLY"
    yearly = "YEARLY"
    custom = "CUSTOM"  # every ``interval`` days


class ChangeType(str, Enum):
    """Kind of change recorded in a task's history."""

    created = "CREATED"
    updated = "UPDATED"
    completed = "COMPLETED"
    deleted = "DELETED"
    restored = "RESTORED"


class ProjectStatus(str, Enum):
    """Lifecycle of a project."""

    active = "ACTIVE"
    completed = "COMPLETED"
    archived = "ARCHIVED"


class Theme(str, Enum):
    light = "light"
    dark = "dark"
    system = "system"
