"""Domain-level types shared across layers."""

from .enums import ChangeType, Emotion, Priority, ProjectStatus, RecurrenceFrequency, Theme

__all__ = ["ChangeType", "Emotion", "Priority", "ProjectStatus", "RecurrenceFrequency", "Theme"]
