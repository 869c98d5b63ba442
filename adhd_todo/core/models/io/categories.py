"""
Category I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORY_COLOR = "#3b82f6"


class CategoryRead(BaseModel):
    """Schema for reading a category from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    user_id: str
    created_at: datetime
    updated_at: datetime


class CategoryWithCount(CategoryRead):
    """Category plus the number of tasks it is attached to."""

    task_count: int = 0


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(min_length=1, max_length=30, description="Category name, unique per user")
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, max_length=32, description="CSS colour")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class CategoryUpdate(BaseModel):
    """Schema for updating a category. Omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=30)
    color: Optional[str] = Field(default=None, max_length=32)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class CategoryEnvelope(BaseModel):
    category: CategoryWithCount


class CategoryList(BaseModel):
    categories: List[CategoryRead]
