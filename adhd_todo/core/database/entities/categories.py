"""
Category entity and the association tables that attach categories to tasks
and task templates.
"""

from datetime import datetime

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class TaskCategoryLink(Base, table=True):
    """Many-to-many association between tasks and categories.

    Table: task_categories
    """

    __tablename__ = "task_categories"
    __table_args__ = ({"extend_existing": True},)

    task_id: str = Field(foreign_key="tasks.id", ondelete="CASCADE", primary_key=True)
    category_id: str = Field(foreign_key="categories.id", ondelete="CASCADE", primary_key=True)


class TemplateCategoryLink(Base, table=True):
    """Many-to-many association between task templates and categories.

    Table: template_categories
    """

    __tablename__ = "template_categories"
    __table_args__ = ({"extend_existing": True},)

    template_id: str = Field(foreign_key="task_templates.id", ondelete="CASCADE", primary_key=True)
    category_id: str = Field(foreign_key="categories.id", ondelete="CASCADE", primary_key=True)


class Category(Base, table=True):
    """User-defined label with a colour.

    Names are unique per user, compared case-insensitively by the repository.

    Table: categories
    """

    __tablename__ = "categories"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=30)
    color: str = Field(default="#3b82f6", max_length=32)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Category(name={self.name}, color={self.color})"
