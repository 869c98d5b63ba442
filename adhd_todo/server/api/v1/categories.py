"""
API endpoints for managing categories.

Category names are unique per user regardless of case. Deleting a category
detaches it from tasks and templates; the tasks themselves are kept.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from adhd_todo.core.database.entities import Category
from adhd_todo.core.database.repositories import CategoryRepository
from adhd_todo.core.errors import ConflictError, NotFoundError
from adhd_todo.core.models.io.categories import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryList,
    CategoryRead,
    CategoryUpdate,
    CategoryWithCount,
)
from adhd_todo.core.models.io.common import MessageResponse
from adhd_todo.server.services.deps import CurrentUserDep, SessionDep

router = APIRouter(tags=["categories"])

DUPLICATE_NAME = "A category with this name already exists"


async def _with_count(repo: CategoryRepository, category: Category) -> CategoryWithCount:
    counts = await repo.task_counts([category.id])
    return CategoryWithCount(**CategoryRead.model_validate(category).model_dump(), task_count=counts[category.id])


async def _get_owned(repo: CategoryRepository, category_id: str, user_id: str) -> Category:
    category = await repo.get_for_user(category_id, user_id)
    if category is None:
        raise NotFoundError("Category")
    return category


@router.get(
    "",
    response_model=CategoryList,
    summary="List Categories",
    description="List the current user's categories ordered by name.",
)
async def list_categories(session: SessionDep, user: CurrentUserDep) -> CategoryList:
    categories = await CategoryRepository(session).list_for_user(user.id)
    return CategoryList(categories=[CategoryRead.model_validate(c) for c in categories])


@router.post(
    "",
    response_model=CategoryEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    description="Create a category. Names are compared case-insensitively.",
    responses={
        201: {"description": "Category created"},
        409: {"description": "A category with this name already exists"},
    },
)
async def create_category(data: CategoryCreate, session: SessionDep, user: CurrentUserDep) -> CategoryEnvelope:
    """
    Create a category.

    - **name**: Required, at most 30 characters.
    - **color**: CSS colour, default ``#3b82f6``.
    """
    repo = CategoryRepository(session)
    if await repo.find_by_name(user.id, data.name) is not None:
        raise ConflictError(DUPLICATE_NAME)
    category = await repo.create(Category(name=data.name, color=data.color, user_id=user.id))
    await session.commit()
    return CategoryEnvelope(category=CategoryWithCount(**CategoryRead.model_validate(category).model_dump()))


@router.get(
    "/{category_id}",
    response_model=CategoryEnvelope,
    summary="Get Category",
    description="Get a category with the number of tasks using it.",
    responses={404: {"description": "Category not found"}},
)
async def get_category(category_id: str, session: SessionDep, user: CurrentUserDep) -> CategoryEnvelope:
    repo = CategoryRepository(session)
    category = await _get_owned(repo, category_id, user.id)
    return CategoryEnvelope(category=await _with_count(repo, category))


async def _update(category_id: str, data: CategoryUpdate, session, user) -> CategoryEnvelope:
    repo = CategoryRepository(session)
    category = await _get_owned(repo, category_id, user.id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes and await repo.find_by_name(user.id, changes["name"], exclude_id=category.id):
        raise ConflictError(DUPLICATE_NAME)
    for field, value in changes.items():
        setattr(category, field, value)
    await repo.update(category)
    await session.commit()
    return CategoryEnvelope(category=await _with_count(repo, category))


@router.put(
    "/{category_id}",
    response_model=CategoryEnvelope,
    summary="Update Category",
    description="Rename or recolour a category.",
    responses={404: {"description": "Category not found"}, 409: {"description": "Duplicate name"}},
)
async def put_category(
    category_id: str, data: CategoryUpdate, session: SessionDep, user: CurrentUserDep
) -> CategoryEnvelope:
    return await _update(category_id, data, session, user)


@router.patch(
    "/{category_id}",
    response_model=CategoryEnvelope,
    summary="Patch Category",
    description="Same as PUT; omitted fields are left unchanged.",
    responses={404: {"description": "Category not found"}, 409: {"description": "Duplicate name"}},
)
async def patch_category(
    category_id: str, data: CategoryUpdate, session: SessionDep, user: CurrentUserDep
) -> CategoryEnvelope:
    return await _update(category_id, data, session, user)


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    summary="Delete Category",
    description="Detach a category from all tasks and templates, then delete it.",
    responses={404: {"description": "Category not found"}},
)
async def delete_category(category_id: str, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    repo = CategoryRepository(session)
    category = await _get_owned(repo, category_id, user.id)
    await repo.detach(category.id)
    await repo.delete(category)
    await session.commit()
    return MessageResponse(message="Category deleted successfully")
