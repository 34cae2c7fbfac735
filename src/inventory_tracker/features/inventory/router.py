"""API routes for managing items and categories."""
from fastapi import APIRouter, Depends, status, Query
from typing import Optional

from ...core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..auth.security import get_current_user, require_admin
from .schemas import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    DeleteResult,
    ItemCreate,
    ItemResponse,
    ItemUpdate,
    PaginatedItemsResponse,
)
from . import service

items_router = APIRouter(
    prefix="/items",
    tags=["Items"],
    dependencies=[Depends(get_current_user)],
    responses={404: {"description": "Not found"}},
)

categories_router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={404: {"description": "Not found"}},
)


@items_router.post(
    "/",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new item",
    dependencies=[Depends(require_admin)],
)
async def create_item(item_in: ItemCreate):
    return await service.create_item(item_in)


@items_router.get(
    "/",
    response_model=PaginatedItemsResponse,
    summary="List items, newest first",
)
async def list_items(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of items per page"),
    search: Optional[str] = Query(None, description="Text to match in name or description"),
    category_id: Optional[str] = Query(None, description="Public ID of the category to filter by"),
):
    return await service.list_items(page, size, search, category_id)


@items_router.get(
    "/{item_public_id}",
    response_model=ItemResponse,
    summary="Get a specific item",
)
async def get_item(item_public_id: str):
    return await service.get_item(item_public_id)


@items_router.put(
    "/{item_public_id}",
    response_model=ItemResponse,
    summary="Update an item",
    dependencies=[Depends(require_admin)],
)
async def update_item(item_public_id: str, item_in: ItemUpdate):
    return await service.update_item(item_public_id, item_in)


@items_router.delete(
    "/{item_public_id}",
    response_model=DeleteResult,
    summary="Delete an item and its sales",
    dependencies=[Depends(require_admin)],
)
async def delete_item(item_public_id: str):
    return await service.delete_item(item_public_id)


# --- Category Endpoints ---
@categories_router.get(
    "/",
    response_model=CategoryListResponse,
    summary="List categories with their item counts",
)
async def list_categories(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of categories per page"),
    search: Optional[str] = Query(None, description="Text to match in name or description"),
):
    return await service.list_categories(page, limit, search)


@categories_router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
    dependencies=[Depends(require_admin)],
)
async def create_category(category_in: CategoryCreate):
    return await service.create_category(category_in)


@categories_router.get(
    "/{category_public_id}",
    response_model=CategoryResponse,
    summary="Get a specific category",
)
async def get_category(category_public_id: str):
    return await service.get_category(category_public_id)


@categories_router.put(
    "/{category_public_id}",
    response_model=CategoryResponse,
    summary="Update a category",
    dependencies=[Depends(require_admin)],
)
async def update_category(category_public_id: str, category_in: CategoryUpdate):
    return await service.update_category(category_public_id, category_in)


@categories_router.delete(
    "/{category_public_id}",
    response_model=DeleteResult,
    summary="Delete a category with its items and their sales",
    dependencies=[Depends(require_admin)],
)
async def delete_category(category_public_id: str):
    return await service.delete_category(category_public_id)
