import logging
from typing import Optional

from tortoise.expressions import Q
from tortoise.functions import Count

from ...common.models import apply_updates, collect_updates
from ...common.pagination import build_pagination, compute_skip, normalize_page, normalize_page_size
from ...core.exceptions import ConflictError, InternalError, NotFoundError
from ..sales.models import Sale
from .models import Category, Item
from .schemas import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithCount,
    DeleteResult,
    ItemCreate,
    ItemResponse,
    ItemUpdate,
    PaginatedItemsResponse,
)

logger = logging.getLogger(__name__)


def _search_filter(search: Optional[str]) -> Optional[Q]:
    """Case-insensitive substring match on name or description."""
    if not search or not search.strip():
        return None
    term = search.strip()
    return Q(name__icontains=term) | Q(description__icontains=term)


def _to_item_response(item: Item) -> ItemResponse:
    """Converts an Item model instance (category fetched) to an ItemResponse schema."""
    category_data = None
    if item.category:
        category_data = CategoryResponse.model_validate(item.category)

    return ItemResponse(
        id=item.public_id,
        name=item.name,
        description=item.description,
        price=item.price,
        quantity=item.quantity,
        category=category_data,
        created_at=item.created_at,
    )


async def _get_category_or_404(category_public_id: str) -> Category:
    category = await Category.get_or_none(public_id=category_public_id)
    if not category:
        raise NotFoundError("Category")
    return category


async def _get_item_or_404(item_public_id: str) -> Item:
    item = await Item.get_or_none(public_id=item_public_id)
    if not item:
        raise NotFoundError("Item")
    return item


async def _ensure_item_name_available(name: str, exclude_id: Optional[int] = None) -> None:
    query = Item.filter(name=name)
    if exclude_id is not None:
        query = query.exclude(id=exclude_id)
    if await query.exists():
        raise ConflictError(f"Item '{name}' already exists")


async def _ensure_category_name_available(name: str, exclude_id: Optional[int] = None) -> None:
    query = Category.filter(name=name)
    if exclude_id is not None:
        query = query.exclude(id=exclude_id)
    if await query.exists():
        raise ConflictError(f"Category '{name}' already exists")


# --- Items ---
async def create_item(item_in: ItemCreate) -> ItemResponse:
    """
    Creates a new item after checking that its name is free.

    Args:
        item_in: The data for the new item.

    Returns:
        The created item with its category.
    """
    await _ensure_item_name_available(item_in.name)
    item_data = item_in.model_dump()
    category_public_id = item_data.pop("category_id", None)
    category = await _get_category_or_404(category_public_id) if category_public_id else None

    try:
        item = await Item.create(**item_data, category=category)
        await item.fetch_related("category")
    except Exception as e:
        logger.error(f"Error creating item: {e}", exc_info=True)
        raise InternalError("Failed to create item.")
    logger.info(f"Created item {item.public_id} ({item.name})")
    return _to_item_response(item)


async def list_items(
    page: int,
    size: int,
    search: Optional[str] = None,
    category_public_id: Optional[str] = None,
) -> PaginatedItemsResponse:
    """
    Lists items, newest first.

    Args:
        page: The page number.
        size: The number of items per page.
        search: Optional text matched against name and description.
        category_public_id: The public ID of the category to filter by.

    Returns:
        A page of items with pagination metadata.
    """
    page, size = normalize_page(page), normalize_page_size(size)
    query = Item.all()
    search_q = _search_filter(search)
    if search_q is not None:
        query = query.filter(search_q)
    if category_public_id:
        category = await _get_category_or_404(category_public_id)
        query = query.filter(category_id=category.id)

    total = await query.count()
    items = (
        await query.prefetch_related("category")
        .order_by("-created_at", "-id")
        .offset(compute_skip(page, size))
        .limit(size)
    )
    return PaginatedItemsResponse(
        items=[_to_item_response(item) for item in items],
        pagination=build_pagination(page, size, total),
    )


async def get_item(item_public_id: str) -> ItemResponse:
    item = await _get_item_or_404(item_public_id)
    await item.fetch_related("category")
    return _to_item_response(item)


async def update_item(item_public_id: str, item_in: ItemUpdate) -> ItemResponse:
    """
    Updates an item. Fields left out of the request keep their current value.

    Args:
        item_public_id: The public ID of the item to update.
        item_in: The new data for the item.

    Returns:
        The updated item.
    """
    item = await _get_item_or_404(item_public_id)
    update_data = collect_updates(item_in)

    if "name" in update_data:
        await _ensure_item_name_available(update_data["name"], exclude_id=item.id)
    category_public_id = update_data.pop("category_id", None)
    if category_public_id:
        item.category = await _get_category_or_404(category_public_id)

    apply_updates(item, update_data)
    try:
        await item.save()
        await item.fetch_related("category")
    except Exception as e:
        logger.error(f"Error updating item {item_public_id}: {e}", exc_info=True)
        raise InternalError("Failed to update item.")
    return _to_item_response(item)


async def delete_item(item_public_id: str) -> DeleteResult:
    """
    Deletes an item together with every sale that references it.

    The sales and the item are removed by two separate delete statements,
    not inside one transaction.
    """
    item = await _get_item_or_404(item_public_id)
    deleted_sales = await Sale.filter(item_id=item.id).delete()
    await item.delete()
    logger.info(f"Deleted item {item_public_id} and {deleted_sales} sale(s)")
    return DeleteResult(message="Item and sales deleted", deleted_items=1, deleted_sales=deleted_sales)


# --- Categories ---
async def create_category(category_in: CategoryCreate) -> CategoryResponse:
    await _ensure_category_name_available(category_in.name)
    try:
        category = await Category.create(**category_in.model_dump())
    except Exception as e:
        logger.error(f"Error creating category: {e}", exc_info=True)
        raise InternalError("Failed to create category.")
    logger.info(f"Created category {category.public_id} ({category.name})")
    return CategoryResponse.model_validate(category)


async def list_categories(
    page: int, size: int, search: Optional[str] = None
) -> CategoryListResponse:
    """
    Lists categories, newest first, each annotated with its item count.

    Args:
        page: The page number.
        size: The number of categories per page.
        search: Optional text matched case-insensitively against name and description.

    Returns:
        A page of categories with pagination metadata.
    """
    page, size = normalize_page(page), normalize_page_size(size)
    query = Category.all()
    search_q = _search_filter(search)
    if search_q is not None:
        query = query.filter(search_q)

    total = await query.count()
    categories = (
        await query.annotate(items_count=Count("items"))
        .order_by("-created_at", "-id")
        .offset(compute_skip(page, size))
        .limit(size)
    )
    if categories:
        logger.debug(f"First category {categories[0].name} has {categories[0].items_count} item(s)")
    return CategoryListResponse(
        categories=[CategoryWithCount.model_validate(category) for category in categories],
        pagination=build_pagination(page, size, total),
    )


async def get_category(category_public_id: str) -> CategoryResponse:
    return CategoryResponse.model_validate(await _get_category_or_404(category_public_id))


async def update_category(
    category_public_id: str, category_in: CategoryUpdate
) -> CategoryResponse:
    category = await _get_category_or_404(category_public_id)
    update_data = collect_updates(category_in)
    if "name" in update_data:
        await _ensure_category_name_available(update_data["name"], exclude_id=category.id)

    apply_updates(category, update_data)
    try:
        await category.save()
    except Exception as e:
        logger.error(f"Error updating category {category_public_id}: {e}", exc_info=True)
        raise InternalError("Failed to update category.")
    return CategoryResponse.model_validate(category)


async def delete_category(category_public_id: str) -> DeleteResult:
    """
    Deletes a category, its items and the sales of those items.

    Sales go first, then items, then the category itself. Each step is an
    independent delete; a failure part way through leaves the earlier
    deletions in place.
    """
    category = await _get_category_or_404(category_public_id)
    item_ids = await Item.filter(category_id=category.id).values_list("id", flat=True)

    deleted_sales = 0
    deleted_items = 0
    if item_ids:
        deleted_sales = await Sale.filter(item_id__in=item_ids).delete()
        deleted_items = await Item.filter(id__in=item_ids).delete()
    await category.delete()
    logger.info(
        f"Deleted category {category_public_id} with {deleted_items} item(s) and {deleted_sales} sale(s)"
    )
    return DeleteResult(
        message="Category, items and sales deleted",
        deleted_items=deleted_items,
        deleted_sales=deleted_sales,
    )
