import pytest
from fastapi import HTTPException

from inventory_tracker.features.inventory.models import Category, Item
from inventory_tracker.features.inventory.schemas import (
    CategoryCreate,
    CategoryUpdate,
    ItemCreate,
    ItemUpdate,
)
from inventory_tracker.features.inventory.service import (
    create_category,
    create_item,
    delete_category,
    delete_item,
    get_category,
    get_item,
    list_categories,
    list_items,
    update_category,
    update_item,
)
from inventory_tracker.features.sales.models import Sale


@pytest.mark.asyncio
async def test_create_category_trims_name():
    """Test creating a category."""
    created = await create_category(CategoryCreate(name="  Hardware  ", description="Tools and parts"))
    assert created.name == "Hardware"
    assert await Category.get_or_none(public_id=created.id) is not None


@pytest.mark.asyncio
async def test_create_category_duplicate_name():
    """Test creating a category with a duplicate name."""
    await create_category(CategoryCreate(name="Duplicate Category"))
    with pytest.raises(HTTPException) as exc_info:
        await create_category(CategoryCreate(name="Duplicate Category"))
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_get_category_not_found():
    """Test getting a non-existent category."""
    with pytest.raises(HTTPException) as exc_info:
        await get_category("non-existent-id")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_update_category_keeps_missing_fields(category_factory):
    """Test updating a category."""
    category = await category_factory("Garden", description="Outdoor things")
    updated = await update_category(category.public_id, CategoryUpdate(name="Garden & Patio"))
    assert updated.name == "Garden & Patio"
    assert updated.description == "Outdoor things"


@pytest.mark.asyncio
async def test_update_category_to_existing_name_conflicts(category_factory):
    """Test renaming a category to a name already in use."""
    await category_factory("Kitchen")
    other = await category_factory("Bath")
    with pytest.raises(HTTPException) as exc_info:
        await update_category(other.public_id, CategoryUpdate(name="Kitchen"))
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_update_category_with_same_name_is_allowed(category_factory):
    """Test updating a category without changing its name."""
    category = await category_factory("Kitchen")
    updated = await update_category(category.public_id, CategoryUpdate(name="Kitchen", description="Pots"))
    assert updated.description == "Pots"


@pytest.mark.asyncio
async def test_update_category_without_fields_rejected(category_factory):
    """Test an empty category update."""
    category = await category_factory("Kitchen")
    with pytest.raises(HTTPException) as exc_info:
        await update_category(category.public_id, CategoryUpdate())
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_list_categories_counts_items_newest_first(category_factory, item_factory):
    """Test listing categories."""
    tools = await category_factory("Tools")
    toys = await category_factory("Toys")
    await category_factory("Empty")
    await item_factory("Hammer", category=tools)
    await item_factory("Wrench", category=tools)
    await item_factory("Yo-yo", category=toys)

    result = await list_categories(page=1, size=10)
    assert [c.name for c in result.categories] == ["Empty", "Toys", "Tools"]
    counts = {c.name: c.items_count for c in result.categories}
    assert counts == {"Empty": 0, "Toys": 1, "Tools": 2}
    assert result.pagination.total_items == 3
    assert result.pagination.total_pages == 1


@pytest.mark.asyncio
async def test_list_categories_search_is_case_insensitive(category_factory):
    """Test searching categories."""
    await category_factory("Power Tools")
    await category_factory("Kitchen", description="Cooking TOOLS and pans")
    await category_factory("Toys")

    result = await list_categories(page=1, size=10, search="tools")
    assert sorted(c.name for c in result.categories) == ["Kitchen", "Power Tools"]
    assert result.pagination.total_items == 2


@pytest.mark.asyncio
async def test_list_categories_pagination(category_factory):
    """Test paging through categories."""
    for index in range(5):
        await category_factory(f"Category {index}")

    page_two = await list_categories(page=2, size=2)
    assert len(page_two.categories) == 2
    assert page_two.pagination.current_page == 2
    assert page_two.pagination.total_pages == 3
    assert page_two.pagination.has_next_page is True
    assert page_two.pagination.has_prev_page is True

    last_page = await list_categories(page=3, size=2)
    assert len(last_page.categories) == 1
    assert last_page.pagination.has_next_page is False


@pytest.mark.asyncio
async def test_delete_category_cascades_to_items_and_sales(category_factory, item_factory, sale_factory):
    """Test deleting a category with items and sales."""
    doomed = await category_factory("Doomed")
    kept = await category_factory("Kept")
    doomed_items = [
        await item_factory("Doomed A", category=doomed),
        await item_factory("Doomed B", category=doomed),
    ]
    survivor = await item_factory("Survivor", category=kept)
    for item in doomed_items:
        await sale_factory(item, quantity=1)
        await sale_factory(item, quantity=2)
    await sale_factory(survivor, quantity=3)

    result = await delete_category(doomed.public_id)

    assert result.deleted_items == 2
    assert result.deleted_sales == 4
    assert await Category.filter(id=doomed.id).count() == 0
    assert await Item.filter(id__in=[i.id for i in doomed_items]).count() == 0
    assert await Sale.filter(item_id__in=[i.id for i in doomed_items]).count() == 0
    assert await Item.filter(id=survivor.id).count() == 1
    assert await Sale.filter(item_id=survivor.id).count() == 1


@pytest.mark.asyncio
async def test_delete_category_without_items(category_factory):
    """Test deleting an empty category."""
    category = await category_factory("Lonely")
    result = await delete_category(category.public_id)
    assert result.deleted_items == 0
    assert result.deleted_sales == 0
    assert await Category.get_or_none(id=category.id) is None


@pytest.mark.asyncio
async def test_delete_missing_category():
    """Test deleting a non-existent category."""
    with pytest.raises(HTTPException) as exc_info:
        await delete_category("missing")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_create_item_with_category(category_factory):
    """Test creating an item."""
    category = await category_factory("Electronics")
    created = await create_item(
        ItemCreate(name=" Laptop ", price=999.5, quantity=3, category_id=category.public_id)
    )
    assert created.name == "Laptop"
    assert created.category is not None
    assert created.category.id == category.public_id
    assert created.quantity == 3


@pytest.mark.asyncio
async def test_create_item_defaults_quantity_to_zero():
    """Test creating an item without a category or quantity."""
    created = await create_item(ItemCreate(name="Widget", price=1.25))
    assert created.quantity == 0
    assert created.category is None


@pytest.mark.asyncio
async def test_create_item_duplicate_name(item_factory):
    """Test creating an item with a duplicate name."""
    await item_factory("Widget")
    with pytest.raises(HTTPException) as exc_info:
        await create_item(ItemCreate(name="Widget", price=1.0))
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_create_item_unknown_category():
    """Test creating an item in a non-existent category."""
    with pytest.raises(HTTPException) as exc_info:
        await create_item(ItemCreate(name="Widget", price=1.0, category_id="missing"))
    assert exc_info.value.status_code == 404
    assert await Item.filter(name="Widget").count() == 0


@pytest.mark.asyncio
async def test_update_item_partial(category_factory, item_factory):
    """Test updating an item."""
    old = await category_factory("Old")
    new = await category_factory("New")
    item = await item_factory("Lamp", price=30.0, quantity=4, category=old, description="Desk lamp")

    updated = await update_item(item.public_id, ItemUpdate(quantity=12, category_id=new.public_id))
    assert updated.quantity == 12
    assert updated.price == 30.0
    assert updated.description == "Desk lamp"
    assert updated.category.name == "New"


@pytest.mark.asyncio
async def test_update_item_name_conflict(item_factory):
    """Test renaming an item to a name already in use."""
    await item_factory("Chair")
    table = await item_factory("Table")
    with pytest.raises(HTTPException) as exc_info:
        await update_item(table.public_id, ItemUpdate(name="Chair"))
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_get_item_not_found():
    """Test getting a non-existent item."""
    with pytest.raises(HTTPException) as exc_info:
        await get_item("missing")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_delete_item_cascades_to_sales(item_factory, sale_factory):
    """Test deleting an item with sales."""
    item = await item_factory("Mug")
    other = await item_factory("Plate")
    await sale_factory(item)
    await sale_factory(item)
    await sale_factory(other)

    result = await delete_item(item.public_id)
    assert result.deleted_sales == 2
    assert await Item.get_or_none(id=item.id) is None
    assert await Sale.filter(item_id=item.id).count() == 0
    assert await Sale.filter(item_id=other.id).count() == 1


@pytest.mark.asyncio
async def test_list_items_filters_by_category_and_search(category_factory, item_factory):
    """Test listing items."""
    tools = await category_factory("Tools")
    await item_factory("Claw Hammer", category=tools)
    await item_factory("Sledge Hammer", category=tools, description="Heavy")
    await item_factory("Screwdriver", category=tools)
    await item_factory("Toy Hammer")

    by_category = await list_items(page=1, size=10, category_public_id=tools.public_id)
    assert by_category.pagination.total_items == 3

    searched = await list_items(page=1, size=10, search="hammer", category_public_id=tools.public_id)
    assert sorted(i.name for i in searched.items) == ["Claw Hammer", "Sledge Hammer"]

    everything = await list_items(page=1, size=2)
    assert len(everything.items) == 2
    assert everything.pagination.total_pages == 2
    assert everything.items[0].name == "Toy Hammer"


@pytest.mark.asyncio
async def test_list_items_unknown_category():
    """Test listing items of a non-existent category."""
    with pytest.raises(HTTPException) as exc_info:
        await list_items(page=1, size=10, category_public_id="missing")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_update_item_store_failure(monkeypatch, item_factory):
    """Test updating an item when the database write fails."""
    item = await item_factory("Lamp", price=30.0)

    async def failing_save(self, *args, **kwargs):
        raise RuntimeError("disk I/O error")

    monkeypatch.setattr(Item, "save", failing_save)

    with pytest.raises(HTTPException) as exc_info:
        await update_item(item.public_id, ItemUpdate(price=35.0))

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to update item."
    assert "disk" not in exc_info.value.detail
