import datetime

import pytest
from fastapi import status

from inventory_tracker.features.dashboard.service import (
    UNKNOWN_ITEM_NAME,
    get_dashboard_summary,
    get_low_quantity_products,
    get_monthly_sales,
    get_recent_sales,
    get_top_categories,
    to_recent_sale,
)
from inventory_tracker.features.sales.models import Sale

UTC = datetime.timezone.utc


@pytest.mark.asyncio
async def test_monthly_sales_cover_the_whole_year(item_factory, sale_factory):
    """Test the monthly revenue series of a year."""
    item = await item_factory("Cola")
    await sale_factory(item, total_amount=10.0, sale_date=datetime.datetime(2023, 3, 1, tzinfo=UTC))
    await sale_factory(item, total_amount=5.0, sale_date=datetime.datetime(2023, 3, 31, 23, tzinfo=UTC))
    await sale_factory(item, total_amount=7.0, sale_date=datetime.datetime(2023, 12, 15, tzinfo=UTC))
    await sale_factory(item, total_amount=99.0, sale_date=datetime.datetime(2024, 1, 1, tzinfo=UTC))

    monthly = await get_monthly_sales(2023)

    assert [m.month for m in monthly] == [
        "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    ]
    assert monthly[2].sales == 15.0
    assert monthly[11].sales == 7.0
    assert sum(m.sales for m in monthly) == 22.0


@pytest.mark.asyncio
async def test_low_quantity_products_lowest_first(item_factory):
    """Test listing low stock items."""
    await item_factory("Plenty", quantity=10)
    await item_factory("Few", quantity=4)
    await item_factory("None Left", quantity=0)

    products = await get_low_quantity_products()

    assert [(p.name, p.quantity) for p in products] == [("None Left", 0), ("Few", 4)]


@pytest.mark.asyncio
async def test_low_quantity_products_capped_at_ten(item_factory):
    """Test that the low stock list holds at most ten items."""
    for index in range(12):
        await item_factory(f"Scarce {index:02d}", quantity=1)
    assert len(await get_low_quantity_products()) == 10


@pytest.mark.asyncio
async def test_top_categories_by_item_count(category_factory, item_factory):
    """Test the top categories by item count."""
    categories = [await category_factory(f"Category {index}") for index in range(6)]
    for index, category in enumerate(categories):
        for count in range(index):
            await item_factory(f"Item {index}-{count}", category=category)

    top = await get_top_categories()

    assert [(c.name, c.value) for c in top] == [
        ("Category 5", 5),
        ("Category 4", 4),
        ("Category 3", 3),
        ("Category 2", 2),
        ("Category 1", 1),
    ]


@pytest.mark.asyncio
async def test_recent_sales_newest_first(item_factory, sale_factory):
    """Test listing the most recent sales."""
    item = await item_factory("Cola")
    base = datetime.datetime(2024, 1, 1, tzinfo=UTC)
    for day in range(7):
        await sale_factory(item, quantity=day + 1, sale_date=base + datetime.timedelta(days=day))

    recent = await get_recent_sales()

    assert [s.quantity for s in recent] == [7, 6, 5, 4, 3]
    assert all(s.product_name == "Cola" for s in recent)


@pytest.mark.asyncio
async def test_dashboard_summary_totals(category_factory, item_factory, sale_factory):
    """Test building the dashboard summary."""
    category = await category_factory("Drinks")
    cola = await item_factory("Cola", quantity=2, category=category)
    await item_factory("Water", quantity=40)
    await sale_factory(cola, total_amount=3.0)

    summary = await get_dashboard_summary()

    assert summary.total_items == 2
    assert summary.total_categories == 1
    assert summary.total_sales == 1
    assert summary.low_quantity == 1
    assert summary.low_quantity_products[0].name == "Cola"
    assert len(summary.monthly_data) == 12
    current_month = datetime.datetime.now(UTC).month
    assert summary.monthly_data[current_month - 1].sales == 3.0
    assert summary.top_categories[0].name == "Drinks"
    assert summary.recent_sales[0].amount == 3.0


@pytest.mark.asyncio
async def test_dashboard_endpoint(client, user_headers):
    """Test getting the dashboard summary."""
    response = await client.get("/api/v1/dashboard/", headers=user_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["total_items"] == 0
    assert body["low_quantity_products"] == []
    assert len(body["monthly_data"]) == 12


@pytest.mark.asyncio
async def test_dashboard_requires_authentication(client):
    """Test getting the dashboard without a token."""
    response = await client.get("/api/v1/dashboard/")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_recent_sale_without_item_uses_placeholder():
    """Test a recent sale whose item could not be fetched."""
    sale = Sale(item=None, quantity=2, total_amount=8.0)

    recent = to_recent_sale(sale)

    assert recent.product_name == UNKNOWN_ITEM_NAME
    assert recent.quantity == 2
    assert recent.amount == 8.0
