"""
DashboardService - assembles the dashboard summary in one response.

Every figure is recomputed from the database on each call.
"""

import calendar
import datetime
import logging
from typing import List

from tortoise.functions import Count

from ...core.config import LOW_STOCK_THRESHOLD
from ..inventory.models import Category, Item
from ..sales.filters import start_of_day
from ..sales.models import Sale
from .schemas import (
    DashboardSummaryResponse,
    LowQuantityProduct,
    MonthlySales,
    RecentSale,
    TopCategory,
)

logger = logging.getLogger(__name__)

LOW_QUANTITY_LIMIT = 10
TOP_CATEGORIES_LIMIT = 5
RECENT_SALES_LIMIT = 5
UNKNOWN_ITEM_NAME = "Unknown item"


async def get_low_quantity_products() -> List[LowQuantityProduct]:
    items = (
        await Item.filter(quantity__lt=LOW_STOCK_THRESHOLD)
        .order_by("quantity", "name")
        .limit(LOW_QUANTITY_LIMIT)
    )
    return [LowQuantityProduct(name=item.name, quantity=item.quantity) for item in items]


async def get_monthly_sales(year: int) -> List[MonthlySales]:
    """Revenue per calendar month of `year`; months without sales report 0."""
    year_start = start_of_day(datetime.date(year, 1, 1))
    next_year_start = start_of_day(datetime.date(year + 1, 1, 1))
    sales = await Sale.filter(
        sale_date__gte=year_start, sale_date__lt=next_year_start
    ).values_list("sale_date", "total_amount")

    revenue_by_month = [0.0] * 12
    for sale_date, amount in sales:
        revenue_by_month[sale_date.month - 1] += amount
    return [
        MonthlySales(month=calendar.month_abbr[month], sales=revenue_by_month[month - 1])
        for month in range(1, 13)
    ]


async def get_top_categories() -> List[TopCategory]:
    categories = (
        await Category.annotate(item_count=Count("items"))
        .order_by("-item_count", "name")
        .limit(TOP_CATEGORIES_LIMIT)
    )
    return [TopCategory(name=category.name, value=category.item_count) for category in categories]


def to_recent_sale(sale: Sale) -> RecentSale:
    """Flattens a sale with its item fetched.

    The item FK is required and RESTRICT, so a stored sale always has an item;
    the placeholder name only covers sales whose item could not be fetched.
    """
    return RecentSale(
        product_name=sale.item.name if sale.item else UNKNOWN_ITEM_NAME,
        quantity=sale.quantity,
        amount=sale.total_amount,
    )


async def get_recent_sales() -> List[RecentSale]:
    sales = await Sale.all().prefetch_related("item").order_by("-sale_date", "-id").limit(RECENT_SALES_LIMIT)
    return [to_recent_sale(sale) for sale in sales]


async def get_dashboard_summary() -> DashboardSummaryResponse:
    """
    Builds the dashboard summary.

    Returns:
        Totals of items, categories and sales; up to 10 low-stock items
        (lowest quantity first) and their count; revenue per month of the
        current UTC calendar year; the 5 categories with the most items;
        and the 5 most recent sales, newest first.
    """
    low_quantity_products = await get_low_quantity_products()
    current_year = datetime.datetime.now(datetime.timezone.utc).year

    summary = DashboardSummaryResponse(
        total_items=await Item.all().count(),
        total_categories=await Category.all().count(),
        total_sales=await Sale.all().count(),
        low_quantity=len(low_quantity_products),
        low_quantity_products=low_quantity_products,
        monthly_data=await get_monthly_sales(current_year),
        top_categories=await get_top_categories(),
        recent_sales=await get_recent_sales(),
    )
    logger.debug(f"Dashboard summary: {summary.total_items} items, {summary.total_sales} sales")
    return summary
