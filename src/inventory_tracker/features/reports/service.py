"""
Reports Service Module

This module loads sales from the database, joined to their items and the
items' categories, and hands them to the aggregation functions to build
the sales reports. It also computes the dashboard statistics. Reports
never modify data and every call recomputes from the database.
"""

import datetime
import logging
from typing import List

from ...core.config import LOW_STOCK_THRESHOLD
from ..inventory.models import Category, Item
from ..sales.filters import DateRangeFilter, SalesFilter, start_of_day
from ..sales.models import Sale
from . import aggregation
from .aggregation import SaleRow
from .schemas import (
    DashboardStatsResponse,
    ReportFilters,
    SalesByCategoryResponse,
    SalesByDateResponse,
    SalesByItemResponse,
)

logger = logging.getLogger(__name__)


async def load_sale_rows(filters: DateRangeFilter) -> List[SaleRow]:
    """
    Fetches the sales matching `filters` as flattened rows.

    Sales whose item no longer exists are skipped. A missing category is
    kept as a row with no category information.
    """
    query = Sale.all()
    predicate = await filters.build()
    if predicate is not None:
        query = query.filter(predicate)

    rows = []
    for sale in await query.prefetch_related("item__category"):
        item = sale.item
        if not item:
            continue
        category = item.category
        rows.append(
            SaleRow(
                item_id=item.public_id,
                item_name=item.name,
                item_price=item.price,
                category_id=category.public_id if category else None,
                category_name=category.name if category else None,
                category_description=category.description if category else None,
                quantity=sale.quantity,
                total_amount=sale.total_amount,
                sale_date=sale.sale_date,
            )
        )
    return rows


async def generate_sales_by_item_report(filters: SalesFilter) -> SalesByItemResponse:
    """
    Generates a sales report broken down by item.

    Args:
        filters: Optional date range and category. With a category, only
            sales of items currently in that category are included.

    Returns:
        SalesByItemResponse: one entry per item that has at least one
        matching sale, sorted by revenue (highest first), plus a summary.
    """
    rows = await load_sale_rows(filters)
    report = aggregation.sales_by_item(rows)
    logger.debug(f"sales-by-item: {len(rows)} sale(s) in {report['summary']['total_items']} item group(s)")
    return SalesByItemResponse(
        **report,
        filters=ReportFilters(
            **filters.describe(), category=filters.category_id or "All categories"
        ),
    )


async def generate_sales_by_date_report(filters: DateRangeFilter, group_by: str) -> SalesByDateResponse:
    """
    Generates a sales report bucketed by day, ISO week or calendar month.

    Args:
        filters: Optional date range.
        group_by: "day" (default), "week" or "month".

    Returns:
        SalesByDateResponse: one entry per period that has sales, in
        chronological order, plus a summary.
    """
    rows = await load_sale_rows(filters)
    report = aggregation.sales_by_date(rows, group_by)
    return SalesByDateResponse(
        **report, filters=ReportFilters(**filters.describe(), group_by=group_by)
    )


async def generate_sales_by_category_report(filters: DateRangeFilter) -> SalesByCategoryResponse:
    """
    Generates a sales report broken down by category.

    Items without a category are grouped together under "Uncategorized".
    Each category carries its percentage of the grand total revenue.
    """
    rows = await load_sale_rows(filters)
    report = aggregation.sales_by_category(rows)
    return SalesByCategoryResponse(**report, filters=ReportFilters(**filters.describe()))


def _sum_sales(sales: List[tuple]) -> tuple:
    """Returns (revenue, items sold) for (total_amount, quantity) pairs."""
    revenue = sum(amount for amount, _ in sales)
    items_sold = sum(quantity for _, quantity in sales)
    return revenue, items_sold


async def generate_dashboard_stats() -> DashboardStatsResponse:
    """
    Computes the headline figures of the dashboard, ignoring any filter.

    Today's figures cover sales from midnight UTC today up to, but not
    including, midnight UTC tomorrow.
    """
    total_items = await Item.all().count()
    total_categories = await Category.all().count()
    low_stock_items = await Item.filter(quantity__lt=LOW_STOCK_THRESHOLD).count()

    all_sales = await Sale.all().values_list("total_amount", "quantity")
    total_revenue, total_items_sold = _sum_sales(all_sales)

    today_start = start_of_day(datetime.datetime.now(datetime.timezone.utc).date())
    tomorrow_start = today_start + datetime.timedelta(days=1)
    today_sales = await Sale.filter(
        sale_date__gte=today_start, sale_date__lt=tomorrow_start
    ).values_list("total_amount", "quantity")
    today_revenue, today_items_sold = _sum_sales(today_sales)

    return DashboardStatsResponse(
        total_items=total_items,
        total_categories=total_categories,
        total_revenue=total_revenue,
        total_items_sold=total_items_sold,
        total_transactions=len(all_sales),
        low_stock_items=low_stock_items,
        today_revenue=today_revenue,
        today_items_sold=today_items_sold,
    )
