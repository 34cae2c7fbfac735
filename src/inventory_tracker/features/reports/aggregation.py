"""
Grouping and summary computations behind the sales reports.

The functions here are pure: they take flattened sale rows (one `SaleRow`
per sale, already joined to its item and the item's category) and return
plain dictionaries shaped like the report schemas. The service module is
responsible for loading the rows from the database.
"""

import calendar
import datetime
from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

UNCATEGORIZED_NAME = "Uncategorized"

GROUP_BY_DAY = "day"
GROUP_BY_WEEK = "week"
GROUP_BY_MONTH = "month"
GROUP_BY_CHOICES = (GROUP_BY_DAY, GROUP_BY_WEEK, GROUP_BY_MONTH)


@dataclass(frozen=True)
class SaleRow:
    item_id: str
    item_name: str
    item_price: float
    category_id: Optional[str]
    category_name: Optional[str]
    category_description: Optional[str]
    quantity: int
    total_amount: float
    sale_date: datetime.datetime


def round_half_up(value: float, places: int = 2) -> float:
    """Rounds half away from zero, e.g. 2.675 -> 2.68 and -2.675 -> -2.68."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def safe_average(total: float, count: int) -> float:
    return total / count if count else 0


def sales_by_item(rows: Iterable[SaleRow]) -> dict:
    groups: dict = {}
    for row in rows:
        group = groups.get(row.item_id)
        if group is None:
            group = groups[row.item_id] = {
                "item_id": row.item_id,
                "item_name": row.item_name,
                "category_name": row.category_name,
                "total_quantity": 0,
                "total_revenue": 0.0,
                "sale_count": 0,
                "_price_sum": 0.0,
            }
        group["total_quantity"] += row.quantity
        group["total_revenue"] += row.total_amount
        group["sale_count"] += 1
        group["_price_sum"] += row.item_price

    items = []
    for group in groups.values():
        price_sum = group.pop("_price_sum")
        group["average_price"] = round_half_up(safe_average(price_sum, group["sale_count"]))
        items.append(group)
    items.sort(key=lambda g: (-g["total_revenue"], g["item_name"]))

    total_revenue = sum(g["total_revenue"] for g in items)
    summary = {
        "total_items": len(items),
        "total_quantity": sum(g["total_quantity"] for g in items),
        "total_revenue": total_revenue,
        "average_revenue_per_item": round_half_up(safe_average(total_revenue, len(items))),
    }
    return {"sales_by_item": items, "summary": summary}


def period_of(sale_date: datetime.datetime, group_by: str):
    """Returns (sort-independent key, period value, period label) for a sale date."""
    day = sale_date.date()
    if group_by == GROUP_BY_MONTH:
        period = f"{day.year:04d}-{day.month:02d}"
        return period, period, f"{calendar.month_name[day.month]} {day.year}"
    if group_by == GROUP_BY_WEEK:
        iso_year, iso_week, _ = day.isocalendar()
        return (iso_year, iso_week), f"{iso_year:04d}-W{iso_week:02d}", f"Week {iso_week}, {iso_year}"
    return day, day.isoformat(), f"{day.month}/{day.day}/{day.year}"


def sales_by_date(rows: Iterable[SaleRow], group_by: str = GROUP_BY_DAY) -> dict:
    if group_by not in GROUP_BY_CHOICES:
        group_by = GROUP_BY_DAY

    groups: dict = {}
    for row in rows:
        key, period, label = period_of(row.sale_date, group_by)
        group = groups.get(key)
        if group is None:
            group = groups[key] = {
                "period": period,
                "period_label": label,
                "total_sales": 0,
                "total_revenue": 0.0,
                "transaction_count": 0,
                "date": row.sale_date,
            }
        group["total_sales"] += row.quantity
        group["total_revenue"] += row.total_amount
        group["transaction_count"] += 1
        if row.sale_date < group["date"]:
            group["date"] = row.sale_date

    periods = sorted(groups.values(), key=lambda g: g["date"])
    for group in periods:
        group["average_sale_value"] = round_half_up(
            safe_average(group["total_revenue"], group["transaction_count"])
        )

    total_revenue = sum(g["total_revenue"] for g in periods)
    summary = {
        "total_periods": len(periods),
        "total_sales": sum(g["total_sales"] for g in periods),
        "total_revenue": total_revenue,
        "total_transactions": sum(g["transaction_count"] for g in periods),
        "average_revenue_per_period": round_half_up(safe_average(total_revenue, len(periods))),
    }
    return {"sales_by_date": periods, "summary": summary}


def sales_by_category(rows: Iterable[SaleRow]) -> dict:
    groups: dict = {}
    item_sets: dict = defaultdict(set)
    for row in rows:
        group = groups.get(row.category_id)
        if group is None:
            group = groups[row.category_id] = {
                "category_id": row.category_id,
                "category_name": row.category_name if row.category_id else UNCATEGORIZED_NAME,
                "category_description": row.category_description,
                "total_quantity": 0,
                "total_revenue": 0.0,
                "sale_count": 0,
            }
        group["total_quantity"] += row.quantity
        group["total_revenue"] += row.total_amount
        group["sale_count"] += 1
        item_sets[row.category_id].add(row.item_id)

    categories: List[dict] = list(groups.values())
    total_revenue = sum(g["total_revenue"] for g in categories)
    for group in categories:
        group["item_count"] = len(item_sets[group["category_id"]])
        group["average_sale_value"] = round_half_up(
            safe_average(group["total_revenue"], group["sale_count"])
        )
        group["revenue_percentage"] = (
            round_half_up(group["total_revenue"] / total_revenue * 100) if total_revenue > 0 else 0
        )
    categories.sort(key=lambda g: (-g["total_revenue"], g["category_name"]))

    summary = {
        "total_categories": len(categories),
        "total_items": sum(g["item_count"] for g in categories),
        "total_quantity": sum(g["total_quantity"] for g in categories),
        "total_revenue": total_revenue,
        "total_sales": sum(g["sale_count"] for g in categories),
        "average_revenue_per_category": round_half_up(safe_average(total_revenue, len(categories))),
    }
    return {"sales_by_category": categories, "summary": summary}
