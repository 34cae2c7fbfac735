"""Sales Reports API Schemas

This module defines Pydantic models used by the reporting endpoints:

1. Sales by Item
2. Sales by Date (day, ISO week or month buckets)
3. Sales by Category, with each category's share of revenue
4. Dashboard statistics

Grand totals are raw sums; averages and percentages are rounded to two
decimal places, half away from zero."""
from pydantic import BaseModel
from typing import List, Literal, Optional
import datetime

GroupBy = Literal["day", "week", "month"]


class ReportFilters(BaseModel):
    start_date: str
    end_date: str
    category: Optional[str] = None
    group_by: Optional[GroupBy] = None


# 1. Sales by Item
class ItemSales(BaseModel):
    item_id: str
    item_name: str
    category_name: Optional[str] = None
    total_quantity: int
    total_revenue: float
    average_price: float
    sale_count: int


class SalesByItemSummary(BaseModel):
    total_items: int
    total_quantity: int
    total_revenue: float
    average_revenue_per_item: float


class SalesByItemResponse(BaseModel):
    sales_by_item: List[ItemSales]
    summary: SalesByItemSummary
    filters: ReportFilters


# 2. Sales by Date
class PeriodSales(BaseModel):
    period: str
    period_label: str
    total_sales: int
    total_revenue: float
    transaction_count: int
    average_sale_value: float
    date: datetime.datetime


class SalesByDateSummary(BaseModel):
    total_periods: int
    total_sales: int
    total_revenue: float
    total_transactions: int
    average_revenue_per_period: float


class SalesByDateResponse(BaseModel):
    sales_by_date: List[PeriodSales]
    summary: SalesByDateSummary
    filters: ReportFilters


# 3. Sales by Category
class CategorySales(BaseModel):
    category_id: Optional[str] = None
    category_name: str
    category_description: Optional[str] = None
    total_quantity: int
    total_revenue: float
    item_count: int
    sale_count: int
    average_sale_value: float
    revenue_percentage: float


class SalesByCategorySummary(BaseModel):
    total_categories: int
    total_items: int
    total_quantity: int
    total_revenue: float
    total_sales: int
    average_revenue_per_category: float


class SalesByCategoryResponse(BaseModel):
    sales_by_category: List[CategorySales]
    summary: SalesByCategorySummary
    filters: ReportFilters


# 4. Dashboard statistics
class DashboardStatsResponse(BaseModel):
    total_items: int
    total_categories: int
    total_revenue: float
    total_items_sold: int
    total_transactions: int
    low_stock_items: int
    today_revenue: float
    today_items_sold: int
