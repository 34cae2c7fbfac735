"""Reporting API endpoints

Sales reports grouped by item, by period and by category, plus the
dashboard statistics. Every endpoint requires an authenticated user.
Date filters are calendar dates (YYYY-MM-DD) and both ends are inclusive."""
import logging

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_user
from ..sales.filters import DateRangeFilter, SalesFilter
from .schemas import (
    DashboardStatsResponse,
    GroupBy,
    SalesByCategoryResponse,
    SalesByDateResponse,
    SalesByItemResponse,
)
from . import service as report_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/sales-by-item", response_model=SalesByItemResponse)
async def get_sales_by_item_report(filters: SalesFilter = Depends()):
    return await report_service.generate_sales_by_item_report(filters)


@router.get("/sales-by-date", response_model=SalesByDateResponse)
async def get_sales_by_date_report(
    filters: DateRangeFilter = Depends(),
    group_by: GroupBy = Query("day", description="Bucket size: day, week or month"),
):
    return await report_service.generate_sales_by_date_report(filters, group_by)


@router.get("/sales-by-category", response_model=SalesByCategoryResponse)
async def get_sales_by_category_report(filters: DateRangeFilter = Depends()):
    return await report_service.generate_sales_by_category_report(filters)


@router.get("/dashboard", response_model=DashboardStatsResponse)
async def get_dashboard_stats():
    return await report_service.generate_dashboard_stats()
