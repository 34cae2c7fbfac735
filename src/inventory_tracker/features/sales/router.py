"""API routes for recording and browsing sales."""
from fastapi import APIRouter, Depends, Query, status

from ...core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..auth.security import get_current_user
from . import service
from .filters import SalesFilter
from .schemas import PaginatedSalesResponse, SaleCreate, SaleResponse

router = APIRouter(
    prefix="/sales",
    tags=["Sales"],
    dependencies=[Depends(get_current_user)],
)


@router.post("/", response_model=SaleResponse, status_code=status.HTTP_201_CREATED, summary="Record a sale")
async def record_sale(sale_in: SaleCreate):
    return await service.record_sale(sale_in)


@router.get("/", response_model=PaginatedSalesResponse, summary="List sales, most recent first")
async def list_sales(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of sales per page"),
    filters: SalesFilter = Depends(),
):
    return await service.list_sales(page, size, filters)
