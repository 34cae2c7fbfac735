from fastapi import APIRouter, Depends

from ..auth.security import get_current_user
from . import service
from .schemas import DashboardSummaryResponse

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/", response_model=DashboardSummaryResponse, summary="Dashboard summary")
async def get_dashboard_summary():
    return await service.get_dashboard_summary()
