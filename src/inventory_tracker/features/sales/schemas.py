import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...common.pagination import PaginationMeta


class SaleCreate(BaseModel):
    item_id: str = Field(..., description="Public ID of the item sold")
    quantity: int = Field(..., ge=1, description="Number of units sold")
    sale_date: Optional[datetime.datetime] = Field(None, description="When the sale happened; defaults to now")


class SaleResponse(BaseModel):
    id: str
    item_id: str
    item_name: str
    quantity: int
    total_amount: float
    sale_date: datetime.datetime
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class PaginatedSalesResponse(BaseModel):
    sales: List[SaleResponse]
    pagination: PaginationMeta
