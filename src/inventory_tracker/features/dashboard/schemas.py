from typing import List

from pydantic import BaseModel


class LowQuantityProduct(BaseModel):
    name: str
    quantity: int


class MonthlySales(BaseModel):
    month: str
    sales: float


class TopCategory(BaseModel):
    name: str
    value: int


class RecentSale(BaseModel):
    product_name: str
    quantity: int
    amount: float


class DashboardSummaryResponse(BaseModel):
    total_items: int
    total_categories: int
    total_sales: int
    low_quantity: int
    low_quantity_products: List[LowQuantityProduct]
    monthly_data: List[MonthlySales]
    top_categories: List[TopCategory]
    recent_sales: List[RecentSale]
