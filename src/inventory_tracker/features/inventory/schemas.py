from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
import datetime

from ...common.pagination import PaginationMeta


# --- Category Schemas (defined first as ItemResponse uses CategoryResponse) ---
class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Name of the category")
    description: Optional[str] = Field(None, max_length=500, description="Optional description for the category")

    model_config = ConfigDict(str_strip_whitespace=True)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="New name of the category")
    description: Optional[str] = Field(None, max_length=500, description="New description for the category")

    model_config = ConfigDict(str_strip_whitespace=True)


class CategoryResponse(CategoryBase):
    id: str = Field(..., validation_alias="public_id", description="Public unique identifier for the category (KSUID)")
    created_at: datetime.datetime = Field(..., description="Timestamp of when the category was created")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        protected_namespaces=(),
    )


class CategoryWithCount(CategoryResponse):
    items_count: int = Field(0, description="Number of items referencing the category")


class CategoryListResponse(BaseModel):
    categories: List[CategoryWithCount]
    pagination: PaginationMeta


# --- Item Schemas ---
class ItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Name of the item")
    description: Optional[str] = Field(None, description="Optional description of the item")
    price: float = Field(..., ge=0, description="Unit price of the item")
    quantity: int = Field(default=0, ge=0, description="Current stock quantity of the item")

    model_config = ConfigDict(str_strip_whitespace=True)


class ItemCreate(ItemBase):
    category_id: Optional[str] = Field(None, description="Public ID of the category to assign to the item")


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="New name of the item")
    description: Optional[str] = Field(None, description="New description of the item")
    price: Optional[float] = Field(None, ge=0, description="New unit price of the item")
    quantity: Optional[int] = Field(None, ge=0, description="New stock quantity of the item")
    category_id: Optional[str] = Field(None, description="Public ID of the new category to assign to the item")

    model_config = ConfigDict(str_strip_whitespace=True)


class ItemResponse(ItemBase):
    id: str = Field(..., description="Public unique identifier for the item (KSUID)")
    category: Optional[CategoryResponse] = Field(None, description="Category of the item")
    created_at: datetime.datetime = Field(..., description="Timestamp of when the item was created")

    model_config = ConfigDict(
        from_attributes=True,
        protected_namespaces=(),
    )


class PaginatedItemsResponse(BaseModel):
    items: List[ItemResponse]
    pagination: PaginationMeta


class DeleteResult(BaseModel):
    message: str
    deleted_items: int = 0
    deleted_sales: int = 0
