from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..auth.schemas import Role, UserBase


class UserCreate(UserBase):
    password: str = Field(..., min_length=6, description="User password")
    role: Role = Field("user", description="User role")


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value):
        return value.lower() if value is not None else value
