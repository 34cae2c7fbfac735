"""Pydantic schemas for authentication, defining the structure for request and response data."""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Role = Literal["admin", "user"]


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="User email address")

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value):
        return value.lower()


class UserResponse(UserBase):
    id: str = Field(..., validation_alias="public_id", description="Public unique identifier for the user (KSUID)")
    role: Role = Field(..., description="User role (admin or user)")
    is_active: bool = Field(..., description="Whether the user account is active")
    last_login: Optional[datetime.datetime] = Field(None, description="Timestamp of the last successful login")
    created_at: datetime.datetime = Field(..., description="Timestamp of when the user was created")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        protected_namespaces=(),
    )


class Principal(BaseModel):
    """The authenticated user attached to a request. Never carries the password hash."""

    public_id: str
    name: str
    email: str
    role: Role
    is_active: bool
    last_login: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value):
        return value.lower() if value is not None else value


class Token(BaseModel):
    access_token: str
    token_type: str
