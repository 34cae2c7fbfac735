"""API routes for user administration. Every route requires an admin principal."""
from typing import List

from fastapi import APIRouter, Depends, status

from ..auth.schemas import UserResponse
from ..auth.security import AdminUser, require_admin
from . import service
from .schemas import UserCreate, UserUpdate

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_admin)],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=List[UserResponse], summary="List all users, newest first")
async def list_users():
    return await service.list_users()


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(user_in: UserCreate):
    return await service.create_user(user_in)


@router.get("/{user_public_id}", response_model=UserResponse, summary="Get a user")
async def get_user(user_public_id: str):
    return await service.get_user(user_public_id)


@router.put("/{user_public_id}", response_model=UserResponse, summary="Update a user")
async def update_user(user_public_id: str, user_in: UserUpdate):
    return await service.update_user(user_public_id, user_in)


@router.delete(
    "/{user_public_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
async def delete_user(user_public_id: str, current_admin: AdminUser):
    await service.delete_user(user_public_id, current_admin)
    return None
