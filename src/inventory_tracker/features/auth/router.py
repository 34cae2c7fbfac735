"""API routes for user authentication: token issuing and the caller's own profile."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from ...core.exceptions import UnauthenticatedError
from . import schemas
from . import security as auth_security
from . import service as auth_service
from .security import CurrentUser

logger = logging.getLogger(__name__)
router = APIRouter(
    tags=["Authentication"],
    prefix="/auth"
)


@router.post("/token", response_model=schemas.Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
):
    # OAuth2 password flow: the "username" form field carries the email
    user = await auth_service.get_user_by_email(email=form_data.username)
    if not user or not auth_security.verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {form_data.username}")
        raise UnauthenticatedError("Invalid email or password")
    if not user.is_active:
        logger.warning(f"Login refused for inactive user {user.public_id}")
        raise UnauthenticatedError("Inactive user")
    await auth_service.record_login(user)
    access_token = auth_security.create_access_token(data={"sub": user.public_id})
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/profile", response_model=schemas.UserResponse)
async def read_profile(current_user: CurrentUser):
    return await auth_service.get_profile(current_user.public_id)


@router.put("/profile", response_model=schemas.UserResponse)
async def update_profile(profile_in: schemas.ProfileUpdate, current_user: CurrentUser):
    return await auth_service.update_profile(current_user.public_id, profile_in)
