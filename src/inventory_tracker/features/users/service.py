"""User administration: listing, creating, updating and removing accounts."""
import logging
from typing import List

from ...common.models import apply_updates, collect_updates
from ...core.exceptions import InternalError, NotFoundError, ValidationError
from ..auth import service as auth_service
from ..auth.models import User
from ..auth.schemas import Principal, UserResponse
from ..auth.security import get_password_hash
from .schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


async def _get_user_or_404(user_public_id: str) -> User:
    user = await User.get_or_none(public_id=user_public_id)
    if not user:
        raise NotFoundError("User")
    return user


async def list_users() -> List[UserResponse]:
    users = await User.all().order_by("-created_at")
    return [UserResponse.model_validate(user) for user in users]


async def get_user(user_public_id: str) -> UserResponse:
    return UserResponse.model_validate(await _get_user_or_404(user_public_id))


async def create_user(user_in: UserCreate) -> UserResponse:
    """
    Creates a new user account.

    Args:
        user_in: The data for the new user. The password is hashed before storage.

    Returns:
        The created user, without the password hash.
    """
    await auth_service.ensure_email_available(user_in.email)
    user_data = user_in.model_dump(exclude={"password"})
    try:
        user = await auth_service.create_user(
            user_in=user_data, hashed_password_val=get_password_hash(user_in.password)
        )
    except Exception as e:
        logger.error(f"Create user failed: {e}", exc_info=True)
        raise InternalError("Could not create user.")
    logger.info(f"Created user {user.public_id} with role {user.role}")
    return UserResponse.model_validate(user)


async def update_user(user_public_id: str, user_in: UserUpdate) -> UserResponse:
    user = await _get_user_or_404(user_public_id)
    update_data = collect_updates(user_in)

    if "email" in update_data and update_data["email"] != user.email:
        await auth_service.ensure_email_available(update_data["email"], exclude_id=user.id)
    password = update_data.pop("password", None)
    if password:
        update_data["hashed_password"] = get_password_hash(password)

    apply_updates(user, update_data)
    try:
        await user.save()
    except Exception as e:
        logger.error(f"Update user {user_public_id} failed: {e}", exc_info=True)
        raise InternalError("Could not update user.")
    return UserResponse.model_validate(user)


async def delete_user(user_public_id: str, current_user: Principal) -> None:
    user = await _get_user_or_404(user_public_id)
    if user.public_id == current_user.public_id:
        raise ValidationError("You cannot delete your own account")
    await user.delete()
    logger.info(f"User {user_public_id} removed by {current_user.public_id}")
