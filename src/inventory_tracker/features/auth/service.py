"""Business logic for authentication, such as user lookup, login and profile updates."""
import datetime
import logging
from typing import Optional

from ...common.models import apply_updates, collect_updates
from ...core.exceptions import ConflictError, InternalError, NotFoundError
from . import models
from .schemas import ProfileUpdate, UserResponse

logger = logging.getLogger(__name__)


async def get_user_by_public_id(public_id: str) -> Optional[models.User]:
    """Retrieves a user by their public id.

    Args:
        public_id: The KSUID embedded in access tokens.

    Returns:
        The User object if found, otherwise None.
    """
    return await models.User.get_or_none(public_id=public_id)


async def get_user_by_email(email: str) -> Optional[models.User]:
    """Retrieves a user by their email address (case-insensitive).

    Args:
        email: The email address of the user to retrieve.

    Returns:
        The User object if found, otherwise None.
    """
    return await models.User.get_or_none(email=email.strip().lower())


async def create_user(user_in: dict, hashed_password_val: str) -> models.User:
    """Creates a new user in the database.

    Args:
        user_in: A dictionary containing the user data (excluding password).
        hashed_password_val: The hashed password for the new user.

    Returns:
        The newly created User object.
    """
    return await models.User.create(**user_in, hashed_password=hashed_password_val)


async def record_login(user: models.User) -> models.User:
    user.last_login = datetime.datetime.now(datetime.timezone.utc)
    await user.save(update_fields=["last_login"])
    return user


async def ensure_email_available(email: str, exclude_id: Optional[int] = None) -> None:
    """Raises ConflictError if another user already owns `email`."""
    query = models.User.filter(email=email)
    if exclude_id is not None:
        query = query.exclude(id=exclude_id)
    if await query.exists():
        raise ConflictError("User already exists")


async def get_profile(public_id: str) -> UserResponse:
    user = await get_user_by_public_id(public_id)
    if not user:
        raise NotFoundError("User")
    return UserResponse.model_validate(user)


async def update_profile(public_id: str, profile_in: ProfileUpdate) -> UserResponse:
    # Imported here: security imports this module for the auth gate
    from .security import get_password_hash

    user = await get_user_by_public_id(public_id)
    if not user:
        raise NotFoundError("User")

    update_data = collect_updates(profile_in)
    if "email" in update_data:
        await ensure_email_available(update_data["email"], exclude_id=user.id)
    password = update_data.pop("password", None)
    if password:
        update_data["hashed_password"] = get_password_hash(password)

    apply_updates(user, update_data)
    try:
        await user.save()
    except Exception as e:
        logger.error(f"Error updating profile for {public_id}: {e}", exc_info=True)
        raise InternalError("Failed to update profile.")
    return UserResponse.model_validate(user)
