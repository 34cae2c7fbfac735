import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

import bcrypt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from ...core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from ...core.exceptions import ForbiddenError, UnauthenticatedError
from . import service as auth_service
from .schemas import Principal

logger = logging.getLogger(__name__)

# Missing header yields None; get_current_user raises UnauthenticatedError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Verifies the token signature and expiry and returns the embedded user id.

    Raises:
        UnauthenticatedError: If the token is tampered, expired or has no subject.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decoding error: {e}")
        raise UnauthenticatedError("Not authorized, token failed")
    sub: Optional[str] = payload.get("sub")
    if not sub:
        logger.warning("Token sub (user id) is missing.")
        raise UnauthenticatedError("Not authorized, token failed")
    return sub


async def get_current_user(token: Annotated[Optional[str], Depends(oauth2_scheme)]) -> Principal:
    if not token:
        raise UnauthenticatedError("Not authorized, no token")
    user_public_id = decode_access_token(token)

    user = await auth_service.get_user_by_public_id(user_public_id)
    if user is None:
        logger.warning(f"User not found for id: {user_public_id}")
        raise UnauthenticatedError("Not authorized, user not found")
    if not user.is_active:
        logger.warning(f"User {user_public_id} is inactive.")
        raise UnauthenticatedError("Inactive user")
    return Principal.model_validate(user)


async def require_admin(current_user: Annotated[Principal, Depends(get_current_user)]) -> Principal:
    if not current_user.is_admin:
        logger.warning(f"User {current_user.public_id} denied admin-only operation.")
        raise ForbiddenError("Not authorized as an admin")
    return current_user


CurrentUser = Annotated[Principal, Depends(get_current_user)]
AdminUser = Annotated[Principal, Depends(require_admin)]
