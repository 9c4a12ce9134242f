# backend/studio_booking/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Identity is established upstream by the auth gateway, which forwards the
authenticated user's id in ``settings.auth_user_header``. These dependencies
only resolve that id to a user row and enforce the admin flag.
"""

import asyncio
import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.exceptions import ForbiddenException, UnauthorizedException
from ...core.ulid_helper import is_valid_ulid
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def _lookup_user(db: Session, user_id: str) -> Optional[User]:
    return RepositoryFactory.create_user_repository(db).get_by_id(user_id)


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the calling user from the gateway header.

    Raises:
        UnauthorizedException: header missing, malformed, or unknown user
    """
    user_id = (request.headers.get(settings.auth_user_header) or "").strip()
    if not user_id or not is_valid_ulid(user_id):
        raise UnauthorizedException("Authentication required", code="UNAUTHORIZED")

    user = await asyncio.to_thread(_lookup_user, db, user_id)
    if user is None:
        logger.info("Unknown user id on request", extra={"path": request.url.path})
        raise UnauthorizedException("Authentication required", code="UNAUTHORIZED")
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Allow only studio staff through."""
    if not current_user.is_admin:
        raise ForbiddenException(
            "Studio staff access required",
            code="FORBIDDEN",
            details={"user_id": current_user.id},
        )
    return current_user


async def get_optional_user(
    request: Request, db: Session = Depends(get_db)
) -> Optional[User]:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    if not request.headers.get(settings.auth_user_header):
        return None
    return await get_current_user(request, db)
