"""Login, logout and the authenticated-user dependency.

The signed session cookie carries an ``AuthSession``: who logged in, when, and
when the session stops being valid. Expiry is checked on every request.
"""

import os
from datetime import datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from dailyledger.core.db import get_db
from dailyledger.core.errors import UnauthorizedError
from dailyledger.core.logging import get_logger
from dailyledger.core.security import check_credentials
from dailyledger.models.user import User
from dailyledger.models.user_schemas import LoginRequest, LoginResponse, UserRead
from dailyledger.utils.datetime import now_utc

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])

SESSION_KEY = "auth"
SESSION_TTL = timedelta(hours=float(os.getenv("SESSION_TTL_HOURS", "24")))


class AuthSession(BaseModel):
    """Session payload stored in the signed cookie."""

    user_id: UUID
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def issue(cls, user_id: UUID, now: datetime, ttl: timedelta = SESSION_TTL) -> "AuthSession":
        return cls(user_id=user_id, issued_at=now, expires_at=now + ttl)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


def read_session(request: Request) -> AuthSession | None:
    """Decode the session from the cookie. Malformed payloads count as absent."""
    raw = request.session.get(SESSION_KEY)
    if not raw:
        return None
    try:
        return AuthSession.model_validate(raw)
    except PydanticValidationError:
        logger.warning("auth.session_malformed")
        return None


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency to get current authenticated user from session."""
    auth = read_session(request)
    if auth is None:
        raise UnauthorizedError("Not authenticated")

    if auth.is_expired(now_utc()):
        request.session.clear()
        logger.info(
            "auth.session_expired",
            user_id=str(auth.user_id),
            expires_at=auth.expires_at.isoformat(),
        )
        raise UnauthorizedError("Session expired")

    stmt = select(User).where((User.id == auth.user_id) & (User.is_active))
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        request.session.clear()
        raise UnauthorizedError("User not found or inactive")

    return user


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Validate credentials and issue a session."""
    stmt = select(User).where(User.username == credentials.username)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    valid, new_hash = (
        check_credentials(credentials.password, user.hashed_password) if user else (False, None)
    )
    if not valid:
        logger.warning("auth.login_failed", username=credentials.username)
        raise UnauthorizedError("Invalid username or password")

    if not user.is_active:
        logger.warning("auth.login_disabled_account", username=user.username)
        raise UnauthorizedError("Account is disabled")

    if new_hash:
        user.hashed_password = new_hash
        await db.commit()

    auth = AuthSession.issue(user.id, now_utc())
    request.session[SESSION_KEY] = auth.model_dump(mode="json")

    logger.info("auth.login_success", username=user.username, user_id=str(user.id))
    return LoginResponse(user=UserRead.model_validate(user), expires_at=auth.expires_at)


@router.post("/logout", status_code=204)
async def logout(request: Request) -> None:
    """Clear the session."""
    auth = read_session(request)
    if auth is not None:
        logger.info("auth.logout", user_id=str(auth.user_id))
    request.session.clear()
