import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_tracker.config import settings
from delivery_tracker.database import get_db
from delivery_tracker.exceptions import Unauthorized
from delivery_tracker.models.user import User
from delivery_tracker.schemas.common import ApiResponse
from delivery_tracker.schemas.user import AuthStatus, LoginRequest, UserResponse
from delivery_tracker.utils.auth import (
    create_session,
    destroy_session,
    validate_session,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_token(request: Request) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency that returns the current authenticated user."""
    token = _session_token(request)
    if token is None:
        raise Unauthorized("Not authenticated")

    session_data = validate_session(token)
    if session_data is None:
        raise Unauthorized("Session expired or invalid")

    result = await db.execute(
        select(User).where(User.id == session_data["user_id"], User.is_active.is_(True))
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise Unauthorized("Not authenticated")
    return user


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    result = await db.execute(
        select(User).where(User.username == body.username)
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        logger.warning("Failed login for %r", body.username)
        raise Unauthorized("Invalid credentials")

    if not user.is_active:
        raise Unauthorized("Account is disabled")

    token = create_session(user.id, user.username)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
    )

    return ApiResponse.ok(UserResponse.model_validate(user))


@router.post("/logout")
async def logout(request: Request, response: Response) -> ApiResponse[None]:
    token = _session_token(request)
    if token:
        destroy_session(token)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)
    return ApiResponse.ok(None)


@router.get("/check")
async def check(request: Request) -> ApiResponse[AuthStatus]:
    """Report whether the caller holds a live session. Never answers 401."""
    token = _session_token(request)
    session_data = validate_session(token) if token else None
    if session_data is None:
        return ApiResponse.ok(AuthStatus(authenticated=False))
    return ApiResponse.ok(
        AuthStatus(authenticated=True, username=session_data["username"])
    )


@router.get("/me")
async def get_me(
    user: User = Depends(get_current_user),
) -> ApiResponse[UserResponse]:
    return ApiResponse.ok(UserResponse.model_validate(user))
