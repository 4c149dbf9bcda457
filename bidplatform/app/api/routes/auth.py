"""Account endpoints - POST /api/auth/register, POST /api/auth/login."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from bidplatform.app.api.auth import ROLES
from bidplatform.app.config import Settings, get_settings
from bidplatform.app.db.engine import get_session
from bidplatform.app.db.users import create_user, get_user_by_email
from bidplatform.app.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register."""

    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters")
    role: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value

    @field_validator("role")
    @classmethod
    def role_known(cls, value: str | None) -> str | None:
        if value is not None and value not in ROLES:
            raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
        return value


class RegisterResponse(BaseModel):
    """Response for POST /api/auth/register."""

    msg: str


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Response for POST /api/auth/login."""

    token: str


def _field_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": [{"msg": message}]})


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> RegisterResponse | JSONResponse:
    """Register a new user (default role: Bid Creator)."""
    if await get_user_by_email(session, request.email) is not None:
        return _field_error(status.HTTP_400_BAD_REQUEST, "User already exists")

    await create_user(
        session,
        name=request.name,
        email=request.email,
        password_hash=await run_in_threadpool(hash_password, request.password),
        role=request.role or "Bid Creator",
    )
    logger.info("Registered user %s", request.email)

    return RegisterResponse(msg="User registered successfully")


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse | JSONResponse:
    """Authenticate a user and issue an access token."""
    user = await get_user_by_email(session, request.email)
    if user is None or not await run_in_threadpool(
        verify_password, request.password, user.password_hash
    ):
        return _field_error(status.HTTP_400_BAD_REQUEST, "Invalid credentials")

    token = create_access_token(str(user.user_id), user.role, settings)
    return TokenResponse(token=token)
