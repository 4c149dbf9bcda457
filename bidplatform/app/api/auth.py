"""Auth dependencies: bearer-token authentication and role guards."""

import uuid
from collections.abc import Awaitable, Callable, Iterable
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from bidplatform.app.config import Settings, get_settings
from bidplatform.app.db.context import RequestContext
from bidplatform.app.db.engine import get_session
from bidplatform.app.db.users import get_user
from bidplatform.app.security import decode_access_token

ROLES = ("Admin", "Bid Creator", "Bid Reviewer", "Bid Viewer", "Manager", "Client")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_context(
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Resolve the authenticated user from an ``Authorization: Bearer`` header.

    The token identifies the user; name and role are read from the database
    so that role changes apply without reissuing tokens.

    Raises:
        HTTPException: 401 if the header is missing, malformed, invalid, or
            names an unknown user
    """
    if not authorization:
        raise _unauthorized("No token, authorization denied")

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header format")

    token = authorization[7:]  # Strip "Bearer "

    try:
        payload = decode_access_token(token, settings)
        user_id = uuid.UUID(str(payload["user"]["id"]))
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
        raise _unauthorized("Token is not valid") from e

    user = await get_user(session, user_id)
    if user is None:
        raise _unauthorized("Token is not valid")

    return RequestContext(user_id=user.user_id, name=user.name, role=user.role)


def require_roles(
    allowed: Iterable[str],
) -> Callable[[RequestContext], Awaitable[RequestContext]]:
    """Build a dependency that rejects users whose role is not in ``allowed``.

    Usage:
        ctx: Annotated[RequestContext, Depends(require_roles(["Admin"]))]
    """
    allowed_roles = frozenset(allowed)

    async def dependency(
        ctx: Annotated[RequestContext, Depends(get_current_context)],
    ) -> RequestContext:
        if ctx.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return ctx

    return dependency
