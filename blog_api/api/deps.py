"""Request-level authentication dependencies.

Two gates share one verification path:

- ``get_current_user`` (strict) rejects with 401 before the handler runs.
- ``get_optional_user`` (soft) hands the handler ``None`` instead, so
  session endpoints can answer for anonymous callers themselves.

The resolved user is injected as a handler argument; nothing is stored on
the request or in module state.
"""

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core import get_db
from blog_api.models import User
from blog_api.services.auth import AuthService, TokenError, TokenExpiredError

logger = logging.getLogger(__name__)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Dependency to get auth service."""
    return AuthService(db)


def extract_bearer_token(request: Request) -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


async def resolve_identity(request: Request, auth_service: AuthService) -> User | None:
    """Verify the request's bearer token; ``None`` when absent or invalid."""
    token = extract_bearer_token(request)
    if token is None:
        return None

    try:
        return await auth_service.verify_token(token)
    except TokenExpiredError:
        logger.debug(f"Expired token for: {request.method} {request.url.path}")
    except TokenError as e:
        logger.warning(f"Invalid token for: {request.method} {request.url.path} - {e}")
    return None


async def get_current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Strict gate: the authenticated user, or 401."""
    user = await resolve_identity(request, auth_service)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User | None:
    """Soft gate: the authenticated user, or None."""
    return await resolve_identity(request, auth_service)
