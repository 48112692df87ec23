"""Session endpoints: log in, who-am-I, log out.

Tokens are stateless, so logging out has nothing to invalidate on the
server; the client simply discards its token.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from blog_api.api.auth import INVALID_CREDENTIALS
from blog_api.api.deps import get_auth_service, get_optional_user
from blog_api.models import User
from blog_api.schemas.auth import (
    CredentialsRequest,
    MessageResponse,
    SessionResponse,
    SessionStatusResponse,
    UserResponse,
)
from blog_api.services.auth import AuthService, InvalidCredentialsError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["session"])


@router.post("", response_model=SessionResponse)
async def create_session(
    request: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SessionResponse | JSONResponse:
    """Log in and return the token together with the user."""
    try:
        user = await auth_service.authenticate(email=request.email, password=request.password)
    except InvalidCredentialsError:
        logger.info("Failed session login attempt")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": INVALID_CREDENTIALS},
        )
    logger.info(f"Session started for user {user.id}")
    return SessionResponse(
        token=auth_service.create_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get(
    "",
    response_model=SessionStatusResponse,
    responses={status.HTTP_401_UNAUTHORIZED: {"description": "Not authenticated"}},
)
async def get_session(
    current_user: User | None = Depends(get_optional_user),
) -> SessionStatusResponse | JSONResponse:
    """Report whether the bearer token identifies a user."""
    if current_user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"authenticated": False},
        )
    return SessionStatusResponse(user=UserResponse.model_validate(current_user))


@router.delete("", response_model=MessageResponse)
async def delete_session(
    current_user: User | None = Depends(get_optional_user),
) -> MessageResponse:
    """Log out. Always succeeds."""
    if current_user is not None:
        logger.info(f"User logged out: {current_user.id}")
    return MessageResponse(message="Logged out successfully")
