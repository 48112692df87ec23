"""Registration and login endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from blog_api.api.deps import get_auth_service
from blog_api.schemas.auth import CredentialsRequest, TokenResponse
from blog_api.services.auth import AuthService, InvalidCredentialsError
from blog_api.services.validation import ValidationError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_422_UNPROCESSABLE_ENTITY: {"description": "Invalid registration"}},
)
async def register(
    request: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse | JSONResponse:
    """Register a new user and return a session token."""
    try:
        user = await auth_service.register(email=request.email, password=request.password)
    except ValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"errors": e.full_messages()},
        )
    return TokenResponse(token=auth_service.create_token(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={status.HTTP_401_UNAUTHORIZED: {"description": INVALID_CREDENTIALS}},
)
async def login(
    request: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse | JSONResponse:
    """Exchange email and password for a session token."""
    try:
        user = await auth_service.authenticate(email=request.email, password=request.password)
    except InvalidCredentialsError:
        logger.info("Failed login attempt")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": INVALID_CREDENTIALS},
        )
    logger.info(f"User logged in: {user.id}")
    return TokenResponse(token=auth_service.create_token(user))
