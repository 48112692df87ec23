"""Post API endpoints.

All routes require a valid bearer token and act only on the caller's posts.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.api.deps import get_current_user
from blog_api.core import get_db
from blog_api.models import User
from blog_api.schemas.post import PostCreate, PostResponse, PostUpdate
from blog_api.services.policy import ForbiddenError
from blog_api.services.post import PostNotFoundError, PostService
from blog_api.services.validation import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["posts"],
)


def get_post_service(db: AsyncSession = Depends(get_db)) -> PostService:
    """Dependency to get post service."""
    return PostService(db)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Post not found",
    )


def _forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def _invalid(e: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=e.errors)


@router.get("", response_model=list[PostResponse])
async def list_posts(
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> list[PostResponse]:
    """List the caller's posts, newest first."""
    posts = await service.list(current_user)
    return [PostResponse.model_validate(p) for p in posts]


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> PostResponse | JSONResponse:
    """Create a post owned by the caller."""
    try:
        post = await service.create(current_user, data)
    except ValidationError as e:
        return _invalid(e)
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Get one of the caller's posts."""
    try:
        post = await service.get(current_user, post_id)
    except PostNotFoundError as e:
        raise _not_found() from e
    except ForbiddenError as e:
        logger.warning(f"User {current_user.id} denied read of post {post_id}")
        raise _forbidden() from e
    return PostResponse.model_validate(post)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    data: PostUpdate,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> PostResponse | JSONResponse:
    """Update title and/or body of one of the caller's posts."""
    try:
        post = await service.update(current_user, post_id, data)
    except PostNotFoundError as e:
        raise _not_found() from e
    except ForbiddenError as e:
        logger.warning(f"User {current_user.id} denied update of post {post_id}")
        raise _forbidden() from e
    except ValidationError as e:
        return _invalid(e)
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> None:
    """Delete one of the caller's posts."""
    try:
        await service.delete(current_user, post_id)
    except PostNotFoundError as e:
        raise _not_found() from e
    except ForbiddenError as e:
        logger.warning(f"User {current_user.id} denied delete of post {post_id}")
        raise _forbidden() from e
    return None
