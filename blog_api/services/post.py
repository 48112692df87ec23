"""Post service - business logic for owner-scoped post CRUD."""

import builtins
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.models import Post, User
from blog_api.schemas.post import PostCreate, PostUpdate
from blog_api.services.policy import Action, authorize, scope_posts
from blog_api.services.validation import ValidationError, validate_post_fields

logger = logging.getLogger(__name__)


class PostNotFoundError(Exception):
    """No post with the requested ID exists."""

    pass


class PostService:
    """Service for managing a user's posts.

    Every method takes the acting user explicitly; ownership is checked
    after the post is loaded so a missing post (404) stays distinguishable
    from someone else's post (403).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, post_id: UUID | str) -> Post:
        try:
            key = post_id if isinstance(post_id, UUID) else UUID(post_id)
        except ValueError as e:
            # Not a UUID, so no post can have it
            raise PostNotFoundError(f"Post {post_id} not found") from e

        result = await self.db.execute(select(Post).where(Post.id == key))
        post = result.scalar_one_or_none()
        if post is None:
            raise PostNotFoundError(f"Post {post_id} not found")
        return post

    async def list(self, identity: User) -> builtins.list[Post]:
        """List the caller's own posts."""
        result = await self.db.execute(scope_posts(identity))
        return list(result.scalars().all())

    async def get(self, identity: User, post_id: UUID | str) -> Post:
        """Get one post the caller owns."""
        post = await self._load(post_id)
        authorize(identity, Action.READ, post)
        return post

    async def create(self, identity: User, data: PostCreate) -> Post:
        """Create a post owned by the caller."""
        fields = data.model_dump(include={"title", "body"})
        errors = validate_post_fields(fields)
        if errors:
            raise ValidationError(errors)

        post = Post(
            title=fields["title"],
            body=fields["body"],
            owner_id=identity.id,
        )
        self.db.add(post)
        await self.db.flush()
        await self.db.refresh(post)

        logger.info(f"User {identity.id} created post {post.id}")
        return post

    async def update(self, identity: User, post_id: UUID | str, data: PostUpdate) -> Post:
        """Apply the provided fields of ``data`` to a post the caller owns."""
        post = await self._load(post_id)
        authorize(identity, Action.UPDATE, post)

        update_data = data.model_dump(exclude_unset=True, include={"title", "body"})
        errors = validate_post_fields(update_data, partial=True)
        if errors:
            raise ValidationError(errors)

        for field, value in update_data.items():
            setattr(post, field, value)

        await self.db.flush()
        await self.db.refresh(post)
        return post

    async def delete(self, identity: User, post_id: UUID | str) -> None:
        """Delete a post the caller owns."""
        post = await self._load(post_id)
        authorize(identity, Action.DELETE, post)

        await self.db.delete(post)
        await self.db.flush()
        logger.info(f"User {identity.id} deleted post {post_id}")
