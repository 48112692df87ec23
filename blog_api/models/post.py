"""Post model - a blog post owned by exactly one user."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_api.models.base import BaseModel

if TYPE_CHECKING:
    from blog_api.models.user import User


class Post(BaseModel):
    """Blog post.

    ``owner_id`` is set to the creator at insert time and never reassigned.
    """

    __tablename__ = "posts"
    __table_args__ = (Index("ix_posts_owner_created", "owner_id", "created_at"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    owner: Mapped["User"] = relationship("User", back_populates="posts")

    def __repr__(self) -> str:
        return f"<Post {self.title!r} owner={self.owner_id}>"
