"""User model - credential store for password authentication."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_api.models.base import BaseModel

if TYPE_CHECKING:
    from blog_api.models.post import Post


class User(BaseModel):
    """A registered user.

    ``email`` is stored normalized (trimmed, lower-cased) so the unique
    index also enforces case-insensitive uniqueness.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Owned posts go with the user; the FK cascade does the work in the database
    posts: Mapped[list["Post"]] = relationship(
        "Post",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
