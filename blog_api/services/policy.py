"""Ownership policy for posts.

A post may be read, updated or deleted only by the user who created it,
and listings are built from a query that is already filtered by owner.
"""

from collections.abc import Callable
from enum import Enum

from sqlalchemy import Select, select

from blog_api.models import Post, User


class ForbiddenError(Exception):
    """The caller is authenticated but may not act on this resource."""

    pass


class Action(str, Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


def is_owner(identity: User, post: Post) -> bool:
    return identity.id == post.owner_id


POST_RULES: dict[Action, Callable[[User, Post], bool]] = {
    Action.READ: is_owner,
    Action.UPDATE: is_owner,
    Action.DELETE: is_owner,
}


def can(identity: User | None, action: Action, post: Post) -> bool:
    """Whether ``identity`` may perform ``action`` on ``post``."""
    if identity is None:
        return False
    rule = POST_RULES.get(Action(action))
    return rule is not None and rule(identity, post)


def authorize(identity: User | None, action: Action, post: Post) -> None:
    """Raise ForbiddenError unless the action is permitted."""
    if not can(identity, action, post):
        raise ForbiddenError(f"Not allowed to {Action(action).value} this post")


def scope_posts(identity: User) -> Select[tuple[Post]]:
    """Posts visible to ``identity``, newest first."""
    return (
        select(Post)
        .where(Post.owner_id == identity.id)
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
