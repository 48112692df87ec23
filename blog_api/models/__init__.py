# Blog API Models
from blog_api.models.base import BaseModel
from blog_api.models.post import Post
from blog_api.models.user import User

__all__ = [
    "BaseModel",
    "Post",
    "User",
]
