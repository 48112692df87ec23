"""Blog API routers."""

from blog_api.api.router import api_router

__all__ = ["api_router"]
