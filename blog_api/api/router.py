"""Blog API Router - aggregates all API routes."""

from fastapi import APIRouter

from blog_api.api import auth, health, posts, session

# Routes are mounted at the root: /register, /login, /session, /posts
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(session.router)
api_router.include_router(posts.router)
