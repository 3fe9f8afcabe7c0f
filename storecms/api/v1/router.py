# storecms/api/v1/router.py
from fastapi import APIRouter

from .endpoints import health, pages, post_settings, posts, taxonomies

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(pages.router)                    # /pages
api_router.include_router(posts.router)                    # /posts
api_router.include_router(taxonomies.categories_router)    # /post-categories
api_router.include_router(taxonomies.tags_router)          # /post-tags
api_router.include_router(post_settings.router)            # /post-settings
