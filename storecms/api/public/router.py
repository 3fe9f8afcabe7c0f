# =============================================================================
# Public read path (storefront). Only publicly visible content:
# status == published AND publishedAt <= now.
# storecms/api/public/router.py
# =============================================================================
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storecms.core.settings import settings
from storecms.db.session import get_db
from storecms.schemas.cms import PageOut, PostListOut, PostOut
from storecms.services import page_service, post_service, post_settings_service

router = APIRouter(tags=["public"])


@router.get("/pages", response_model=list[PageOut])
def list_public_pages(db: Session = Depends(get_db)):
    return page_service.list_visible_pages(db)


@router.get("/pages/home", response_model=PageOut)
def get_public_home(db: Session = Depends(get_db)):
    return page_service.get_visible_page(db, home=True)


@router.get("/pages/shop", response_model=PageOut)
def get_public_shop(db: Session = Depends(get_db)):
    return page_service.get_visible_page(db, shop=True)


@router.get("/pages/{slug}", response_model=PageOut)
def get_public_page(slug: str, db: Session = Depends(get_db)):
    return page_service.get_visible_page(db, slug=slug)


@router.get("/posts", response_model=PostListOut)
def list_public_posts(
    tag: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=settings.POSTS_PAGE_SIZE_MAX, alias="pageSize"),
    db: Session = Depends(get_db),
):
    """Newest first; page size defaults to the blog's postsPerPage."""
    if page_size is None:
        page_size = post_settings_service.get_settings(db).posts_per_page
    return post_service.list_posts(
        db,
        tag=tag,
        category=category,
        page=page,
        page_size=page_size,
        sort="publishedAt_desc",
        visible_only=True,
    )


@router.get("/posts/{slug}", response_model=PostOut)
def get_public_post(slug: str, db: Session = Depends(get_db)):
    return post_service.get_visible_post(db, slug)
