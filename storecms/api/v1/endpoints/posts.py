# =============================================================================
# Post Endpoints (CRUD, filtered list, transitions, revisions)
# storecms/api/v1/endpoints/posts.py
# =============================================================================
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storecms.api.deps import get_acting_user_id
from storecms.core.settings import settings
from storecms.db.session import get_db
from storecms.schemas.cms import (
    ContentStatus, PostCreate, PostListOut, PostOut, PostRevisionOut, PostSort, PostUpdate,
    ScheduleIn, SlugCheckOut,
)
from storecms.services import post_service, slug_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=PostListOut)
def list_posts(
    status: Optional[ContentStatus] = Query(None),
    q: Optional[str] = Query(None, max_length=200),
    tag: Optional[str] = Query(None, description="tag slug"),
    category: Optional[str] = Query(None, description="category slug"),
    author_id: Optional[str] = Query(None, alias="authorId"),
    featured: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(post_service.DEFAULT_PAGE_SIZE, ge=1, le=settings.POSTS_PAGE_SIZE_MAX, alias="pageSize"),
    sort: PostSort = Query(post_service.DEFAULT_SORT),
    db: Session = Depends(get_db),
):
    return post_service.list_posts(
        db,
        status=status,
        q=q,
        tag=tag,
        category=category,
        author_id=author_id,
        featured=featured,
        page=page,
        page_size=page_size,
        sort=sort,
    )


@router.get("/check-slug", response_model=SlugCheckOut)
def check_slug(
    slug: str = Query(..., min_length=1, max_length=200),
    current_slug: Optional[str] = Query(None, alias="currentSlug"),
    db: Session = Depends(get_db),
):
    return {"slug": slug, "available": slug_service.is_slug_available(db, "post", slug, current_slug)}


@router.get("/{post_id}", response_model=PostOut)
def get_post(post_id: str, db: Session = Depends(get_db)):
    return post_service.get_post(db, post_id)


@router.post("", response_model=PostOut, status_code=201)
def create_post(payload: PostCreate, db: Session = Depends(get_db)):
    return post_service.create_post(db, payload)


@router.put("/{post_id}", response_model=PostOut)
def update_post(
    post_id: str,
    patch: PostUpdate,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_acting_user_id),
):
    return post_service.update_post(db, post_id, patch, user_id=user_id)


@router.delete("/{post_id}", response_model=PostOut)
def delete_post(post_id: str, db: Session = Depends(get_db)):
    """Archives the post; rows are kept."""
    return post_service.remove_post(db, post_id)


# ---- Transitions ----
@router.post("/{post_id}/publish", response_model=PostOut)
def publish_post(
    post_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_acting_user_id),
):
    return post_service.publish_post(db, post_id, user_id=user_id)


@router.post("/{post_id}/unpublish", response_model=PostOut)
def unpublish_post(post_id: str, db: Session = Depends(get_db)):
    return post_service.unpublish_post(db, post_id)


@router.post("/{post_id}/schedule", response_model=PostOut)
def schedule_post(post_id: str, body: ScheduleIn, db: Session = Depends(get_db)):
    return post_service.schedule_post(db, post_id, body.scheduled_at)


@router.post("/{post_id}/archive", response_model=PostOut)
def archive_post(post_id: str, db: Session = Depends(get_db)):
    return post_service.archive_post(db, post_id)


# ---- Revisions ----
@router.get("/{post_id}/revisions", response_model=list[PostRevisionOut])
def list_revisions(post_id: str, db: Session = Depends(get_db)):
    return post_service.list_post_revisions(db, post_id)
