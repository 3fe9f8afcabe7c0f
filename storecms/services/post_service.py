# storecms/services/post_service.py
# Post repository: CRUD with taxonomy assignment, filtered listing, transitions.
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from storecms.core.errors import NotFoundError, ValidationError
from storecms.core.settings import settings
from storecms.db.session import transactional
from storecms.models.cms import Category, Post, Tag
from storecms.schemas.cms import PostCreate, PostUpdate
from storecms.services import publish_service, revision_service, slug_service, taxonomy_service
from storecms.services.html_sanitizer import sanitize_html
from storecms.services.page_service import reject_nulls, validated_document

logger = logging.getLogger(__name__)

DEFAULT_SORT = "createdAt_desc"
DEFAULT_PAGE_SIZE = 20

SORT_COLUMNS = {
    "createdAt": Post.created_at,
    "updatedAt": Post.updated_at,
    "publishedAt": Post.published_at,
    "title": Post.title,
}

_REQUIRED_ON_PATCH = ("title", "slug", "status", "featured", "allow_index", "allow_follow")


@dataclass
class PostPage:
    data: List[Post]
    total: int
    page: int
    page_size: int


def _with_taxonomies(stmt):
    return stmt.options(selectinload(Post.categories), selectinload(Post.tags))


def _order_by(sort: Optional[str]):
    field, _, direction = (sort or DEFAULT_SORT).rpartition("_")
    column = SORT_COLUMNS.get(field)
    if column is None or direction not in ("asc", "desc"):
        raise ValidationError.for_field("sort", f"Unsupported sort {sort!r}")
    primary = column.asc() if direction == "asc" else column.desc()
    return primary, Post.id.asc()


# -------- Reads --------
def get_post(db: Session, post_id: str) -> Post:
    post = db.scalar(_with_taxonomies(select(Post).where(Post.id == post_id)))
    if post is None:
        raise NotFoundError("Post", post_id)
    return post


def get_post_by_slug(db: Session, slug: str) -> Optional[Post]:
    return db.scalar(_with_taxonomies(select(Post).where(Post.slug == slug)))


def list_posts(
    db: Session,
    *,
    status: Optional[str] = None,
    q: Optional[str] = None,
    tag: Optional[str] = None,
    category: Optional[str] = None,
    author_id: Optional[str] = None,
    featured: Optional[bool] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    sort: Optional[str] = None,
    visible_only: bool = False,
    now: Optional[datetime] = None,
) -> PostPage:
    """
    Filtered, paginated post list. ``tag``/``category`` match by slug;
    ``q`` is a case-insensitive match on title or excerpt.
    """
    if page < 1:
        raise ValidationError.for_field("page", "page must be >= 1")
    if not 1 <= page_size <= settings.POSTS_PAGE_SIZE_MAX:
        raise ValidationError.for_field("pageSize", f"pageSize must be between 1 and {settings.POSTS_PAGE_SIZE_MAX}")
    order = _order_by(sort)

    conditions = []
    if visible_only:
        conditions.append(publish_service.visible_clause(Post, now))
    if status:
        conditions.append(Post.status == status)
    if q:
        like = f"%{q.strip()}%"
        conditions.append(or_(Post.title.ilike(like), Post.excerpt.ilike(like)))
    if tag:
        conditions.append(Post.tags.any(Tag.slug == tag))
    if category:
        conditions.append(Post.categories.any(Category.slug == category))
    if author_id:
        conditions.append(Post.author_id == author_id)
    if featured is not None:
        conditions.append(Post.featured == featured)

    total = db.scalar(select(func.count(Post.id)).where(*conditions)) or 0
    stmt = (
        _with_taxonomies(select(Post).where(*conditions))
        .order_by(*order)
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    return PostPage(data=list(db.scalars(stmt).all()), total=total, page=page, page_size=page_size)


def get_visible_post(db: Session, slug: str) -> Post:
    post = get_post_by_slug(db, slug)
    if post is None or not publish_service.is_publicly_visible(post.status, post.published_at):
        raise NotFoundError("Post")
    return post


# -------- Writes --------
def create_post(db: Session, payload: PostCreate) -> Post:
    document = validated_document(payload.content_json, entity="post")
    slug = slug_service.resolve_slug(db, "post", slug=payload.slug, source=payload.title)

    publish_service.assert_status_invariants(payload.status, payload.published_at, payload.scheduled_at)
    if payload.status == "scheduled":
        publish_service.assert_in_future(payload.scheduled_at)

    categories = taxonomy_service.resolve_ids(db, Category, payload.category_ids, field="categoryIds")
    tags = taxonomy_service.resolve_ids(db, Tag, payload.tag_ids, field="tagIds")

    values = payload.model_dump(exclude={"slug", "content_json", "legacy_html", "category_ids", "tag_ids"})
    post = Post(
        slug=slug,
        content_json=document,
        legacy_html=sanitize_html(payload.legacy_html),
        **values,
    )
    post.categories = sorted(categories, key=lambda c: c.name)
    post.tags = sorted(tags, key=lambda t: t.name)

    with slug_service.slug_conflict_guard("post", slug), transactional(db):
        db.add(post)

    logger.info("post created id=%s slug=%s status=%s", post.id, post.slug, post.status)
    return post


def update_post(db: Session, post_id: str, patch: PostUpdate, *, user_id: Optional[str] = None) -> Post:
    post = get_post(db, post_id)
    values = patch.model_dump(exclude_unset=True)
    reject_nulls(values, _REQUIRED_ON_PATCH)

    category_ids = values.pop("category_ids", None)
    tag_ids = values.pop("tag_ids", None)

    if "content_json" in values:
        values["content_json"] = validated_document(values["content_json"], entity="post", entity_id=post.id)
    if "legacy_html" in values:
        values["legacy_html"] = sanitize_html(values["legacy_html"])
    if "slug" in values:
        slug_service.assert_slug_available(db, "post", values["slug"], current_slug=post.slug)

    status = values.get("status", post.status)
    published_at = values["published_at"] if "published_at" in values else post.published_at
    scheduled_at = values["scheduled_at"] if "scheduled_at" in values else post.scheduled_at
    publish_service.assert_status_invariants(status, published_at, scheduled_at)
    if status == "scheduled" and (post.status != "scheduled" or "scheduled_at" in values):
        publish_service.assert_in_future(scheduled_at)

    categories = (
        taxonomy_service.resolve_ids(db, Category, category_ids, field="categoryIds")
        if category_ids is not None else None
    )
    tags = taxonomy_service.resolve_ids(db, Tag, tag_ids, field="tagIds") if tag_ids is not None else None

    becoming_published = status == "published" and post.status != "published"
    before = revision_service.build_snapshot(post) if becoming_published else None

    with slug_service.slug_conflict_guard("post", values.get("slug")), transactional(db):
        for key, value in values.items():
            setattr(post, key, value)
        if categories is not None:
            post.categories = sorted(categories, key=lambda c: c.name)
        if tags is not None:
            post.tags = sorted(tags, key=lambda t: t.name)

    if before is not None:
        revision_service.snapshot(db, post.id, before, user_id)
    return post


# -------- Transitions --------
def _locked(db: Session, post_id: str) -> Post:
    post = db.scalar(select(Post).where(Post.id == post_id).with_for_update())
    if post is None:
        raise NotFoundError("Post", post_id)
    return post


def publish_post(db: Session, post_id: str, *, user_id: Optional[str] = None) -> Post:
    """
    Publish (idempotent on status/published_at) and snapshot the state the
    post was in before the call. The snapshot is written after the commit.
    """
    with transactional(db):
        post = _locked(db, post_id)
        before = revision_service.build_snapshot(post)
        publish_service.apply_publish(post)

    revision_service.snapshot(db, post.id, before, user_id)
    logger.info("post published id=%s", post.id)
    return post


def unpublish_post(db: Session, post_id: str) -> Post:
    with transactional(db):
        post = _locked(db, post_id)
        publish_service.apply_unpublish(post)
    return post


def schedule_post(db: Session, post_id: str, scheduled_at: datetime) -> Post:
    with transactional(db):
        post = _locked(db, post_id)
        publish_service.apply_schedule(post, scheduled_at)
    return post


def archive_post(db: Session, post_id: str) -> Post:
    with transactional(db):
        post = _locked(db, post_id)
        publish_service.apply_archive(post)
    return post


def remove_post(db: Session, post_id: str) -> Post:
    """API "delete": posts are archived, never dropped."""
    return archive_post(db, post_id)


def hard_delete_post(db: Session, post_id: str) -> None:
    with transactional(db):
        db.delete(_locked(db, post_id))
    logger.info("post hard-deleted id=%s", post_id)


def list_post_revisions(db: Session, post_id: str) -> Sequence:
    return revision_service.list_revisions(db, post_id)
