# storecms/services/page_service.py
# Page repository: CRUD, singleton resolution and page transitions.
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from storecms.core.errors import NotFoundError, ValidationError
from storecms.db.session import transactional
from storecms.db.types import new_id
from storecms.models.cms import Page
from storecms.schemas.cms import PageCreate, PageUpdate
from storecms.services import publish_service, singleton_service, slug_service
from storecms.services.content_validation import validate_content_json
from storecms.services.html_sanitizer import sanitize_html
from storecms.utils.payload_guard import enforce_content_json_size

logger = logging.getLogger(__name__)

# columns a patch may not set to null
_REQUIRED_ON_PATCH = ("title", "slug", "status", "show_in_nav", "nav_order")


def validated_document(raw: Any, *, entity: str, entity_id: Optional[str] = None) -> Dict[str, Any]:
    """Size cap + shape check; warnings are logged, never raised."""
    enforce_content_json_size(raw)
    result = validate_content_json(raw)
    for warning in result.warnings:
        logger.warning("%s %s contentJson: %s", entity, entity_id or "(new)", warning)
    return result.document


def reject_nulls(values: Dict[str, Any], fields: Sequence[str]) -> None:
    for name in fields:
        if name in values and values[name] is None:
            raise ValidationError.for_field(name, f"{name} cannot be null")


# -------- Reads --------
def list_pages(db: Session) -> Sequence[Page]:
    stmt = select(Page).order_by(Page.nav_order.asc(), Page.created_at.asc())
    return db.scalars(stmt).all()


def get_page(db: Session, page_id: str) -> Page:
    page = db.get(Page, page_id)
    if page is None:
        raise NotFoundError("Page", page_id)
    return page


def get_page_by_slug(db: Session, slug: str) -> Optional[Page]:
    return db.scalar(select(Page).where(Page.slug == slug))


find_home = singleton_service.find_home
find_shop = singleton_service.find_shop


# -------- Writes --------
def create_page(db: Session, payload: PageCreate) -> Page:
    document = validated_document(payload.content_json, entity="page")
    slug = slug_service.resolve_slug(db, "page", slug=payload.slug, source=payload.title)

    status = payload.status
    scheduled_at = payload.scheduled_at if status == "scheduled" else None
    publish_service.assert_status_invariants(status, payload.published_at, scheduled_at, noun="pages")
    if status == "scheduled":
        publish_service.assert_in_future(scheduled_at)

    page = Page(
        id=new_id(),
        title=payload.title,
        slug=slug,
        content=sanitize_html(payload.content),
        content_json=document,
        template=payload.template,
        meta_title=payload.meta_title,
        meta_description=payload.meta_description,
        canonical_url=payload.canonical_url,
        og_image=payload.og_image,
        custom_css=payload.custom_css,
        is_home=False,
        is_shop=False,
        status=status,
        published_at=payload.published_at,
        scheduled_at=scheduled_at,
        show_in_nav=payload.show_in_nav,
        nav_order=payload.nav_order,
    )

    with slug_service.slug_conflict_guard("page", slug), singleton_service.singleton_conflict_guard(), \
            transactional(db):
        # clear-then-set happens before the new row is inserted
        singleton_service.apply_singleton_flags(db, page, is_home=payload.is_home, is_shop=payload.is_shop)
        db.add(page)

    logger.info("page created id=%s slug=%s", page.id, page.slug)
    return page


def update_page(db: Session, page_id: str, patch: PageUpdate) -> Page:
    page = get_page(db, page_id)
    values = patch.model_dump(exclude_unset=True)
    reject_nulls(values, _REQUIRED_ON_PATCH)

    is_home = values.pop("is_home", None)
    is_shop = values.pop("is_shop", None)

    if "content_json" in values:
        values["content_json"] = validated_document(values["content_json"], entity="page", entity_id=page.id)
    if "content" in values:
        values["content"] = sanitize_html(values["content"])
    if "slug" in values:
        slug_service.assert_slug_available(db, "page", values["slug"], current_slug=page.slug)

    status = values.get("status", page.status)
    published_at = values["published_at"] if "published_at" in values else page.published_at
    scheduled_at = values["scheduled_at"] if "scheduled_at" in values else page.scheduled_at
    if status != "scheduled":
        scheduled_at = None
        values["scheduled_at"] = None

    publish_service.assert_status_invariants(status, published_at, scheduled_at, noun="pages")
    entering_schedule = status == "scheduled" and (page.status != "scheduled" or "scheduled_at" in values)
    if entering_schedule:
        publish_service.assert_in_future(scheduled_at)

    with slug_service.slug_conflict_guard("page", values.get("slug")), \
            singleton_service.singleton_conflict_guard(), transactional(db):
        singleton_service.apply_singleton_flags(db, page, is_home=is_home, is_shop=is_shop)
        for key, value in values.items():
            setattr(page, key, value)

    return page


def delete_page(db: Session, page_id: str) -> None:
    """Physical delete: pages are structural and keep no archive."""
    with transactional(db):
        page = get_page(db, page_id)
        db.delete(page)
    logger.info("page deleted id=%s", page_id)


def set_home(db: Session, page_id: str) -> Page:
    return singleton_service.set_home(db, page_id)


def set_shop(db: Session, page_id: str) -> Page:
    return singleton_service.set_shop(db, page_id)


# -------- Transitions --------
def publish_page(db: Session, page_id: str) -> Page:
    with transactional(db):
        page = get_page(db, page_id)
        publish_service.apply_publish(page)
    return page


def unpublish_page(db: Session, page_id: str) -> Page:
    with transactional(db):
        page = get_page(db, page_id)
        publish_service.apply_unpublish(page, clear_schedule=True)
    return page


def schedule_page(db: Session, page_id: str, scheduled_at: datetime) -> Page:
    with transactional(db):
        page = get_page(db, page_id)
        publish_service.apply_schedule(page, scheduled_at)
    return page


def archive_page(db: Session, page_id: str) -> Page:
    with transactional(db):
        page = get_page(db, page_id)
        publish_service.apply_archive(page)
        page.scheduled_at = None
    return page


# -------- Public reads --------
def list_visible_pages(db: Session, *, now: Optional[datetime] = None) -> Sequence[Page]:
    stmt = (
        select(Page)
        .where(publish_service.visible_clause(Page, now))
        .order_by(Page.nav_order.asc(), Page.created_at.asc())
    )
    return db.scalars(stmt).all()


def get_visible_page(db: Session, *, slug: Optional[str] = None, home: bool = False, shop: bool = False) -> Page:
    if home:
        page = find_home(db)
    elif shop:
        page = find_shop(db)
    else:
        page = get_page_by_slug(db, slug or "")
    if page is None or not publish_service.is_publicly_visible(page.status, page.published_at):
        raise NotFoundError("Page")
    return page
