# storecms/services/slug_service.py
# Per-class slug uniqueness (pages, posts, categories, tags)
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Literal, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storecms.core.errors import SlugConflictError, ValidationError
from storecms.db.base import Base
from storecms.models.cms import Category, Page, Post, Tag
from storecms.utils.slugify import slugify

EntityClass = Literal["page", "post", "category", "tag"]

_MODELS: dict[str, Type[Base]] = {
    "page": Page,
    "post": Post,
    "category": Category,
    "tag": Tag,
}


def _model_for(cls: EntityClass) -> Type[Base]:
    try:
        return _MODELS[cls]
    except KeyError:
        raise ValueError(f"Unknown entity class {cls!r}")


def is_slug_available(
    db: Session,
    cls: EntityClass,
    slug: str,
    current_slug: Optional[str] = None,
) -> bool:
    """
    True when no other entity of the same class holds ``slug``.
    On update pass the entity's current slug: keeping it is always allowed.
    """
    if current_slug is not None and slug == current_slug:
        return True
    model = _model_for(cls)
    taken = db.scalar(select(func.count()).select_from(model).where(model.slug == slug))
    return not taken


def assert_slug_available(
    db: Session,
    cls: EntityClass,
    slug: str,
    current_slug: Optional[str] = None,
) -> None:
    if not is_slug_available(db, cls, slug, current_slug):
        raise SlugConflictError(slug, cls)


def resolve_slug(
    db: Session,
    cls: EntityClass,
    *,
    slug: Optional[str],
    source: Optional[str],
    current_slug: Optional[str] = None,
) -> str:
    """
    Slug for a create/update: the explicit one, else derived from ``source``
    (title or name). Raises ValidationError when nothing usable is left and
    SlugConflictError when it is taken.
    """
    candidate = slug if slug else slugify(source)
    if not candidate:
        raise ValidationError.for_field("slug", "A slug could not be derived; provide one explicitly")
    assert_slug_available(db, cls, candidate, current_slug)
    return candidate


def is_slug_integrity_error(exc: IntegrityError) -> bool:
    """Unique-constraint violation on a slug column (the race the pre-check cannot close)."""
    text = str(getattr(exc, "orig", exc)).lower()
    return "slug" in text and ("unique" in text or "duplicate" in text)


@contextmanager
def slug_conflict_guard(cls: EntityClass, slug: Optional[str]) -> Iterator[None]:
    """Wrap a commit so a unique-slug violation surfaces as SlugConflictError."""
    try:
        yield
    except IntegrityError as exc:
        if slug and is_slug_integrity_error(exc):
            raise SlugConflictError(slug, cls) from exc
        raise
