# storecms/services/publish_service.py
# ⟶ State transitions, invariants, public visibility and the scheduled sweep
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal, Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from storecms.core.errors import ValidationError
from storecms.db.session import transactional
from storecms.db.types import as_utc, utcnow
from storecms.models.cms import Page, Post
from storecms.services import revision_service

logger = logging.getLogger(__name__)

Status = Literal["draft", "scheduled", "published", "archived"]
Publishable = Union[Page, Post]


# -----------------------------
# Invariants
# -----------------------------
def assert_status_invariants(
    status: str,
    published_at: Optional[datetime],
    scheduled_at: Optional[datetime],
    *,
    noun: str = "posts",
) -> None:
    """
    published => published_at is set; scheduled => scheduled_at is set.
    Runs against the resolved (patch-or-current) values; never auto-fills.
    """
    if status == "published" and published_at is None:
        raise ValidationError.for_field("publishedAt", f"Published {noun} require a publishedAt date")
    if status == "scheduled" and scheduled_at is None:
        raise ValidationError.for_field("scheduledAt", f"Scheduled {noun} require a scheduledAt date")


def assert_in_future(scheduled_at: datetime, now: Optional[datetime] = None) -> None:
    now = as_utc(now) or utcnow()
    if as_utc(scheduled_at) <= now:
        raise ValidationError.for_field("scheduledAt", "scheduledAt must be in the future")


def is_publicly_visible(
    status: str,
    published_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """Authoritative public gate, independent of whether the sweep has run."""
    if status != "published" or published_at is None:
        return False
    now = as_utc(now) or utcnow()
    return as_utc(published_at) <= now


def visible_clause(model, now: Optional[datetime] = None):
    """SQL form of is_publicly_visible for list/slug queries."""
    now = as_utc(now) or utcnow()
    return (model.status == "published") & (model.published_at.is_not(None)) & (model.published_at <= now)


# -----------------------------
# Transitions (mutate in place; the caller owns the transaction)
# -----------------------------
def apply_publish(entity: Publishable, now: Optional[datetime] = None) -> Publishable:
    if entity.published_at is None:
        entity.published_at = as_utc(now) or utcnow()
    entity.scheduled_at = None
    entity.status = "published"
    return entity


def apply_unpublish(entity: Publishable, *, clear_schedule: bool = False) -> Publishable:
    entity.status = "draft"
    if clear_schedule:
        entity.scheduled_at = None
    return entity


def apply_schedule(entity: Publishable, scheduled_at: datetime, now: Optional[datetime] = None) -> Publishable:
    assert_in_future(scheduled_at, now)
    entity.status = "scheduled"
    entity.scheduled_at = as_utc(scheduled_at)
    return entity


def apply_archive(entity: Publishable) -> Publishable:
    entity.status = "archived"
    return entity


# -----------------------------
# Scheduled sweep
# -----------------------------
@dataclass
class SweepResult:
    page_ids: List[str] = field(default_factory=list)
    post_ids: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.page_ids) + len(self.post_ids)


def _due(db: Session, model, now: datetime):
    stmt = (
        select(model)
        .where(model.status == "scheduled", model.scheduled_at.is_not(None), model.scheduled_at <= now)
        .order_by(model.scheduled_at.asc())
        .with_for_update(skip_locked=True)
    )
    return list(db.scalars(stmt).all())


def publish_due(db: Session, now: Optional[datetime] = None) -> SweepResult:
    """
    Promote every scheduled Page/Post whose scheduled_at has passed.

    One transaction for the promotion; posts then get a revision snapshot
    each. Running it again with nothing due is a no-op.
    """
    now = as_utc(now) or utcnow()
    result = SweepResult()
    snapshots = []

    with transactional(db):
        for page in _due(db, Page, now):
            apply_publish(page, now)
            result.page_ids.append(page.id)
        for post in _due(db, Post, now):
            snapshots.append((post.id, revision_service.build_snapshot(post)))
            apply_publish(post, now)
            result.post_ids.append(post.id)

    for post_id, snap in snapshots:
        revision_service.snapshot(db, post_id, snap)

    if result.total:
        logger.info("sweep published %d page(s), %d post(s)", len(result.page_ids), len(result.post_ids))
    return result
