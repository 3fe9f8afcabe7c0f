# storecms/services/revision_service.py
# Append-only post revisions, written after the publish commit.
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storecms.core.errors import NotFoundError
from storecms.models.cms import Post, PostRevision

logger = logging.getLogger(__name__)


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def build_snapshot(post: Post) -> Dict[str, Any]:
    """JSON-safe copy of the fields a revision preserves."""
    return {
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "contentJson": post.content_json,
        "legacyHtml": post.legacy_html,
        "status": post.status,
        "publishedAt": _iso(post.published_at),
        "featured": bool(post.featured),
        "allowIndex": bool(post.allow_index),
        "allowFollow": bool(post.allow_follow),
    }


def snapshot(
    db: Session,
    post_id: str,
    snapshot: Dict[str, Any],
    user_id: Optional[str] = None,
) -> Optional[PostRevision]:
    """
    Persist one revision in its own transaction.

    Called after the publish has committed; a failure here is logged and
    swallowed so the publish result is unaffected. Returns None in that case.
    """
    try:
        rev = PostRevision(post_id=post_id, snapshot_json=snapshot, created_by_user_id=user_id)
        db.add(rev)
        db.commit()
        return rev
    except Exception:
        db.rollback()
        logger.exception("revision snapshot failed for post %s", post_id)
        return None


def list_revisions(db: Session, post_id: str) -> List[PostRevision]:
    if db.get(Post, post_id) is None:
        raise NotFoundError("Post", post_id)
    stmt = (
        select(PostRevision)
        .where(PostRevision.post_id == post_id)
        .order_by(PostRevision.created_at.asc(), PostRevision.id.asc())
    )
    return list(db.scalars(stmt).all())
