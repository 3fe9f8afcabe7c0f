# storecms/services/post_settings_service.py
from __future__ import annotations

from sqlalchemy.orm import Session

from storecms.db.session import transactional
from storecms.models.cms import POST_SETTINGS_ID, PostSettings
from storecms.schemas.cms import PostSettingsUpdate

DEFAULTS = {
    "posts_per_page": 12,
    "blog_title": "Blog",
    "blog_description": None,
    "default_og_image_id": None,
    "rss_enabled": True,
}


def get_settings(db: Session) -> PostSettings:
    """Stored row, or an unsaved instance carrying the defaults."""
    row = db.get(PostSettings, POST_SETTINGS_ID)
    if row is None:
        return PostSettings(id=POST_SETTINGS_ID, **DEFAULTS)
    return row


def upsert_settings(db: Session, patch: PostSettingsUpdate) -> PostSettings:
    values = {k: v for k, v in patch.model_dump(exclude_unset=True).items()
              if v is not None or k in ("blog_description", "default_og_image_id")}
    with transactional(db):
        row = db.get(PostSettings, POST_SETTINGS_ID, with_for_update=True)
        if row is None:
            row = PostSettings(id=POST_SETTINGS_ID, **{**DEFAULTS, **values})
            db.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)
    return row
