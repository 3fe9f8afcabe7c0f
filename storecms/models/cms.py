# storecms/models/cms.py
# CMS content models: Page, Post (+ taxonomies), PostRevision, PostSettings
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean, Column, Enum, ForeignKey, Index, Integer, String, Table, Text, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storecms.db.base import Base
from storecms.db.types import JSONDocument, UTCDateTime, new_id, utcnow

CONTENT_STATUSES = ("draft", "scheduled", "published", "archived")


def _status_enum() -> Enum:
    return Enum(
        *CONTENT_STATUSES,
        name="content_status",
        create_constraint=True,
        validate_strings=True,
        native_enum=False,
    )


class Page(Base):
    __tablename__ = "pages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(200), unique=True)

    # legacy HTML (pre-block era), stored sanitized
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # {"version": 1, "blocks": [...]}
    content_json: Mapped[Optional[dict]] = mapped_column(JSONDocument, nullable=True)

    template: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    canonical_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    og_image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    custom_css: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_home: Mapped[bool] = mapped_column(Boolean, default=False)
    is_shop: Mapped[bool] = mapped_column(Boolean, default=False)

    status: Mapped[str] = mapped_column(_status_enum(), default="draft")
    published_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    scheduled_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    show_in_nav: Mapped[bool] = mapped_column(Boolean, default=False)
    nav_order: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        # at most one home / one shop page; the repository clears before it sets
        Index(
            "uq_pages_single_home", "is_home", unique=True,
            sqlite_where=text("is_home = 1"), postgresql_where=text("is_home = TRUE"),
        ),
        Index(
            "uq_pages_single_shop", "is_shop", unique=True,
            sqlite_where=text("is_shop = 1"), postgresql_where=text("is_shop = TRUE"),
        ),
        Index("ix_pages_status_nav_order", "status", "nav_order"),
    )


post_category_map = Table(
    "post_category_map",
    Base.metadata,
    Column("post_id", String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", String(36), ForeignKey("post_categories.id", ondelete="CASCADE"), primary_key=True),
)

post_tag_map = Table(
    "post_tag_map",
    Base.metadata,
    Column("post_id", String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("post_tags.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    __tablename__ = "post_categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(160))
    slug: Mapped[str] = mapped_column(String(200), unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    posts: Mapped[list["Post"]] = relationship(
        "Post", secondary=post_category_map, back_populates="categories"
    )


class Tag(Base):
    __tablename__ = "post_tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(160))
    slug: Mapped[str] = mapped_column(String(200), unique=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    posts: Mapped[list["Post"]] = relationship(
        "Post", secondary=post_tag_map, back_populates="tags"
    )


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(200), unique=True)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    content_json: Mapped[Optional[dict]] = mapped_column(JSONDocument, nullable=True)
    legacy_html: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(_status_enum(), default="draft")
    published_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    scheduled_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    # ids owned by collaborators outside this engine (admin users, media library)
    author_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    cover_image_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    og_image_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    reading_time_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    canonical_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    allow_index: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_follow: Mapped[bool] = mapped_column(Boolean, default=True)
    custom_css: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    categories: Mapped[list[Category]] = relationship(
        Category, secondary=post_category_map, back_populates="posts", order_by=Category.name
    )
    tags: Mapped[list[Tag]] = relationship(
        Tag, secondary=post_tag_map, back_populates="posts", order_by=Tag.name
    )
    revisions: Mapped[list["PostRevision"]] = relationship(
        "PostRevision",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PostRevision.created_at",
    )

    __table_args__ = (
        Index("ix_posts_status_published_at", "status", "published_at"),
        Index("ix_posts_status_scheduled_at", "status", "scheduled_at"),
    )


class PostRevision(Base):
    """Immutable snapshot of a post taken when it is published."""

    __tablename__ = "post_revisions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), index=True)
    snapshot_json: Mapped[dict] = mapped_column(JSONDocument)
    created_by_user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    post: Mapped[Post] = relationship(Post, back_populates="revisions")


POST_SETTINGS_ID = "default"


class PostSettings(Base):
    __tablename__ = "post_settings"

    # single row, fixed key: concurrent upserts collide on the PK instead of duplicating
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=POST_SETTINGS_ID)
    posts_per_page: Mapped[int] = mapped_column(Integer, default=12)
    blog_title: Mapped[str] = mapped_column(String(255), default="Blog")
    blog_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    default_og_image_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    rss_enabled: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
