# storecms/schemas/cms.py
# Pydantic requests/responses for Pages, Posts, taxonomies, revisions and settings.
# Wire format is camelCase; attributes stay snake_case.
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storecms.utils.slugify import SLUG_PATTERN

ContentStatus = Literal["draft", "scheduled", "published", "archived"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _slug_field():
    return Field(None, max_length=200, pattern=SLUG_PATTERN)


# ---------- Page ----------
class PageCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = _slug_field()
    content: Optional[str] = None
    # validated by the service so the error can name the offending block
    content_json: Optional[Any] = None
    template: Optional[str] = Field(None, max_length=64)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = Field(None, max_length=512)
    og_image: Optional[str] = Field(None, max_length=512)
    custom_css: Optional[str] = None
    is_home: bool = False
    is_shop: bool = False
    status: ContentStatus = "draft"
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    show_in_nav: bool = False
    nav_order: int = 0


class PageUpdate(CamelModel):
    """Patch: only the keys present in the body are applied."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = _slug_field()
    content: Optional[str] = None
    content_json: Optional[Any] = None
    template: Optional[str] = Field(None, max_length=64)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = Field(None, max_length=512)
    og_image: Optional[str] = Field(None, max_length=512)
    custom_css: Optional[str] = None
    is_home: Optional[bool] = None
    is_shop: Optional[bool] = None
    status: Optional[ContentStatus] = None
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    show_in_nav: Optional[bool] = None
    nav_order: Optional[int] = None


class PageOut(CamelOut):
    id: str
    title: str
    slug: str
    content: Optional[str] = None
    content_json: Optional[dict] = None
    template: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    og_image: Optional[str] = None
    custom_css: Optional[str] = None
    is_home: bool
    is_shop: bool
    status: ContentStatus
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    show_in_nav: bool
    nav_order: int
    created_at: datetime
    updated_at: datetime


# ---------- Taxonomies ----------
class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=160)
    slug: Optional[str] = _slug_field()
    description: Optional[str] = None


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=160)
    slug: Optional[str] = _slug_field()
    description: Optional[str] = None


class CategoryOut(CamelOut):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime


class CategoryCountOut(CategoryOut):
    # only filled by ?withCounts=true
    post_count: Optional[int] = None


class TagCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=160)
    slug: Optional[str] = _slug_field()


class TagUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=160)
    slug: Optional[str] = _slug_field()


class TagOut(CamelOut):
    id: str
    name: str
    slug: str
    created_at: datetime


class TagCountOut(TagOut):
    post_count: Optional[int] = None


# ---------- Post ----------
class PostCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = _slug_field()
    excerpt: Optional[str] = None
    content_json: Optional[Any] = None
    legacy_html: Optional[str] = None
    status: ContentStatus = "draft"
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    author_id: Optional[str] = Field(None, max_length=36)
    cover_image_id: Optional[str] = Field(None, max_length=36)
    og_image_id: Optional[str] = Field(None, max_length=36)
    reading_time_minutes: Optional[int] = Field(None, gt=0)
    canonical_url: Optional[str] = Field(None, max_length=512)
    featured: bool = False
    allow_index: bool = True
    allow_follow: bool = True
    custom_css: Optional[str] = None
    category_ids: List[str] = Field(default_factory=list)
    tag_ids: List[str] = Field(default_factory=list)


class PostUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = _slug_field()
    excerpt: Optional[str] = None
    content_json: Optional[Any] = None
    legacy_html: Optional[str] = None
    status: Optional[ContentStatus] = None
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    author_id: Optional[str] = Field(None, max_length=36)
    cover_image_id: Optional[str] = Field(None, max_length=36)
    og_image_id: Optional[str] = Field(None, max_length=36)
    reading_time_minutes: Optional[int] = Field(None, gt=0)
    canonical_url: Optional[str] = Field(None, max_length=512)
    featured: Optional[bool] = None
    allow_index: Optional[bool] = None
    allow_follow: Optional[bool] = None
    custom_css: Optional[str] = None
    category_ids: Optional[List[str]] = None
    tag_ids: Optional[List[str]] = None


class PostOut(CamelOut):
    id: str
    title: str
    slug: str
    excerpt: Optional[str] = None
    content_json: Optional[dict] = None
    legacy_html: Optional[str] = None
    status: ContentStatus
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    author_id: Optional[str] = None
    cover_image_id: Optional[str] = None
    og_image_id: Optional[str] = None
    reading_time_minutes: Optional[int] = None
    canonical_url: Optional[str] = None
    featured: bool
    allow_index: bool
    allow_follow: bool
    custom_css: Optional[str] = None
    categories: List[CategoryOut] = Field(default_factory=list)
    tags: List[TagOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class PostListOut(CamelOut):
    data: List[PostOut]
    total: int
    page: int
    page_size: int


PostSort = Literal[
    "createdAt_asc", "createdAt_desc",
    "updatedAt_asc", "updatedAt_desc",
    "publishedAt_asc", "publishedAt_desc",
    "title_asc", "title_desc",
]


# ---------- Transitions ----------
class ScheduleIn(CamelModel):
    scheduled_at: datetime


# ---------- Revisions ----------
class PostRevisionOut(CamelOut):
    id: str
    post_id: str
    snapshot_json: dict
    created_by_user_id: Optional[str] = None
    created_at: datetime


# ---------- Settings ----------
class PostSettingsUpdate(CamelModel):
    posts_per_page: Optional[int] = Field(None, ge=1, le=100)
    blog_title: Optional[str] = Field(None, min_length=1, max_length=255)
    blog_description: Optional[str] = None
    default_og_image_id: Optional[str] = Field(None, max_length=36)
    rss_enabled: Optional[bool] = None


class PostSettingsOut(CamelOut):
    posts_per_page: int
    blog_title: str
    blog_description: Optional[str] = None
    default_og_image_id: Optional[str] = None
    rss_enabled: bool


# ---------- Misc ----------
class SlugCheckOut(CamelModel):
    slug: str
    available: bool
