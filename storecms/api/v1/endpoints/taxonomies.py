# =============================================================================
# Post taxonomy Endpoints (categories, tags)
# storecms/api/v1/endpoints/taxonomies.py
# =============================================================================
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storecms.db.session import get_db
from storecms.schemas.cms import (
    CategoryCountOut, CategoryCreate, CategoryOut, CategoryUpdate, SlugCheckOut,
    TagCountOut, TagCreate, TagOut, TagUpdate,
)
from storecms.services import slug_service, taxonomy_service

categories_router = APIRouter(prefix="/post-categories", tags=["post-categories"])
tags_router = APIRouter(prefix="/post-tags", tags=["post-tags"])


def _counted(schema, item, post_count: int):
    return schema.model_validate(item).model_copy(update={"post_count": post_count})


# ---------- Categories ----------
@categories_router.get("", response_model=list[CategoryCountOut])
def list_categories(
    with_counts: bool = Query(False, alias="withCounts"),
    db: Session = Depends(get_db),
):
    if with_counts:
        return [_counted(CategoryCountOut, c, n) for c, n in taxonomy_service.list_categories_with_counts(db)]
    return taxonomy_service.list_categories(db)


@categories_router.get("/check-slug", response_model=SlugCheckOut)
def check_category_slug(
    slug: str = Query(..., min_length=1, max_length=200),
    current_slug: Optional[str] = Query(None, alias="currentSlug"),
    db: Session = Depends(get_db),
):
    return {"slug": slug, "available": slug_service.is_slug_available(db, "category", slug, current_slug)}


@categories_router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, db: Session = Depends(get_db)):
    return taxonomy_service.get_category(db, category_id)


@categories_router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return taxonomy_service.create_category(db, payload)


@categories_router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: str, patch: CategoryUpdate, db: Session = Depends(get_db)):
    return taxonomy_service.update_category(db, category_id, patch)


@categories_router.delete("/{category_id}", status_code=204)
def delete_category(category_id: str, db: Session = Depends(get_db)):
    taxonomy_service.delete_category(db, category_id)
    return Response(status_code=204)


# ---------- Tags ----------
@tags_router.get("", response_model=list[TagCountOut])
def list_tags(
    with_counts: bool = Query(False, alias="withCounts"),
    db: Session = Depends(get_db),
):
    if with_counts:
        return [_counted(TagCountOut, t, n) for t, n in taxonomy_service.list_tags_with_counts(db)]
    return taxonomy_service.list_tags(db)


@tags_router.get("/check-slug", response_model=SlugCheckOut)
def check_tag_slug(
    slug: str = Query(..., min_length=1, max_length=200),
    current_slug: Optional[str] = Query(None, alias="currentSlug"),
    db: Session = Depends(get_db),
):
    return {"slug": slug, "available": slug_service.is_slug_available(db, "tag", slug, current_slug)}


@tags_router.get("/{tag_id}", response_model=TagOut)
def get_tag(tag_id: str, db: Session = Depends(get_db)):
    return taxonomy_service.get_tag(db, tag_id)


@tags_router.post("", response_model=TagOut, status_code=201)
def create_tag(payload: TagCreate, db: Session = Depends(get_db)):
    return taxonomy_service.create_tag(db, payload)


@tags_router.put("/{tag_id}", response_model=TagOut)
def update_tag(tag_id: str, patch: TagUpdate, db: Session = Depends(get_db)):
    return taxonomy_service.update_tag(db, tag_id, patch)


@tags_router.delete("/{tag_id}", status_code=204)
def delete_tag(tag_id: str, db: Session = Depends(get_db)):
    taxonomy_service.delete_tag(db, tag_id)
    return Response(status_code=204)
