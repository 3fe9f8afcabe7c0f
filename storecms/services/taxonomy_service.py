# storecms/services/taxonomy_service.py
# Post categories and tags. Deleting one removes its join rows only.
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple, Type, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storecms.core.errors import NotFoundError, ValidationError
from storecms.db.session import transactional
from storecms.models.cms import Category, Tag, post_category_map, post_tag_map
from storecms.schemas.cms import CategoryCreate, CategoryUpdate, TagCreate, TagUpdate
from storecms.services import slug_service

logger = logging.getLogger(__name__)

Taxonomy = Union[Category, Tag]


def _entity_class(model: Type[Taxonomy]) -> slug_service.EntityClass:
    return "category" if model is Category else "tag"


def _list(db: Session, model: Type[Taxonomy]) -> Sequence[Taxonomy]:
    return db.scalars(select(model).order_by(model.name.asc())).all()


def _list_with_counts(db: Session, model: Type[Taxonomy]) -> List[Tuple[Taxonomy, int]]:
    """Every row with the number of posts linked to it (any status), ordered by name."""
    join_table, fk = (
        (post_category_map, post_category_map.c.category_id)
        if model is Category
        else (post_tag_map, post_tag_map.c.tag_id)
    )
    post_count = func.count(join_table.c.post_id)
    stmt = (
        select(model, post_count)
        .outerjoin(join_table, fk == model.id)
        .group_by(model.id)
        .order_by(model.name.asc())
    )
    return [(item, count) for item, count in db.execute(stmt).all()]


def _get(db: Session, model: Type[Taxonomy], item_id: str) -> Taxonomy:
    item = db.get(model, item_id)
    if item is None:
        raise NotFoundError(model.__name__, item_id)
    return item


def _create(db: Session, model: Type[Taxonomy], payload: Union[CategoryCreate, TagCreate]) -> Taxonomy:
    cls = _entity_class(model)
    slug = slug_service.resolve_slug(db, cls, slug=payload.slug, source=payload.name)
    values = payload.model_dump(exclude={"slug"})
    item = model(slug=slug, **values)
    with slug_service.slug_conflict_guard(cls, slug), transactional(db):
        db.add(item)
    logger.info("%s created id=%s slug=%s", cls, item.id, item.slug)
    return item


def _update(db: Session, model: Type[Taxonomy], item_id: str, patch: Union[CategoryUpdate, TagUpdate]) -> Taxonomy:
    cls = _entity_class(model)
    item = _get(db, model, item_id)
    values = patch.model_dump(exclude_unset=True)
    for name in ("name", "slug"):
        if name in values and values[name] is None:
            raise ValidationError.for_field(name, f"{name} cannot be null")
    if "slug" in values:
        slug_service.assert_slug_available(db, cls, values["slug"], current_slug=item.slug)

    with slug_service.slug_conflict_guard(cls, values.get("slug")), transactional(db):
        for key, value in values.items():
            setattr(item, key, value)
    return item


def _delete(db: Session, model: Type[Taxonomy], item_id: str) -> None:
    item = _get(db, model, item_id)
    attr = "categories" if model is Category else "tags"
    linked = list(item.posts)
    with transactional(db):
        db.delete(item)
    # loaded posts still hold the deleted row in their collection
    for post in linked:
        db.expire(post, [attr])
    logger.info("%s deleted id=%s", _entity_class(model), item_id)


def resolve_ids(db: Session, model: Type[Taxonomy], ids: List[str], *, field: str) -> List[Taxonomy]:
    """Load taxonomy rows for a post assignment; unknown ids are a ValidationError."""
    unique_ids = list(dict.fromkeys(ids))
    if not unique_ids:
        return []
    found = {item.id: item for item in db.scalars(select(model).where(model.id.in_(unique_ids))).all()}
    missing = [i for i in unique_ids if i not in found]
    if missing:
        raise ValidationError.for_field(field, f"Unknown {field}: {', '.join(missing)}")
    return [found[i] for i in unique_ids]


# -------- Categories --------
def list_categories(db: Session) -> Sequence[Category]:
    return _list(db, Category)


def list_categories_with_counts(db: Session) -> List[Tuple[Category, int]]:
    return _list_with_counts(db, Category)


def get_category(db: Session, category_id: str) -> Category:
    return _get(db, Category, category_id)


def create_category(db: Session, payload: CategoryCreate) -> Category:
    return _create(db, Category, payload)


def update_category(db: Session, category_id: str, patch: CategoryUpdate) -> Category:
    return _update(db, Category, category_id, patch)


def delete_category(db: Session, category_id: str) -> None:
    _delete(db, Category, category_id)


# -------- Tags --------
def list_tags(db: Session) -> Sequence[Tag]:
    return _list(db, Tag)


def list_tags_with_counts(db: Session) -> List[Tuple[Tag, int]]:
    return _list_with_counts(db, Tag)


def get_tag(db: Session, tag_id: str) -> Tag:
    return _get(db, Tag, tag_id)


def create_tag(db: Session, payload: TagCreate) -> Tag:
    return _create(db, Tag, payload)


def update_tag(db: Session, tag_id: str, patch: TagUpdate) -> Tag:
    return _update(db, Tag, tag_id, patch)


def delete_tag(db: Session, tag_id: str) -> None:
    _delete(db, Tag, tag_id)
