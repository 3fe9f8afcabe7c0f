# storecms/services/singleton_service.py
# Home/shop page flags: at most one page each, reassigned with clear-then-set.
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Literal, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storecms.core.errors import ConflictError, NotFoundError
from storecms.db.session import transactional
from storecms.models.cms import Page

SingletonFlag = Literal["is_home", "is_shop"]

_INDEX_MARKERS = ("single_home", "single_shop", "pages.is_home", "pages.is_shop")


def is_singleton_integrity_error(exc: IntegrityError) -> bool:
    text = str(getattr(exc, "orig", exc)).lower()
    return any(marker in text for marker in _INDEX_MARKERS)


@contextmanager
def singleton_conflict_guard() -> Iterator[None]:
    """
    The loser of two concurrent claims on one flag hits the partial unique
    index; report it as a conflict.
    """
    try:
        yield
    except IntegrityError as exc:
        if is_singleton_integrity_error(exc):
            raise ConflictError("Another request changed the home/shop page; retry") from exc
        raise


def _clear_flag(db: Session, flag: SingletonFlag, *, keep_id: Optional[str]) -> None:
    column = getattr(Page, flag)
    stmt = update(Page).where(column == True)  # noqa: E712
    if keep_id is not None:
        stmt = stmt.where(Page.id != keep_id)
    db.execute(stmt.values({flag: False}))
    db.flush()


def claim_flag(db: Session, page: Page, flag: SingletonFlag) -> Page:
    """
    Clear ``flag`` from whichever page holds it, then set it on ``page``.
    Runs inside the caller's transaction; both steps commit together.
    """
    _clear_flag(db, flag, keep_id=page.id)
    setattr(page, flag, True)
    return page


def apply_singleton_flags(
    db: Session,
    page: Page,
    *,
    is_home: Optional[bool] = None,
    is_shop: Optional[bool] = None,
) -> Page:
    """
    Create/update hook. True moves the flag onto ``page``; an explicit
    False clears it on ``page`` alone; None leaves every page as it is.
    """
    for flag, value in (("is_home", is_home), ("is_shop", is_shop)):
        if value:
            claim_flag(db, page, flag)
        elif value is not None:
            setattr(page, flag, False)
    return page


def _set_singleton(db: Session, page_id: str, flag: SingletonFlag) -> Page:
    with singleton_conflict_guard(), transactional(db):
        page = db.scalar(select(Page).where(Page.id == page_id).with_for_update())
        if page is None:
            raise NotFoundError("Page", page_id)
        claim_flag(db, page, flag)
    return page


def set_home(db: Session, page_id: str) -> Page:
    return _set_singleton(db, page_id, "is_home")


def set_shop(db: Session, page_id: str) -> Page:
    return _set_singleton(db, page_id, "is_shop")


def find_home(db: Session) -> Optional[Page]:
    return db.scalar(select(Page).where(Page.is_home == True).limit(1))  # noqa: E712


def find_shop(db: Session) -> Optional[Page]:
    return db.scalar(select(Page).where(Page.is_shop == True).limit(1))  # noqa: E712
