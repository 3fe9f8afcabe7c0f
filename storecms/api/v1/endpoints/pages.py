# =============================================================================
# Page Endpoints (CRUD, home/shop singletons, transitions)
# storecms/api/v1/endpoints/pages.py
# =============================================================================
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storecms.core.errors import NotFoundError
from storecms.db.session import get_db
from storecms.schemas.cms import PageCreate, PageOut, PageUpdate, ScheduleIn, SlugCheckOut
from storecms.services import page_service, slug_service

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get("", response_model=list[PageOut])
def list_pages(db: Session = Depends(get_db)):
    """All pages, ordered by navOrder ascending."""
    return page_service.list_pages(db)


@router.get("/home", response_model=PageOut)
def get_home(db: Session = Depends(get_db)):
    page = page_service.find_home(db)
    if page is None:
        raise NotFoundError("Home page")
    return page


@router.get("/shop", response_model=PageOut)
def get_shop(db: Session = Depends(get_db)):
    page = page_service.find_shop(db)
    if page is None:
        raise NotFoundError("Shop page")
    return page


@router.get("/check-slug", response_model=SlugCheckOut)
def check_slug(
    slug: str = Query(..., min_length=1, max_length=200),
    current_slug: str | None = Query(None, alias="currentSlug"),
    db: Session = Depends(get_db),
):
    return {"slug": slug, "available": slug_service.is_slug_available(db, "page", slug, current_slug)}


@router.get("/{page_id}", response_model=PageOut)
def get_page(page_id: str, db: Session = Depends(get_db)):
    return page_service.get_page(db, page_id)


@router.post("", response_model=PageOut, status_code=201)
def create_page(payload: PageCreate, db: Session = Depends(get_db)):
    return page_service.create_page(db, payload)


@router.put("/{page_id}", response_model=PageOut)
def update_page(page_id: str, patch: PageUpdate, db: Session = Depends(get_db)):
    return page_service.update_page(db, page_id, patch)


@router.delete("/{page_id}", status_code=204)
def delete_page(page_id: str, db: Session = Depends(get_db)):
    page_service.delete_page(db, page_id)
    return Response(status_code=204)


# ---- Transitions ----
@router.post("/{page_id}/publish", response_model=PageOut)
def publish_page(page_id: str, db: Session = Depends(get_db)):
    return page_service.publish_page(db, page_id)


@router.post("/{page_id}/unpublish", response_model=PageOut)
def unpublish_page(page_id: str, db: Session = Depends(get_db)):
    return page_service.unpublish_page(db, page_id)


@router.post("/{page_id}/schedule", response_model=PageOut)
def schedule_page(page_id: str, body: ScheduleIn, db: Session = Depends(get_db)):
    return page_service.schedule_page(db, page_id, body.scheduled_at)


@router.post("/{page_id}/archive", response_model=PageOut)
def archive_page(page_id: str, db: Session = Depends(get_db)):
    return page_service.archive_page(db, page_id)


# ---- Singletons ----
@router.post("/{page_id}/set-home", response_model=PageOut)
def set_home(page_id: str, db: Session = Depends(get_db)):
    return page_service.set_home(db, page_id)


@router.post("/{page_id}/set-shop", response_model=PageOut)
def set_shop(page_id: str, db: Session = Depends(get_db)):
    return page_service.set_shop(db, page_id)
