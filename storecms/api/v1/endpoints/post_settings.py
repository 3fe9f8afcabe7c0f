# storecms/api/v1/endpoints/post_settings.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storecms.db.session import get_db
from storecms.schemas.cms import PostSettingsOut, PostSettingsUpdate
from storecms.services import post_settings_service

router = APIRouter(prefix="/post-settings", tags=["post-settings"])


@router.get("", response_model=PostSettingsOut)
def get_post_settings(db: Session = Depends(get_db)):
    return post_settings_service.get_settings(db)


@router.put("", response_model=PostSettingsOut)
def put_post_settings(patch: PostSettingsUpdate, db: Session = Depends(get_db)):
    return post_settings_service.upsert_settings(db, patch)
