from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
from ..db.crud import settings as settings_crud
from ..db.schemas.settings import SettingsUpdate, SettingsResponse
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    try:
        return settings_crud.get_or_create_settings(db)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

@router.put("/", response_model=SettingsResponse)
def update_settings(settings_data: SettingsUpdate, db: Session = Depends(get_db)):
    try:
        settings = settings_crud.update_settings(db, settings_data)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    logger.info(f"Auto-assignment {'enabled' if settings.auto_assign_enabled else 'disabled'}")
    return settings
