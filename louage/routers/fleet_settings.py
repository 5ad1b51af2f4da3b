"""Fleet settings — readable by every session, writable by the owner."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from louage.config import settings
from louage.database import get_db
from louage.schemas.fleet_settings import SettingsOut, SettingsUpdate
from louage.services import settings_service
from louage.services.session_gate import UserSession, get_current_session, get_owner_session

router = APIRouter()


@router.get("/settings", response_model=SettingsOut)
def read_settings(db: Session = Depends(get_db), _: UserSession = Depends(get_current_session)):
    return settings_service.get_settings(db)


@router.put("/settings", response_model=SettingsOut, summary="Owner — update fleet settings")
def write_settings(body: SettingsUpdate, db: Session = Depends(get_db),
                   _: UserSession = Depends(get_owner_session)):
    return settings_service.update_settings(db, body.model_dump(exclude_unset=True))


@router.get("/route", summary="The fixed route and per-leg seat capacity")
def route_info():
    return {**settings.ROUTE, "seat_capacity": settings.SEAT_CAPACITY}
