"""Login / logout for the owner and for drivers."""

from typing import Optional
from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session
from louage.database import get_db
from louage.schemas.auth import DriverLogin, MeOut, OwnerLogin, SessionOut
from louage.services.registry_service import get_driver
from louage.services.session_gate import (
    SessionGate, UserSession, get_current_session, get_session_gate,
)

router = APIRouter()


@router.post("/auth/owner", response_model=SessionOut, summary="Log in as the fleet owner")
def login_owner(body: OwnerLogin, db: Session = Depends(get_db),
                gate: SessionGate = Depends(get_session_gate)):
    s = gate.login_as_owner(db, body.password)
    return SessionOut(token=s.token, role=s.role.value)


@router.post("/auth/driver", response_model=SessionOut, summary="Log in as a driver")
def login_driver(body: DriverLogin, db: Session = Depends(get_db),
                 gate: SessionGate = Depends(get_session_gate)):
    s = gate.login_as_driver(db, body.name, body.password)
    return SessionOut(token=s.token, role=s.role.value, driver_id=s.driver_id)


@router.post("/auth/logout", summary="End the current session")
def logout(x_session_token: Optional[str] = Header(None),
           gate: SessionGate = Depends(get_session_gate)):
    gate.logout(x_session_token)
    return {"status": "logged_out"}


@router.get("/auth/me", response_model=MeOut)
def whoami(user_session: UserSession = Depends(get_current_session), db: Session = Depends(get_db)):
    driver = get_driver(db, user_session.driver_id) if user_session.driver_id else None
    return MeOut(
        role=user_session.role.value,
        driver_id=user_session.driver_id,
        driver_name=driver.name if driver else None,
        vehicle_id=user_session.vehicle_id,
    )
