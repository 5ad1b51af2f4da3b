"""Trip settlement + trip history."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from louage.database import get_db
from louage.exceptions import NotFound, ValidationError
from louage.schemas.trip import TripCreate, TripOut, TripVisibilityUpdate
from louage.services import settlement_service
from louage.services.session_gate import (
    UserSession, can_read_trip, ensure_vehicle_access, get_current_session, get_owner_session,
    scoped_vehicle_id,
)
from louage.services.settlement_service import TripInput

router = APIRouter()


@router.get("/trips", response_model=list[TripOut], summary="Trip history, newest first")
def list_trips(vehicle_id: int = None, limit: int = None, db: Session = Depends(get_db),
               user_session: UserSession = Depends(get_current_session)):
    return settlement_service.list_trips(
        db,
        vehicle_id=scoped_vehicle_id(user_session, vehicle_id),
        visible_only=not user_session.is_owner,
        limit=limit,
    )


@router.post("/trips", response_model=TripOut, status_code=201, summary="Record and settle a trip")
def record_trip(body: TripCreate, db: Session = Depends(get_db),
                user_session: UserSession = Depends(get_current_session)):
    """
    Computes driver_share and net_profit from the current driver percentage
    and adds km_traveled to the vehicle odometer. Send a request_id to make
    retries safe.
    """
    vehicle_id = body.vehicle_id
    if not user_session.is_owner and vehicle_id is None:
        vehicle_id = user_session.vehicle_id
    if vehicle_id is None:
        raise ValidationError("vehicle_id", "vehicle_id is required")
    ensure_vehicle_access(user_session, vehicle_id)
    trip_input = TripInput(vehicle_id=vehicle_id, **body.model_dump(exclude={"vehicle_id"}))
    trip = settlement_service.record_trip(db, trip_input)
    if not can_read_trip(user_session, trip):
        # Replay of a trip the owner has since hidden
        raise NotFound("trips", trip.id)
    return trip


@router.get("/trips/{trip_id}", response_model=TripOut)
def get_trip(trip_id: int, db: Session = Depends(get_db),
             user_session: UserSession = Depends(get_current_session)):
    trip = settlement_service.get_trip(db, trip_id)
    if not can_read_trip(user_session, trip):
        # Hidden trips look the same as missing ones to drivers
        raise NotFound("trips", trip_id)
    return trip


@router.put("/trips/{trip_id}/visibility", response_model=TripOut,
            summary="Owner — show or hide a trip from the driver")
def set_visibility(trip_id: int, body: TripVisibilityUpdate, db: Session = Depends(get_db),
                   _: UserSession = Depends(get_owner_session)):
    return settlement_service.set_visibility(db, trip_id, body.visible_to_driver)
