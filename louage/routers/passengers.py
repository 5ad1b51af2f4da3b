"""
Passenger reservations and seat availability.
POST/PUT return 409 with the remaining seat count when a leg would be overbooked.
"""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from louage.database import get_db
from louage.models.passenger import Direction
from louage.schemas.passenger import DaySeatsOut, PassengerCreate, PassengerOut, SeatAvailabilityOut
from louage.services import seat_ledger
from louage.services.session_gate import (
    UserSession, ensure_vehicle_access, get_current_session, scoped_vehicle_id,
)

router = APIRouter()


def _bind_vehicle(body: PassengerCreate, user_session: UserSession) -> PassengerCreate:
    if not user_session.is_owner and body.vehicle_id is None:
        body = body.model_copy(update={"vehicle_id": user_session.vehicle_id})
    ensure_vehicle_access(user_session, body.vehicle_id)
    return body


@router.get("/passengers", response_model=list[PassengerOut], summary="List reservations")
def list_passengers(travel_date: date = None, vehicle_id: int = None, direction: Direction = None,
                    db: Session = Depends(get_db), user_session: UserSession = Depends(get_current_session)):
    return seat_ledger.list_reservations(
        db, travel_date=travel_date,
        vehicle_id=scoped_vehicle_id(user_session, vehicle_id),
        direction=direction,
    )


@router.post("/passengers", response_model=PassengerOut, status_code=201, summary="Book seats")
def create_reservation(body: PassengerCreate, db: Session = Depends(get_db),
                       user_session: UserSession = Depends(get_current_session)):
    return seat_ledger.reserve(db, _bind_vehicle(body, user_session))


@router.put("/passengers/{reservation_id}", response_model=PassengerOut, summary="Edit a booking")
def update_reservation(reservation_id: int, body: PassengerCreate, db: Session = Depends(get_db),
                       user_session: UserSession = Depends(get_current_session)):
    ensure_vehicle_access(user_session, seat_ledger.get_reservation(db, reservation_id).vehicle_id)
    return seat_ledger.reserve(db, _bind_vehicle(body, user_session), reservation_id=reservation_id)


@router.delete("/passengers/{reservation_id}", summary="Cancel a booking")
def cancel_reservation(reservation_id: int, db: Session = Depends(get_db),
                       user_session: UserSession = Depends(get_current_session)):
    ensure_vehicle_access(user_session, seat_ledger.get_reservation(db, reservation_id).vehicle_id)
    seat_ledger.cancel(db, reservation_id)
    return {"status": "cancelled", "reservation_id": reservation_id}


@router.get("/seats", response_model=SeatAvailabilityOut, summary="Seats left on one leg")
def leg_availability(vehicle_id: int, travel_date: date, direction: Direction,
                     db: Session = Depends(get_db), user_session: UserSession = Depends(get_current_session)):
    ensure_vehicle_access(user_session, vehicle_id)
    return seat_ledger.availability(db, vehicle_id, travel_date, direction)


@router.get("/seats/day", response_model=DaySeatsOut, summary="Seats left on both legs of a day")
def day_availability(vehicle_id: int, travel_date: date,
                     db: Session = Depends(get_db), user_session: UserSession = Depends(get_current_session)):
    ensure_vehicle_access(user_session, vehicle_id)
    return {
        "vehicle_id": vehicle_id,
        "travel_date": travel_date,
        "outbound": seat_ledger.availability(db, vehicle_id, travel_date, Direction.OUTBOUND),
        "inbound": seat_ledger.availability(db, vehicle_id, travel_date, Direction.INBOUND),
    }
