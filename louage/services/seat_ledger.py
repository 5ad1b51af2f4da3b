# louage/services/seat_ledger.py
"""
Seat ledger: passenger reservations and the per-leg capacity rule.

A leg is (vehicle, travel date, direction). The seats booked on one leg never
exceed settings.SEAT_CAPACITY; the two directions of the same vehicle-day are
counted separately.

Concurrency: each leg has a seat_legs row holding its aggregate count. A
booking applies its seat delta with one conditional UPDATE
(occupied + delta <= capacity), so of two racing requests for the last seat
only one can match the WHERE clause. When the UPDATE matches nothing the
whole transaction is rolled back and CapacityExceeded is raised.
"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from louage.config import settings
from louage.exceptions import CapacityExceeded, NotFound, UnknownVehicle, ValidationError
from louage.models.passenger import Direction, Passenger
from louage.models.seat_leg import SeatLeg
from louage.models.vehicle import Vehicle
from louage.schemas.passenger import PassengerCreate
from louage.services.change_feed import change_feed
from louage.utils.logger import get_logger

logger = get_logger(__name__)


def _direction(value) -> str:
    return Direction(value).value


def occupied_seats(db: Session, vehicle_id: int, travel_date: date, direction,
                   exclude_reservation_id: Optional[int] = None) -> int:
    """Seats booked on one leg, optionally ignoring one reservation."""
    q = db.query(func.coalesce(func.sum(Passenger.seats_count), 0)).filter(
        Passenger.vehicle_id == vehicle_id,
        Passenger.travel_date == travel_date,
        Passenger.direction == _direction(direction),
    )
    if exclude_reservation_id is not None:
        q = q.filter(Passenger.id != exclude_reservation_id)
    return int(q.scalar())


def remaining_seats(db: Session, vehicle_id: int, travel_date: date, direction,
                    exclude_reservation_id: Optional[int] = None) -> int:
    return settings.SEAT_CAPACITY - occupied_seats(
        db, vehicle_id, travel_date, direction, exclude_reservation_id
    )


def availability(db: Session, vehicle_id: int, travel_date: date, direction) -> dict:
    occupied = occupied_seats(db, vehicle_id, travel_date, direction)
    return {
        "vehicle_id": vehicle_id,
        "travel_date": travel_date,
        "direction": Direction(direction),
        "capacity": settings.SEAT_CAPACITY,
        "occupied": occupied,
        "remaining": settings.SEAT_CAPACITY - occupied,
    }


def list_reservations(db: Session, travel_date: Optional[date] = None,
                      vehicle_id: Optional[int] = None, direction=None):
    q = db.query(Passenger)
    if travel_date is not None:
        q = q.filter(Passenger.travel_date == travel_date)
    if vehicle_id is not None:
        q = q.filter(Passenger.vehicle_id == vehicle_id)
    if direction is not None:
        q = q.filter(Passenger.direction == _direction(direction))
    return q.order_by(Passenger.travel_date, Passenger.id).all()


def get_reservation(db: Session, reservation_id: int) -> Passenger:
    passenger = db.query(Passenger).filter(Passenger.id == reservation_id).first()
    if passenger is None:
        raise NotFound("passengers", reservation_id)
    return passenger


def _validate(body: PassengerCreate):
    if not body.name or not body.name.strip():
        raise ValidationError("name", "Passenger name is required")
    if not body.phone or not body.phone.strip():
        raise ValidationError("phone", "Passenger phone is required")
    if body.vehicle_id is None:
        raise ValidationError("vehicle_id", "vehicle_id is required")
    if not (1 <= body.seats_count <= settings.SEAT_CAPACITY):
        raise ValidationError("seats_count",
                              f"seats_count must be between 1 and {settings.SEAT_CAPACITY}")


def _leg(db: Session, vehicle_id: int, travel_date: date, direction: str) -> SeatLeg:
    """
    Get or create the aggregate row for a leg. Must run before any other
    write of the transaction: a lost creation race rolls the session back.
    """
    filters = (SeatLeg.vehicle_id == vehicle_id,
               SeatLeg.travel_date == travel_date,
               SeatLeg.direction == direction)
    leg = db.query(SeatLeg).filter(*filters).first()
    if leg:
        return leg

    leg = SeatLeg(vehicle_id=vehicle_id, travel_date=travel_date, direction=direction,
                  occupied_seats=occupied_seats(db, vehicle_id, travel_date, direction))
    db.add(leg)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        leg = db.query(SeatLeg).filter(*filters).one()
    return leg


def _apply_delta(db: Session, leg: SeatLeg, delta: int) -> bool:
    """Atomically add delta seats to a leg. False if that would overbook it."""
    q = db.query(SeatLeg).filter(SeatLeg.id == leg.id)
    if delta > 0:
        q = q.filter(SeatLeg.occupied_seats + delta <= settings.SEAT_CAPACITY)
    updated = q.update({SeatLeg.occupied_seats: SeatLeg.occupied_seats + delta},
                       synchronize_session=False)
    return updated == 1


def reserve(db: Session, body: PassengerCreate, reservation_id: Optional[int] = None) -> Passenger:
    """
    Create a reservation, or overwrite reservation_id in place.
    Raises ValidationError, UnknownVehicle, NotFound or CapacityExceeded;
    nothing is written when it raises.
    """
    _validate(body)
    direction = _direction(body.direction)
    if db.query(Vehicle.id).filter(Vehicle.id == body.vehicle_id).first() is None:
        raise UnknownVehicle(body.vehicle_id)

    existing = get_reservation(db, reservation_id) if reservation_id is not None else None
    leg_key = (body.vehicle_id, body.travel_date, direction)
    old_key = ((existing.vehicle_id, existing.travel_date, existing.direction)
               if existing is not None else None)

    if existing is not None and old_key == leg_key:
        # Resize on the same leg: only the difference has to fit
        claimed = _apply_delta(db, _leg(db, *leg_key), body.seats_count - existing.seats_count)
    else:
        # Moving to another leg: the old leg row already exists, look it up first
        old_leg = _leg(db, *old_key) if existing is not None else None
        leg = _leg(db, *leg_key)
        if old_leg is not None:
            _apply_delta(db, old_leg, -existing.seats_count)
        claimed = _apply_delta(db, leg, body.seats_count)

    if not claimed:
        db.rollback()
        remaining = remaining_seats(db, *leg_key, exclude_reservation_id=reservation_id)
        logger.warning(
            f"Capacity exceeded: vehicle={body.vehicle_id} {body.travel_date} {direction} "
            f"requested={body.seats_count} remaining={remaining}"
        )
        raise CapacityExceeded(remaining)

    now = datetime.utcnow()
    passenger = existing or Passenger(created_at=now)
    passenger.name = body.name.strip()
    passenger.phone = body.phone.strip()
    passenger.direction = direction
    passenger.travel_date = body.travel_date
    passenger.vehicle_id = body.vehicle_id
    passenger.seats_count = body.seats_count
    passenger.updated_at = now
    if existing is None:
        db.add(passenger)
    db.commit()
    db.refresh(passenger)

    change_feed.notify("passengers")
    logger.info(
        f"Reservation {'updated' if existing else 'created'}: id={passenger.id} "
        f"vehicle={passenger.vehicle_id} {passenger.travel_date} {direction} "
        f"seats={passenger.seats_count}"
    )
    return passenger


def cancel(db: Session, reservation_id: int):
    """Delete a reservation and give its seats back to the leg."""
    passenger = get_reservation(db, reservation_id)
    leg = _leg(db, passenger.vehicle_id, passenger.travel_date, passenger.direction)
    _apply_delta(db, leg, -passenger.seats_count)
    db.delete(passenger)
    db.commit()
    change_feed.notify("passengers")
    logger.info(f"Reservation cancelled: id={reservation_id}")
