# louage/services/settlement_service.py
"""
Trip settlement: turns raw trip revenue/costs into the driver's payout and
the owner's net profit, then records the trip and adds its distance to the
vehicle odometer.

All money is Decimal quantized to 3 places (millimes). The only operation that
can produce extra digits is the percentage split, which is rounded half-even.
A negative net profit is a loss-making trip, not an error.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from louage.exceptions import NotFound, UnknownVehicle, ValidationError
from louage.models.fleet_settings import FleetSettings
from louage.models.trip import Trip
from louage.models.vehicle import Vehicle
from louage.services.change_feed import change_feed
from louage.services.settings_service import get_settings
from louage.utils.logger import get_logger

logger = get_logger(__name__)

MILLIME = Decimal("0.001")
HUNDRED = Decimal("100")


def to_money(value) -> Decimal:
    """Exact 3-decimal amount. Floats go through str() so 2.5 stays 2.500."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(MILLIME, rounding=ROUND_HALF_EVEN)


@dataclass
class TripInput:
    vehicle_id: int
    trip_date: date
    revenue: Decimal
    km_traveled: int = 0
    fuel_cost: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    expense_note: Optional[str] = None
    request_id: Optional[str] = None


@dataclass
class Settlement:
    trip: Trip                # populated, not yet persisted
    odometer_delta: int       # km to add to the vehicle's current_odometer


def _validate(trip_input: TripInput):
    for field in ("revenue", "fuel_cost", "expenses"):
        if to_money(getattr(trip_input, field)) < 0:
            raise ValidationError(field, f"{field} cannot be negative")
    if trip_input.km_traveled is None or trip_input.km_traveled < 0:
        raise ValidationError("km_traveled", "km_traveled cannot be negative")
    if trip_input.trip_date is None:
        raise ValidationError("trip_date", "trip_date is required")


def settle(trip_input: TripInput, fleet_settings: FleetSettings, vehicle: Optional[Vehicle]) -> Settlement:
    """Pure computation. Raises UnknownVehicle when the vehicle did not resolve."""
    if vehicle is None:
        raise UnknownVehicle(trip_input.vehicle_id)
    _validate(trip_input)

    revenue = to_money(trip_input.revenue)
    fuel_cost = to_money(trip_input.fuel_cost)
    expenses = to_money(trip_input.expenses)
    driver_share = to_money(revenue * Decimal(fleet_settings.driver_percentage) / HUNDRED)
    net_profit = revenue - driver_share - fuel_cost - expenses

    trip = Trip(
        vehicle_id=vehicle.id,
        trip_date=trip_input.trip_date,
        revenue=revenue,
        km_traveled=trip_input.km_traveled,
        fuel_cost=fuel_cost,
        expenses=expenses,
        expense_note=trip_input.expense_note,
        driver_share=driver_share,
        net_profit=net_profit,
        visible_to_driver=True,
        request_id=trip_input.request_id,
    )
    return Settlement(trip=trip, odometer_delta=trip_input.km_traveled)


def _trip_by_request(db: Session, request_id: Optional[str]) -> Optional[Trip]:
    if not request_id:
        return None
    return db.query(Trip).filter(Trip.request_id == request_id).first()


def _replayed(stored: Trip, trip_input: TripInput) -> Trip:
    """The stored trip for a retried request_id, once the retry is shown to be the same trip."""
    if (stored.vehicle_id != trip_input.vehicle_id
            or stored.trip_date != trip_input.trip_date
            or to_money(stored.revenue) != to_money(trip_input.revenue)):
        logger.warning(f"request_id {trip_input.request_id} reused for a different trip (stored as trip {stored.id})")
        raise ValidationError("request_id", "request_id already used for a different trip")
    logger.info(f"Trip request {trip_input.request_id} already settled as trip {stored.id}")
    return stored


def record_trip(db: Session, trip_input: TripInput) -> Trip:
    """
    Settle and persist a trip, bumping the odometer in the same transaction.
    A retry carrying an already-stored request_id returns the stored trip
    and leaves the odometer alone; the vehicle, date and revenue must match.
    """
    already = _trip_by_request(db, trip_input.request_id)
    if already is not None:
        return _replayed(already, trip_input)

    vehicle = db.query(Vehicle).filter(Vehicle.id == trip_input.vehicle_id).first()
    result = settle(trip_input, get_settings(db), vehicle)
    result.trip.created_at = datetime.utcnow()

    db.add(result.trip)
    db.query(Vehicle).filter(Vehicle.id == vehicle.id).update(
        {Vehicle.current_odometer: Vehicle.current_odometer + result.odometer_delta},
        synchronize_session=False,
    )
    try:
        db.commit()
    except IntegrityError:
        # Concurrent retry with the same request_id won the insert
        db.rollback()
        already = _trip_by_request(db, trip_input.request_id)
        if already is None:
            raise
        return _replayed(already, trip_input)

    db.refresh(result.trip)
    db.refresh(vehicle)
    change_feed.notify("trips", "vehicles")
    logger.info(
        f"Trip settled: id={result.trip.id} vehicle={vehicle.id} revenue={result.trip.revenue} "
        f"driver_share={result.trip.driver_share} net={result.trip.net_profit} "
        f"odometer +{result.odometer_delta} → {vehicle.current_odometer}"
    )
    return result.trip


def get_trip(db: Session, trip_id: int) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if trip is None:
        raise NotFound("trips", trip_id)
    return trip


def list_trips(db: Session, vehicle_id: Optional[int] = None, visible_only: bool = False,
               limit: Optional[int] = None):
    """Newest first."""
    q = db.query(Trip)
    if vehicle_id is not None:
        q = q.filter(Trip.vehicle_id == vehicle_id)
    if visible_only:
        q = q.filter(Trip.visible_to_driver.is_(True))
    q = q.order_by(Trip.trip_date.desc(), Trip.id.desc())
    if limit:
        q = q.limit(limit)
    return q.all()


def set_visibility(db: Session, trip_id: int, visible: bool) -> Trip:
    trip = get_trip(db, trip_id)
    trip.visible_to_driver = visible
    db.commit()
    change_feed.notify("trips")
    logger.info(f"Trip {trip_id} visible_to_driver={visible}")
    return trip
