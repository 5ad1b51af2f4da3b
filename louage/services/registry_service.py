# louage/services/registry_service.py
"""
Vehicle and driver-account registry.
Drivers must point at an existing vehicle; a vehicle cannot be deleted
while any driver account, trip or booking still points at it.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from louage.exceptions import NotFound, UnknownVehicle, ValidationError, VehicleInUse
from louage.models.driver import DriverAccount
from louage.models.passenger import Passenger
from louage.models.trip import Trip
from louage.models.vehicle import Vehicle
from louage.services.change_feed import change_feed
from louage.utils.logger import get_logger

logger = get_logger(__name__)


# ── Vehicles ──────────────────────────────────────────────────────────────

def list_vehicles(db: Session, vehicle_id: Optional[int] = None):
    q = db.query(Vehicle)
    if vehicle_id is not None:
        q = q.filter(Vehicle.id == vehicle_id)
    return q.order_by(Vehicle.id).all()


def get_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
    """Find a vehicle by id. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()


def require_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = get_vehicle(db, vehicle_id)
    if vehicle is None:
        raise UnknownVehicle(vehicle_id)
    return vehicle


def create_vehicle(db: Session, plate_number: str, model: str = "",
                   current_odometer: int = 0, last_oil_change_odometer: Optional[int] = None) -> Vehicle:
    if not plate_number or not plate_number.strip():
        raise ValidationError("plate_number", "plate_number is required")
    if current_odometer < 0:
        raise ValidationError("current_odometer", "current_odometer cannot be negative")
    if last_oil_change_odometer is None:
        last_oil_change_odometer = current_odometer
    if not (0 <= last_oil_change_odometer <= current_odometer):
        raise ValidationError("last_oil_change_odometer",
                              "last_oil_change_odometer must be between 0 and current_odometer")

    vehicle = Vehicle(
        plate_number=plate_number.strip(),
        model=(model or "").strip(),
        current_odometer=current_odometer,
        last_oil_change_odometer=last_oil_change_odometer,
        created_at=datetime.utcnow(),
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    change_feed.notify("vehicles")
    logger.info(f"Vehicle registered: {vehicle.plate_number} (id={vehicle.id})")
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int):
    vehicle = require_vehicle(db, vehicle_id)
    drivers = db.query(DriverAccount).filter(DriverAccount.vehicle_id == vehicle_id).count()
    history = (db.query(Trip).filter(Trip.vehicle_id == vehicle_id).count()
               + db.query(Passenger).filter(Passenger.vehicle_id == vehicle_id).count())
    if drivers or history:
        logger.warning(f"Refused to delete vehicle {vehicle_id}: {drivers} driver(s), {history} record(s)")
        raise VehicleInUse(vehicle_id, drivers, history)
    db.delete(vehicle)
    db.commit()
    change_feed.notify("vehicles")
    logger.info(f"Vehicle removed: {vehicle.plate_number} (id={vehicle_id})")


# ── Driver accounts ───────────────────────────────────────────────────────

def list_drivers(db: Session, vehicle_id: Optional[int] = None):
    q = db.query(DriverAccount)
    if vehicle_id is not None:
        q = q.filter(DriverAccount.vehicle_id == vehicle_id)
    return q.order_by(DriverAccount.id).all()


def get_driver(db: Session, driver_id: int) -> Optional[DriverAccount]:
    return db.query(DriverAccount).filter(DriverAccount.id == driver_id).first()


def find_driver_by_credentials(db: Session, name: str, password: str) -> Optional[DriverAccount]:
    """Exact name + password match, as the login screen does."""
    return db.query(DriverAccount).filter(
        DriverAccount.name == name, DriverAccount.password == password
    ).first()


def create_driver(db: Session, name: str, password: str, vehicle_id: int) -> DriverAccount:
    if not name or not name.strip():
        raise ValidationError("name", "name is required")
    if not password:
        raise ValidationError("password", "password is required")
    require_vehicle(db, vehicle_id)

    driver = DriverAccount(name=name.strip(), password=password, vehicle_id=vehicle_id,
                           created_at=datetime.utcnow())
    db.add(driver)
    db.commit()
    db.refresh(driver)
    change_feed.notify("drivers")
    logger.info(f"Driver account created: {driver.name} → vehicle {vehicle_id}")
    return driver


def delete_driver(db: Session, driver_id: int):
    driver = get_driver(db, driver_id)
    if driver is None:
        raise NotFound("drivers", driver_id)
    db.delete(driver)
    db.commit()
    change_feed.notify("drivers")
    logger.info(f"Driver account removed: {driver.name} (id={driver_id})")
