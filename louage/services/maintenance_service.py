# louage/services/maintenance_service.py
"""
Oil-change tracking.
A vehicle is due once it has covered oil_change_interval_km since the
odometer reading recorded at its last oil change.
"""

from sqlalchemy.orm import Session
from louage.models.fleet_settings import FleetSettings
from louage.models.vehicle import Vehicle
from louage.services.change_feed import change_feed
from louage.services.registry_service import list_vehicles, require_vehicle
from louage.services.settings_service import get_settings
from louage.utils.logger import get_logger

logger = get_logger(__name__)


def km_since_oil_change(vehicle: Vehicle) -> int:
    return vehicle.current_odometer - vehicle.last_oil_change_odometer


def due_for_maintenance(vehicle: Vehicle, fleet_settings: FleetSettings) -> bool:
    return km_since_oil_change(vehicle) >= fleet_settings.oil_change_interval_km


def acknowledge_maintenance(vehicle: Vehicle) -> Vehicle:
    vehicle.last_oil_change_odometer = vehicle.current_odometer
    return vehicle


def maintenance_status(vehicle: Vehicle, fleet_settings: FleetSettings) -> dict:
    return {
        "vehicle_id": vehicle.id,
        "plate_number": vehicle.plate_number,
        "current_odometer": vehicle.current_odometer,
        "last_oil_change_odometer": vehicle.last_oil_change_odometer,
        "km_since_oil_change": km_since_oil_change(vehicle),
        "oil_change_interval_km": fleet_settings.oil_change_interval_km,
        "is_due": due_for_maintenance(vehicle, fleet_settings),
    }


def vehicles_due(db: Session) -> list[dict]:
    fleet_settings = get_settings(db)
    return [
        maintenance_status(v, fleet_settings)
        for v in list_vehicles(db)
        if due_for_maintenance(v, fleet_settings)
    ]


def record_oil_change(db: Session, vehicle_id: int) -> Vehicle:
    """Persist acknowledge_maintenance for one vehicle."""
    vehicle = require_vehicle(db, vehicle_id)
    # Single UPDATE so a concurrent odometer bump is not overwritten
    db.query(Vehicle).filter(Vehicle.id == vehicle_id).update(
        {Vehicle.last_oil_change_odometer: Vehicle.current_odometer},
        synchronize_session=False,
    )
    db.commit()
    db.refresh(vehicle)
    change_feed.notify("vehicles")
    logger.info(f"Oil change recorded: vehicle {vehicle.plate_number} at {vehicle.current_odometer} km")
    return vehicle
