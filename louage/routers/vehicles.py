"""Vehicle registry + oil-change maintenance."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from louage.database import get_db
from louage.schemas.vehicle import MaintenanceStatusOut, VehicleCreate, VehicleOut
from louage.services import maintenance_service, registry_service
from louage.services.session_gate import (
    UserSession, ensure_vehicle_access, get_current_session, get_owner_session, scoped_vehicle_id,
)
from louage.services.settings_service import get_settings

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List vehicles")
def list_vehicles(db: Session = Depends(get_db), user_session: UserSession = Depends(get_current_session)):
    """Owners see the whole fleet, drivers only their own vehicle."""
    return registry_service.list_vehicles(db, vehicle_id=scoped_vehicle_id(user_session, None))


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Owner — add a vehicle")
def create_vehicle(body: VehicleCreate, db: Session = Depends(get_db),
                   _: UserSession = Depends(get_owner_session)):
    return registry_service.create_vehicle(
        db,
        plate_number=body.plate_number,
        model=body.model,
        current_odometer=body.current_odometer,
        last_oil_change_odometer=body.last_oil_change_odometer,
    )


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db),
                user_session: UserSession = Depends(get_current_session)):
    ensure_vehicle_access(user_session, vehicle_id)
    return registry_service.require_vehicle(db, vehicle_id)


@router.delete("/vehicles/{vehicle_id}", summary="Owner — remove a vehicle nothing references")
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db),
                   _: UserSession = Depends(get_owner_session)):
    registry_service.delete_vehicle(db, vehicle_id)
    return {"status": "removed", "vehicle_id": vehicle_id}


@router.get("/vehicles/{vehicle_id}/maintenance", response_model=MaintenanceStatusOut)
def vehicle_maintenance(vehicle_id: int, db: Session = Depends(get_db),
                        user_session: UserSession = Depends(get_current_session)):
    ensure_vehicle_access(user_session, vehicle_id)
    vehicle = registry_service.require_vehicle(db, vehicle_id)
    return maintenance_service.maintenance_status(vehicle, get_settings(db))


@router.post("/vehicles/{vehicle_id}/maintenance", response_model=VehicleOut,
             summary="Owner — record an oil change at the current odometer")
def acknowledge_maintenance(vehicle_id: int, db: Session = Depends(get_db),
                            _: UserSession = Depends(get_owner_session)):
    return maintenance_service.record_oil_change(db, vehicle_id)


@router.get("/maintenance/due", response_model=list[MaintenanceStatusOut],
            summary="Owner — vehicles due for an oil change")
def maintenance_due(db: Session = Depends(get_db), _: UserSession = Depends(get_owner_session)):
    return maintenance_service.vehicles_due(db)
