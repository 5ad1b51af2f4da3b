"""Driver accounts — owner only."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from louage.database import get_db
from louage.schemas.driver import DriverCreate, DriverOut
from louage.services import registry_service
from louage.services.session_gate import UserSession, get_owner_session

router = APIRouter()


@router.get("/drivers", response_model=list[DriverOut])
def list_drivers(vehicle_id: int = None, db: Session = Depends(get_db),
                 _: UserSession = Depends(get_owner_session)):
    return registry_service.list_drivers(db, vehicle_id=vehicle_id)


@router.post("/drivers", response_model=DriverOut, status_code=201, summary="Create a driver account")
def create_driver(body: DriverCreate, db: Session = Depends(get_db),
                  _: UserSession = Depends(get_owner_session)):
    return registry_service.create_driver(db, body.name, body.password, body.vehicle_id)


@router.delete("/drivers/{driver_id}", summary="Delete a driver account")
def delete_driver(driver_id: int, db: Session = Depends(get_db),
                  _: UserSession = Depends(get_owner_session)):
    registry_service.delete_driver(db, driver_id)
    return {"status": "removed", "driver_id": driver_id}
