# louage/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class VehicleCreate(BaseModel):
    plate_number: str
    model: str = ""
    current_odometer: int = Field(0, ge=0)
    last_oil_change_odometer: Optional[int] = Field(None, ge=0)   # defaults to current_odometer


class VehicleOut(BaseModel):
    id: int
    plate_number: str
    model: str
    current_odometer: int
    last_oil_change_odometer: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class MaintenanceStatusOut(BaseModel):
    vehicle_id: int
    plate_number: str
    current_odometer: int
    last_oil_change_odometer: int
    km_since_oil_change: int
    oil_change_interval_km: int
    is_due: bool
