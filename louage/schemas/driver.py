# louage/schemas/driver.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class DriverCreate(BaseModel):
    name: str
    password: str
    vehicle_id: int


class DriverOut(BaseModel):
    id: int
    name: str
    vehicle_id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
