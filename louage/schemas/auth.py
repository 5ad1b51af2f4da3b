# louage/schemas/auth.py
from pydantic import BaseModel
from typing import Optional


class OwnerLogin(BaseModel):
    password: str


class DriverLogin(BaseModel):
    name: str
    password: str


class SessionOut(BaseModel):
    token: str
    role: str                       # owner | driver
    driver_id: Optional[int] = None


class MeOut(BaseModel):
    role: str
    driver_id: Optional[int] = None
    driver_name: Optional[str] = None
    vehicle_id: Optional[int] = None
