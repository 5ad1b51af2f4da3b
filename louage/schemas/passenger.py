# louage/schemas/passenger.py
from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional
from louage.models.passenger import Direction


class PassengerCreate(BaseModel):
    name: str
    phone: str
    direction: Direction
    travel_date: date
    vehicle_id: Optional[int] = None   # drivers always book on their own vehicle
    seats_count: int = 1


class PassengerOut(BaseModel):
    id: int
    name: str
    phone: str
    direction: Direction
    travel_date: date
    vehicle_id: int
    seats_count: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class SeatAvailabilityOut(BaseModel):
    vehicle_id: int
    travel_date: date
    direction: Direction
    capacity: int
    occupied: int
    remaining: int


class DaySeatsOut(BaseModel):
    vehicle_id: int
    travel_date: date
    outbound: SeatAvailabilityOut
    inbound: SeatAvailabilityOut
