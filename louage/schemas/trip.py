# louage/schemas/trip.py
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


class TripCreate(BaseModel):
    vehicle_id: Optional[int] = None   # forced to the driver's vehicle for driver sessions
    trip_date: date
    revenue: Decimal = Field(..., ge=0)
    km_traveled: int = Field(0, ge=0)
    fuel_cost: Decimal = Field(Decimal("0"), ge=0)
    expenses: Decimal = Field(Decimal("0"), ge=0)
    expense_note: Optional[str] = None
    request_id: Optional[str] = Field(None, max_length=100)   # retry-safe idempotency key


class TripOut(BaseModel):
    id: int
    vehicle_id: int
    trip_date: date
    revenue: Decimal
    km_traveled: int
    fuel_cost: Decimal
    expenses: Decimal
    expense_note: Optional[str]
    driver_share: Decimal
    net_profit: Decimal
    visible_to_driver: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class TripVisibilityUpdate(BaseModel):
    visible_to_driver: bool
