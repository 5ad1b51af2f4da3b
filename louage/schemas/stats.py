# louage/schemas/stats.py
from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import Optional


class TripSummaryOut(BaseModel):
    vehicle_id: Optional[int] = None
    trip_count: int
    total_km: int
    total_revenue: Decimal
    total_driver_share: Decimal
    total_fuel_cost: Decimal
    total_expenses: Decimal
    total_net_profit: Decimal


class ProfitPointOut(BaseModel):
    trip_id: int
    trip_date: date
    net_profit: Decimal
