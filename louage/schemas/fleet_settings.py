# louage/schemas/fleet_settings.py
from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional


class SettingsOut(BaseModel):
    fuel_price_reference: Decimal
    driver_percentage: Decimal
    oil_change_interval_km: int
    language: str
    theme: str
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class SettingsUpdate(BaseModel):
    fuel_price_reference: Optional[Decimal] = Field(None, ge=0)
    driver_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    oil_change_interval_km: Optional[int] = Field(None, gt=0)
    owner_password: Optional[str] = None
    language: Optional[Literal["ar", "fr"]] = None
    theme: Optional[Literal["light", "dark"]] = None
