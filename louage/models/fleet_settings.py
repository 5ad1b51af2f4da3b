# louage/models/fleet_settings.py
"""
Fleet settings singleton (one row, id="global").
Created with defaults from config on first read; mutated in place by the owner.
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric
from louage.database import Base

SETTINGS_ID = "global"


class FleetSettings(Base):
    __tablename__ = "settings"

    id = Column(String(20), primary_key=True, default=SETTINGS_ID)
    fuel_price_reference = Column(Numeric(10, 3), nullable=False)
    driver_percentage = Column(Numeric(5, 2), nullable=False)
    oil_change_interval_km = Column(Integer, nullable=False)
    owner_password = Column(String(200), nullable=False)
    language = Column(String(2), nullable=False)   # ar | fr
    theme = Column(String(10), nullable=False)     # light | dark
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<FleetSettings driver%={self.driver_percentage} oil={self.oil_change_interval_km}km>"
