# louage/models/passenger.py
"""
Passenger seat reservations.
Keyed for capacity purposes by (vehicle_id, travel_date, direction), i.e. one leg.
"""

import enum
from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Index
from louage.database import Base


class Direction(str, enum.Enum):
    OUTBOUND = "outbound"   # origin → destination
    INBOUND = "inbound"     # destination → origin


class Passenger(Base):
    __tablename__ = "passengers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    direction = Column(String(10), nullable=False)
    travel_date = Column(Date, nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    seats_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    __table_args__ = (
        Index("ix_passengers_leg", "vehicle_id", "travel_date", "direction"),
    )

    def __repr__(self):
        return f"<Passenger {self.name} {self.direction} {self.travel_date} seats={self.seats_count}>"
