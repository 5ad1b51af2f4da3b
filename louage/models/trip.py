# louage/models/trip.py
"""
Settled trips. Written once; only visible_to_driver changes afterwards.
Currency columns are exact decimals with 3 places (millimes).
"""

from sqlalchemy import Column, Integer, String, DateTime, Date, Numeric, Boolean, Text, ForeignKey
from louage.database import Base


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    trip_date = Column(Date, nullable=False, index=True)
    revenue = Column(Numeric(12, 3), nullable=False)
    km_traveled = Column(Integer, nullable=False, default=0)
    fuel_cost = Column(Numeric(12, 3), nullable=False)
    expenses = Column(Numeric(12, 3), nullable=False)
    expense_note = Column(Text)
    driver_share = Column(Numeric(12, 3), nullable=False)
    net_profit = Column(Numeric(12, 3), nullable=False)
    visible_to_driver = Column(Boolean, default=True, nullable=False)
    request_id = Column(String(100), unique=True)   # client idempotency key
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Trip {self.id} vehicle={self.vehicle_id} {self.trip_date} net={self.net_profit}>"
