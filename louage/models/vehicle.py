# louage/models/vehicle.py
"""
Fleet vehicles.
current_odometer only grows (trip settlement adds km_traveled atomically);
last_oil_change_odometer is moved up to it when maintenance is acknowledged.
Plate numbers are display keys and are not required to be unique.
"""

from sqlalchemy import Column, Integer, String, DateTime
from louage.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate_number = Column(String(50), nullable=False, index=True)
    model = Column(String(100), nullable=False, default="")
    current_odometer = Column(Integer, default=0, nullable=False)
    last_oil_change_odometer = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Vehicle {self.plate_number} km={self.current_odometer}>"
