# louage/models/driver.py
"""Driver accounts. Each one points at exactly one vehicle."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from louage.database import Base


class DriverAccount(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    password = Column(String(200), nullable=False)   # plaintext, login gate only
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<DriverAccount {self.name} vehicle={self.vehicle_id}>"
