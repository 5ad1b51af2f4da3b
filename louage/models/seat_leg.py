# louage/models/seat_leg.py
"""
Aggregate seat counter per leg.
The ledger bumps occupied_seats with a conditional UPDATE so that two
concurrent reservations can never both take the last seat.
"""

from sqlalchemy import Column, Integer, String, Date, UniqueConstraint
from louage.database import Base


class SeatLeg(Base):
    __tablename__ = "seat_legs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, nullable=False)
    travel_date = Column(Date, nullable=False)
    direction = Column(String(10), nullable=False)
    occupied_seats = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint("vehicle_id", "travel_date", "direction", name="uq_seat_leg"),
    )

    def __repr__(self):
        return f"<SeatLeg v={self.vehicle_id} {self.travel_date} {self.direction} occupied={self.occupied_seats}>"
