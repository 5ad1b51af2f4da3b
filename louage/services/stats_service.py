# louage/services/stats_service.py
"""
Dashboard figures derived from settled trips.
Sums are done over Decimal values in Python so repeated aggregation stays exact
regardless of how the database stores NUMERIC columns.
"""

from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session
from louage.models.trip import Trip

ZERO = Decimal("0.000")


def trip_summary(db: Session, vehicle_id: Optional[int] = None) -> dict:
    q = db.query(Trip.revenue, Trip.driver_share, Trip.fuel_cost, Trip.expenses,
                 Trip.net_profit, Trip.km_traveled)
    if vehicle_id is not None:
        q = q.filter(Trip.vehicle_id == vehicle_id)
    rows = q.all()

    return {
        "vehicle_id": vehicle_id,
        "trip_count": len(rows),
        "total_km": sum(r.km_traveled for r in rows),
        "total_revenue": sum((r.revenue for r in rows), ZERO),
        "total_driver_share": sum((r.driver_share for r in rows), ZERO),
        "total_fuel_cost": sum((r.fuel_cost for r in rows), ZERO),
        "total_expenses": sum((r.expenses for r in rows), ZERO),
        "total_net_profit": sum((r.net_profit for r in rows), ZERO),
    }


def profit_trend(db: Session, limit: int = 7, vehicle_id: Optional[int] = None) -> list[dict]:
    """Net profit of the latest `limit` trips, oldest first (chart order)."""
    q = db.query(Trip.id, Trip.trip_date, Trip.net_profit)
    if vehicle_id is not None:
        q = q.filter(Trip.vehicle_id == vehicle_id)
    rows = q.order_by(Trip.trip_date.desc(), Trip.id.desc()).limit(limit).all()
    return [
        {"trip_id": r.id, "trip_date": r.trip_date, "net_profit": r.net_profit}
        for r in reversed(rows)
    ]
