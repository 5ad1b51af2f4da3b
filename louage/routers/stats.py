"""Owner dashboard statistics."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from louage.database import get_db
from louage.schemas.stats import ProfitPointOut, TripSummaryOut
from louage.services import stats_service
from louage.services.session_gate import UserSession, get_owner_session

router = APIRouter()


@router.get("/stats/summary", response_model=TripSummaryOut, summary="Revenue / profit totals")
def get_summary(vehicle_id: int = None, db: Session = Depends(get_db),
                _: UserSession = Depends(get_owner_session)):
    return stats_service.trip_summary(db, vehicle_id=vehicle_id)


@router.get("/stats/profit-trend", response_model=list[ProfitPointOut],
            summary="Net profit of the latest trips, oldest first")
def get_profit_trend(limit: int = 7, vehicle_id: int = None, db: Session = Depends(get_db),
                     _: UserSession = Depends(get_owner_session)):
    return stats_service.profit_trend(db, limit=limit, vehicle_id=vehicle_id)
