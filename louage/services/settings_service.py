# louage/services/settings_service.py
"""
Fleet settings singleton: get-or-init on read, in-place update by the owner.
"""

from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from louage.config import settings
from louage.exceptions import ValidationError
from louage.models.fleet_settings import FleetSettings, SETTINGS_ID
from louage.services.change_feed import change_feed
from louage.utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = (
    "fuel_price_reference", "driver_percentage", "oil_change_interval_km",
    "owner_password", "language", "theme",
)


def default_settings() -> dict:
    return {
        "fuel_price_reference": settings.DEFAULT_FUEL_PRICE,
        "driver_percentage": settings.DEFAULT_DRIVER_PERCENTAGE,
        "oil_change_interval_km": settings.DEFAULT_OIL_CHANGE_INTERVAL_KM,
        "owner_password": settings.DEFAULT_OWNER_PASSWORD,
        "language": settings.DEFAULT_LANGUAGE,
        "theme": settings.DEFAULT_THEME,
    }


def get_settings(db: Session) -> FleetSettings:
    """Return the settings row, creating it with defaults if absent."""
    row = db.query(FleetSettings).filter(FleetSettings.id == SETTINGS_ID).first()
    if row:
        return row

    row = FleetSettings(id=SETTINGS_ID, updated_at=datetime.utcnow(), **default_settings())
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # Another request initialised it first
        db.rollback()
        return db.query(FleetSettings).filter(FleetSettings.id == SETTINGS_ID).one()
    logger.info("Settings initialised with defaults")
    return row


def update_settings(db: Session, changes: dict) -> FleetSettings:
    row = get_settings(db)
    changes = {k: v for k, v in changes.items() if v is not None}
    for field in changes:
        if field not in EDITABLE_FIELDS:
            raise ValidationError(field, f"'{field}' is not a settings field")

    pct = changes.get("driver_percentage")
    if pct is not None and not (0 <= pct <= 100):
        raise ValidationError("driver_percentage", "driver_percentage must be between 0 and 100")
    interval = changes.get("oil_change_interval_km")
    if interval is not None and interval <= 0:
        raise ValidationError("oil_change_interval_km", "oil_change_interval_km must be positive")
    if "owner_password" in changes and not changes["owner_password"].strip():
        raise ValidationError("owner_password", "owner_password cannot be empty")

    for field, value in changes.items():
        setattr(row, field, value)
    row.updated_at = datetime.utcnow()
    db.commit()
    change_feed.notify("settings")
    logger.info(f"Settings updated: {sorted(k for k in changes if k != 'owner_password')}")
    return row
