# louage/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./louage.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to require X-API-Key on every call

    # ── Route & capacity ──────────────────────────────────────────────────
    ROUTE_ORIGIN: str = "Tunis"
    ROUTE_DESTINATION: str = "Jelma"
    SEAT_CAPACITY: int = 8          # Seats per leg (vehicle + date + direction)

    # ── Fleet settings defaults (written on first access) ─────────────────
    DEFAULT_FUEL_PRICE: Decimal = Decimal("2.500")
    DEFAULT_DRIVER_PERCENTAGE: Decimal = Decimal("20")
    DEFAULT_OIL_CHANGE_INTERVAL_KM: int = 8000
    DEFAULT_OWNER_PASSWORD: str = "admin"
    DEFAULT_LANGUAGE: str = "ar"
    DEFAULT_THEME: str = "light"

    # ── Change feed ───────────────────────────────────────────────────────
    FEED_POLL_INTERVAL_SECONDS: float = 1.0

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None   # Defaults to logs/ at the project root
    LOG_FILE: str = "louage.log"
    LOG_MAX_BYTES: int = 5 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 10
    LOG_SQL: bool = False           # Echo SQLAlchemy statements at INFO

    @property
    def ROUTE(self) -> dict:
        return {
            "outbound": {"from": self.ROUTE_ORIGIN, "to": self.ROUTE_DESTINATION},
            "inbound": {"from": self.ROUTE_DESTINATION, "to": self.ROUTE_ORIGIN},
        }

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
