# louage/services/session_gate.py
"""
Session/role gate.

States per client: anonymous (no token) → owner | driver(driver_id) → anonymous
on logout. Tokens are opaque strings kept in memory by a SessionGate that lives
on app.state for the lifetime of the process; a restart logs everyone out.

Authorization:
  - owner  may do everything;
  - driver may book seats and record trips for its assigned vehicle only,
    may read only trips of that vehicle that are visible_to_driver,
    and may not touch settings, vehicles or driver accounts.
"""

import enum
import secrets
import threading
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from louage.database import get_db
from louage.exceptions import Forbidden, InvalidCredentials, NotAuthenticated
from louage.services.registry_service import find_driver_by_credentials, get_driver
from louage.services.settings_service import get_settings
from louage.utils.logger import get_logger

logger = get_logger(__name__)


class Role(str, enum.Enum):
    OWNER = "owner"
    DRIVER = "driver"


@dataclass(frozen=True)
class UserSession:
    token: str
    role: Role
    driver_id: Optional[int] = None
    vehicle_id: Optional[int] = None   # resolved from the driver account on every request

    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER


class SessionGate:
    def __init__(self):
        self._tokens: dict[str, tuple[Role, Optional[int]]] = {}
        self._lock = threading.Lock()

    def _issue(self, role: Role, driver_id: Optional[int] = None) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._tokens[token] = (role, driver_id)
        return token

    def login_as_owner(self, db: Session, password: str) -> UserSession:
        if password != get_settings(db).owner_password:
            logger.warning("Owner login rejected")
            raise InvalidCredentials()
        logger.info("Owner logged in")
        return UserSession(token=self._issue(Role.OWNER), role=Role.OWNER)

    def login_as_driver(self, db: Session, name: str, password: str) -> UserSession:
        driver = find_driver_by_credentials(db, name, password)
        if driver is None:
            logger.warning(f"Driver login rejected for name={name!r}")
            raise InvalidCredentials()
        logger.info(f"Driver logged in: {driver.name} (id={driver.id})")
        return UserSession(token=self._issue(Role.DRIVER, driver.id), role=Role.DRIVER,
                           driver_id=driver.id, vehicle_id=driver.vehicle_id)

    def logout(self, token: Optional[str]):
        """Always succeeds, known token or not."""
        with self._lock:
            dropped = self._tokens.pop(token, None) if token else None
        if dropped:
            logger.info(f"Logged out: role={dropped[0].value} driver={dropped[1]}")

    def resolve(self, db: Session, token: Optional[str]) -> Optional[UserSession]:
        """Current session for a token, or None when anonymous."""
        if not token:
            return None
        with self._lock:
            entry = self._tokens.get(token)
        if entry is None:
            return None

        role, driver_id = entry
        if role == Role.OWNER:
            return UserSession(token=token, role=role)

        driver = get_driver(db, driver_id)
        if driver is None:
            # Account deleted by the owner while logged in
            self.logout(token)
            return None
        return UserSession(token=token, role=role, driver_id=driver.id, vehicle_id=driver.vehicle_id)

    def clear(self):
        with self._lock:
            self._tokens.clear()


# ── Authorization helpers ─────────────────────────────────────────────────

def require_owner(user_session: UserSession):
    if not user_session.is_owner:
        raise Forbidden("Owner access required")


def ensure_vehicle_access(user_session: UserSession, vehicle_id: Optional[int]):
    if user_session.is_owner:
        return
    if vehicle_id != user_session.vehicle_id:
        raise Forbidden("Drivers can only act on their assigned vehicle")


def scoped_vehicle_id(user_session: UserSession, requested: Optional[int]) -> Optional[int]:
    """
    Vehicle filter to apply for a request. Owners get what they asked for
    (None = all vehicles); drivers always get their own vehicle.
    """
    if user_session.is_owner:
        return requested
    if requested is not None:
        ensure_vehicle_access(user_session, requested)
    return user_session.vehicle_id


def can_read_trip(user_session: UserSession, trip) -> bool:
    if user_session.is_owner:
        return True
    return trip.visible_to_driver and trip.vehicle_id == user_session.vehicle_id


# ── FastAPI dependencies ──────────────────────────────────────────────────

def get_session_gate(request: Request) -> SessionGate:
    return request.app.state.session_gate


def get_current_session(
    x_session_token: Optional[str] = Header(None),
    gate: SessionGate = Depends(get_session_gate),
    db: Session = Depends(get_db),
) -> UserSession:
    user_session = gate.resolve(db, x_session_token)
    if user_session is None:
        raise NotAuthenticated()
    return user_session


def get_owner_session(user_session: UserSession = Depends(get_current_session)) -> UserSession:
    require_owner(user_session)
    return user_session
