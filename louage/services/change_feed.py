# louage/services/change_feed.py
"""
Live change feed for the five collections.

Every committed mutation bumps the collection's version counter. WebSocket
subscribers wake up periodically, and whenever the version they last sent
differs from the current one they push the full, role-scoped record set again.
If the database cannot be read the subscriber sends {"status": "unavailable"}
once and keeps retrying; the next successful snapshot means it is back.
"""

import asyncio
import threading
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from louage.config import settings
from louage.database import SessionLocal
from louage.utils.logger import get_logger

logger = get_logger(__name__)

COLLECTIONS = ("vehicles", "drivers", "trips", "passengers", "settings")


class ChangeFeed:
    def __init__(self):
        self._versions = {name: 0 for name in COLLECTIONS}
        self._lock = threading.Lock()

    def notify(self, *collections: str):
        with self._lock:
            for name in collections:
                self._versions[name] += 1
        logger.debug(f"Feed bump: {', '.join(collections)}")

    def version(self, collection: str) -> int:
        with self._lock:
            return self._versions[collection]


change_feed = ChangeFeed()


def snapshot(db, collection: str, user_session):
    """Full current record set of one collection, as the given session may see it."""
    from louage.services import registry_service, seat_ledger, settings_service, settlement_service
    from louage.services.session_gate import scoped_vehicle_id
    from louage.schemas.driver import DriverOut
    from louage.schemas.fleet_settings import SettingsOut
    from louage.schemas.passenger import PassengerOut
    from louage.schemas.trip import TripOut
    from louage.schemas.vehicle import VehicleOut

    vehicle_id = scoped_vehicle_id(user_session, None)
    if collection == "vehicles":
        rows = registry_service.list_vehicles(db, vehicle_id=vehicle_id)
        return [VehicleOut.model_validate(v).model_dump(mode="json") for v in rows]
    if collection == "drivers":
        rows = registry_service.list_drivers(db, vehicle_id=vehicle_id)
        return [DriverOut.model_validate(d).model_dump(mode="json") for d in rows]
    if collection == "trips":
        rows = settlement_service.list_trips(db, vehicle_id=vehicle_id,
                                             visible_only=not user_session.is_owner)
        return [TripOut.model_validate(t).model_dump(mode="json") for t in rows]
    if collection == "passengers":
        rows = seat_ledger.list_reservations(db, vehicle_id=vehicle_id)
        return [PassengerOut.model_validate(p).model_dump(mode="json") for p in rows]
    if collection == "settings":
        return SettingsOut.model_validate(settings_service.get_settings(db)).model_dump(mode="json")
    raise ValueError(f"Unknown collection '{collection}'")


def _read_snapshot(collection: str, token: str, gate):
    db = SessionLocal()
    try:
        user_session = gate.resolve(db, token)
        if user_session is None:
            return None
        return snapshot(db, collection, user_session)
    finally:
        db.close()


async def stream_collection(websocket, collection: str, token: str, gate, feed: ChangeFeed = change_feed):
    """
    Push snapshots of one collection until the client goes away or the
    session is logged out. Raises WebSocketDisconnect from send_json.
    """
    last_version = None
    unavailable = False

    while True:
        version = feed.version(collection)
        if version != last_version:
            try:
                records = await run_in_threadpool(_read_snapshot, collection, token, gate)
            except SQLAlchemyError as e:
                if not unavailable:
                    logger.error(f"Feed '{collection}' cannot read database: {e}")
                    await websocket.send_json({"collection": collection, "status": "unavailable"})
                unavailable = True
            else:
                if records is None:
                    logger.info(f"Feed '{collection}' closed: session ended")
                    await websocket.close(code=4401)
                    return
                await websocket.send_json({
                    "collection": collection,
                    "status": "ok",
                    "version": version,
                    "records": records,
                })
                last_version = version
                unavailable = False

        await asyncio.sleep(settings.FEED_POLL_INTERVAL_SECONDS)
