"""Unit tests for the live collection feed."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import WebSocketDisconnect
from sqlalchemy.exc import OperationalError
from louage.services.change_feed import ChangeFeed, snapshot, stream_collection
from louage.services.session_gate import Role, UserSession
from louage.services.settlement_service import TripInput, record_trip, set_visibility


def make_socket(sends_before_disconnect):
    ws = MagicMock()
    ws.send_json = AsyncMock(side_effect=[None] * sends_before_disconnect + [WebSocketDisconnect()])
    ws.close = AsyncMock()
    return ws


class TestChangeFeed:
    def test_notify_bumps_versions(self):
        feed = ChangeFeed()
        feed.notify("trips", "vehicles")
        feed.notify("trips")

        assert feed.version("trips") == 2
        assert feed.version("vehicles") == 1
        assert feed.version("passengers") == 0

    @pytest.mark.asyncio
    async def test_sends_snapshot_again_after_change(self):
        feed = ChangeFeed()
        ws = make_socket(1)

        with patch("louage.services.change_feed._read_snapshot", return_value=[{"id": 1}]), \
             patch("louage.services.change_feed.asyncio.sleep",
                   new=AsyncMock(side_effect=lambda *_: feed.notify("trips"))):
            with pytest.raises(WebSocketDisconnect):
                await stream_collection(ws, "trips", "token", MagicMock(), feed=feed)

        first, second = [c.args[0] for c in ws.send_json.call_args_list]
        assert first == {"collection": "trips", "status": "ok", "version": 0, "records": [{"id": 1}]}
        assert second["version"] > first["version"]

    @pytest.mark.asyncio
    async def test_database_outage_reported_then_recovers(self):
        feed = ChangeFeed()
        ws = make_socket(1)
        outage = OperationalError("SELECT 1", {}, Exception("connection refused"))

        with patch("louage.services.change_feed._read_snapshot", side_effect=[outage, [{"id": 1}]]), \
             patch("louage.services.change_feed.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(WebSocketDisconnect):
                await stream_collection(ws, "trips", "token", MagicMock(), feed=feed)

        first, second = [c.args[0] for c in ws.send_json.call_args_list]
        assert first == {"collection": "trips", "status": "unavailable"}
        assert second["status"] == "ok"

    @pytest.mark.asyncio
    async def test_closes_when_session_ends(self):
        ws = make_socket(0)

        with patch("louage.services.change_feed._read_snapshot", return_value=None):
            await stream_collection(ws, "trips", "stale-token", MagicMock(), feed=ChangeFeed())

        ws.close.assert_awaited_once_with(code=4401)
        ws.send_json.assert_not_called()


class TestSnapshots:
    def test_driver_trip_snapshot_is_scoped(self, db, vehicle, other_vehicle, driver):
        from datetime import date
        from decimal import Decimal
        own = record_trip(db, TripInput(vehicle_id=vehicle.id, trip_date=date(2024, 5, 1), revenue=Decimal("10")))
        hidden = record_trip(db, TripInput(vehicle_id=vehicle.id, trip_date=date(2024, 5, 2), revenue=Decimal("10")))
        record_trip(db, TripInput(vehicle_id=other_vehicle.id, trip_date=date(2024, 5, 1), revenue=Decimal("10")))
        set_visibility(db, hidden.id, False)

        driver_session = UserSession(token="t", role=Role.DRIVER, driver_id=driver.id, vehicle_id=vehicle.id)
        owner_session = UserSession(token="o", role=Role.OWNER)

        assert [t["id"] for t in snapshot(db, "trips", driver_session)] == [own.id]
        assert len(snapshot(db, "trips", owner_session)) == 3

    def test_settings_snapshot_hides_password(self, db):
        data = snapshot(db, "settings", UserSession(token="o", role=Role.OWNER))
        assert "owner_password" not in data
        assert data["language"] == "ar"
