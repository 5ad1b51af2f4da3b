"""Shared fixtures: an in-memory database per test and an API client bound to it."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from louage.database import create_tables, get_db
from louage.main import app
from louage.services import registry_service
from louage.services.session_gate import SessionGate

TRAVEL_DATE = date(2024, 5, 1)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def vehicle(db):
    return registry_service.create_vehicle(db, "123 TU 4567", "Peugeot Partner", current_odometer=1000)


@pytest.fixture
def other_vehicle(db):
    return registry_service.create_vehicle(db, "987 TU 6543", "Renault Kangoo", current_odometer=5000)


@pytest.fixture
def driver(db, vehicle):
    return registry_service.create_driver(db, "Sami", "sami-pass", vehicle.id)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.session_gate = SessionGate()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers(client):
    resp = client.post("/api/v1/auth/owner", json={"password": "admin"})
    assert resp.status_code == 200
    return {"X-Session-Token": resp.json()["token"]}


@pytest.fixture
def driver_headers(client, driver):
    resp = client.post("/api/v1/auth/driver", json={"name": "Sami", "password": "sami-pass"})
    assert resp.status_code == 200
    return {"X-Session-Token": resp.json()["token"]}
