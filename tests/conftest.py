"""
Shared fixtures for the IoT inventory test suite.

Provides:
- A temporary SQLite database per test, tables created
- A FastAPI ``TestClient`` wired to that database
- A raw ``Session`` and a ``Services`` container for service-level tests
- ``make_*`` factories that create entities through the API

Usage:
    def test_example(client, make_zone):
        zone = make_zone(name="Lab")
        assert client.get(f"{API}/zones/{zone['id']}").status_code == 200
"""
import itertools
import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from iot_inventory.database import make_engine, settings
from iot_inventory.main import create_app
from iot_inventory.models import Base
from iot_inventory.services import build_services

API = settings.api_prefix

# keep test output clean
logging.getLogger("iot_inventory").setLevel(logging.WARNING)

_seq = itertools.count(1)


# ========================== Database Fixtures ==============================


@pytest.fixture()
def engine(tmp_path):
    """SQLite file database with all tables created; fresh for every test."""
    engine = make_engine(f"sqlite:///{tmp_path / 'inventory.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture()
def services():
    return build_services(settings)


# ========================== API Fixtures ===================================


@pytest.fixture()
def app(engine):
    return create_app(engine)


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


def _post(client, collection, payload):
    response = client.post(f"{API}/{collection}", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def make_user(client):
    def factory(**overrides):
        n = next(_seq)
        payload = {
            "name": f"User {n}",
            "email": f"user{n}@example.com",
            "password": "secret123",
            "role": "technician",
        }
        payload.update(overrides)
        return _post(client, "users", payload)
    return factory


@pytest.fixture()
def make_zone(client):
    def factory(**overrides):
        n = next(_seq)
        payload = {"name": f"Zone {n}", "description": "test zone"}
        payload.update(overrides)
        return _post(client, "zones", payload)
    return factory


@pytest.fixture()
def make_sensor(client):
    def factory(**overrides):
        payload = {
            "type": "temperature",
            "unit": "°C",
            "model": "DHT22",
            "location": "Bench 1",
        }
        payload.update(overrides)
        return _post(client, "sensors", payload)
    return factory


@pytest.fixture()
def make_device(client, make_user, make_zone):
    def factory(**overrides):
        n = next(_seq)
        payload = {"serialNumber": f"SN-{n:05d}", "model": "ESP32"}
        if "ownerId" not in overrides:
            payload["ownerId"] = make_user()["id"]
        if "zoneId" not in overrides:
            payload["zoneId"] = make_zone()["id"]
        payload.update(overrides)
        return _post(client, "devices", payload)
    return factory


@pytest.fixture()
def make_reading(client):
    def factory(sensor_id, **overrides):
        payload = {"sensorId": sensor_id, "value": 21.5}
        payload.update(overrides)
        return _post(client, "readings", payload)
    return factory
