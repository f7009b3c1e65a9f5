"""
Shared fixtures for the booking engine test suite.

Most tests run against an in-memory SQLite database. Tests that need real
concurrent transactions use ``file_db_config``, a SQLite file under tmp_path,
because an in-memory database lives inside a single shared connection.
"""

from datetime import time
from decimal import Decimal

import pytest

from flightdesk.database.config import DatabaseConfig
from flightdesk.services import (
    BookingService,
    FlightManagementService,
    FlightQueryEngine,
    ReportAggregator,
    SeatInventoryManager,
)


@pytest.fixture
def db_config():
    """In-memory database with all tables created."""
    config = DatabaseConfig(database_url="sqlite:///:memory:", lock_timeout=5)
    config.create_tables()
    yield config
    config.close()


@pytest.fixture
def file_db_config(tmp_path):
    """File-backed SQLite database so every thread gets its own connection."""
    config = DatabaseConfig(database_url=f"sqlite:///{tmp_path / 'flightdesk.db'}", lock_timeout=30)
    config.create_tables()
    yield config
    config.close()


@pytest.fixture
def management(db_config):
    return FlightManagementService(db_config)


@pytest.fixture
def booking(db_config):
    return BookingService(db_config)


@pytest.fixture
def inventory(db_config):
    return SeatInventoryManager(db_config)


@pytest.fixture
def queries(db_config):
    return FlightQueryEngine(db_config)


@pytest.fixture
def reports(db_config):
    return ReportAggregator(db_config)


def register_fleet(management):
    """One plane per category: 100, 180 and 400 seats."""
    return {
        "regional": management.create_plane(
            {"name": "Sukhoi Superjet 100", "category": "Regional", "seats_count": 100}
        ),
        "medium": management.create_plane(
            {"name": "Airbus A320", "category": "Medium", "seats_count": 180}
        ),
        "long_haul": management.create_plane(
            {"name": "Boeing 777", "category": "Long-haul", "seats_count": 400}
        ),
    }


@pytest.fixture
def fleet(management):
    return register_fleet(management)


def flight_data(plane_id, flight_number="SU100", stops=None, departure_time=time(8, 0),
                free_seats=100, price="5000.00"):
    return {
        "flight_number": flight_number,
        "plane_id": plane_id,
        "stops": stops or ["Moscow", "Sochi"],
        "departure_time": departure_time,
        "free_seats": free_seats,
        "price": Decimal(price),
    }


@pytest.fixture
def make_flight(management, fleet):
    """Factory creating flights on the medium (180 seat) plane by default."""
    def _make(**overrides):
        plane_id = overrides.pop("plane_id", fleet["medium"].id)
        return management.create_flight(flight_data(plane_id, **overrides))
    return _make


@pytest.fixture
def payload():
    """Builder for flight create/update payloads."""
    return flight_data
