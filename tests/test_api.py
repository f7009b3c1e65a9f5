"""
Tests for the REST API: routes, status codes and the response envelope.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from flightdesk.api import create_app
from flightdesk.database.config import reset_database_config
from flightdesk.utils.config import AppConfig

FLIGHT = {
    "flight_number": "SU100",
    "stops": ["Moscow", "Sochi"],
    "departure_time": "08:00:00",
    "free_seats": 2,
    "price": "7500.00",
}

TICKET = {
    "counter_number": 1,
    "flight_number": "SU100",
    "flight_date": "2026-10-20",
    "sale_time": "2026-10-19T09:15:00",
}


@pytest.fixture
def app(db_config):
    return create_app(db_config=db_config, config=AppConfig())


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def flight(client, fleet):
    response = client.post("/flights", json={**FLIGHT, "plane_id": fleet["medium"].id})
    assert response.status_code == 201
    return response.json()["data"]


class TestFlightRoutes:
    """Flight CRUD endpoints."""

    def test_create_flight(self, flight, fleet):
        assert flight["flight_number"] == "SU100"
        assert flight["plane_id"] == fleet["medium"].id
        assert flight["price"] == "7500.00"
        assert flight["seats_count"] == 180

    def test_list_and_get(self, client, flight):
        listing = client.get("/flights").json()
        assert listing["success"] is True
        assert [f["flight_number"] for f in listing["data"]] == ["SU100"]

        single = client.get(f"/flights/{flight['id']}").json()
        assert single["data"]["stops"] == ["Moscow", "Sochi"]

    def test_get_missing_flight(self, client, fleet):
        response = client.get("/flights/999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Flight not found"}

    def test_create_above_capacity(self, client, fleet):
        response = client.post("/flights", json={**FLIGHT, "plane_id": fleet["regional"].id, "free_seats": 500})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "capacity" in response.json()["message"]

    def test_create_with_missing_field(self, client, fleet):
        body = {**FLIGHT, "plane_id": fleet["medium"].id}
        del body["price"]

        response = client.post("/flights", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "price" in response.json()["message"]

    def test_duplicate_flight_number(self, client, flight, fleet):
        response = client.post("/flights", json={**FLIGHT, "plane_id": fleet["long_haul"].id})
        assert response.status_code == 409

    def test_update_flight(self, client, flight, fleet):
        body = {**FLIGHT, "plane_id": fleet["medium"].id, "price": "8100.50"}

        response = client.put(f"/flights/{flight['id']}", json=body)

        assert response.status_code == 200
        assert response.json()["data"]["price"] == "8100.50"

    def test_delete_flight(self, client, flight):
        response = client.delete(f"/flights/{flight['id']}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(f"/flights/{flight['id']}").status_code == 404

    def test_delete_flight_with_tickets(self, client, flight):
        client.post("/tickets", json=TICKET)

        response = client.delete(f"/flights/{flight['id']}")

        assert response.status_code == 409
        assert response.json()["message"] == "Cannot delete flight: It has sold tickets"

    def test_flights_by_plane(self, client, flight, fleet):
        data = client.get(f"/flights/plane/{fleet['medium'].id}").json()["data"]
        assert [f["flight_number"] for f in data] == ["SU100"]

        assert client.get("/flights/plane/999").status_code == 404


class TestSearchRoutes:
    """Flight query endpoints."""

    def test_nearest(self, client, flight):
        response = client.get("/flights/search/nearest", params={"destination": "Sochi"})

        assert response.status_code == 200
        assert response.json()["data"]["flight_number"] == "SU100"

    def test_nearest_not_found(self, client, flight):
        response = client.get("/flights/search/nearest", params={"destination": "Omsk"})
        assert response.status_code == 404

    def test_nearest_without_destination(self, client, flight):
        response = client.get("/flights/search/nearest")

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_non_stop(self, client, flight):
        data = client.get("/flights/search/non-stop").json()["data"]
        assert [f["flight_number"] for f in data] == ["SU100"]

    def test_most_expensive(self, client, fleet):
        assert client.get("/flights/search/most-expensive").status_code == 404

    def test_replacement_candidates(self, client, flight):
        # 2 of 180 seats free
        data = client.get(
            "/flights/search/replacement-candidates", params={"minFreeSeatsPercentage": 1}
        ).json()["data"]
        assert data[0]["free_seats_percentage"] == 1.11

        data = client.get("/flights/search/replacement-candidates").json()["data"]
        assert data == []

    def test_check_seats(self, client, flight):
        response = client.get("/flights/check-seats/SU100")
        assert response.json()["data"] == {"flight_number": "SU100", "free_seats": 2, "has_free_seats": True}

    def test_load(self, client, flight):
        client.post("/tickets", json=TICKET)

        data = client.get(
            "/flights/load/SU100", params={"startDate": "2026-10-01", "endDate": "2026-10-31"}
        ).json()["data"]

        assert data["tickets_sold"] == 1
        assert data["total_occupied"] == 180

    def test_load_bad_range(self, client, flight):
        response = client.get(
            "/flights/load/SU100", params={"startDate": "2026-10-31", "endDate": "2026-10-01"}
        )
        assert response.status_code == 400


class TestTicketRoutes:
    """Ticket endpoints."""

    def test_sell_ticket(self, client, flight):
        response = client.post("/tickets", json=TICKET)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["flight_number"] == "SU100"
        assert body["data"]["price"] == "7500.00"
        assert client.get("/flights/check-seats/SU100").json()["data"]["free_seats"] == 1

    def test_sell_until_sold_out(self, client, flight):
        assert client.post("/tickets", json=TICKET).status_code == 201
        assert client.post("/tickets", json=TICKET).status_code == 201

        response = client.post("/tickets", json=TICKET)

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "No free seats available on this flight"}

    def test_sell_unknown_flight(self, client, flight):
        response = client.post("/tickets", json={**TICKET, "flight_number": "XX000"})
        assert response.status_code == 404

    def test_sell_invalid_body(self, client, flight):
        response = client.post("/tickets", json={**TICKET, "counter_number": 0})
        assert response.status_code == 400

    def test_cancel_ticket(self, client, flight):
        ticket = client.post("/tickets", json=TICKET).json()["data"]

        response = client.delete(f"/tickets/{ticket['id']}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get("/flights/check-seats/SU100").json()["data"]["free_seats"] == 2
        assert client.delete(f"/tickets/{ticket['id']}").status_code == 404

    def test_ticket_listings(self, client, flight):
        ticket = client.post("/tickets", json=TICKET).json()["data"]

        assert client.get(f"/tickets/{ticket['id']}").json()["data"]["id"] == ticket["id"]
        assert len(client.get("/tickets").json()["data"]) == 1
        assert len(client.get("/tickets/flight/SU100").json()["data"]) == 1

        in_range = client.get(
            "/tickets/date-range", params={"startDate": "2026-10-20", "endDate": "2026-10-20"}
        ).json()["data"]
        assert len(in_range) == 1

    def test_sales_by_counter(self, client, flight):
        client.post("/tickets", json=TICKET)
        client.post("/tickets", json={**TICKET, "counter_number": 3})

        data = client.get(
            "/tickets/sales-by-counter", params={"startDate": "2026-10-19", "endDate": "2026-10-19"}
        ).json()["data"]

        assert sorted(row["counter_number"] for row in data) == [1, 3]


class TestReportAndPlaneRoutes:
    """Report and fleet endpoints."""

    def test_general_report(self, client, flight):
        data = client.get("/reports/general").json()["data"]

        assert data["summary"]["totalFlights"] == 1
        assert data["summary"]["totalDirectFlights"] == 1
        assert data["mostExpensiveFlight"]["flight_number"] == "SU100"
        assert data["flightsForReplacement"] == []

    def test_sales_report(self, client, flight):
        client.post("/tickets", json=TICKET)

        data = client.get(
            "/reports/sales", params={"startDate": "2026-10-19", "endDate": "2026-10-19"}
        ).json()["data"]

        assert data["summary"]["totalTickets"] == 1
        assert data["summary"]["totalRevenue"] == "7500.00"
        assert data["salesByFlight"][0]["flight_number"] == "SU100"

    def test_sales_report_requires_dates(self, client, flight):
        assert client.get("/reports/sales").status_code == 400

    def test_flight_load_report(self, client, flight):
        data = client.get(
            "/reports/flight-load", params={"startDate": "2026-10-01", "endDate": "2026-10-31"}
        ).json()["data"]
        assert data[0]["flight_number"] == "SU100"

    def test_planes(self, client, fleet):
        data = client.get("/planes").json()["data"]
        assert [p["category"] for p in data] == ["Regional", "Medium", "Long-haul"]

        assert client.get(f"/planes/{fleet['regional'].id}").json()["data"]["seats_count"] == 100
        assert client.get("/planes/999").status_code == 404


class TestStorageErrors:
    """Storage failures leaving the services are translated by the app."""

    def test_lock_timeout_is_503(self, app, client, monkeypatch):
        def locked():
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(app.state.services.queries, "list_flights", locked)

        response = client.get("/flights")

        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_unique_violation_is_409(self, app, client, monkeypatch):
        def duplicate(data):
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: flight.flight_number"))

        monkeypatch.setattr(app.state.services.management, "create_flight", duplicate)

        response = client.post("/flights", json={**FLIGHT, "plane_id": 1})

        assert response.status_code == 409
        assert response.json()["message"] == "A record with this value already exists"

    def test_health(self, client):
        assert client.get("/health").json() == {"success": True}


class TestAppFactory:
    """Building the app on the global database."""

    def test_global_database_uses_configured_lock_timeout(self):
        reset_database_config()
        try:
            app = create_app(config=AppConfig(database_url="sqlite:///:memory:", db_lock_timeout=4))
            assert app.state.services.db.lock_timeout == 4
        finally:
            reset_database_config()
