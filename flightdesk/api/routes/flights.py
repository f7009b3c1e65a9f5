"""
Flight endpoints: CRUD, seat checks, load and the search queries.

Static paths (``/search/...``, ``/check-seats/...``, ``/load/...``) are
registered before ``/{flight_id}``.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...models.flight import FlightCreateModel
from ..dependencies import ServiceContainer, dump, get_services, ok

router = APIRouter(prefix="/flights", tags=["flights"])


@router.get("/search/nearest")
def nearest_flight(
    destination: str = Query(..., description="Stop the flight must serve"),
    min_free_seats: int = Query(1, alias="minFreeSeats", ge=0),
    services: ServiceContainer = Depends(get_services),
):
    return ok(dump(services.queries.find_nearest_flight(destination, min_free_seats)))


@router.get("/search/non-stop")
def non_stop_flights(services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.queries.get_non_stop_flights()))


@router.get("/search/most-expensive")
def most_expensive_flight(services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.queries.get_most_expensive_flight()))


@router.get("/search/replacement-candidates")
def replacement_candidates(
    min_free_seats_percentage: Optional[float] = Query(None, alias="minFreeSeatsPercentage", ge=0),
    services: ServiceContainer = Depends(get_services),
):
    threshold = min_free_seats_percentage
    if threshold is None:
        threshold = services.reports.replacement_threshold
    return ok(dump(services.queries.get_replacement_candidates(threshold)))


@router.get("/check-seats/{flight_number}")
def check_seats(flight_number: str, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.queries.check_seats(flight_number)))


@router.get("/load/{flight_number}")
def flight_load(
    flight_number: str,
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    services: ServiceContainer = Depends(get_services),
):
    return ok(dump(services.queries.get_flight_load(flight_number, start_date, end_date)))


@router.get("/plane/{plane_id}")
def flights_by_plane(plane_id: int, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.queries.list_flights_by_plane(plane_id)))


@router.get("")
def list_flights(services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.queries.list_flights()))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_flight(payload: FlightCreateModel, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.management.create_flight(payload)))


@router.get("/{flight_id}")
def get_flight(flight_id: int, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.queries.get_flight(flight_id)))


@router.put("/{flight_id}")
def update_flight(
    flight_id: int,
    payload: FlightCreateModel,
    services: ServiceContainer = Depends(get_services),
):
    return ok(dump(services.management.update_flight(flight_id, payload)))


@router.delete("/{flight_id}")
def delete_flight(flight_id: int, services: ServiceContainer = Depends(get_services)):
    services.management.delete_flight(flight_id)
    return ok(message="Flight deleted successfully")
