"""
Flight and fleet management.

Creates, updates and deletes flights while holding the capacity invariant
``0 <= free_seats <= plane.seats_count``, and guards plane deletion.
"""

import logging
from typing import List

from pydantic import ValidationError

from ..database.config import DatabaseConfig
from ..database.models import Flight
from ..database.repositories import FlightRepository, PlaneDirectory
from ..exceptions import (
    DuplicateResourceError,
    InputValidationError,
    NotFoundError,
    format_validation_error,
)
from ..models.flight import FlightCreateModel, FlightModel
from ..models.plane import PlaneCreateModel, PlaneModel

logger = logging.getLogger(__name__)


def _validated(model_cls, data):
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise InputValidationError(format_validation_error(e)) from e


class FlightManagementService:
    """Flight CRUD with capacity checks, plus plane registration and removal."""

    def __init__(self, db_config: DatabaseConfig):
        self.db = db_config

    def create_flight(self, data) -> FlightModel:
        """
        Create a flight.

        Args:
            data: FlightCreateModel or a mapping with the same fields

        Raises:
            InputValidationError: Invalid fields or free seats above plane capacity
            NotFoundError: Plane does not exist
            DuplicateResourceError: Flight number already exists
        """
        request = _validated(FlightCreateModel, data)

        with self.db.get_session_context() as session:
            flights = FlightRepository(session)
            self._check_capacity(PlaneDirectory(session), request)
            if flights.flight_number_taken(request.flight_number):
                raise DuplicateResourceError('Flight number already exists')

            flight = flights.create(Flight(**request.model_dump()))
            result = FlightModel.model_validate(flight)

        logger.info(f"Flight {result.flight_number} created with {result.free_seats} free seats")
        return result

    def update_flight(self, flight_id: int, data) -> FlightModel:
        """
        Replace every field of a flight.

        The row is locked for the update so it serializes with ticket sales.

        Raises:
            NotFoundError: Flight or plane does not exist
            InputValidationError: Invalid fields or free seats above plane capacity
            DuplicateResourceError: New flight number belongs to another flight
        """
        request = _validated(FlightCreateModel, data)

        with self.db.get_session_context() as session:
            flights = FlightRepository(session)
            current = flights.get_by_id(flight_id)
            if current is None:
                raise NotFoundError('Flight not found')
            flight = flights.get_for_update(current.flight_number)

            self._check_capacity(PlaneDirectory(session), request)
            if flights.flight_number_taken(request.flight_number, exclude_id=flight_id):
                raise DuplicateResourceError('Flight number already exists')

            result = FlightModel.model_validate(flights.update(flight, request.model_dump()))

        logger.info(f"Flight {result.flight_number} (id={flight_id}) updated")
        return result

    def delete_flight(self, flight_id: int) -> None:
        """
        Delete a flight.

        Raises:
            NotFoundError: Flight does not exist
            ReferentialConflictError: Tickets were sold for the flight
        """
        with self.db.get_session_context() as session:
            flights = FlightRepository(session)
            flight = flights.get_by_id(flight_id)
            if flight is None:
                raise NotFoundError('Flight not found')
            flight_number = flight.flight_number
            flights.delete(flight)

        logger.info(f"Flight {flight_number} (id={flight_id}) deleted")

    @staticmethod
    def _check_capacity(planes: PlaneDirectory, request: FlightCreateModel) -> None:
        plane = planes.require(request.plane_id)
        if request.free_seats > plane.seats_count:
            raise InputValidationError(
                f"Free seats cannot exceed plane capacity ({plane.seats_count})"
            )

    # Fleet

    def list_planes(self) -> List[PlaneModel]:
        with self.db.get_session_context(read_only=True) as session:
            return [PlaneModel.model_validate(p) for p in PlaneDirectory(session).list_all()]

    def get_plane(self, plane_id: int) -> PlaneModel:
        with self.db.get_session_context(read_only=True) as session:
            return PlaneModel.model_validate(PlaneDirectory(session).require(plane_id))

    def create_plane(self, data) -> PlaneModel:
        request = _validated(PlaneCreateModel, data)
        with self.db.get_session_context() as session:
            plane = PlaneDirectory(session).add(
                name=request.name,
                category=request.category.value,
                seats_count=request.seats_count,
            )
            result = PlaneModel.model_validate(plane)

        logger.info(f"Plane {result.name} registered with {result.seats_count} seats")
        return result

    def delete_plane(self, plane_id: int) -> None:
        """
        Remove a plane from the fleet.

        Raises:
            NotFoundError: Plane does not exist
            ReferentialConflictError: A flight still uses the plane
        """
        with self.db.get_session_context() as session:
            PlaneDirectory(session).delete(plane_id)

        logger.info(f"Plane {plane_id} deleted")


__all__ = ['FlightManagementService']
