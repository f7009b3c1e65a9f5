"""
Read-only flight queries over the seat inventory.

This module implements the operational questions asked of the flight table:
- Nearest flight serving a destination with enough free seats
- Non-stop flights
- Most expensive flight
- Replacement candidates (aircraft oversized for current demand)
- Flight load over a travel-date range

Queries do not take the inventory lock and may observe values that are a
commit behind a concurrent sale (read-committed semantics).
"""

import logging
from datetime import date
from typing import List

from sqlalchemy import select

from ..database.config import DatabaseConfig
from ..database.models import Flight
from ..database.repositories import FlightRepository, PlaneDirectory, TicketRepository
from ..exceptions import InputValidationError, NotFoundError
from ..models.flight import (
    FlightLoadModel,
    FlightModel,
    ReplacementCandidateModel,
    SeatCheckModel,
)

logger = logging.getLogger(__name__)

DEFAULT_REPLACEMENT_THRESHOLD = 50.0


def free_seats_percentage(flight: Flight) -> float:
    """Share of the plane's seats still unsold, in percent, rounded to 2 decimals."""
    return round(flight.free_seats / flight.seats_count * 100, 2)


def build_flight_load(flight: Flight, tickets_sold: int) -> FlightLoadModel:
    """Combine the running counter with a date-scoped ticket count."""
    seats_count = flight.seats_count
    total_occupied = (seats_count - flight.free_seats) + tickets_sold
    return FlightLoadModel(
        flight_number=flight.flight_number,
        free_seats=flight.free_seats,
        seats_count=seats_count,
        tickets_sold=tickets_sold,
        total_occupied=total_occupied,
        load_percentage=round(total_occupied / seats_count * 100, 2),
    )


class FlightQueryEngine:
    """Stateless flight queries; every call runs in its own short session."""

    def __init__(self, db_config: DatabaseConfig):
        self.db = db_config

    def list_flights(self) -> List[FlightModel]:
        """All flights, earliest departure first."""
        with self.db.get_session_context(read_only=True) as session:
            return [FlightModel.model_validate(f) for f in FlightRepository(session).list_all()]

    def get_flight(self, flight_id: int) -> FlightModel:
        with self.db.get_session_context(read_only=True) as session:
            flight = FlightRepository(session).get_by_id(flight_id)
            if flight is None:
                raise NotFoundError('Flight not found')
            return FlightModel.model_validate(flight)

    def list_flights_by_plane(self, plane_id: int) -> List[FlightModel]:
        with self.db.get_session_context(read_only=True) as session:
            PlaneDirectory(session).require(plane_id)
            flights = FlightRepository(session).list_by_plane(plane_id)
            return [FlightModel.model_validate(f) for f in flights]

    def find_nearest_flight(self, destination: str, min_free_seats: int = 1) -> FlightModel:
        """
        Find the earliest-departing flight that stops at ``destination``.

        Any stop counts (origin, layover or final destination). Ties on
        departure time go to the lowest flight id.

        Args:
            destination: Stop name to look for
            min_free_seats: Minimum free seats the flight must still have

        Returns:
            FlightModel of the first match

        Raises:
            InputValidationError: Empty destination or negative seat requirement
            NotFoundError: No flight matches
        """
        destination = (destination or '').strip()
        if not destination:
            raise InputValidationError('Please provide destination')
        if min_free_seats < 0:
            raise InputValidationError('Minimum free seats cannot be negative')

        with self.db.get_session_context(read_only=True) as session:
            for flight in FlightRepository(session).list_with_free_seats(min_free_seats):
                if destination in flight.stops:
                    return FlightModel.model_validate(flight)

        raise NotFoundError('No flights found to the specified destination with available seats')

    def get_non_stop_flights(self) -> List[FlightModel]:
        """Flights with only an origin and a destination, earliest departure first."""
        with self.db.get_session_context(read_only=True) as session:
            return [
                FlightModel.model_validate(f)
                for f in FlightRepository(session).list_all()
                if len(f.stops) == 2
            ]

    def get_most_expensive_flight(self) -> FlightModel:
        """
        The flight with the highest price; ties go to the lowest id.

        Raises:
            NotFoundError: There are no flights
        """
        with self.db.get_session_context(read_only=True) as session:
            flight = session.scalar(
                select(Flight).order_by(Flight.price.desc(), Flight.id).limit(1)
            )
            if flight is None:
                raise NotFoundError('No flights found')
            return FlightModel.model_validate(flight)

    def get_replacement_candidates(
        self, min_free_seats_percentage: float = DEFAULT_REPLACEMENT_THRESHOLD
    ) -> List[ReplacementCandidateModel]:
        """
        Flights whose free-seat share reaches ``min_free_seats_percentage``.

        A high share means the assigned aircraft is oversized for demand and a
        smaller plane could fly the route.

        Returns:
            Candidates sorted by free-seat percentage, highest first
        """
        if min_free_seats_percentage < 0:
            raise InputValidationError('Free seats percentage cannot be negative')

        with self.db.get_session_context(read_only=True) as session:
            matches = [
                flight for flight in FlightRepository(session).list_all()
                if flight.free_seats * 100 >= min_free_seats_percentage * flight.seats_count
            ]
            matches.sort(key=lambda f: (-(f.free_seats / f.seats_count), f.id))

            return [
                ReplacementCandidateModel(
                    **FlightModel.model_validate(flight).model_dump(),
                    free_seats_percentage=free_seats_percentage(flight),
                )
                for flight in matches
            ]

    def get_flight_load(self, flight_number: str, start_date: date, end_date: date) -> FlightLoadModel:
        """
        Load of one flight for travel dates in ``[start_date, end_date]``.

        ``total_occupied = (seats_count - free_seats) + tickets_sold`` where
        ``tickets_sold`` only counts tickets in the date range while the first
        term reflects the all-time counter. Both terms are kept as they are.

        Raises:
            InputValidationError: start_date is after end_date
            NotFoundError: Flight does not exist
        """
        if start_date > end_date:
            raise InputValidationError('Start date must not be after end date')

        with self.db.get_session_context(read_only=True) as session:
            flight = FlightRepository(session).get_by_flight_number(flight_number)
            if flight is None:
                raise NotFoundError('Flight not found')
            tickets_sold = TicketRepository(session).count_for_flight_in_range(
                flight_number, start_date, end_date
            )
            return build_flight_load(flight, tickets_sold)

    def check_seats(self, flight_number: str) -> SeatCheckModel:
        """
        Free-seat availability of one flight.

        Raises:
            NotFoundError: Flight does not exist
        """
        with self.db.get_session_context(read_only=True) as session:
            flight = FlightRepository(session).get_by_flight_number(flight_number)
            if flight is None:
                raise NotFoundError('Flight not found')
            return SeatCheckModel(
                flight_number=flight.flight_number,
                free_seats=flight.free_seats,
                has_free_seats=flight.free_seats > 0,
            )


__all__ = [
    'FlightQueryEngine',
    'DEFAULT_REPLACEMENT_THRESHOLD',
    'free_seats_percentage',
    'build_flight_load',
]
