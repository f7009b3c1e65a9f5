"""
Session-bound repositories for planes, flights and tickets.

Each repository wraps one SQLAlchemy session and never commits: transaction
boundaries belong to the caller (normally ``DatabaseConfig.get_session_context``),
so a booking can combine ticket writes and seat adjustments in one unit of work.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .models import Flight, Plane, Ticket
from ..exceptions import NotFoundError, ReferentialConflictError

logger = logging.getLogger(__name__)


class PlaneDirectory:
    """Read access to the fleet, plus the delete guard used by plane management."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, plane_id: int) -> Optional[Plane]:
        return self.session.get(Plane, plane_id)

    def require(self, plane_id: int) -> Plane:
        plane = self.get(plane_id)
        if plane is None:
            raise NotFoundError('Plane not found')
        return plane

    def list_all(self) -> List[Plane]:
        return list(self.session.scalars(select(Plane).order_by(Plane.id)))

    def add(self, name: str, category: str, seats_count: int) -> Plane:
        plane = Plane(name=name, category=category, seats_count=seats_count)
        self.session.add(plane)
        self.session.flush()
        return plane

    def delete(self, plane_id: int) -> None:
        """
        Delete a plane.

        Raises:
            NotFoundError: No plane with this id
            ReferentialConflictError: The plane still flies at least one flight
        """
        plane = self.require(plane_id)
        in_use = self.session.scalar(
            select(func.count(Flight.id)).where(Flight.plane_id == plane_id)
        )
        if in_use:
            raise ReferentialConflictError('Cannot delete plane: It is used in existing flights')
        self.session.delete(plane)
        self.session.flush()


class FlightRepository:
    """CRUD and locking read access to flight rows."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, flight_id: int) -> Optional[Flight]:
        return self.session.get(Flight, flight_id)

    def get_by_flight_number(self, flight_number: str) -> Optional[Flight]:
        return self.session.scalar(
            select(Flight).where(Flight.flight_number == flight_number)
        )

    def get_for_update(self, flight_number: str) -> Optional[Flight]:
        """
        Load a flight holding an exclusive lock on its row until the
        surrounding transaction ends.
        """
        stmt = (
            select(Flight)
            .where(Flight.flight_number == flight_number)
            .with_for_update(of=Flight)
            .execution_options(populate_existing=True)
        )
        return self.session.scalar(stmt)

    def list_all(self) -> List[Flight]:
        stmt = select(Flight).order_by(Flight.departure_time, Flight.id)
        return list(self.session.scalars(stmt))

    def list_by_plane(self, plane_id: int) -> List[Flight]:
        stmt = (
            select(Flight)
            .where(Flight.plane_id == plane_id)
            .order_by(Flight.departure_time, Flight.id)
        )
        return list(self.session.scalars(stmt))

    def list_with_free_seats(self, min_free_seats: int) -> List[Flight]:
        """Flights with at least ``min_free_seats`` seats, earliest departure first."""
        stmt = (
            select(Flight)
            .where(Flight.free_seats >= min_free_seats)
            .order_by(Flight.departure_time, Flight.id)
        )
        return list(self.session.scalars(stmt))

    def flight_number_taken(self, flight_number: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(func.count(Flight.id)).where(Flight.flight_number == flight_number)
        if exclude_id is not None:
            stmt = stmt.where(Flight.id != exclude_id)
        return bool(self.session.scalar(stmt))

    def create(self, flight: Flight) -> Flight:
        self.session.add(flight)
        self.session.flush()
        self.session.refresh(flight)
        return flight

    def update(self, flight: Flight, values: dict) -> Flight:
        """Overwrite the given columns of a (normally locked) flight."""
        for field, value in values.items():
            setattr(flight, field, value)
        self.session.flush()
        self.session.refresh(flight)
        return flight

    def count_tickets(self, flight_number: str) -> int:
        return self.session.scalar(
            select(func.count(Ticket.id)).where(Ticket.flight_number == flight_number)
        ) or 0

    def delete(self, flight: Flight) -> None:
        """
        Delete a flight.

        Raises:
            ReferentialConflictError: Tickets were sold for this flight number
        """
        if self.count_tickets(flight.flight_number) > 0:
            raise ReferentialConflictError('Cannot delete flight: It has sold tickets')
        self.session.delete(flight)
        self.session.flush()


class TicketRepository:
    """CRUD access to ticket rows and the ticket-side aggregates."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        return self.session.get(Ticket, ticket_id)

    def get_for_update(self, ticket_id: int) -> Optional[Ticket]:
        """Load a ticket holding a lock on its row until the transaction ends."""
        stmt = (
            select(Ticket)
            .where(Ticket.id == ticket_id)
            .with_for_update(of=Ticket)
            .execution_options(populate_existing=True)
        )
        return self.session.scalar(stmt)

    def list_all(self) -> List[Ticket]:
        stmt = select(Ticket).order_by(Ticket.sale_time.desc(), Ticket.id.desc())
        return list(self.session.scalars(stmt))

    def list_by_flight(self, flight_number: str) -> List[Ticket]:
        stmt = (
            select(Ticket)
            .where(Ticket.flight_number == flight_number)
            .order_by(Ticket.sale_time.desc(), Ticket.id.desc())
        )
        return list(self.session.scalars(stmt))

    def list_by_flight_date_range(self, start_date: date, end_date: date) -> List[Ticket]:
        """Tickets whose travel date lies in ``[start_date, end_date]``."""
        stmt = (
            select(Ticket)
            .where(Ticket.flight_date.between(start_date, end_date))
            .order_by(Ticket.flight_date, Ticket.sale_time, Ticket.id)
        )
        return list(self.session.scalars(stmt))

    def list_by_sale_time_range(self, start: datetime, end: datetime) -> List[Ticket]:
        """Tickets sold in ``[start, end)``."""
        stmt = (
            select(Ticket)
            .where(Ticket.sale_time >= start, Ticket.sale_time < end)
            .order_by(Ticket.sale_time, Ticket.id)
        )
        return list(self.session.scalars(stmt))

    def count_for_flight_in_range(self, flight_number: str, start_date: date, end_date: date) -> int:
        stmt = select(func.count(Ticket.id)).where(
            Ticket.flight_number == flight_number,
            Ticket.flight_date.between(start_date, end_date),
        )
        return self.session.scalar(stmt) or 0

    def sales_by_counter(self, start: datetime, end: datetime) -> List[Tuple[int, int, Decimal]]:
        """
        Tickets sold in ``[start, end)`` grouped by counter.

        Returns:
            (counter_number, tickets_sold, total_revenue) rows, highest revenue first
        """
        revenue = func.sum(Flight.price).label('total_revenue')
        stmt = (
            select(Ticket.counter_number, func.count(Ticket.id), revenue)
            .join(Flight, Flight.flight_number == Ticket.flight_number)
            .where(Ticket.sale_time >= start, Ticket.sale_time < end)
            .group_by(Ticket.counter_number)
            .order_by(revenue.desc(), Ticket.counter_number)
        )
        return [
            (counter, count, Decimal(str(total or 0)).quantize(Decimal('0.01')))
            for counter, count, total in self.session.execute(stmt)
        ]

    def add(self, ticket: Ticket) -> Ticket:
        self.session.add(ticket)
        self.session.flush()
        return ticket

    def delete_by_id(self, ticket_id: int) -> int:
        """Delete a ticket by id and return the number of rows removed (0 or 1)."""
        result = self.session.execute(delete(Ticket).where(Ticket.id == ticket_id))
        return result.rowcount


__all__ = [
    'PlaneDirectory',
    'FlightRepository',
    'TicketRepository',
]
