"""
Ticket sales and cancellations.

A sale is one transaction: lock the flight, take one seat, insert the ticket.
A cancellation is the mirror image. Either every write of the transaction is
committed or none is, so a ticket without its seat adjustment (or the reverse)
is never observable.
"""

import logging
from datetime import date, datetime
from typing import List

from pydantic import ValidationError

from ..database.config import DatabaseConfig
from ..database.models import Ticket
from ..database.repositories import TicketRepository
from ..exceptions import InputValidationError, NotFoundError, format_validation_error
from ..models.ticket import TicketCreateModel, TicketModel
from .seat_inventory import SeatInventoryManager

logger = logging.getLogger(__name__)


class BookingService:
    """Orchestrates ticket writes and seat adjustments inside one transaction."""

    def __init__(self, db_config: DatabaseConfig, inventory: SeatInventoryManager = None):
        self.db = db_config
        self.inventory = inventory or SeatInventoryManager(db_config)

    def sell_ticket(
        self,
        counter_number: int,
        flight_number: str,
        flight_date: date,
        sale_time: datetime,
    ) -> TicketModel:
        """
        Sell one ticket on a flight.

        Args:
            counter_number: Point-of-sale counter (>= 1)
            flight_number: Flight to sell on
            flight_date: Date of travel
            sale_time: Timestamp of the sale

        Returns:
            TicketModel of the created ticket

        Raises:
            NotFoundError: Flight does not exist
            CapacityExhaustedError: Flight has no free seats
            InputValidationError: A field is missing or out of range
        """
        try:
            request = TicketCreateModel(
                counter_number=counter_number,
                flight_number=flight_number,
                flight_date=flight_date,
                sale_time=sale_time,
            )
        except ValidationError as e:
            raise InputValidationError(format_validation_error(e)) from e

        with self.db.get_session_context() as session:
            free_seats = self.inventory.adjust_free_seats(request.flight_number, -1, session=session)

            ticket = TicketRepository(session).add(Ticket(
                counter_number=request.counter_number,
                flight_number=request.flight_number,
                flight_date=request.flight_date,
                sale_time=request.sale_time,
            ))
            result = TicketModel.from_ticket(ticket)

        logger.info(
            f"Ticket {result.id} sold on {result.flight_number} at counter "
            f"{result.counter_number} ({free_seats} seats left)"
        )
        return result

    def sell(self, request: TicketCreateModel) -> TicketModel:
        """Sell a ticket from an already validated request."""
        return self.sell_ticket(
            request.counter_number,
            request.flight_number,
            request.flight_date,
            request.sale_time,
        )

    def cancel_ticket(self, ticket_id: int) -> int:
        """
        Cancel a ticket and give its seat back to the flight.

        Args:
            ticket_id: ID of the ticket to cancel

        Returns:
            The flight's new free_seats value

        Raises:
            NotFoundError: Ticket does not exist, or a concurrent cancellation
                removed it first
        """
        with self.db.get_session_context() as session:
            tickets = TicketRepository(session)
            ticket = tickets.get_for_update(ticket_id)
            if ticket is None:
                raise NotFoundError('Ticket not found')

            flight_number = ticket.flight_number
            # The seat is only returned for the cancellation that removed the row
            if tickets.delete_by_id(ticket_id) == 0:
                raise NotFoundError('Ticket not found')
            free_seats = self.inventory.adjust_free_seats(flight_number, +1, session=session)

        logger.info(f"Ticket {ticket_id} on {flight_number} cancelled ({free_seats} seats left)")
        return free_seats

    def get_ticket(self, ticket_id: int) -> TicketModel:
        with self.db.get_session_context(read_only=True) as session:
            ticket = TicketRepository(session).get_by_id(ticket_id)
            if ticket is None:
                raise NotFoundError('Ticket not found')
            return TicketModel.from_ticket(ticket)

    def list_tickets(self) -> List[TicketModel]:
        with self.db.get_session_context(read_only=True) as session:
            return [TicketModel.from_ticket(t) for t in TicketRepository(session).list_all()]

    def list_tickets_for_flight(self, flight_number: str) -> List[TicketModel]:
        with self.db.get_session_context(read_only=True) as session:
            tickets = TicketRepository(session).list_by_flight(flight_number)
            return [TicketModel.from_ticket(t) for t in tickets]

    def list_tickets_by_flight_date(self, start_date: date, end_date: date) -> List[TicketModel]:
        with self.db.get_session_context(read_only=True) as session:
            tickets = TicketRepository(session).list_by_flight_date_range(start_date, end_date)
            return [TicketModel.from_ticket(t) for t in tickets]


__all__ = ['BookingService']
