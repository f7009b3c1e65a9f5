"""
Tests for ticket sales and cancellations.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from flightdesk.database.models import Ticket
from flightdesk.database.repositories import TicketRepository
from flightdesk.exceptions import CapacityExhaustedError, InputValidationError, NotFoundError
from flightdesk.models import TicketCreateModel
from flightdesk.services import SeatInventoryManager

FLIGHT_DATE = date(2026, 10, 20)
SALE_TIME = datetime(2026, 10, 19, 9, 15)


def sell(booking, flight_number="SU100", counter_number=1):
    return booking.sell_ticket(
        counter_number=counter_number,
        flight_number=flight_number,
        flight_date=FLIGHT_DATE,
        sale_time=SALE_TIME,
    )


class TestSellTicket:
    """Test cases for BookingService.sell_ticket."""

    def test_sale_takes_one_seat(self, booking, queries, make_flight):
        make_flight(free_seats=10, price="7500.00")

        ticket = sell(booking, counter_number=2)

        assert ticket.id is not None
        assert ticket.counter_number == 2
        assert ticket.flight_date == FLIGHT_DATE
        assert ticket.price == Decimal("7500.00")
        assert ticket.stops == ["Moscow", "Sochi"]
        assert ticket.plane_name == "Airbus A320"
        assert queries.check_seats("SU100").free_seats == 9

    def test_sale_from_request_model(self, booking, make_flight):
        make_flight(free_seats=1)
        request = TicketCreateModel(
            counter_number=1, flight_number="SU100", flight_date=FLIGHT_DATE, sale_time=SALE_TIME
        )

        assert booking.sell(request).flight_number == "SU100"

    def test_sale_on_full_flight(self, booking, queries, make_flight):
        """Test that a sold-out flight refuses the sale and stores nothing."""
        make_flight(free_seats=0)

        with pytest.raises(CapacityExhaustedError):
            sell(booking)

        assert booking.list_tickets() == []
        assert queries.check_seats("SU100").free_seats == 0

    def test_sale_on_unknown_flight(self, booking, fleet):
        with pytest.raises(NotFoundError, match="Flight not found"):
            sell(booking, flight_number="XX000")
        assert booking.list_tickets() == []

    def test_invalid_counter_rejected(self, booking, queries, make_flight):
        make_flight(free_seats=5)

        with pytest.raises(InputValidationError) as exc_info:
            sell(booking, counter_number=0)

        assert exc_info.value.status_code == 400
        assert queries.check_seats("SU100").free_seats == 5

    def test_last_seat(self, booking, queries, make_flight):
        make_flight(free_seats=1)

        sell(booking)
        with pytest.raises(CapacityExhaustedError):
            sell(booking)

        assert len(booking.list_tickets_for_flight("SU100")) == 1
        assert queries.check_seats("SU100").has_free_seats is False

    def test_failed_ticket_insert_keeps_the_seat(self, booking, queries, make_flight, monkeypatch):
        """Test that a failure after the seat was taken rolls the seat back too."""
        make_flight(free_seats=5)

        def broken_add(self, ticket):
            raise RuntimeError("ticket insert failed")

        monkeypatch.setattr(TicketRepository, "add", broken_add)

        with pytest.raises(RuntimeError, match="ticket insert failed"):
            sell(booking)

        assert queries.check_seats("SU100").free_seats == 5
        assert booking.list_tickets() == []


class TestCancelTicket:
    """Test cases for BookingService.cancel_ticket."""

    def test_cancel_returns_the_seat(self, booking, queries, make_flight):
        make_flight(free_seats=10)
        ticket = sell(booking)

        assert booking.cancel_ticket(ticket.id) == 10
        assert queries.check_seats("SU100").free_seats == 10
        with pytest.raises(NotFoundError):
            booking.get_ticket(ticket.id)

    def test_sell_then_cancel_restores_counter(self, booking, queries, make_flight):
        """Test that a sale followed by its cancellation is a no-op on the counter."""
        make_flight(free_seats=7)

        tickets = [sell(booking) for _ in range(3)]
        for ticket in tickets:
            booking.cancel_ticket(ticket.id)

        assert queries.check_seats("SU100").free_seats == 7
        assert booking.list_tickets() == []

    def test_cancel_unknown_ticket(self, booking, fleet):
        with pytest.raises(NotFoundError, match="Ticket not found"):
            booking.cancel_ticket(999)

    def test_cancel_after_concurrent_cancel_returns_no_seat(self, booking, queries, make_flight, monkeypatch):
        """Test that a cancellation that loses the race for the row gives no seat back."""
        make_flight(free_seats=10)
        cancelled = sell(booking)
        sell(booking)
        booking.cancel_ticket(cancelled.id)

        # What a second transaction saw before the first one deleted the row
        stale = Ticket(
            id=cancelled.id,
            counter_number=cancelled.counter_number,
            flight_number="SU100",
            flight_date=FLIGHT_DATE,
            sale_time=SALE_TIME,
        )
        monkeypatch.setattr(TicketRepository, "get_for_update", lambda self, ticket_id: stale)

        with pytest.raises(NotFoundError, match="Ticket not found"):
            booking.cancel_ticket(cancelled.id)

        assert queries.check_seats("SU100").free_seats == 9
        assert len(booking.list_tickets_for_flight("SU100")) == 1

    def test_failed_seat_return_keeps_the_ticket(self, booking, queries, make_flight, monkeypatch):
        """Test that a cancellation failing after the delete leaves the ticket in place."""
        make_flight(free_seats=5)
        ticket = sell(booking)

        def broken_adjust(self, flight_number, delta, session=None):
            raise RuntimeError("seat update failed")

        monkeypatch.setattr(SeatInventoryManager, "adjust_free_seats", broken_adjust)

        with pytest.raises(RuntimeError, match="seat update failed"):
            booking.cancel_ticket(ticket.id)

        assert booking.get_ticket(ticket.id).id == ticket.id
        assert queries.check_seats("SU100").free_seats == 4


class TestTicketListings:
    """Test cases for the ticket read operations."""

    def test_ticket_reflects_current_flight_price(self, booking, management, make_flight):
        """Test that tickets always show the flight's price as it is now."""
        flight = make_flight(free_seats=10, price="5000.00")
        ticket = sell(booking)

        data = flight.model_dump(exclude={"id", "plane_name", "plane_category", "seats_count"})
        data["price"] = Decimal("6200.00")
        management.update_flight(flight.id, data)

        assert booking.get_ticket(ticket.id).price == Decimal("6200.00")

    def test_list_by_flight_date(self, booking, make_flight):
        make_flight(free_seats=10)
        booking.sell_ticket(1, "SU100", date(2026, 10, 20), SALE_TIME)
        booking.sell_ticket(1, "SU100", date(2026, 10, 25), SALE_TIME)

        tickets = booking.list_tickets_by_flight_date(date(2026, 10, 19), date(2026, 10, 21))

        assert [t.flight_date for t in tickets] == [date(2026, 10, 20)]

    def test_list_tickets_newest_sale_first(self, booking, make_flight):
        make_flight(free_seats=10)
        first = booking.sell_ticket(1, "SU100", FLIGHT_DATE, datetime(2026, 10, 19, 8, 0))
        second = booking.sell_ticket(1, "SU100", FLIGHT_DATE, datetime(2026, 10, 19, 9, 0))

        assert [t.id for t in booking.list_tickets()] == [second.id, first.id]
