"""
Summary reports composed from the flight queries and the ticket table.

Reports are advisory: they read without the inventory lock and may be a
commit behind concurrent sales.
"""

import logging
from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from ..database.config import DatabaseConfig
from ..database.repositories import FlightRepository, TicketRepository
from ..exceptions import InputValidationError
from ..models.report import (
    CounterSalesModel,
    DateRangeModel,
    FlightLoadReportEntryModel,
    FlightSalesModel,
    GeneralReportModel,
    GeneralReportSummaryModel,
    ReplacementSummaryModel,
    SalesReportModel,
    SalesReportSummaryModel,
)
from .flight_query_engine import (
    DEFAULT_REPLACEMENT_THRESHOLD,
    FlightQueryEngine,
    build_flight_load,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT)


def _day_bounds(start_date: date, end_date: date):
    """Half-open datetime range covering every moment of both dates."""
    return (
        datetime.combine(start_date, time.min),
        datetime.combine(end_date + timedelta(days=1), time.min),
    )


class ReportAggregator:
    """Builds the general, sales and load reports."""

    def __init__(
        self,
        db_config: DatabaseConfig,
        query_engine: Optional[FlightQueryEngine] = None,
        replacement_threshold: float = DEFAULT_REPLACEMENT_THRESHOLD,
    ):
        self.db = db_config
        self.queries = query_engine or FlightQueryEngine(db_config)
        self.replacement_threshold = replacement_threshold

    def general_report(self) -> GeneralReportModel:
        """
        Fleet-wide statistics.

        overall load = (sum of capacity - sum of free seats) / sum of capacity * 100.
        With no flights every figure is zero and there is no most expensive flight.
        """
        flights = self.queries.list_flights()
        direct_flights = self.queries.get_non_stop_flights()
        candidates = self.queries.get_replacement_candidates(self.replacement_threshold)

        total_flights = len(flights)
        total_capacity = sum(f.seats_count for f in flights)
        total_free_seats = sum(f.free_seats for f in flights)
        average_price = (
            sum((f.price for f in flights), Decimal('0')) / total_flights
            if total_flights else Decimal('0')
        )
        overall_load = (
            round((total_capacity - total_free_seats) / total_capacity * 100, 2)
            if total_capacity else 0.0
        )

        most_expensive = self.queries.get_most_expensive_flight() if flights else None

        summary = GeneralReportSummaryModel(
            total_flights=total_flights,
            total_direct_flights=len(direct_flights),
            flights_with_connections=total_flights - len(direct_flights),
            average_price=_money(average_price),
            total_capacity=total_capacity,
            total_free_seats=total_free_seats,
            overall_load_percentage=overall_load,
        )

        logger.info(
            f"General report: {total_flights} flights, {overall_load}% load, "
            f"{len(candidates)} replacement candidates"
        )

        return GeneralReportModel(
            summary=summary,
            most_expensive_flight=most_expensive,
            flights_for_replacement=[
                ReplacementSummaryModel.model_validate(c) for c in candidates
            ],
        )

    def sales_report(self, start_date: date, end_date: date) -> SalesReportModel:
        """
        Tickets sold between two dates (by sale time, both days inclusive).

        Revenue uses each flight's current price. Both groupings are sorted by
        revenue, highest first.
        """
        if start_date > end_date:
            raise InputValidationError('Start date must not be after end date')

        start, end = _day_bounds(start_date, end_date)

        with self.db.get_session_context(read_only=True) as session:
            tickets_repo = TicketRepository(session)
            by_counter = [
                CounterSalesModel(counter_number=counter, tickets_sold=count, total_revenue=revenue)
                for counter, count, revenue in tickets_repo.sales_by_counter(start, end)
            ]

            per_flight = OrderedDict()
            total_revenue = Decimal('0')
            tickets = tickets_repo.list_by_sale_time_range(start, end)
            for ticket in tickets:
                price = Decimal(ticket.flight.price)
                total_revenue += price
                entry = per_flight.setdefault(
                    ticket.flight_number, {'tickets_sold': 0, 'revenue': Decimal('0')}
                )
                entry['tickets_sold'] += 1
                entry['revenue'] += price

        by_flight = [
            FlightSalesModel(flight_number=number, tickets_sold=v['tickets_sold'], revenue=_money(v['revenue']))
            for number, v in per_flight.items()
        ]
        by_flight.sort(key=lambda s: (-s.revenue, s.flight_number))

        total_tickets = len(tickets)
        average = total_revenue / total_tickets if total_tickets else Decimal('0')

        logger.info(f"Sales report {start_date}..{end_date}: {total_tickets} tickets, revenue {_money(total_revenue)}")

        return SalesReportModel(
            summary=SalesReportSummaryModel(
                total_tickets=total_tickets,
                total_revenue=_money(total_revenue),
                average_ticket_price=_money(average),
                date_range=DateRangeModel(start_date=start_date, end_date=end_date),
            ),
            sales_by_counter=by_counter,
            sales_by_flight=by_flight,
        )

    def load_report(self, start_date: date, end_date: date) -> List[FlightLoadReportEntryModel]:
        """Load of every flight over a travel-date range, most loaded first."""
        if start_date > end_date:
            raise InputValidationError('Start date must not be after end date')

        entries = []
        with self.db.get_session_context(read_only=True) as session:
            tickets_repo = TicketRepository(session)
            for flight in FlightRepository(session).list_all():
                sold = tickets_repo.count_for_flight_in_range(flight.flight_number, start_date, end_date)
                load = build_flight_load(flight, sold)
                entries.append(FlightLoadReportEntryModel(
                    **load.model_dump(),
                    plane_name=flight.plane_name,
                    departure_time=flight.departure_time,
                ))

        entries.sort(key=lambda e: -e.load_percentage)
        return entries


__all__ = ['ReportAggregator']
