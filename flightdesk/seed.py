"""
Demo data for the booking engine.

Registers a small fleet (one plane per category), a handful of flights with
direct and connecting routes, and a few days of ticket sales spread over
several counters. Seeding is skipped when the fleet is not empty.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from .database.config import DatabaseConfig
from .database.repositories import PlaneDirectory
from .services import BookingService, FlightManagementService

logger = logging.getLogger(__name__)

DEMO_PLANES = [
    {"name": "Sukhoi Superjet 100", "category": "Regional", "seats_count": 98},
    {"name": "Airbus A320", "category": "Medium", "seats_count": 180},
    {"name": "Boeing 777-300ER", "category": "Long-haul", "seats_count": 402},
]

# (flight_number, plane index, stops, departure, free seats, price)
DEMO_FLIGHTS = [
    ("SU100", 1, ["Moscow", "Sochi"], time(8, 0), 120, Decimal("7500.00")),
    ("SU102", 1, ["Moscow", "Sochi"], time(14, 30), 170, Decimal("6900.00")),
    ("SU210", 0, ["Moscow", "Kazan"], time(10, 15), 40, Decimal("4200.00")),
    ("SU330", 0, ["Saint Petersburg", "Moscow", "Kazan"], time(7, 45), 60, Decimal("5100.00")),
    ("SU500", 2, ["Moscow", "Novosibirsk", "Vladivostok"], time(22, 10), 390, Decimal("28900.00")),
    ("SU610", 2, ["Moscow", "Dubai"], time(12, 0), 35, Decimal("32500.00")),
]


@dataclass
class SeedResult:
    planes: int = 0
    flights: int = 0
    tickets: int = 0
    skipped: bool = False


class DemoDataPopulator:
    """Loads the demo fleet, schedule and sales through the regular services."""

    def __init__(self, db_config: DatabaseConfig, tickets_per_flight: int = 3, days: int = 3):
        self.db = db_config
        self.management = FlightManagementService(db_config)
        self.booking = BookingService(db_config)
        self.tickets_per_flight = tickets_per_flight
        self.days = days

    def _fleet_is_empty(self) -> bool:
        with self.db.get_session_context(read_only=True) as session:
            return not PlaneDirectory(session).list_all()

    def populate(self, start_date: date = None) -> SeedResult:
        """
        Insert the demo data.

        Args:
            start_date: First travel and sale date (default: today)

        Returns:
            SeedResult with the number of inserted rows
        """
        result = SeedResult()
        if not self._fleet_is_empty():
            logger.info("Fleet already populated, skipping demo data")
            result.skipped = True
            return result

        start_date = start_date or date.today()

        planes = [self.management.create_plane(data) for data in DEMO_PLANES]
        result.planes = len(planes)

        for number, plane_index, stops, departure, free_seats, price in DEMO_FLIGHTS:
            self.management.create_flight({
                "flight_number": number,
                "plane_id": planes[plane_index].id,
                "stops": stops,
                "departure_time": departure,
                "free_seats": free_seats,
                "price": price,
            })
            result.flights += 1

        for day in range(self.days):
            flight_date = start_date + timedelta(days=day)
            for index, (number, *_rest) in enumerate(DEMO_FLIGHTS):
                for n in range(self.tickets_per_flight):
                    self.booking.sell_ticket(
                        counter_number=(index + n) % 4 + 1,
                        flight_number=number,
                        flight_date=flight_date,
                        sale_time=datetime.combine(flight_date, time(6, 0)) + timedelta(minutes=7 * n),
                    )
                    result.tickets += 1

        logger.info(
            f"Demo data loaded: {result.planes} planes, {result.flights} flights, "
            f"{result.tickets} tickets"
        )
        return result


def seed_demo_data(db_config: DatabaseConfig, **kwargs) -> SeedResult:
    """Convenience wrapper around ``DemoDataPopulator.populate``."""
    start_date = kwargs.pop("start_date", None)
    return DemoDataPopulator(db_config, **kwargs).populate(start_date)


__all__ = ['DemoDataPopulator', 'SeedResult', 'seed_demo_data', 'DEMO_PLANES', 'DEMO_FLIGHTS']
