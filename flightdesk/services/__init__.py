"""
Business logic services for the booking engine.

This module contains the seat inventory manager, the booking service, the
flight query engine, the report aggregator, flight management and the
concurrent sale simulator.
"""

from .seat_inventory import SeatInventoryManager
from .booking_service import BookingService
from .flight_query_engine import FlightQueryEngine, DEFAULT_REPLACEMENT_THRESHOLD
from .flight_management import FlightManagementService
from .report_aggregator import ReportAggregator
from .booking_simulator import BookingSimulator

__all__ = [
    'SeatInventoryManager',
    'BookingService',
    'FlightQueryEngine',
    'DEFAULT_REPLACEMENT_THRESHOLD',
    'FlightManagementService',
    'ReportAggregator',
    'BookingSimulator',
]
