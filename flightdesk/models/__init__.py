"""
Pydantic models package for the booking engine.

This package contains all Pydantic v2 models used for request validation,
API serialization and report shapes.
"""

# Enums
from .enums import (
    PlaneCategory,
    SaleOutcome,
)

from .plane import (
    PlaneCreateModel,
    PlaneModel,
)

from .flight import (
    FLIGHT_NUMBER_PATTERN,
    FlightCreateModel,
    FlightModel,
    ReplacementCandidateModel,
    SeatCheckModel,
    FlightLoadModel,
)

from .ticket import (
    TicketCreateModel,
    TicketModel,
)

from .report import (
    GeneralReportSummaryModel,
    ReplacementSummaryModel,
    GeneralReportModel,
    CounterSalesModel,
    FlightSalesModel,
    DateRangeModel,
    SalesReportSummaryModel,
    SalesReportModel,
    FlightLoadReportEntryModel,
)

from .simulation import (
    SaleAttemptModel,
    SaleSimulationModel,
)

__all__ = [
    # Enums
    "PlaneCategory",
    "SaleOutcome",

    # Core models
    "PlaneCreateModel",
    "PlaneModel",
    "FLIGHT_NUMBER_PATTERN",
    "FlightCreateModel",
    "FlightModel",
    "ReplacementCandidateModel",
    "SeatCheckModel",
    "FlightLoadModel",
    "TicketCreateModel",
    "TicketModel",

    # Report models
    "GeneralReportSummaryModel",
    "ReplacementSummaryModel",
    "GeneralReportModel",
    "CounterSalesModel",
    "FlightSalesModel",
    "DateRangeModel",
    "SalesReportSummaryModel",
    "SalesReportModel",
    "FlightLoadReportEntryModel",

    # Simulation models
    "SaleAttemptModel",
    "SaleSimulationModel",
]
