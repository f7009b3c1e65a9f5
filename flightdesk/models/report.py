"""
Report models for the general, sales and load reports.

Report envelopes serialize with camelCase keys (``totalFlights``,
``salesByCounter``...) while the row models they embed keep the snake_case
column names of the flight and ticket views.
"""

from datetime import date, time
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from .flight import FlightModel, FlightLoadModel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeneralReportSummaryModel(_CamelModel):
    """Fleet-wide flight statistics."""

    total_flights: int = Field(..., ge=0)
    total_direct_flights: int = Field(..., ge=0)
    flights_with_connections: int = Field(..., ge=0)
    average_price: Decimal = Field(..., ge=0)
    total_capacity: int = Field(..., ge=0)
    total_free_seats: int = Field(..., ge=0)
    overall_load_percentage: float


class ReplacementSummaryModel(BaseModel):
    """Replacement candidate as listed in the general report."""
    model_config = ConfigDict(from_attributes=True)

    flight_number: str
    plane_name: Optional[str] = None
    free_seats: int
    seats_count: int
    free_seats_percentage: float


class GeneralReportModel(_CamelModel):
    summary: GeneralReportSummaryModel
    most_expensive_flight: Optional[FlightModel] = None
    flights_for_replacement: List[ReplacementSummaryModel] = Field(default_factory=list)


class CounterSalesModel(BaseModel):
    """Sales of one point-of-sale counter."""

    counter_number: int
    tickets_sold: int = Field(..., ge=0)
    total_revenue: Decimal


class FlightSalesModel(BaseModel):
    """Sales of one flight."""

    flight_number: str
    tickets_sold: int = Field(..., ge=0)
    revenue: Decimal


class DateRangeModel(_CamelModel):
    start_date: date
    end_date: date


class SalesReportSummaryModel(_CamelModel):
    total_tickets: int = Field(..., ge=0)
    total_revenue: Decimal
    average_ticket_price: Decimal
    date_range: DateRangeModel


class SalesReportModel(_CamelModel):
    """Tickets sold in a date range, totalled and grouped by counter and by flight."""

    summary: SalesReportSummaryModel
    sales_by_counter: List[CounterSalesModel] = Field(default_factory=list)
    sales_by_flight: List[FlightSalesModel] = Field(default_factory=list)


class FlightLoadReportEntryModel(FlightLoadModel):
    """Load of one flight enriched with its plane and departure time."""

    plane_name: Optional[str] = None
    departure_time: Optional[time] = None
