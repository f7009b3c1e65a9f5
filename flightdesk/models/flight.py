"""
Flight-related Pydantic models.

This module contains the flight input/output models plus the result shapes of
the flight queries (seat check, load, replacement candidates).
"""

from datetime import time
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

FLIGHT_NUMBER_PATTERN = r"^[A-Z0-9]{2,10}$"


class FlightCreateModel(BaseModel):
    """
    Input for creating or updating a flight.

    The stop list runs from origin to destination; interior entries are layovers.
    """

    flight_number: str = Field(..., pattern=FLIGHT_NUMBER_PATTERN, description="Flight number (e.g., 'SU100')")
    plane_id: int = Field(..., ge=1, description="Assigned plane ID")
    stops: List[str] = Field(..., min_length=2, description="Origin, layovers, destination")
    departure_time: time = Field(..., description="Daily departure time")
    free_seats: int = Field(..., ge=0, description="Unsold seats")
    price: Decimal = Field(..., gt=0, le=1000000, max_digits=10, decimal_places=2, description="Ticket price")

    @field_validator("stops")
    @classmethod
    def validate_stops(cls, v: List[str]) -> List[str]:
        """Strip stop names and reject empty or overlong ones."""
        cleaned = [stop.strip() for stop in v]
        for stop in cleaned:
            if not stop or len(stop) > 100:
                raise ValueError("Stop names must be between 1 and 100 characters")
        return cleaned


class FlightModel(BaseModel):
    """Flight row joined with its plane."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    flight_number: str
    plane_id: int
    stops: List[str]
    departure_time: time
    free_seats: int
    price: Decimal
    plane_name: Optional[str] = None
    plane_category: Optional[str] = None
    seats_count: Optional[int] = None


class ReplacementCandidateModel(FlightModel):
    """Flight whose free-seat share suggests a smaller aircraft would do."""

    free_seats_percentage: float = Field(..., ge=0.0, description="free_seats / seats_count * 100")


class SeatCheckModel(BaseModel):
    """Free-seat availability of one flight."""

    flight_number: str
    free_seats: int = Field(..., ge=0)
    has_free_seats: bool


class FlightLoadModel(BaseModel):
    """
    Occupancy of one flight over a travel-date range.

    ``total_occupied`` adds the date-scoped ticket count to the all-time
    occupied seats derived from the running counter.
    """

    flight_number: str
    free_seats: int
    seats_count: int
    tickets_sold: int
    total_occupied: int
    load_percentage: float
