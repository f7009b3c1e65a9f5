"""
Ticket-related Pydantic models.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .flight import FLIGHT_NUMBER_PATTERN


class TicketCreateModel(BaseModel):
    """Input for selling a ticket at a point of sale."""

    counter_number: int = Field(..., ge=1, description="Point-of-sale counter")
    flight_number: str = Field(..., pattern=FLIGHT_NUMBER_PATTERN, description="Flight number")
    flight_date: date = Field(..., description="Date of travel")
    sale_time: datetime = Field(..., description="Timestamp of the sale")


class TicketModel(BaseModel):
    """
    Ticket joined with its flight's current departure, price and route.

    Price is never stored on the ticket, so it always reflects the flight now.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    counter_number: int
    flight_number: str
    flight_date: date
    sale_time: datetime
    departure_time: Optional[time] = None
    price: Optional[Decimal] = None
    stops: List[str] = Field(default_factory=list)
    plane_name: Optional[str] = None
    plane_category: Optional[str] = None

    @classmethod
    def from_ticket(cls, ticket) -> "TicketModel":
        flight = ticket.flight
        return cls(
            id=ticket.id,
            counter_number=ticket.counter_number,
            flight_number=ticket.flight_number,
            flight_date=ticket.flight_date,
            sale_time=ticket.sale_time,
            departure_time=flight.departure_time if flight else None,
            price=flight.price if flight else None,
            stops=list(flight.stops) if flight else [],
            plane_name=flight.plane_name if flight else None,
            plane_category=flight.plane_category if flight else None,
        )
