"""
Simulation models for concurrent ticket sale runs.

These models capture how a burst of simultaneous sales against one flight
was resolved by the seat inventory lock.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .enums import SaleOutcome


class SaleAttemptModel(BaseModel):
    """
    A single simulated sale attempt.

    Records which counter tried to sell, how it ended and how long it took,
    including time spent waiting on the flight lock.
    """
    model_config = ConfigDict(from_attributes=True)

    attempt_id: int = Field(..., ge=0, description="Attempt index within the run")
    counter_number: int = Field(..., ge=1, description="Counter that attempted the sale")
    outcome: SaleOutcome = Field(default=SaleOutcome.FAILED, description="How the attempt ended")
    ticket_id: Optional[int] = Field(None, description="Created ticket ID if sold")
    error_message: Optional[str] = Field(None, description="Error message if rejected")
    response_time_ms: float = Field(default=0.0, ge=0.0, description="Total response time")


class SaleSimulationModel(BaseModel):
    """
    Results from a concurrent sale simulation.

    With ``initial_free_seats = k`` and ``attempts = N > k`` a consistent
    inventory yields exactly ``k`` sold and ``N - k`` capacity rejections.
    """
    model_config = ConfigDict(from_attributes=True)

    simulation_id: str = Field(..., description="Unique simulation identifier")
    flight_number: str = Field(..., description="Target flight")
    attempts: int = Field(..., ge=1, description="Number of concurrent sale attempts")
    workers: int = Field(..., ge=1, description="Thread pool size")
    initial_free_seats: int = Field(..., ge=0)
    final_free_seats: int = Field(..., ge=0)
    sold: int = Field(default=0, ge=0)
    capacity_rejections: int = Field(default=0, ge=0)
    other_failures: int = Field(default=0, ge=0)
    average_response_time_ms: float = Field(default=0.0, ge=0.0)
    simulation_duration_ms: int = Field(default=0, ge=0)
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    results: List[SaleAttemptModel] = Field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        """Sold seats match the drop in the free-seat counter."""
        return self.initial_free_seats - self.final_free_seats == self.sold
