"""
Plane-related Pydantic models.
"""

from pydantic import BaseModel, Field, ConfigDict

from .enums import PlaneCategory


class PlaneCreateModel(BaseModel):
    """Input for registering an aircraft."""

    name: str = Field(..., min_length=1, max_length=100, description="Plane name")
    category: PlaneCategory = Field(..., description="Size category")
    seats_count: int = Field(..., ge=1, le=1000, description="Seat capacity")


class PlaneModel(PlaneCreateModel):
    """Aircraft as stored in the fleet directory."""
    model_config = ConfigDict(from_attributes=True)

    id: int
