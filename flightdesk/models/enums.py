"""
Enums for the flight inventory and booking engine.
"""

from enum import Enum


class PlaneCategory(str, Enum):
    """Aircraft size category."""
    REGIONAL = "Regional"
    MEDIUM = "Medium"
    LONG_HAUL = "Long-haul"


class SaleOutcome(str, Enum):
    """Result of a single simulated ticket sale."""
    SOLD = "sold"
    CAPACITY_EXHAUSTED = "capacity_exhausted"
    FAILED = "failed"
