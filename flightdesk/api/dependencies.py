"""
Service wiring shared by the API routers.
"""

from dataclasses import dataclass

from fastapi import Request

from ..database.config import DatabaseConfig
from ..services import (
    BookingService,
    FlightManagementService,
    FlightQueryEngine,
    ReportAggregator,
    SeatInventoryManager,
)


@dataclass
class ServiceContainer:
    """All services built over one database configuration."""
    db: DatabaseConfig
    inventory: SeatInventoryManager
    booking: BookingService
    queries: FlightQueryEngine
    management: FlightManagementService
    reports: ReportAggregator

    @classmethod
    def build(cls, db_config: DatabaseConfig, replacement_threshold: float) -> 'ServiceContainer':
        inventory = SeatInventoryManager(db_config)
        queries = FlightQueryEngine(db_config)
        return cls(
            db=db_config,
            inventory=inventory,
            booking=BookingService(db_config, inventory),
            queries=queries,
            management=FlightManagementService(db_config),
            reports=ReportAggregator(db_config, queries, replacement_threshold),
        )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def ok(data=None, message: str = None) -> dict:
    """Success envelope: ``{"success": true, "data": ...}``."""
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body


def dump(model):
    """JSON-ready form of a model or a list of models."""
    if isinstance(model, list):
        return [dump(item) for item in model]
    return model.model_dump(mode="json", by_alias=True)
