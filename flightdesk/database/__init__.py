"""
Database package for the flight inventory and booking engine.

This package provides the SQLAlchemy models, database configuration and the
repositories that own row-level access to planes, flights and tickets.
"""

from .models import (
    Base,
    Plane,
    Flight,
    Ticket,
    create_all_tables,
    drop_all_tables
)

from .config import (
    DatabaseConfig,
    get_database_config,
    initialize_database,
    reset_database_config,
)

from .repositories import (
    PlaneDirectory,
    FlightRepository,
    TicketRepository,
)

__all__ = [
    # Models
    'Base',
    'Plane',
    'Flight',
    'Ticket',
    'create_all_tables',
    'drop_all_tables',

    # Configuration
    'DatabaseConfig',
    'get_database_config',
    'initialize_database',
    'reset_database_config',

    # Repositories
    'PlaneDirectory',
    'FlightRepository',
    'TicketRepository',
]
