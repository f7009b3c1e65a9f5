"""
Seat inventory manager: the only writer of a flight's free-seat counter.

Every adjustment is a locked read-modify-write of ``flight.free_seats``:
- The flight row is read with SELECT ... FOR UPDATE (BEGIN IMMEDIATE on SQLite)
- Decrements below zero are refused with CapacityExhaustedError
- Increments are capped at the plane's seat capacity

Adjustments on one flight are serialized by the storage lock; adjustments on
different flights proceed in parallel. No in-process lock is involved, so
several service instances can share one database safely.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..database.config import DatabaseConfig
from ..database.repositories import FlightRepository
from ..exceptions import CapacityExhaustedError, InputValidationError, NotFoundError

logger = logging.getLogger(__name__)

ALLOWED_DELTAS = (-1, 1)


class SeatInventoryManager:
    """
    Atomic free-seat adjustments under a storage-level row lock.

    The manager can join a caller's transaction (pass ``session``) or open its
    own short transaction through the database configuration.
    """

    def __init__(self, db_config: DatabaseConfig):
        """
        Initialize seat inventory manager.

        Args:
            db_config: DatabaseConfig used when no session is supplied
        """
        self.db = db_config

    def adjust_free_seats(self, flight_number: str, delta: int, session: Optional[Session] = None) -> int:
        """
        Adjust a flight's free seats by ``delta``.

        Args:
            flight_number: Natural key of the flight
            delta: -1 for a sale, +1 for a cancellation
            session: Session of an open transaction to join; the lock is then
                held until that transaction commits or rolls back

        Returns:
            The new free_seats value

        Raises:
            NotFoundError: No flight with this number
            CapacityExhaustedError: Decrement attempted with no free seats left
        """
        if delta not in ALLOWED_DELTAS:
            raise InputValidationError(f"Seat adjustment must be -1 or +1, got {delta}")

        if session is not None:
            return self._adjust(session, flight_number, delta)

        with self.db.get_session_context() as own_session:
            return self._adjust(own_session, flight_number, delta)

    def _adjust(self, session: Session, flight_number: str, delta: int) -> int:
        flights = FlightRepository(session)
        flight = flights.get_for_update(flight_number)
        if flight is None:
            raise NotFoundError('Flight not found')

        new_free_seats = flight.free_seats + delta

        if new_free_seats < 0:
            logger.warning(f"Sale refused for {flight_number}: no free seats left")
            raise CapacityExhaustedError('No free seats available on this flight')

        capacity = flight.seats_count
        if new_free_seats > capacity:
            # Counter already at (or above) capacity; keep it pinned to the ceiling
            logger.warning(
                f"Free seats for {flight_number} would exceed plane capacity "
                f"({new_free_seats} > {capacity}); capping at {capacity}"
            )
            new_free_seats = capacity

        flight.free_seats = new_free_seats
        session.flush()

        logger.info(f"Free seats for {flight_number} adjusted by {delta:+d} to {new_free_seats}")
        return new_free_seats


__all__ = ['SeatInventoryManager', 'ALLOWED_DELTAS']
