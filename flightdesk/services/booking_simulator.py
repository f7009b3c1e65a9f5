"""
Concurrent ticket sale simulator for oversell demonstration.

This module fires many simultaneous sales at one flight to demonstrate:
- Oversell prevention by the storage-level flight lock
- Exactly ``free_seats`` successful sales when demand exceeds supply
- Lock contention cost as seen in per-attempt response times
"""

import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Optional

from ..exceptions import CapacityExhaustedError
from ..models.enums import SaleOutcome
from ..models.simulation import SaleAttemptModel, SaleSimulationModel
from .booking_service import BookingService
from .flight_query_engine import FlightQueryEngine

logger = logging.getLogger(__name__)


class BookingSimulator:
    """
    Multi-counter ticket sale simulator.

    Every attempt runs ``BookingService.sell_ticket`` in its own thread and
    database session, so the only coordination between attempts is the flight
    row lock taken by the seat inventory manager.
    """

    def __init__(self, booking_service: BookingService, query_engine: FlightQueryEngine):
        """
        Initialize booking simulator.

        Args:
            booking_service: Service used for every sale attempt
            query_engine: Used to read the free-seat counter before and after the run
        """
        self.booking = booking_service
        self.queries = query_engine

    def run(
        self,
        flight_number: str,
        attempts: int,
        workers: int = 8,
        counters: int = 4,
        flight_date: Optional[date] = None,
    ) -> SaleSimulationModel:
        """
        Run ``attempts`` concurrent sales against one flight.

        Args:
            flight_number: Target flight
            attempts: Number of sale attempts
            workers: Thread pool size
            counters: Attempts are spread round-robin over this many counters
            flight_date: Travel date for every ticket (default: today)

        Returns:
            SaleSimulationModel: Outcome counts, final counter and timings
        """
        if attempts < 1 or workers < 1 or counters < 1:
            raise ValueError("attempts, workers and counters must all be positive")

        flight_date = flight_date or date.today()
        initial = self.queries.check_seats(flight_number).free_seats

        simulation = SaleSimulationModel(
            simulation_id=str(uuid.uuid4()),
            flight_number=flight_number,
            attempts=attempts,
            workers=workers,
            initial_free_seats=initial,
            final_free_seats=initial,
        )

        logger.info(
            f"Starting sale simulation on {flight_number}: {attempts} attempts, "
            f"{workers} workers, {initial} free seats"
        )

        start_time = time.time()
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._attempt_sale, i, flight_number, (i % counters) + 1, flight_date)
                for i in range(attempts)
            ]
            results = [future.result() for future in futures]

        simulation.results = results
        simulation.sold = sum(1 for r in results if r.outcome == SaleOutcome.SOLD)
        simulation.capacity_rejections = sum(
            1 for r in results if r.outcome == SaleOutcome.CAPACITY_EXHAUSTED
        )
        simulation.other_failures = attempts - simulation.sold - simulation.capacity_rejections
        simulation.average_response_time_ms = sum(r.response_time_ms for r in results) / attempts
        simulation.simulation_duration_ms = int((time.time() - start_time) * 1000)
        simulation.final_free_seats = self.queries.check_seats(flight_number).free_seats
        simulation.completed_at = datetime.now()

        logger.info(
            f"Simulation completed: {simulation.sold} sold, "
            f"{simulation.capacity_rejections} rejected for capacity, "
            f"{simulation.other_failures} other failures, "
            f"{simulation.final_free_seats} seats left"
        )
        if not simulation.is_consistent:
            logger.error(
                f"Inventory mismatch on {flight_number}: {simulation.sold} sold but counter "
                f"moved from {initial} to {simulation.final_free_seats}"
            )

        return simulation

    def _attempt_sale(
        self, attempt_id: int, flight_number: str, counter_number: int, flight_date: date
    ) -> SaleAttemptModel:
        attempt = SaleAttemptModel(attempt_id=attempt_id, counter_number=counter_number)
        start_time = time.time()

        try:
            ticket = self.booking.sell_ticket(
                counter_number=counter_number,
                flight_number=flight_number,
                flight_date=flight_date,
                sale_time=datetime.now(),
            )
            attempt.outcome = SaleOutcome.SOLD
            attempt.ticket_id = ticket.id
        except CapacityExhaustedError as e:
            attempt.outcome = SaleOutcome.CAPACITY_EXHAUSTED
            attempt.error_message = e.message
        except Exception as e:
            attempt.outcome = SaleOutcome.FAILED
            attempt.error_message = str(e)
            logger.warning(f"Sale attempt {attempt_id} on {flight_number} failed: {e}")
        finally:
            attempt.response_time_ms = (time.time() - start_time) * 1000

        return attempt


__all__ = ['BookingSimulator']
