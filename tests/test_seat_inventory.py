"""
Tests for the seat inventory manager: locked, bounded free-seat adjustments.
"""

import pytest

from flightdesk.exceptions import CapacityExhaustedError, InputValidationError, NotFoundError


class TestAdjustFreeSeats:
    """Test cases for SeatInventoryManager.adjust_free_seats."""

    def test_decrement(self, inventory, queries, make_flight):
        make_flight(free_seats=10)

        assert inventory.adjust_free_seats("SU100", -1) == 9
        assert queries.check_seats("SU100").free_seats == 9

    def test_increment(self, inventory, queries, make_flight):
        make_flight(free_seats=10)

        assert inventory.adjust_free_seats("SU100", +1) == 11
        assert queries.check_seats("SU100").free_seats == 11

    def test_decrement_at_zero_refused(self, inventory, queries, make_flight):
        """Test that the counter never goes below zero."""
        make_flight(free_seats=0)

        with pytest.raises(CapacityExhaustedError) as exc_info:
            inventory.adjust_free_seats("SU100", -1)

        assert exc_info.value.status_code == 409
        assert queries.check_seats("SU100").free_seats == 0

    def test_increment_capped_at_capacity(self, inventory, queries, make_flight):
        """Test that a full plane's counter stays at its seat capacity."""
        make_flight(free_seats=180)

        assert inventory.adjust_free_seats("SU100", +1) == 180
        assert queries.check_seats("SU100").free_seats == 180

    def test_unknown_flight(self, inventory, fleet):
        with pytest.raises(NotFoundError, match="Flight not found"):
            inventory.adjust_free_seats("XX000", -1)

    @pytest.mark.parametrize("delta", [0, 2, -5])
    def test_only_unit_steps_allowed(self, inventory, make_flight, delta):
        make_flight(free_seats=10)

        with pytest.raises(InputValidationError):
            inventory.adjust_free_seats("SU100", delta)

    def test_joined_session_rolls_back_with_caller(self, db_config, inventory, queries, make_flight):
        """Test that an adjustment inside a failed transaction leaves no trace."""
        make_flight(free_seats=5)

        with pytest.raises(RuntimeError):
            with db_config.get_session_context() as session:
                assert inventory.adjust_free_seats("SU100", -1, session=session) == 4
                raise RuntimeError("abort")

        assert queries.check_seats("SU100").free_seats == 5

    def test_adjustments_are_isolated_per_flight(self, inventory, queries, make_flight):
        make_flight(flight_number="SU100", free_seats=3)
        make_flight(flight_number="SU200", free_seats=3)

        inventory.adjust_free_seats("SU100", -1)
        inventory.adjust_free_seats("SU100", -1)

        assert queries.check_seats("SU100").free_seats == 1
        assert queries.check_seats("SU200").free_seats == 3
