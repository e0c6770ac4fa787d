"""Tests for worked-hours calculation."""

from datetime import datetime
from decimal import Decimal

import pytest

from app.core.exceptions import InvalidInterval
from app.core.hours import calculate_hours_worked


def test_full_working_day():
    """08:30 to 17:30 is exactly nine hours."""
    hours = calculate_hours_worked(datetime(2024, 3, 4, 8, 30), datetime(2024, 3, 4, 17, 30))
    assert hours == Decimal("9.00")


def test_zero_length_interval():
    moment = datetime(2024, 3, 4, 9, 0)
    assert calculate_hours_worked(moment, moment) == Decimal("0.00")


def test_rounds_half_up_to_two_places():
    """45 seconds is 0.0125 hours, which rounds up to 0.01."""
    start = datetime(2024, 3, 4, 9, 0, 0)
    assert calculate_hours_worked(start, datetime(2024, 3, 4, 9, 0, 45)) == Decimal("0.01")
    # 18 seconds = 0.005 hours exactly, the half-way case
    assert calculate_hours_worked(start, datetime(2024, 3, 4, 9, 0, 18)) == Decimal("0.01")
    # 17 seconds = 0.00472 hours
    assert calculate_hours_worked(start, datetime(2024, 3, 4, 9, 0, 17)) == Decimal("0.00")


def test_sub_second_precision_is_kept():
    start = datetime(2024, 3, 4, 9, 0, 0)
    end = datetime(2024, 3, 4, 10, 29, 59, 999_999)
    assert calculate_hours_worked(start, end) == Decimal("1.50")


def test_overnight_interval():
    hours = calculate_hours_worked(datetime(2024, 3, 4, 22, 0), datetime(2024, 3, 5, 6, 15))
    assert hours == Decimal("8.25")


def test_result_is_decimal_with_two_places():
    hours = calculate_hours_worked(datetime(2024, 3, 4, 9, 0), datetime(2024, 3, 4, 9, 20))
    assert isinstance(hours, Decimal)
    assert hours == Decimal("0.33")
    assert hours.as_tuple().exponent == -2


def test_check_out_before_check_in_is_rejected():
    with pytest.raises(InvalidInterval):
        calculate_hours_worked(datetime(2024, 3, 4, 17, 0), datetime(2024, 3, 4, 9, 0))
