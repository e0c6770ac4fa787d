"""
Worked-hours calculation.

Hours are fixed-point decimals rounded half-up to two places so payroll totals
do not drift the way float arithmetic would.
"""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from app.core.exceptions import InvalidInterval

SECONDS_PER_HOUR = Decimal(3600)
HOURS_QUANTUM = Decimal("0.01")


def _exact_seconds(delta: timedelta) -> Decimal:
    return (
        Decimal(delta.days) * 86400
        + Decimal(delta.seconds)
        + Decimal(delta.microseconds) / Decimal(1_000_000)
    )


def calculate_hours_worked(check_in_time: datetime, check_out_time: datetime) -> Decimal:
    """
    Hours between check-in and check-out, rounded half-up to 2 decimals.

    Raises:
        InvalidInterval: if check_out_time precedes check_in_time
    """
    if check_out_time < check_in_time:
        raise InvalidInterval(
            f"Check-out {check_out_time.isoformat()} precedes "
            f"check-in {check_in_time.isoformat()}"
        )
    hours = _exact_seconds(check_out_time - check_in_time) / SECONDS_PER_HOUR
    return hours.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)
