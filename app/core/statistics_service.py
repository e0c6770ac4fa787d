"""
Workforce attendance statistics.

For one day: roster size, distinct employees present, late arrivals and
absentees. Results are cached in Redis so the admin dashboard can still show
the last known numbers while the record store is unavailable.
"""

from datetime import date, datetime, time
from typing import Iterable, Optional

from app.core.cache import RedisClient, stats_cache_key
from app.core.clock import Clock, system_clock
from app.core.config import settings
from app.core.exceptions import StoreUnavailable
from app.core.logging import get_logger
from app.core.security import AuthContext, ensure_admin
from app.models import AttendanceRecord, AttendanceStats, User
from app.repositories.base import RecordStore

logger = get_logger(__name__)


def is_late_arrival(check_in_time: Optional[datetime], cutoff: time) -> bool:
    """A check-in is late when strictly after the cutoff on its own day."""
    if check_in_time is None:
        return False
    return check_in_time > datetime.combine(check_in_time.date(), cutoff)


def compute_daily_stats(
    day: date,
    roster: Iterable[User],
    records: Iterable[AttendanceRecord],
    cutoff: time,
) -> AttendanceStats:
    """
    Aggregate one day's records against the roster.

    Only records owned by roster employees count; check-ins by admins,
    deactivated users or unknown ids are left out of every number.
    """
    roster_ids = {u.id for u in roster}
    records = list(records)
    counted = [r for r in records if r.user_id in roster_ids]
    if len(counted) < len(records):
        logger.info(
            f"Ignoring {len(records) - len(counted)} records on {day.isoformat()} "
            f"from users outside the employee roster"
        )

    present_today = len({r.user_id for r in counted})
    if present_today < len(counted):
        logger.warning(
            f"Data integrity: {len(counted)} records for {present_today} employees "
            f"on {day.isoformat()}"
        )
    late_arrivals = sum(1 for r in counted if is_late_arrival(r.check_in_time, cutoff))

    return AttendanceStats(
        date=day.isoformat(),
        total_employees=len(roster_ids),
        present_today=present_today,
        late_arrivals=late_arrivals,
        absent=len(roster_ids) - present_today,
    )


class StatisticsService:
    def __init__(
        self,
        store: RecordStore,
        clock: Clock = system_clock,
        late_cutoff: Optional[time] = None,
    ):
        self.store = store
        self.clock = clock
        self.late_cutoff = late_cutoff or settings.late_cutoff

    async def get_stats(self, auth: AuthContext) -> AttendanceStats:
        """
        Compute today's statistics.

        Raises:
            AccessDenied: caller is not an admin
            StoreUnavailable: the record store could not be read
        """
        ensure_admin(auth)
        today = self.clock.today()
        roster = await self.store.list_active_employees()
        records = await self.store.get_attendance_by_date_range(today, today)
        stats = compute_daily_stats(today, roster, records, self.late_cutoff)
        logger.info(
            f"Stats for {stats.date}: {stats.total_employees} employees, "
            f"{stats.present_today} present, {stats.late_arrivals} late, "
            f"{stats.absent} absent"
        )
        return stats

    async def get_dashboard_stats(self, auth: AuthContext) -> AttendanceStats:
        """
        Statistics for the admin dashboard; never fails on store outages.

        Fresh numbers are cached. If the store is unavailable the cached
        numbers for today are returned, or zeros, flagged as degraded.
        """
        key = stats_cache_key(self.clock.today().isoformat())
        try:
            stats = await self.get_stats(auth)
        except StoreUnavailable:
            logger.warning("Record store unavailable, serving degraded statistics")
            cached = RedisClient.get_json(key)
            if cached:
                stats = AttendanceStats.model_validate(cached)
            else:
                stats = AttendanceStats(date=self.clock.today().isoformat())
            stats.degraded = True
            return stats

        RedisClient.set_json(key, stats.model_dump(), settings.STATS_CACHE_TTL_SECONDS)
        return stats
