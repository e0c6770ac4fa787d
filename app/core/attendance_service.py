"""
Attendance state machine.

Per user per day the record moves NoRecordToday -> CheckedIn -> CheckedOut:

- check-in creates the day's record (status checked_in)
- check-out completes it in place (status checked_out, hours worked)
- checked_out is terminal for the day; the next day starts a new record

Both transitions require a location and a photo. The store guarantees at most
one record per (user, day); a racing duplicate check-in surfaces as
AlreadyCheckedIn, and check-out only applies while the record is still open.
"""

from datetime import time
from typing import Optional

from app.core.clock import Clock, system_clock
from app.core.config import settings
from app.core.events import (
    AttendanceCheckinEvent,
    AttendanceCheckoutEvent,
    AttendanceLateEvent,
    EventType,
    create_event,
)
from app.core.exceptions import (
    AlreadyCheckedIn,
    AttendanceAlreadyCompleted,
    InvalidInterval,
    MissingAttendanceEvidence,
    NotCheckedIn,
    OutsideGeofence,
    RecordConflict,
)
from app.core.geofence import check_geofence
from app.core.hours import calculate_hours_worked
from app.core.kafka import publish_event
from app.core.logging import get_logger
from app.core.security import AuthContext
from app.core.statistics_service import is_late_arrival
from app.core.topics import KafkaTopics
from app.models import AttendanceRecord, AttendanceStatus, GeoLocation
from app.repositories.base import RecordStore

logger = get_logger(__name__)


class AttendanceService:
    def __init__(
        self,
        store: RecordStore,
        clock: Clock = system_clock,
        late_cutoff: Optional[time] = None,
        geofence_enforced: Optional[bool] = None,
    ):
        self.store = store
        self.clock = clock
        self.late_cutoff = late_cutoff or settings.late_cutoff
        self.geofence_enforced = (
            settings.GEOFENCE_ENFORCED
            if geofence_enforced is None
            else geofence_enforced
        )

    def _require_evidence(
        self, location: Optional[GeoLocation], photo: Optional[str]
    ) -> None:
        if location is None or not photo:
            raise MissingAttendanceEvidence()

    async def _enforce_geofence(self, auth: AuthContext, location: GeoLocation) -> None:
        if not self.geofence_enforced:
            return
        locations = await self.store.list_active_work_locations()
        if not locations:
            logger.warning("Geofencing enforced but no active work location exists")
            return
        result = check_geofence(location, locations)
        if not result.within_geofence:
            logger.warning(
                f"User {auth.user_id} outside geofence "
                f"({result.distance_meters}m from nearest location)"
            )
            raise OutsideGeofence()

    async def check_in(
        self,
        auth: AuthContext,
        location: Optional[GeoLocation],
        photo: Optional[str],
    ) -> AttendanceRecord:
        """
        Open today's attendance record.

        Raises:
            MissingAttendanceEvidence: location or photo missing
            OutsideGeofence: geofencing enforced and point outside every location
            AlreadyCheckedIn: an open record exists for today
            AttendanceAlreadyCompleted: today's record is already checked out
        """
        self._require_evidence(location, photo)
        await self._enforce_geofence(auth, location)

        now = self.clock.now()
        today = now.date()

        existing = await self.store.get_today_attendance_record(auth.user_id, today)
        if existing is not None:
            logger.info(
                f"Rejected check-in for user {auth.user_id} on {today}: "
                f"record {existing.id} is {existing.status}"
            )
            if existing.status == AttendanceStatus.CHECKED_IN.value:
                raise AlreadyCheckedIn()
            raise AttendanceAlreadyCompleted()

        record = AttendanceRecord(
            user_id=auth.user_id,
            date=today,
            check_in_time=now,
            check_in_location=location.model_dump(),
            check_in_photo=photo,
            status=AttendanceStatus.CHECKED_IN.value,
            created_at=now,
            updated_at=now,
        )
        try:
            record = await self.store.create_attendance_record(record)
        except RecordConflict:
            logger.warning(f"Concurrent check-in for user {auth.user_id} on {today}")
            raise AlreadyCheckedIn() from None

        logger.info(f"User {auth.user_id} checked in at {now.isoformat()}")
        await self._publish_checkin(auth, record)
        return record

    async def check_out(
        self,
        auth: AuthContext,
        location: Optional[GeoLocation],
        photo: Optional[str],
    ) -> AttendanceRecord:
        """
        Close today's open attendance record and compute hours worked.

        Raises:
            MissingAttendanceEvidence: location or photo missing
            OutsideGeofence: geofencing enforced and point outside every location
            NotCheckedIn: no open record for today
            InvalidInterval: check-out would precede the stored check-in
        """
        self._require_evidence(location, photo)
        await self._enforce_geofence(auth, location)

        now = self.clock.now()
        today = now.date()

        record = await self.store.get_today_attendance_record(auth.user_id, today)
        if record is None or record.status != AttendanceStatus.CHECKED_IN.value:
            logger.info(f"Rejected check-out for user {auth.user_id}: no open record")
            raise NotCheckedIn()
        if record.check_in_time is None:
            raise InvalidInterval(f"Open record {record.id} has no check-in time")

        hours_worked = calculate_hours_worked(record.check_in_time, now)

        updated = await self.store.update_attendance_record(
            record.id,
            {
                "check_out_time": now,
                "check_out_location": location.model_dump(),
                "check_out_photo": photo,
                "status": AttendanceStatus.CHECKED_OUT.value,
                "hours_worked": hours_worked,
                "updated_at": now,
            },
            expected_status=AttendanceStatus.CHECKED_IN.value,
        )
        if updated is None:
            logger.warning(f"Record {record.id} closed concurrently")
            raise NotCheckedIn()

        logger.info(
            f"User {auth.user_id} checked out at {now.isoformat()} "
            f"after {hours_worked} hours"
        )
        await self._publish_checkout(auth, updated)
        return updated

    async def get_today_record(self, auth: AuthContext) -> Optional[AttendanceRecord]:
        return await self.store.get_today_attendance_record(
            auth.user_id, self.clock.today()
        )

    async def get_history(
        self, auth: AuthContext, limit: Optional[int] = None
    ) -> list[AttendanceRecord]:
        return await self.store.get_user_attendance_records(
            auth.user_id, limit or settings.ATTENDANCE_HISTORY_LIMIT
        )

    async def _publish_checkin(self, auth: AuthContext, record: AttendanceRecord) -> None:
        late = is_late_arrival(record.check_in_time, self.late_cutoff)
        location = record.check_in_location or {}
        event = create_event(
            EventType.ATTENDANCE_CHECKIN,
            AttendanceCheckinEvent(
                attendance_id=record.id,
                user_id=record.user_id,
                date=record.date.isoformat(),
                check_in_time=record.check_in_time,
                latitude=location.get("lat", 0.0),
                longitude=location.get("lng", 0.0),
                is_late=late,
            ),
            actor_user_id=auth.user_id,
            actor_role=auth.role.value,
        )
        await publish_event(KafkaTopics.ATTENDANCE_CHECKIN, event, key=record.user_id)

        if late:
            late_event = create_event(
                EventType.ATTENDANCE_LATE,
                AttendanceLateEvent(
                    attendance_id=record.id,
                    user_id=record.user_id,
                    date=record.date.isoformat(),
                    cutoff_time=self.late_cutoff.strftime("%H:%M"),
                    actual_time=record.check_in_time.strftime("%H:%M:%S"),
                ),
                actor_user_id=auth.user_id,
            )
            await publish_event(KafkaTopics.ATTENDANCE_LATE, late_event, key=record.user_id)

    async def _publish_checkout(self, auth: AuthContext, record: AttendanceRecord) -> None:
        event = create_event(
            EventType.ATTENDANCE_CHECKOUT,
            AttendanceCheckoutEvent(
                attendance_id=record.id,
                user_id=record.user_id,
                date=record.date.isoformat(),
                check_in_time=record.check_in_time,
                check_out_time=record.check_out_time,
                hours_worked=str(record.hours_worked),
            ),
            actor_user_id=auth.user_id,
            actor_role=auth.role.value,
        )
        await publish_event(KafkaTopics.ATTENDANCE_CHECKOUT, event, key=record.user_id)
