"""
Tests for the check-in / check-out state machine.
"""

import asyncio
from datetime import datetime, time
from decimal import Decimal

import pytest

from app.core.attendance_service import AttendanceService
from app.core.exceptions import (
    AlreadyCheckedIn,
    AttendanceAlreadyCompleted,
    InvalidInterval,
    MissingAttendanceEvidence,
    NotCheckedIn,
    OutsideGeofence,
)
from app.models import AttendanceStatus, GeoLocation, WorkLocation
from app.repositories import InMemoryRecordStore
from tests.factories import OFFICE, SELFIE


@pytest.fixture
def service(store, clock):
    return AttendanceService(store, clock, late_cutoff=time(9, 0), geofence_enforced=False)


async def test_check_in_creates_open_record(service, store, employee, clock):
    record = await service.check_in(employee, OFFICE, SELFIE)

    assert record.user_id == "alice"
    assert record.date == clock.today()
    assert record.check_in_time == clock.now()
    assert record.status == AttendanceStatus.CHECKED_IN.value
    assert record.check_out_time is None
    assert record.hours_worked is None
    assert len(store.attendance) == 1


async def test_double_check_in_is_rejected(service, store, employee, clock):
    """A second check-in without a check-out fails and leaves one record."""
    await service.check_in(employee, OFFICE, SELFIE)
    clock.advance(minutes=1)

    with pytest.raises(AlreadyCheckedIn) as exc_info:
        await service.check_in(employee, OFFICE, SELFIE)

    assert exc_info.value.code == "already_checked_in"
    assert len(store.attendance) == 1


async def test_check_in_after_check_out_same_day_is_rejected(service, store, employee, clock):
    await service.check_in(employee, OFFICE, SELFIE)
    clock.advance(hours=8)
    await service.check_out(employee, OFFICE, SELFIE)

    with pytest.raises(AttendanceAlreadyCompleted):
        await service.check_in(employee, OFFICE, SELFIE)
    assert len(store.attendance) == 1


async def test_check_out_without_check_in_is_rejected(service, employee):
    with pytest.raises(NotCheckedIn) as exc_info:
        await service.check_out(employee, OFFICE, SELFIE)
    assert exc_info.value.code == "not_checked_in"


async def test_double_check_out_is_rejected(service, employee, clock):
    await service.check_in(employee, OFFICE, SELFIE)
    clock.advance(hours=4)
    await service.check_out(employee, OFFICE, SELFIE)
    clock.advance(minutes=1)

    with pytest.raises(NotCheckedIn):
        await service.check_out(employee, OFFICE, SELFIE)


async def test_check_out_computes_hours_worked(service, employee, clock):
    """08:30 -> 17:15:09 is 8.7525 hours, stored as 8.75."""
    await service.check_in(employee, OFFICE, SELFIE)
    clock.set(datetime(2024, 3, 4, 17, 15, 9))
    exit_point = GeoLocation(lat=10.7770, lng=106.7010)

    record = await service.check_out(employee, exit_point, "data:image/png;base64,AAAA")

    assert record.status == AttendanceStatus.CHECKED_OUT.value
    assert record.check_out_time == datetime(2024, 3, 4, 17, 15, 9)
    assert record.hours_worked == Decimal("8.75")
    assert record.check_out_location == exit_point.model_dump()
    assert record.check_out_photo == "data:image/png;base64,AAAA"
    # Check-in data is untouched by check-out
    assert record.check_in_location == OFFICE.model_dump()
    assert record.check_in_photo == SELFIE


async def test_check_out_before_check_in_time_raises_invalid_interval(service, employee, clock):
    await service.check_in(employee, OFFICE, SELFIE)
    clock.set(datetime(2024, 3, 4, 8, 0))

    with pytest.raises(InvalidInterval):
        await service.check_out(employee, OFFICE, SELFIE)

    record = await service.get_today_record(employee)
    assert record.status == AttendanceStatus.CHECKED_IN.value


async def test_next_day_starts_a_new_record(service, store, employee, clock):
    await service.check_in(employee, OFFICE, SELFIE)
    clock.advance(hours=9)
    await service.check_out(employee, OFFICE, SELFIE)

    clock.set(datetime(2024, 3, 5, 8, 45))
    assert await service.get_today_record(employee) is None

    record = await service.check_in(employee, OFFICE, SELFIE)
    assert record.date == datetime(2024, 3, 5).date()
    assert len(store.attendance) == 2


@pytest.mark.parametrize(
    "location,photo",
    [
        (None, SELFIE),
        (OFFICE, None),
        (OFFICE, ""),
    ],
)
async def test_missing_evidence_is_rejected(service, store, employee, location, photo):
    with pytest.raises(MissingAttendanceEvidence):
        await service.check_in(employee, location, photo)
    assert store.attendance == {}


async def test_get_today_record_is_a_pure_read(service, employee):
    await service.check_in(employee, OFFICE, SELFIE)

    first = await service.get_today_record(employee)
    second = await service.get_today_record(employee)
    third = await service.get_today_record(employee)

    assert first.model_dump() == second.model_dump() == third.model_dump()


async def test_location_and_photo_round_trip_unchanged(service, employee):
    location = GeoLocation(lat=-33.865143, lng=151.2099, address="Circular Quay, Sydney")
    photo = "data:image/jpeg;base64," + "QUJD" * 500

    await service.check_in(employee, location, photo)
    record = await service.get_today_record(employee)

    assert GeoLocation.model_validate(record.check_in_location) == location
    assert record.check_in_photo == photo


async def test_returned_records_do_not_alias_store_state(service, store, employee):
    record = await service.check_in(employee, OFFICE, SELFIE)
    record.check_in_location["address"] = "changed"

    stored = await service.get_today_record(employee)
    assert stored.check_in_location["address"] == OFFICE.address


async def test_history_is_newest_first_and_limited(service, employee, clock):
    for day in range(4, 8):
        clock.set(datetime(2024, 3, day, 8, 30))
        await service.check_in(employee, OFFICE, SELFIE)

    history = await service.get_history(employee, limit=3)

    assert [r.date.day for r in history] == [7, 6, 5]


async def test_history_only_contains_own_records(service, employee, admin):
    await service.check_in(employee, OFFICE, SELFIE)
    await service.check_in(admin, OFFICE, SELFIE)

    history = await service.get_history(employee)
    assert [r.user_id for r in history] == ["alice"]


async def test_concurrent_check_ins_create_one_record(service, store, employee):
    results = await asyncio.gather(
        service.check_in(employee, OFFICE, SELFIE),
        service.check_in(employee, OFFICE, SELFIE),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], AlreadyCheckedIn)
    assert len(store.attendance) == 1


class StaleReadStore(InMemoryRecordStore):
    """Store whose today-lookup always misses, as when two requests race."""

    async def get_today_attendance_record(self, user_id, day):
        return None


async def test_lost_race_on_insert_maps_to_already_checked_in(clock, employee):
    store = StaleReadStore()
    service = AttendanceService(store, clock, geofence_enforced=False)
    await service.check_in(employee, OFFICE, SELFIE)

    with pytest.raises(AlreadyCheckedIn):
        await service.check_in(employee, OFFICE, SELFIE)
    assert len(store.attendance) == 1


# Geofencing


@pytest.fixture
async def fenced_service(store, clock):
    await store.create_work_location(
        WorkLocation(
            name="HQ",
            address="1 Office Street",
            latitude=OFFICE.lat,
            longitude=OFFICE.lng,
            radius=150.0,
        )
    )
    return AttendanceService(store, clock, geofence_enforced=True)


async def test_enforced_geofence_accepts_point_inside(fenced_service, employee):
    nearby = GeoLocation(lat=OFFICE.lat + 0.0005, lng=OFFICE.lng)
    record = await fenced_service.check_in(employee, nearby, SELFIE)
    assert record.status == AttendanceStatus.CHECKED_IN.value


async def test_enforced_geofence_rejects_point_outside(fenced_service, store, employee):
    far_away = GeoLocation(lat=OFFICE.lat + 0.05, lng=OFFICE.lng)

    with pytest.raises(OutsideGeofence):
        await fenced_service.check_in(employee, far_away, SELFIE)
    assert store.attendance == {}


async def test_advisory_geofence_accepts_any_point(service, store, employee):
    await store.create_work_location(
        WorkLocation(name="HQ", address="x", latitude=0.0, longitude=0.0, radius=10.0)
    )
    record = await service.check_in(employee, GeoLocation(lat=45.0, lng=45.0), SELFIE)
    assert record.status == AttendanceStatus.CHECKED_IN.value


async def test_enforced_geofence_without_locations_is_skipped(store, clock, employee):
    service = AttendanceService(store, clock, geofence_enforced=True)
    record = await service.check_in(employee, GeoLocation(lat=1.0, lng=1.0), SELFIE)
    assert record.status == AttendanceStatus.CHECKED_IN.value
