from typing import Annotated, Optional

from fastapi import APIRouter, Query

from app.api.dependencies import AttendanceServiceDep, AuthDep
from app.core.logging import get_logger
from app.models import (
    AttendancePublic,
    AttendanceRecord,
    CheckInRequest,
    CheckOutRequest,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/attendance",
    tags=["attendance"],
)


@router.post("/check-in", response_model=AttendancePublic, status_code=201)
async def check_in(
    request: CheckInRequest,
    auth: AuthDep,
    service: AttendanceServiceDep,
) -> AttendanceRecord:
    """
    Check in for today with a location reading and a selfie.

    The user is always the authenticated caller; the body cannot name another
    user.

    Raises:
        400 already_checked_in / attendance_completed if today's record exists,
        403 outside_geofence when geofencing is enforced
    """
    logger.info(f"Check-in requested by {auth.user_id}")
    return await service.check_in(auth, request.location, request.photo)


@router.post("/check-out", response_model=AttendancePublic)
async def check_out(
    request: CheckOutRequest,
    auth: AuthDep,
    service: AttendanceServiceDep,
) -> AttendanceRecord:
    """
    Check out of today's open record and compute hours worked.

    Raises:
        400 not_checked_in if there is no open record for today,
        409 invalid_interval if the stored check-in lies in the future
    """
    logger.info(f"Check-out requested by {auth.user_id}")
    return await service.check_out(auth, request.location, request.photo)


@router.get("/today", response_model=Optional[AttendancePublic])
async def get_today(
    auth: AuthDep,
    service: AttendanceServiceDep,
) -> Optional[AttendanceRecord]:
    """Today's record for the caller, or null before check-in."""
    return await service.get_today_record(auth)


@router.get("/history", response_model=list[AttendancePublic])
async def get_history(
    auth: AuthDep,
    service: AttendanceServiceDep,
    limit: Annotated[Optional[int], Query(ge=1, le=100)] = None,
) -> list[AttendanceRecord]:
    """The caller's most recent records, newest first."""
    records = await service.get_history(auth, limit)
    logger.info(f"User {auth.user_id} fetched {len(records)} attendance records")
    return records
