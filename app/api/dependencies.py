"""
Shared API dependencies.
Contains reusable dependency functions for FastAPI endpoints: the record
store, the clock, the authenticated caller and the domain services.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from app.core.attendance_service import AttendanceService
from app.core.clock import Clock, system_clock
from app.core.database import engine
from app.core.invitation_service import InvitationService
from app.core.location_service import LocationService
from app.core.logging import get_logger
from app.core.password_reset_service import PasswordResetService
from app.core.security import AuthContext, TokenData, ensure_admin, get_current_token
from app.core.statistics_service import StatisticsService
from app.core.user_service import UserService
from app.models import UserRole
from app.repositories import RecordStore, SqlRecordStore

logger = get_logger(__name__)


@lru_cache
def get_record_store() -> RecordStore:
    return SqlRecordStore(engine)


def get_clock() -> Clock:
    return system_clock


StoreDep = Annotated[RecordStore, Depends(get_record_store)]
ClockDep = Annotated[Clock, Depends(get_clock)]
TokenDep = Annotated[TokenData, Depends(get_current_token)]


async def get_auth_context(token: TokenDep, store: StoreDep) -> AuthContext:
    """Resolve the token subject to a registered, active user."""
    user = await store.get_user(token.sub)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not registered",
        )
    if not user.is_active:
        logger.warning(f"Inactive user {user.id} attempted access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )
    return AuthContext(user_id=user.id, role=UserRole(user.role), email=user.email)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def get_admin_context(auth: AuthDep) -> AuthContext:
    ensure_admin(auth)
    return auth


AdminDep = Annotated[AuthContext, Depends(get_admin_context)]


def get_attendance_service(store: StoreDep, clock: ClockDep) -> AttendanceService:
    return AttendanceService(store, clock)


def get_statistics_service(store: StoreDep, clock: ClockDep) -> StatisticsService:
    return StatisticsService(store, clock)


def get_invitation_service(store: StoreDep, clock: ClockDep) -> InvitationService:
    return InvitationService(store, clock)


def get_user_service(store: StoreDep, clock: ClockDep) -> UserService:
    return UserService(store, clock)


def get_location_service(store: StoreDep, clock: ClockDep) -> LocationService:
    return LocationService(store, clock)


def get_password_reset_service(
    store: StoreDep, clock: ClockDep
) -> PasswordResetService:
    return PasswordResetService(store, clock)


AttendanceServiceDep = Annotated[AttendanceService, Depends(get_attendance_service)]
StatisticsServiceDep = Annotated[StatisticsService, Depends(get_statistics_service)]
InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
LocationServiceDep = Annotated[LocationService, Depends(get_location_service)]
PasswordResetServiceDep = Annotated[
    PasswordResetService, Depends(get_password_reset_service)
]
