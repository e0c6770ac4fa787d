"""
Database models and schemas module.
Contains all SQLModel table definitions and Pydantic schemas.
"""

from app.models.attendance import (
    AttendancePublic,
    AttendanceRecord,
    AttendanceStats,
    AttendanceStatus,
    AttendanceWithUser,
    CheckInRequest,
    CheckOutRequest,
    GeoLocation,
)
from app.models.invitation import (
    EmployeeInvitation,
    InvitationCreate,
    InvitationPublic,
    RegistrationRequest,
)
from app.models.password_reset import (
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetToken,
)
from app.models.user import (
    EmployeeUpdate,
    ProfileUpdate,
    User,
    UserPublic,
    UserRole,
)
from app.models.work_location import (
    GeofenceResult,
    WorkLocation,
    WorkLocationCreate,
    WorkLocationPublic,
)

__all__ = [
    "AttendanceRecord",
    "AttendanceStatus",
    "AttendancePublic",
    "AttendanceWithUser",
    "AttendanceStats",
    "CheckInRequest",
    "CheckOutRequest",
    "GeoLocation",
    "EmployeeInvitation",
    "InvitationCreate",
    "InvitationPublic",
    "RegistrationRequest",
    "PasswordResetToken",
    "PasswordResetRequest",
    "PasswordResetConfirm",
    "User",
    "UserPublic",
    "UserRole",
    "EmployeeUpdate",
    "ProfileUpdate",
    "WorkLocation",
    "WorkLocationCreate",
    "WorkLocationPublic",
    "GeofenceResult",
]
