"""
Abstract Record Store.

Backends must guarantee:
- at most one attendance record per (user_id, date); a second insert raises
  RecordConflict instead of creating a duplicate
- single-record read-modify-write is atomic (update_attendance_record with an
  expected_status only applies when the stored status still matches)
- connectivity failures surface as StoreUnavailable
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from app.models import (
    AttendanceRecord,
    EmployeeInvitation,
    PasswordResetToken,
    User,
    WorkLocation,
)


class RecordStore(ABC):
    # Users

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    async def list_users(self) -> list[User]: ...

    @abstractmethod
    async def list_active_employees(self) -> list[User]:
        """Roster: active users with the employee role."""

    @abstractmethod
    async def create_user(self, user: User) -> User: ...

    @abstractmethod
    async def update_user(
        self, user_id: str, changes: dict[str, Any]
    ) -> Optional[User]: ...

    # Attendance

    @abstractmethod
    async def create_attendance_record(
        self, record: AttendanceRecord
    ) -> AttendanceRecord: ...

    @abstractmethod
    async def update_attendance_record(
        self,
        record_id: str,
        changes: dict[str, Any],
        expected_status: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        """Apply changes; return None if missing or the status moved on."""

    @abstractmethod
    async def get_attendance_record(
        self, record_id: str
    ) -> Optional[AttendanceRecord]: ...

    @abstractmethod
    async def get_today_attendance_record(
        self, user_id: str, day: date
    ) -> Optional[AttendanceRecord]: ...

    @abstractmethod
    async def get_user_attendance_records(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[AttendanceRecord]:
        """Newest first."""

    @abstractmethod
    async def get_all_attendance_records(self) -> list[AttendanceRecord]: ...

    @abstractmethod
    async def get_attendance_by_date_range(
        self, start: date, end: date
    ) -> list[AttendanceRecord]:
        """Records with start <= date <= end, newest first."""

    # Invitations

    @abstractmethod
    async def create_invitation(
        self, invitation: EmployeeInvitation
    ) -> EmployeeInvitation: ...

    @abstractmethod
    async def list_invitations(self) -> list[EmployeeInvitation]: ...

    @abstractmethod
    async def get_invitation_by_email(
        self, email: str
    ) -> Optional[EmployeeInvitation]: ...

    @abstractmethod
    async def delete_invitation(self, invitation_id: str) -> bool: ...

    # Work locations

    @abstractmethod
    async def list_active_work_locations(self) -> list[WorkLocation]: ...

    @abstractmethod
    async def create_work_location(self, location: WorkLocation) -> WorkLocation: ...

    # Password reset tokens

    @abstractmethod
    async def create_reset_token(
        self, token: PasswordResetToken
    ) -> PasswordResetToken: ...

    @abstractmethod
    async def get_reset_token(self, token: str) -> Optional[PasswordResetToken]: ...

    @abstractmethod
    async def mark_reset_token_used(self, token_id: str) -> bool:
        """Flip used to True; False if missing or already used."""
