"""
In-memory Record Store.

Embedded backend for tests and single-process deployments. Every write and
every read hands out copies, so callers never alias stored state. Inserts
check the unique indexes without awaiting, which makes check-and-insert atomic
under the event loop.
"""

import copy
from datetime import date
from typing import Any, Optional, TypeVar

from sqlmodel import SQLModel

from app.core.exceptions import RecordConflict
from app.models import (
    AttendanceRecord,
    EmployeeInvitation,
    PasswordResetToken,
    User,
    UserRole,
    WorkLocation,
)
from app.repositories.base import RecordStore

ModelT = TypeVar("ModelT", bound=SQLModel)


def _clone(instance: ModelT) -> ModelT:
    return type(instance)(**copy.deepcopy(instance.model_dump()))


def _newest_first(records: list[AttendanceRecord]) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: (r.date, r.created_at), reverse=True)


class InMemoryRecordStore(RecordStore):
    def __init__(self):
        self.users: dict[str, User] = {}
        self.attendance: dict[str, AttendanceRecord] = {}
        self.invitations: dict[str, EmployeeInvitation] = {}
        self.work_locations: dict[str, WorkLocation] = {}
        self.reset_tokens: dict[str, PasswordResetToken] = {}

    # Users

    async def get_user(self, user_id: str) -> Optional[User]:
        user = self.users.get(user_id)
        return _clone(user) if user else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        for user in self.users.values():
            if user.email == email:
                return _clone(user)
        return None

    async def list_users(self) -> list[User]:
        users = sorted(self.users.values(), key=lambda u: u.created_at, reverse=True)
        return [_clone(u) for u in users]

    async def list_active_employees(self) -> list[User]:
        return [
            _clone(u)
            for u in self.users.values()
            if u.role == UserRole.EMPLOYEE.value and u.is_active
        ]

    async def create_user(self, user: User) -> User:
        if user.id in self.users or any(
            u.email == user.email for u in self.users.values()
        ):
            raise RecordConflict("User already exists")
        self.users[user.id] = _clone(user)
        return _clone(user)

    async def update_user(
        self, user_id: str, changes: dict[str, Any]
    ) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        for field, value in changes.items():
            setattr(user, field, value)
        return _clone(user)

    # Attendance

    async def create_attendance_record(
        self, record: AttendanceRecord
    ) -> AttendanceRecord:
        for existing in self.attendance.values():
            if existing.user_id == record.user_id and existing.date == record.date:
                raise RecordConflict("Attendance record already exists for this day")
        self.attendance[record.id] = _clone(record)
        return _clone(record)

    async def update_attendance_record(
        self,
        record_id: str,
        changes: dict[str, Any],
        expected_status: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        record = self.attendance.get(record_id)
        if record is None:
            return None
        if expected_status is not None and record.status != expected_status:
            return None
        for field, value in copy.deepcopy(changes).items():
            setattr(record, field, value)
        return _clone(record)

    async def get_attendance_record(
        self, record_id: str
    ) -> Optional[AttendanceRecord]:
        record = self.attendance.get(record_id)
        return _clone(record) if record else None

    async def get_today_attendance_record(
        self, user_id: str, day: date
    ) -> Optional[AttendanceRecord]:
        for record in self.attendance.values():
            if record.user_id == user_id and record.date == day:
                return _clone(record)
        return None

    async def get_user_attendance_records(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[AttendanceRecord]:
        records = _newest_first(
            [r for r in self.attendance.values() if r.user_id == user_id]
        )
        if limit:
            records = records[:limit]
        return [_clone(r) for r in records]

    async def get_all_attendance_records(self) -> list[AttendanceRecord]:
        return [_clone(r) for r in _newest_first(list(self.attendance.values()))]

    async def get_attendance_by_date_range(
        self, start: date, end: date
    ) -> list[AttendanceRecord]:
        records = [r for r in self.attendance.values() if start <= r.date <= end]
        return [_clone(r) for r in _newest_first(records)]

    # Invitations

    async def create_invitation(
        self, invitation: EmployeeInvitation
    ) -> EmployeeInvitation:
        if any(i.email == invitation.email for i in self.invitations.values()):
            raise RecordConflict("Invitation already exists for this email")
        self.invitations[invitation.id] = _clone(invitation)
        return _clone(invitation)

    async def list_invitations(self) -> list[EmployeeInvitation]:
        invitations = sorted(
            self.invitations.values(), key=lambda i: i.created_at, reverse=True
        )
        return [_clone(i) for i in invitations]

    async def get_invitation_by_email(
        self, email: str
    ) -> Optional[EmployeeInvitation]:
        for invitation in self.invitations.values():
            if invitation.email == email:
                return _clone(invitation)
        return None

    async def delete_invitation(self, invitation_id: str) -> bool:
        return self.invitations.pop(invitation_id, None) is not None

    # Work locations

    async def list_active_work_locations(self) -> list[WorkLocation]:
        return [_clone(w) for w in self.work_locations.values() if w.is_active]

    async def create_work_location(self, location: WorkLocation) -> WorkLocation:
        self.work_locations[location.id] = _clone(location)
        return _clone(location)

    # Password reset tokens

    async def create_reset_token(
        self, token: PasswordResetToken
    ) -> PasswordResetToken:
        if any(t.token == token.token for t in self.reset_tokens.values()):
            raise RecordConflict("Reset token already exists")
        self.reset_tokens[token.id] = _clone(token)
        return _clone(token)

    async def get_reset_token(self, token: str) -> Optional[PasswordResetToken]:
        for stored in self.reset_tokens.values():
            if stored.token == token:
                return _clone(stored)
        return None

    async def mark_reset_token_used(self, token_id: str) -> bool:
        token = self.reset_tokens.get(token_id)
        if token is None or token.used:
            return False
        token.used = True
        return True
