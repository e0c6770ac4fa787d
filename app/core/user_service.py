"""
Profile and employee management, plus the admin attendance listing.
"""

from datetime import date
from typing import Optional

from app.core.clock import Clock, system_clock
from app.core.exceptions import RecordNotFound
from app.core.logging import get_logger
from app.core.security import AuthContext, ensure_admin
from app.models import (
    AttendanceWithUser,
    EmployeeUpdate,
    ProfileUpdate,
    User,
    UserPublic,
)
from app.repositories.base import RecordStore

logger = get_logger(__name__)


class UserService:
    def __init__(self, store: RecordStore, clock: Clock = system_clock):
        self.store = store
        self.clock = clock

    async def get_profile(self, auth: AuthContext) -> User:
        user = await self.store.get_user(auth.user_id)
        if user is None:
            raise RecordNotFound("User not found")
        return user

    async def update_profile(self, auth: AuthContext, changes: ProfileUpdate) -> User:
        data = changes.model_dump(exclude_unset=True)
        data["updated_at"] = self.clock.now()
        user = await self.store.update_user(auth.user_id, data)
        if user is None:
            raise RecordNotFound("User not found")
        logger.info(f"User {auth.user_id} updated profile fields {sorted(data)}")
        return user

    async def list_employees(self, auth: AuthContext) -> list[User]:
        ensure_admin(auth)
        return await self.store.list_users()

    async def update_employee(
        self, auth: AuthContext, user_id: str, changes: EmployeeUpdate
    ) -> User:
        ensure_admin(auth)
        data = changes.model_dump(exclude_unset=True)
        if "role" in data:
            data["role"] = data["role"].value
        data["updated_at"] = self.clock.now()
        user = await self.store.update_user(user_id, data)
        if user is None:
            raise RecordNotFound("Employee not found")
        logger.info(f"Admin {auth.user_id} updated employee {user_id}: {sorted(data)}")
        return user

    async def list_attendance(
        self,
        auth: AuthContext,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceWithUser]:
        """All attendance records (optionally within a date range) with owners."""
        ensure_admin(auth)
        if start_date or end_date:
            records = await self.store.get_attendance_by_date_range(
                start_date or date.min, end_date or date.max
            )
        else:
            records = await self.store.get_all_attendance_records()

        users = {u.id: u for u in await self.store.list_users()}
        result = []
        for record in records:
            owner = users.get(record.user_id)
            item = AttendanceWithUser.model_validate(record, from_attributes=True)
            item.user = UserPublic.model_validate(owner, from_attributes=True) if owner else None
            result.append(item)
        return result
