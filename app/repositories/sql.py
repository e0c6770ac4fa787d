"""
SQLModel-backed Record Store.

Each call runs in its own session on a threadpool worker. The unique
(user_id, date) constraint makes a racing duplicate check-in fail as
RecordConflict; attendance updates lock the row (SELECT ... FOR UPDATE where
the database supports it) before comparing the expected status.
"""

import functools
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any, Optional, TypeVar

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlmodel import Session, SQLModel, col, select

from app.core.exceptions import RecordConflict, StoreUnavailable
from app.core.logging import get_logger
from app.models import (
    AttendanceRecord,
    EmployeeInvitation,
    PasswordResetToken,
    User,
    UserRole,
    WorkLocation,
)
from app.repositories.base import RecordStore

logger = get_logger(__name__)

T = TypeVar("T")


def _offloaded(method: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """Run a blocking store method in the threadpool so the event loop stays free."""

    @functools.wraps(method)
    async def wrapper(*args, **kwargs) -> T:
        return await run_in_threadpool(method, *args, **kwargs)

    return wrapper


class SqlRecordStore(RecordStore):
    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with Session(self.engine, expire_on_commit=False) as session:
                yield session
        except IntegrityError as e:
            logger.info(f"Uniqueness conflict: {e.orig}")
            raise RecordConflict() from e
        except DBAPIError as e:
            logger.error(f"Database error: {e}")
            raise StoreUnavailable() from e

    def _insert(self, instance: SQLModel) -> Any:
        with self._session() as session:
            session.add(instance)
            session.commit()
            session.refresh(instance)
            return instance

    # Users

    @_offloaded
    def get_user(self, user_id: str) -> Optional[User]:
        with self._session() as session:
            return session.get(User, user_id)

    @_offloaded
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._session() as session:
            statement = select(User).where(User.email == email)
            return session.exec(statement).first()

    @_offloaded
    def list_users(self) -> list[User]:
        with self._session() as session:
            statement = select(User).order_by(col(User.created_at).desc())
            return list(session.exec(statement).all())

    @_offloaded
    def list_active_employees(self) -> list[User]:
        with self._session() as session:
            statement = select(User).where(
                (User.role == UserRole.EMPLOYEE.value) & (col(User.is_active).is_(True))
            )
            return list(session.exec(statement).all())

    @_offloaded
    def create_user(self, user: User) -> User:
        return self._insert(user)

    @_offloaded
    def update_user(
        self, user_id: str, changes: dict[str, Any]
    ) -> Optional[User]:
        with self._session() as session:
            user = session.get(User, user_id)
            if user is None:
                return None
            for field, value in changes.items():
                setattr(user, field, value)
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    # Attendance

    @_offloaded
    def create_attendance_record(
        self, record: AttendanceRecord
    ) -> AttendanceRecord:
        return self._insert(record)

    @_offloaded
    def update_attendance_record(
        self,
        record_id: str,
        changes: dict[str, Any],
        expected_status: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        with self._session() as session:
            record = session.get(AttendanceRecord, record_id, with_for_update=True)
            if record is None:
                return None
            if expected_status is not None and record.status != expected_status:
                logger.info(
                    f"Attendance {record_id} is {record.status}, expected {expected_status}"
                )
                return None
            for field, value in changes.items():
                setattr(record, field, value)
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    @_offloaded
    def get_attendance_record(
        self, record_id: str
    ) -> Optional[AttendanceRecord]:
        with self._session() as session:
            return session.get(AttendanceRecord, record_id)

    @_offloaded
    def get_today_attendance_record(
        self, user_id: str, day: date
    ) -> Optional[AttendanceRecord]:
        with self._session() as session:
            statement = select(AttendanceRecord).where(
                (AttendanceRecord.user_id == user_id) & (AttendanceRecord.date == day)
            )
            return session.exec(statement).first()

    @_offloaded
    def get_user_attendance_records(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[AttendanceRecord]:
        with self._session() as session:
            statement = (
                select(AttendanceRecord)
                .where(AttendanceRecord.user_id == user_id)
                .order_by(
                    col(AttendanceRecord.date).desc(),
                    col(AttendanceRecord.created_at).desc(),
                )
            )
            if limit:
                statement = statement.limit(limit)
            return list(session.exec(statement).all())

    @_offloaded
    def get_all_attendance_records(self) -> list[AttendanceRecord]:
        with self._session() as session:
            statement = select(AttendanceRecord).order_by(
                col(AttendanceRecord.date).desc(),
                col(AttendanceRecord.created_at).desc(),
            )
            return list(session.exec(statement).all())

    @_offloaded
    def get_attendance_by_date_range(
        self, start: date, end: date
    ) -> list[AttendanceRecord]:
        with self._session() as session:
            statement = (
                select(AttendanceRecord)
                .where(
                    (col(AttendanceRecord.date) >= start)
                    & (col(AttendanceRecord.date) <= end)
                )
                .order_by(
                    col(AttendanceRecord.date).desc(),
                    col(AttendanceRecord.created_at).desc(),
                )
            )
            return list(session.exec(statement).all())

    # Invitations

    @_offloaded
    def create_invitation(
        self, invitation: EmployeeInvitation
    ) -> EmployeeInvitation:
        return self._insert(invitation)

    @_offloaded
    def list_invitations(self) -> list[EmployeeInvitation]:
        with self._session() as session:
            statement = select(EmployeeInvitation).order_by(
                col(EmployeeInvitation.created_at).desc()
            )
            return list(session.exec(statement).all())

    @_offloaded
    def get_invitation_by_email(
        self, email: str
    ) -> Optional[EmployeeInvitation]:
        with self._session() as session:
            statement = select(EmployeeInvitation).where(
                EmployeeInvitation.email == email
            )
            return session.exec(statement).first()

    @_offloaded
    def delete_invitation(self, invitation_id: str) -> bool:
        with self._session() as session:
            invitation = session.get(EmployeeInvitation, invitation_id)
            if invitation is None:
                return False
            session.delete(invitation)
            session.commit()
            return True

    # Work locations

    @_offloaded
    def list_active_work_locations(self) -> list[WorkLocation]:
        with self._session() as session:
            statement = select(WorkLocation).where(col(WorkLocation.is_active).is_(True))
            return list(session.exec(statement).all())

    @_offloaded
    def create_work_location(self, location: WorkLocation) -> WorkLocation:
        return self._insert(location)

    # Password reset tokens

    @_offloaded
    def create_reset_token(
        self, token: PasswordResetToken
    ) -> PasswordResetToken:
        return self._insert(token)

    @_offloaded
    def get_reset_token(self, token: str) -> Optional[PasswordResetToken]:
        with self._session() as session:
            statement = select(PasswordResetToken).where(
                PasswordResetToken.token == token
            )
            return session.exec(statement).first()

    @_offloaded
    def mark_reset_token_used(self, token_id: str) -> bool:
        with self._session() as session:
            token = session.get(PasswordResetToken, token_id, with_for_update=True)
            if token is None or token.used:
                return False
            token.used = True
            session.add(token)
            session.commit()
            return True

