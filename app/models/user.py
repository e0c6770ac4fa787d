"""
User database model and schemas.

Users are never hard-deleted; admins deactivate them through is_active.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    """Role of a user. Exactly one per user."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


class User(SQLModel, table=True):
    """
    ORM model for the users table.

    The id is the subject issued by the identity provider, so the
    authenticated user id maps directly onto this row.
    """

    __tablename__ = "users"

    id: str = Field(primary_key=True, max_length=255)
    email: str = Field(index=True, unique=True, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    profile_image_url: Optional[str] = Field(default=None, max_length=1024)

    role: str = Field(default=UserRole.EMPLOYEE.value, max_length=20, index=True)
    is_active: bool = Field(default=True, index=True)

    # Profile
    department: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    hire_date: Optional[dt.date] = Field(default=None)

    # Timestamps
    created_at: dt.datetime = Field(default_factory=dt.datetime.now, nullable=False)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.now, nullable=False)


class UserPublic(SQLModel):
    """Schema for user responses."""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: UserRole
    is_active: bool
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    hire_date: Optional[dt.date] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class EmployeeUpdate(SQLModel):
    """Admin update of an employee. The id is never writable."""

    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    department: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    hire_date: Optional[dt.date] = None

    @field_validator("role", "is_active")
    @classmethod
    def reject_null(cls, value):
        # Omit the field to leave it unchanged; null is never a valid value
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ProfileUpdate(SQLModel):
    """Self-service profile update. Role and active flag are admin-only."""

    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    profile_image_url: Optional[str] = Field(default=None, max_length=1024)
    department: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
