"""
Employee invitation model and schemas.

An invitation is a pending offer to join with a given role and profile. It is
consumed (deleted) once when the invited person registers.
"""

import datetime as dt
from typing import Optional

from pydantic import EmailStr, field_validator
from sqlmodel import Field, SQLModel

from app.models.base import new_id, normalize_email
from app.models.user import UserRole


class EmployeeInvitation(SQLModel, table=True):
    """ORM model for the employee_invitations table."""

    __tablename__ = "employee_invitations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    email: str = Field(index=True, unique=True, max_length=255)
    first_name: str = Field(max_length=255)
    last_name: str = Field(max_length=255)
    role: str = Field(default=UserRole.EMPLOYEE.value, max_length=20)
    department: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    hire_date: Optional[dt.date] = Field(default=None)
    invited_by: Optional[str] = Field(
        default=None, foreign_key="users.id", max_length=255
    )
    created_at: dt.datetime = Field(default_factory=dt.datetime.now, nullable=False)
    expires_at: dt.datetime = Field(nullable=False)


class InvitationCreate(SQLModel):
    """Schema for an admin inviting an employee."""

    email: EmailStr
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    role: UserRole = UserRole.EMPLOYEE
    department: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    hire_date: Optional[dt.date] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return normalize_email(value)


class InvitationPublic(SQLModel):
    """Schema for invitation responses."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    hire_date: Optional[dt.date] = None
    invited_by: Optional[str] = None
    created_at: dt.datetime
    expires_at: dt.datetime


class RegistrationRequest(SQLModel):
    """Optional name overrides supplied when accepting an invitation."""

    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
