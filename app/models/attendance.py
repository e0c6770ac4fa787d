"""
Attendance database models and schemas.

One AttendanceRecord per user per calendar day:
- created by check-in (status checked_in)
- completed in place by check-out (status checked_out, hours filled)
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlalchemy import JSON, Column, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.base import new_id
from app.models.user import UserPublic


class AttendanceStatus(str, Enum):
    """Status of attendance record."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


class GeoLocation(BaseModel):
    """Coordinate reported by the client, with an optional display address."""

    lat: float = PydanticField(ge=-90, le=90)
    lng: float = PydanticField(ge=-180, le=180)
    address: Optional[str] = None


# Database Model


class AttendanceRecord(SQLModel, table=True):
    """
    ORM model for the attendance_records table.

    The (user_id, date) constraint keeps at most one record per user per day,
    so two racing check-ins cannot both create an open record.
    """

    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(index=True, foreign_key="users.id", max_length=255)
    date: dt.date = Field(index=True, nullable=False)

    check_in_time: Optional[dt.datetime] = Field(default=None, nullable=True)
    check_out_time: Optional[dt.datetime] = Field(default=None, nullable=True)

    # {lat, lng, address}
    check_in_location: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    check_out_location: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Opaque image payloads (base64 data URIs), stored as-is
    check_in_photo: Optional[str] = Field(default=None, sa_column=Column(Text))
    check_out_photo: Optional[str] = Field(default=None, sa_column=Column(Text))

    status: str = Field(default=AttendanceStatus.CHECKED_IN.value, max_length=20)
    hours_worked: Optional[Decimal] = Field(
        default=None, max_digits=5, decimal_places=2
    )

    # Timestamps
    created_at: dt.datetime = Field(default_factory=dt.datetime.now, nullable=False)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.now, nullable=False)


# Request Schemas


class CheckInRequest(SQLModel):
    """Schema for check-in. The user comes from the auth token, never the body."""

    location: GeoLocation
    photo: str = Field(min_length=1)


class CheckOutRequest(SQLModel):
    """Schema for check-out."""

    location: GeoLocation
    photo: str = Field(min_length=1)


# Response Schemas


class AttendancePublic(SQLModel):
    """Schema for attendance responses."""

    id: str
    user_id: str
    date: dt.date
    check_in_time: Optional[dt.datetime] = None
    check_out_time: Optional[dt.datetime] = None
    check_in_location: Optional[GeoLocation] = None
    check_out_location: Optional[GeoLocation] = None
    check_in_photo: Optional[str] = None
    check_out_photo: Optional[str] = None
    status: AttendanceStatus
    hours_worked: Optional[Decimal] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class AttendanceWithUser(AttendancePublic):
    """Attendance record joined with its owner, for the admin views."""

    user: Optional[UserPublic] = None


class AttendanceStats(BaseModel):
    """Workforce numbers for one day."""

    date: str
    total_employees: int = 0
    present_today: int = 0
    late_arrivals: int = 0
    absent: int = 0
    degraded: bool = False
