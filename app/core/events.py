"""
Event definitions for the Attendance Tracker Service.

Defines the event types and payloads published to Kafka:
- Check-in/Check-out events
- Late arrival events
- Invitation and registration events
- Password reset notifications
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types produced by the Attendance Tracker Service."""

    ATTENDANCE_CHECKIN = "attendance.checkin"
    ATTENDANCE_CHECKOUT = "attendance.checkout"
    ATTENDANCE_LATE = "attendance.late"

    EMPLOYEE_INVITED = "employee.invited"
    EMPLOYEE_REGISTERED = "employee.registered"

    PASSWORD_RESET_REQUESTED = "password.reset.requested"


class EventMetadata(BaseModel):
    """Metadata attached to every event for tracing and correlation."""

    source_service: str = "attendance-tracker-service"
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))
    actor_user_id: Optional[str] = None
    actor_role: Optional[str] = None


class EventEnvelope(BaseModel):
    """
    Standard envelope for all events.
    Provides consistent structure for Kafka messages.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: EventType
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    version: str = "1.0"
    data: dict[str, Any]
    metadata: EventMetadata = Field(default_factory=EventMetadata)


# Attendance Event Data Models


class AttendanceCheckinEvent(BaseModel):
    """Data for attendance.checkin event."""

    attendance_id: str
    user_id: str
    date: str  # YYYY-MM-DD format
    check_in_time: datetime
    latitude: float
    longitude: float
    is_late: bool = False


class AttendanceCheckoutEvent(BaseModel):
    """Data for attendance.checkout event."""

    attendance_id: str
    user_id: str
    date: str
    check_in_time: datetime
    check_out_time: datetime
    hours_worked: str  # Decimal rendered as text to keep two places


class AttendanceLateEvent(BaseModel):
    """Data for attendance.late event."""

    attendance_id: str
    user_id: str
    date: str
    cutoff_time: str  # e.g. "09:00"
    actual_time: str


# Onboarding Event Data Models


class EmployeeInvitedEvent(BaseModel):
    """Data for employee.invited event."""

    invitation_id: str
    email: str
    first_name: str
    last_name: str
    role: str
    department: Optional[str] = None
    invited_by: Optional[str] = None
    expires_at: datetime


class EmployeeRegisteredEvent(BaseModel):
    """Data for employee.registered event."""

    user_id: str
    email: str
    role: str
    department: Optional[str] = None


class PasswordResetRequestedEvent(BaseModel):
    """Data for password.reset.requested event."""

    user_id: str
    email: str
    first_name: Optional[str] = None
    token: str
    expires_at: datetime


def create_event(
    event_type: EventType,
    data: BaseModel,
    actor_user_id: Optional[str] = None,
    actor_role: Optional[str] = None,
) -> EventEnvelope:
    """
    Helper function to create an event envelope with proper metadata.

    Args:
        event_type: Type of the event
        data: Event data as a Pydantic model
        actor_user_id: ID of the user performing the action
        actor_role: Role of the user performing the action

    Returns:
        EventEnvelope ready for publishing
    """
    metadata = EventMetadata(actor_user_id=actor_user_id, actor_role=actor_role)

    return EventEnvelope(
        event_type=event_type,
        data=data.model_dump(mode="json"),
        metadata=metadata,
    )
