"""
Domain errors for the Attendance Tracker Service.

Every error carries the HTTP status and a stable machine-readable code so the
API layer can render it without knowing the individual classes.
"""


class AttendanceTrackerError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    code: str = "error"
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# Attendance state machine


class AlreadyCheckedIn(AttendanceTrackerError):
    status_code = 400
    code = "already_checked_in"
    default_message = "Already checked in today"


class AttendanceAlreadyCompleted(AlreadyCheckedIn):
    code = "attendance_completed"
    default_message = "Attendance already completed for today"


class NotCheckedIn(AttendanceTrackerError):
    status_code = 400
    code = "not_checked_in"
    default_message = "Not checked in today. Please check in first."


class MissingAttendanceEvidence(AttendanceTrackerError):
    status_code = 422
    code = "missing_evidence"
    default_message = "Location and photo are required"


class OutsideGeofence(AttendanceTrackerError):
    status_code = 403
    code = "outside_geofence"
    default_message = "Location is outside every approved work location"


class InvalidInterval(AttendanceTrackerError):
    status_code = 409
    code = "invalid_interval"
    default_message = "Check-out time precedes check-in time"


# Store and access


class StoreUnavailable(AttendanceTrackerError):
    status_code = 503
    code = "store_unavailable"
    default_message = "Record store is unavailable, please retry later"


class RecordConflict(AttendanceTrackerError):
    """Raised by a store when a write violates a uniqueness rule."""

    status_code = 409
    code = "conflict"
    default_message = "Record already exists"


class RecordNotFound(AttendanceTrackerError):
    status_code = 404
    code = "not_found"
    default_message = "Record not found"


class AccessDenied(AttendanceTrackerError):
    status_code = 403
    code = "access_denied"
    default_message = "Access denied"


# Invitations and accounts


class InvitationAlreadyExists(AttendanceTrackerError):
    status_code = 409
    code = "invitation_exists"
    default_message = "A pending invitation already exists for this email"


class UserAlreadyExists(AttendanceTrackerError):
    status_code = 409
    code = "user_exists"
    default_message = "User already exists"


class InvitationNotFound(AttendanceTrackerError):
    status_code = 404
    code = "invitation_not_found"
    default_message = "No invitation found for this email"


class InvitationExpired(AttendanceTrackerError):
    status_code = 410
    code = "invitation_expired"
    default_message = "Invitation has expired"


class InvalidResetToken(AttendanceTrackerError):
    status_code = 400
    code = "invalid_reset_token"
    default_message = "Invalid or expired reset token"
