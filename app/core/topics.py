"""
Kafka Topic Definitions for the Attendance Tracker Service.

Topic naming follows the pattern: <domain>-<event-type>
"""


class KafkaTopics:
    """
    Central registry of all Kafka topics used by the Attendance Tracker Service.
    """

    # Attendance lifecycle
    ATTENDANCE_CHECKIN = "attendance-checkin"
    ATTENDANCE_CHECKOUT = "attendance-checkout"
    ATTENDANCE_LATE = "attendance-late"

    # Employee onboarding
    EMPLOYEE_REGISTERED = "employee-registered"

    # Notification triggers, consumed by the email service
    NOTIFICATION_INVITATION = "notification-invitation"
    NOTIFICATION_PASSWORD_RESET = "notification-password-reset"

    @classmethod
    def all_topics(cls) -> list[str]:
        """Return list of all topic names."""
        return [
            value
            for name, value in vars(cls).items()
            if isinstance(value, str) and not name.startswith("_")
        ]

