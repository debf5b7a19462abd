from __future__ import annotations

from enum import Enum


class EmploymentType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    PRN = "PRN"


class StaffStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"


class ShiftType(str, Enum):
    DAY = "DAY"
    EVENING = "EVENING"
    NIGHT = "NIGHT"
    ON_CALL = "ON_CALL"
    FLOAT = "FLOAT"
    RECOVERY = "RECOVERY"


class ShiftStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AttendanceStatus(str, Enum):
    """Attendance outcome stored on each record."""

    ON_TIME = "ON_TIME"
    TARDY = "TARDY"
    LEFT_EARLY = "LEFT_EARLY"
    NO_CALL_NO_SHOW = "NO_CALL_NO_SHOW"
    CALLED_OFF = "CALLED_OFF"
    COMPLETED = "COMPLETED"
    SWAPPED = "SWAPPED"


class ConsequenceLevel(str, Enum):
    """Escalation tier derived from a live point total (advisory only)."""

    NONE = "NONE"
    WARNING = "WARNING"
    PROBATION = "PROBATION"
    TERMINATION = "TERMINATION"


class NotificationChannel(str, Enum):
    IN_APP = "IN_APP"
    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"


class NotificationPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)


_PRIORITY_ORDER = [
    NotificationPriority.LOW,
    NotificationPriority.MEDIUM,
    NotificationPriority.HIGH,
    NotificationPriority.URGENT,
]


class NotificationType(str, Enum):
    SHIFT_SWAP = "SHIFT_SWAP"
    SCHEDULE_CHANGE = "SCHEDULE_CHANGE"
    REMINDER = "REMINDER"
    ALERT = "ALERT"
    ERROR = "ERROR"
    INFO = "INFO"
