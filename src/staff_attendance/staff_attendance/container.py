from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_NOTICE_HOURS
from .core.exceptions import ConfigurationError
from .database.connection import DBConfig, DatabaseConnection
from .notifications.dispatcher import InMemoryNotificationDispatcher, NotificationDispatcher
from .notifications.service import NotificationService
from .points.service import PointsService
from .policy.model import AttendancePolicy
from .shifts.memory_shift_repository import InMemoryShiftRepository
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .staff.memory_staff_repository import InMemoryStaffRepository
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository


@dataclass(frozen=True)
class Container:
    policy: AttendancePolicy

    staff_repo: StaffRepository
    shifts_repo: ShiftRepository
    attendance_repo: AttendanceRepository
    dispatcher: NotificationDispatcher

    attendance_service: AttendanceService
    points_service: PointsService
    notification_service: NotificationService


def build_container(
    *,
    policy: AttendancePolicy,
    backend: str = "mysql",
    db_config: Optional[dict] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    cancel_notice_hours: int = DEFAULT_NOTICE_HOURS,
) -> Container:
    if backend == "mysql":
        if not db_config:
            raise ConfigurationError("DB_CONFIG is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
        staff_repo = MySQLStaffRepository(conn)
        shifts_repo = MySQLShiftRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
    elif backend == "memory":
        staff_repo = InMemoryStaffRepository()
        shifts_repo = InMemoryShiftRepository()
        attendance_repo = InMemoryAttendanceRepository()
    else:
        raise ConfigurationError(f"Unknown store backend: {backend!r}")

    dispatcher = dispatcher or InMemoryNotificationDispatcher()
    points_service = PointsService(attendance_repo, policy)
    attendance_service = AttendanceService(
        attendance_repo,
        policy,
        points=points_service,
        cancel_notice_hours=cancel_notice_hours,
    )

    return Container(
        policy=policy,
        staff_repo=staff_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        dispatcher=dispatcher,
        attendance_service=attendance_service,
        points_service=points_service,
        notification_service=NotificationService(dispatcher),
    )
