from __future__ import annotations

from datetime import date

import pytest

from staff_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from staff_attendance.attendance.service import AttendanceService
from staff_attendance.core.enums import ShiftType
from staff_attendance.policy.loader import load_policy
from staff_attendance.shifts.model import Shift
from staff_attendance.staff.model import StaffMember


def _make_shift(
    shift_id: str = "sh-1",
    *,
    staff_id: str = "s-1",
    shift_date: date = date(2024, 3, 5),
    start_time: str = "07:00",
    end_time: str = "19:00",
    shift_type: ShiftType = ShiftType.DAY,
) -> Shift:
    return Shift(
        shift_id=shift_id,
        staff_id=staff_id,
        shift_type=shift_type,
        shift_date=shift_date,
        start_time=start_time,
        end_time=end_time,
        department="ICU",
        role="RN",
    )


@pytest.fixture
def make_shift():
    return _make_shift


@pytest.fixture
def policy():
    return load_policy()


@pytest.fixture
def staff():
    return StaffMember(staff_id="s-1", name="Jane Doe", email="jane@example.com", role="RN", department="ICU")


@pytest.fixture
def attendance_repo():
    return InMemoryAttendanceRepository()


@pytest.fixture
def service(attendance_repo, policy):
    return AttendanceService(attendance_repo, policy)
