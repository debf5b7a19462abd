"""Example: drive the attendance workflow without Flask, on the in-memory store."""

from datetime import date, datetime

from staff_attendance.container import build_container
from staff_attendance.core.enums import ShiftType
from staff_attendance.policy.loader import load_policy
from staff_attendance.shifts.model import Shift
from staff_attendance.staff.model import StaffMember


def main():
    container = build_container(policy=load_policy(), backend="memory")

    nurse = StaffMember(staff_id="s1", name="Jane Doe", email="jane@example.com", role="RN", department="ICU")
    shift = Shift(
        shift_id="sh1",
        staff_id="s1",
        shift_type=ShiftType.DAY,
        shift_date=date(2024, 3, 5),
        start_time="07:00",
        end_time="19:00",
        department="ICU",
        role="RN",
    )

    result = container.attendance_service.clock_in(nurse, shift, now=datetime(2024, 3, 5, 7, 22))
    print(result.message)
    print(container.notification_service.dispatch_all(result.notifications))
    print(container.points_service.summary(nurse, date(2024, 3, 5)))


if __name__ == "__main__":
    main()
