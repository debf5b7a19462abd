from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from staff_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from staff_attendance.attendance.model import AttendanceRecord
from staff_attendance.core.enums import AttendanceStatus
from staff_attendance.core.exceptions import (
    DuplicateActiveRecordError,
    NotFoundError,
    RecoveryLimitError,
    ShiftReleasedError,
    ValidationError,
)


def _record(shift_id="sh-1", *, staff_id="s-1", event_date=date(2024, 3, 5), **kwargs) -> AttendanceRecord:
    return AttendanceRecord(
        staff_id=staff_id,
        shift_id=shift_id,
        event_date=event_date,
        status=kwargs.pop("status", AttendanceStatus.ON_TIME),
        points=kwargs.pop("points", 0),
        **kwargs,
    )


def test_create_assigns_id_and_indexes_active_shift():
    repo = InMemoryAttendanceRepository()

    saved = repo.create(_record())

    assert saved.attendance_id == 1
    assert repo.find_active_by_shift("sh-1") == saved
    assert repo.get_by_id(1) == saved


def test_second_active_record_for_shift_rejected():
    repo = InMemoryAttendanceRepository()
    repo.create(_record())

    with pytest.raises(DuplicateActiveRecordError):
        repo.create(_record(status=AttendanceStatus.TARDY, points=1))

    assert len(repo.list_for_staff("s-1")) == 1


def test_inactive_records_do_not_block_the_shift():
    repo = InMemoryAttendanceRepository()
    repo.create(_record(status=AttendanceStatus.SWAPPED, is_swapped=True, swap_with_staff_id="s-2"))

    assert repo.find_active_by_shift("sh-1") is None
    repo.create(_record(staff_id="s-2"))
    assert repo.find_active_by_shift("sh-1").staff_id == "s-2"


def test_concurrent_creates_only_one_wins():
    repo = InMemoryAttendanceRepository()
    barrier = threading.Barrier(8)
    outcomes: list[str] = []

    def worker():
        barrier.wait()
        try:
            repo.create(_record())
            outcomes.append("ok")
        except DuplicateActiveRecordError:
            outcomes.append("dup")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("dup") == 7


def test_released_shift_blocks_the_same_staff_member():
    repo = InMemoryAttendanceRepository()
    repo.create(_record(status=AttendanceStatus.CALLED_OFF, points=2, is_cancelled=True))

    with pytest.raises(ShiftReleasedError):
        repo.create(_record(status=AttendanceStatus.CALLED_OFF, points=1))
    with pytest.raises(ShiftReleasedError):
        repo.create(_record(status=AttendanceStatus.CALLED_OFF, points=0, is_cancelled=True))

    assert len(repo.list_for_staff("s-1")) == 1


def _race(workers: int, create) -> list[str]:
    barrier = threading.Barrier(workers)
    outcomes: list[str] = []

    def worker(i):
        barrier.wait()
        try:
            create(i)
            outcomes.append("ok")
        except (ShiftReleasedError, RecoveryLimitError):
            outcomes.append("rejected")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


def test_concurrent_cancels_only_one_wins():
    repo = InMemoryAttendanceRepository()

    outcomes = _race(8, lambda i: repo.create(_record(status=AttendanceStatus.CALLED_OFF, is_cancelled=True)))

    assert outcomes.count("ok") == 1
    assert outcomes.count("rejected") == 7


def test_concurrent_recovery_credits_respect_monthly_limit():
    repo = InMemoryAttendanceRepository()

    def complete(i):
        credit = _record(f"rec-{i}", event_date=date(2024, 3, 1 + i), status=AttendanceStatus.COMPLETED, points=-2)
        repo.create(credit, monthly_credit_limit=2)

    outcomes = _race(6, complete)

    assert outcomes.count("ok") == 2
    assert len(repo.list_for_staff("s-1")) == 2


def test_find_by_staff_and_date_range_is_inclusive():
    repo = InMemoryAttendanceRepository()
    repo.create(_record("a", event_date=date(2024, 3, 4)))
    repo.create(_record("b", event_date=date(2024, 3, 5)))
    repo.create(_record("c", event_date=date(2024, 3, 6)))
    repo.create(_record("d", staff_id="s-2", event_date=date(2024, 3, 5)))

    found = repo.find_by_staff_and_date_range("s-1", date(2024, 3, 4), date(2024, 3, 5))

    assert [r.shift_id for r in found] == ["a", "b"]


def test_update_patches_clock_out():
    repo = InMemoryAttendanceRepository()
    saved = repo.create(_record(clock_in=datetime(2024, 3, 5, 7, 0)))

    updated = repo.update(saved.attendance_id, {"clock_out": datetime(2024, 3, 5, 19, 0)})

    assert updated.clock_out == datetime(2024, 3, 5, 19, 0)
    assert updated.points == saved.points
    assert repo.get_by_id(saved.attendance_id) == updated


def test_update_missing_id_raises_not_found():
    repo = InMemoryAttendanceRepository()

    with pytest.raises(NotFoundError):
        repo.update(42, {"notes": "x"})


def test_update_cannot_touch_points():
    repo = InMemoryAttendanceRepository()
    saved = repo.create(_record())

    with pytest.raises(ValidationError):
        repo.update(saved.attendance_id, {"points": 5})
