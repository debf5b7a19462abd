from __future__ import annotations

import copy
from datetime import date, datetime

import pytest

from staff_attendance.attendance import evaluator
from staff_attendance.core.enums import AttendanceStatus
from staff_attendance.policy.loader import load_policy
from staff_attendance.policy.rules import DEFAULT_ATTENDANCE_RULES


@pytest.fixture
def zero_threshold_policy():
    rules = copy.deepcopy(DEFAULT_ATTENDANCE_RULES)
    rules["TARDY"].update({"THRESHOLD_MINUTES": 0, "UNDER_15_MIN": 1, "OVER_15_MIN": 2, "OVER_30_MIN": 3})
    return load_policy(rules)


def test_tardy_minutes_late_and_early():
    d = date(2024, 3, 5)

    assert evaluator.tardy_minutes(d, "07:00", datetime(2024, 3, 5, 7, 22, 40)) == 22
    assert evaluator.tardy_minutes(d, "07:00", datetime(2024, 3, 5, 6, 50)) == -10
    assert evaluator.tardy_minutes(d, "07:00:00", datetime(2024, 3, 5, 7, 0)) == 0


@pytest.mark.parametrize("minutes", [-5, 0, 3, 5])
def test_classify_on_time_up_to_threshold(minutes):
    assert evaluator.classify(minutes, 5) == AttendanceStatus.ON_TIME


@pytest.mark.parametrize("minutes", [6, 15, 90])
def test_classify_tardy_past_threshold(minutes):
    assert evaluator.classify(minutes, 5) == AttendanceStatus.TARDY


def test_tardy_points_strictly_increase(zero_threshold_policy):
    p = zero_threshold_policy

    assert evaluator.points_for(p, AttendanceStatus.TARDY, 10) == 1
    assert evaluator.points_for(p, AttendanceStatus.TARDY, 20) == 2
    assert evaluator.points_for(p, AttendanceStatus.TARDY, 45) == 3


def test_tier_bounds_are_inclusive(policy):
    assert evaluator.points_for(policy, AttendanceStatus.TARDY, 15) == policy.tardy.under_15_min
    assert evaluator.points_for(policy, AttendanceStatus.TARDY, 16) == policy.tardy.over_15_min
    assert evaluator.points_for(policy, AttendanceStatus.TARDY, 30) == policy.tardy.over_15_min
    assert evaluator.points_for(policy, AttendanceStatus.TARDY, 31) == policy.tardy.over_30_min
    assert evaluator.points_for(policy, AttendanceStatus.LEFT_EARLY, 45) == policy.left_early.over_30_min


def test_missing_minutes_uses_untiered_default(policy):
    assert evaluator.points_for(policy, AttendanceStatus.TARDY) == policy.tardy.points
    assert evaluator.points_for(policy, AttendanceStatus.LEFT_EARLY, None) == policy.left_early.points


def test_untiered_statuses(policy):
    assert evaluator.points_for(policy, AttendanceStatus.ON_TIME) == 0
    assert evaluator.points_for(policy, AttendanceStatus.NO_CALL_NO_SHOW) == policy.no_show_points
    assert evaluator.points_for(policy, AttendanceStatus.CALLED_OFF) == policy.called_off.with_approval
    assert evaluator.points_for(policy, AttendanceStatus.COMPLETED) == 0
    assert evaluator.points_for(policy, AttendanceStatus.SWAPPED) == 0


def test_expiration_dates(policy):
    d = date(2024, 1, 1)

    assert evaluator.expiration_date(policy, AttendanceStatus.CALLED_OFF, d) == date(2024, 1, 15)
    assert evaluator.expiration_date(policy, AttendanceStatus.TARDY, d) == date(2024, 1, 31)
    assert evaluator.expiration_date(policy, AttendanceStatus.NO_CALL_NO_SHOW, d) == date(2024, 1, 31)
    assert evaluator.expiration_date(policy, AttendanceStatus.LEFT_EARLY, d) == date(2024, 1, 31)
    assert evaluator.expiration_date(policy, AttendanceStatus.ON_TIME, d) == date(2025, 1, 1)
    assert evaluator.expiration_date(policy, AttendanceStatus.SWAPPED, date(2024, 2, 29)) == date(2025, 2, 28)


def test_has_sufficient_notice_boundary():
    start = datetime(2024, 3, 5, 7, 0)

    assert evaluator.has_sufficient_notice(start, datetime(2024, 3, 4, 7, 0)) is True
    assert evaluator.has_sufficient_notice(start, datetime(2024, 3, 4, 7, 1)) is False
    assert evaluator.has_sufficient_notice(start, datetime(2024, 3, 5, 5, 0), notice_hours=2) is True


def test_overnight_shift_ends_next_day(make_shift):
    shift = make_shift(start_time="19:00", end_time="07:00")

    assert evaluator.shift_end_at(shift) == datetime(2024, 3, 6, 7, 0)
    assert evaluator.left_early_minutes(shift, datetime(2024, 3, 6, 6, 30)) == 30
    assert evaluator.left_early_minutes(shift, datetime(2024, 3, 6, 7, 10)) == 0
