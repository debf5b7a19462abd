"""Pure attendance rules: tardiness, points, expiration and notice.

Every function here is deterministic and free of I/O. Times are naive
facility-local datetimes.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import add_years, parse_time_of_day
from ..core.constants import (
    DEFAULT_NOTICE_HOURS,
    FIXED_EXPIRATION_DAYS,
    NON_EXPIRING_YEARS,
    TIER_HIGH_MINUTES,
    TIER_LOW_MINUTES,
)
from ..core.enums import AttendanceStatus
from ..policy.model import AttendancePolicy, TieredPenalty
from ..shifts.model import Shift


def compose_instant(shift_date: date, time_of_day: str) -> datetime:
    return datetime.combine(shift_date, parse_time_of_day(time_of_day))


def shift_start_at(shift: Shift) -> datetime:
    return compose_instant(shift.shift_date, shift.start_time)


def shift_end_at(shift: Shift) -> datetime:
    """End instant; a shift ending at or before its start time ends the next day."""
    start = shift_start_at(shift)
    end = compose_instant(shift.shift_date, shift.end_time)
    if end <= start:
        end += timedelta(days=1)
    return end


def tardy_minutes(shift_date: date, shift_start_time: str, clock_in: datetime) -> int:
    """Whole minutes from shift start to clock-in. Negative when early."""
    delta = clock_in - compose_instant(shift_date, shift_start_time)
    return math.floor(delta.total_seconds() / 60)


def left_early_minutes(shift: Shift, clock_out: datetime) -> int:
    delta = shift_end_at(shift) - clock_out
    return max(0, math.floor(delta.total_seconds() / 60))


def classify(minutes_late: int, threshold_minutes: int) -> AttendanceStatus:
    if minutes_late <= threshold_minutes:
        return AttendanceStatus.ON_TIME
    return AttendanceStatus.TARDY


def _tiered_points(penalty: TieredPenalty, minutes: Optional[int]) -> int:
    if not minutes:
        return penalty.points
    if minutes <= TIER_LOW_MINUTES:
        return penalty.under_15_min
    if minutes <= TIER_HIGH_MINUTES:
        return penalty.over_15_min
    return penalty.over_30_min


def points_for(policy: AttendancePolicy, status: AttendanceStatus, minutes: Optional[int] = None) -> int:
    """Point value of a status.

    CALLED_OFF always resolves to the with-approval value here; the workflow
    picks the without-approval value when it knows notice was short.
    """

    if status == AttendanceStatus.ON_TIME:
        return policy.on_time_points
    if status == AttendanceStatus.TARDY:
        return _tiered_points(policy.tardy, minutes)
    if status == AttendanceStatus.LEFT_EARLY:
        return _tiered_points(policy.left_early, minutes)
    if status == AttendanceStatus.NO_CALL_NO_SHOW:
        return policy.no_show_points
    if status == AttendanceStatus.CALLED_OFF:
        return policy.called_off.with_approval
    if status == AttendanceStatus.COMPLETED:
        return policy.completed_points
    return 0


def expiration_date(policy: AttendancePolicy, status: AttendanceStatus, event_date: date) -> date:
    if status == AttendanceStatus.CALLED_OFF:
        return event_date + timedelta(days=policy.called_off.expiration_days)
    if status in (AttendanceStatus.NO_CALL_NO_SHOW, AttendanceStatus.TARDY, AttendanceStatus.LEFT_EARLY):
        return event_date + timedelta(days=FIXED_EXPIRATION_DAYS)
    return add_years(event_date, NON_EXPIRING_YEARS)


def has_sufficient_notice(shift_start: datetime, action_time: datetime, notice_hours: int = DEFAULT_NOTICE_HOURS) -> bool:
    return shift_start - action_time >= timedelta(hours=notice_hours)
