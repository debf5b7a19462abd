from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_NOTICE_HOURS
from ..core.enums import (
    AttendanceStatus,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
    ShiftType,
)
from ..core.exceptions import GuardViolation, RecoveryLimitError, ShiftReleasedError
from ..notifications.model import PendingNotification
from ..points.service import PointsService
from ..policy.model import AttendancePolicy
from ..shifts.model import Shift
from ..staff.model import StaffMember
from . import evaluator
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ALERT_CHANNELS = frozenset({NotificationChannel.IN_APP, NotificationChannel.EMAIL})
URGENT_CHANNELS = frozenset({NotificationChannel.IN_APP, NotificationChannel.EMAIL, NotificationChannel.SMS})


@dataclass(frozen=True)
class WorkflowResult:
    """Outcome of one attendance action.

    ``notifications`` are only populated when the record was persisted; the
    caller hands them to ``NotificationService.dispatch_all``.
    """

    ok: bool
    message: str
    record: Optional[AttendanceRecord] = None
    notifications: tuple[PendingNotification, ...] = ()
    error: Optional[GuardViolation] = None
    consecutive: bool = False
    has_notice: Optional[bool] = None
    left_early_minutes: Optional[int] = None

    @classmethod
    def rejected(cls, error: GuardViolation) -> "WorkflowResult":
        return cls(ok=False, message=str(error), error=error)


def _notify(
    staff: StaffMember,
    message: str,
    *,
    priority: NotificationPriority,
    type: NotificationType = NotificationType.ALERT,
    channels: frozenset = ALERT_CHANNELS,
) -> PendingNotification:
    return PendingNotification(
        recipient_id=staff.staff_id,
        message=message,
        channels=channels,
        priority=priority,
        type=type,
    )


class AttendanceService:
    """Attendance workflow: guard, adjudicate, persist, emit notifications.

    Guard failures come back as a rejected WorkflowResult and persist nothing.
    PersistenceError from the store propagates to the caller.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        policy: AttendancePolicy,
        *,
        points: PointsService | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        cancel_notice_hours: int = DEFAULT_NOTICE_HOURS,
    ):
        self._attendance = attendance
        self._policy = policy
        self._points = points or PointsService(attendance, policy)
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._cancel_notice_hours = int(cancel_notice_hours)

    def _guard_no_active_record(self, shift: Shift) -> None:
        if self._attendance.find_active_by_shift(shift.shift_id) is not None:
            raise GuardViolation("An attendance record already exists for this shift")

    def _guard_not_already_released(self, staff: StaffMember, shift: Shift) -> None:
        # The store repeats this check atomically in create.
        for r in self._attendance.find_by_staff_and_date_range(staff.staff_id, shift.shift_date, shift.shift_date):
            if r.shift_id == shift.shift_id and not r.is_active:
                raise ShiftReleasedError("This shift has already been cancelled or swapped")

    def _guard_assigned(self, staff: StaffMember, shift: Shift) -> None:
        if staff.staff_id in (shift.staff_id, shift.swap_with_staff_id):
            return
        for r in self._attendance.find_by_staff_and_date_range(shift.staff_id, shift.shift_date, shift.shift_date):
            if r.shift_id == shift.shift_id and r.is_swapped and r.swap_with_staff_id == staff.staff_id:
                return
        raise GuardViolation("This shift is not assigned to you")

    def _rejected(self, action: str, staff: StaffMember, shift: Shift, error: GuardViolation) -> WorkflowResult:
        logger.info("%s rejected for staff=%s shift=%s: %s", action, staff.staff_id, shift.shift_id, error)
        return WorkflowResult.rejected(error)

    def is_consecutive_call_off(self, staff_id: str, shift: Shift) -> bool:
        previous_day = shift.shift_date - timedelta(days=1)
        records = self._attendance.find_by_staff_and_date_range(staff_id, previous_day, previous_day)
        return any(r.status == AttendanceStatus.CALLED_OFF for r in records)

    def clock_in(self, staff: StaffMember, shift: Shift, *, now: datetime | None = None) -> WorkflowResult:
        now = now or now_local()
        try:
            self._guard_assigned(staff, shift)
            self._guard_no_active_record(shift)
            self._guard_not_already_released(staff, shift)
            minutes_late = max(0, evaluator.tardy_minutes(shift.shift_date, shift.start_time, now))
            threshold = self._policy.tardy_threshold_minutes
            strategy = self._factory.for_clock_in(minutes_late=minutes_late, threshold_minutes=threshold)
            decision = strategy.decide(policy=self._policy, event_date=shift.shift_date, minutes_late=minutes_late)

            record = self._attendance.create(
                AttendanceRecord(
                    staff_id=staff.staff_id,
                    shift_id=shift.shift_id,
                    event_date=shift.shift_date,
                    status=decision.status,
                    points=decision.points,
                    clock_in=now,
                    tardy_minutes=decision.tardy_minutes,
                    expiration_date=decision.expiration_date,
                )
            )
        except GuardViolation as e:
            return self._rejected("clock-in", staff, shift, e)

        logger.info("clock-in staff=%s shift=%s status=%s points=%s", staff.staff_id, shift.shift_id, record.status.value, record.points)

        if record.status != AttendanceStatus.TARDY:
            return WorkflowResult(ok=True, message="Clocked in on time", record=record)

        return WorkflowResult(
            ok=True,
            message=f"Clocked in {minutes_late} minutes late. {record.points} points added.",
            record=record,
            notifications=(
                _notify(
                    staff,
                    f"You clocked in {minutes_late} minutes late. {record.points} points have been added to your record.",
                    priority=NotificationPriority.HIGH,
                ),
            ),
        )

    def clock_out(self, staff: StaffMember, shift: Shift, *, now: datetime | None = None) -> WorkflowResult:
        """Record the clock-out time. Points stay as adjudicated at clock-in."""

        now = now or now_local()
        record = self._attendance.find_active_by_shift(shift.shift_id)
        if record is None or record.staff_id != staff.staff_id or record.clock_in is None:
            return self._rejected("clock-out", staff, shift, GuardViolation("You have not clocked in for this shift"))
        if record.clock_out is not None:
            return self._rejected("clock-out", staff, shift, GuardViolation("You have already clocked out"))

        updated = self._attendance.update(record.attendance_id, {"clock_out": now})
        minutes_early = evaluator.left_early_minutes(shift, now)
        logger.info("clock-out staff=%s shift=%s left_early=%s", staff.staff_id, shift.shift_id, minutes_early)

        message = "Clocked out"
        if minutes_early:
            message = f"Clocked out {minutes_early} minutes before shift end"
        return WorkflowResult(ok=True, message=message, record=updated, left_early_minutes=minutes_early)

    def call_off(self, staff: StaffMember, shift: Shift, reason: str, *, now: datetime | None = None) -> WorkflowResult:
        # Always awarded the with-approval value; the 24-hour notice rule is not applied to call-offs.
        now = now or now_local()
        try:
            reason = require_non_empty(reason, "Call-off reason")
            self._guard_no_active_record(shift)
            self._guard_not_already_released(staff, shift)
            consecutive = self.is_consecutive_call_off(staff.staff_id, shift)
            status = AttendanceStatus.CALLED_OFF

            record = self._attendance.create(
                AttendanceRecord(
                    staff_id=staff.staff_id,
                    shift_id=shift.shift_id,
                    event_date=shift.shift_date,
                    status=status,
                    points=evaluator.points_for(self._policy, status),
                    call_off_reason=reason,
                    notification_time=now,
                    expiration_date=evaluator.expiration_date(self._policy, status, shift.shift_date),
                )
            )
        except GuardViolation as e:
            return self._rejected("call-off", staff, shift, e)

        logger.info("call-off staff=%s shift=%s consecutive=%s", staff.staff_id, shift.shift_id, consecutive)

        suffix = " (consecutive call-off)" if consecutive else ""
        return WorkflowResult(
            ok=True,
            message=f"Call-off recorded with {record.points} points{' (consecutive)' if consecutive else ''}",
            record=record,
            consecutive=consecutive,
            notifications=(
                _notify(
                    staff,
                    f"Your call-off has been recorded. {record.points} points have been added to your record{suffix}.",
                    priority=NotificationPriority.HIGH if consecutive else NotificationPriority.MEDIUM,
                ),
            ),
        )

    def no_call_no_show(self, staff: StaffMember, shift: Shift) -> WorkflowResult:
        try:
            self._guard_no_active_record(shift)
            self._guard_not_already_released(staff, shift)
            status = AttendanceStatus.NO_CALL_NO_SHOW
            record = self._attendance.create(
                AttendanceRecord(
                    staff_id=staff.staff_id,
                    shift_id=shift.shift_id,
                    event_date=shift.shift_date,
                    status=status,
                    points=evaluator.points_for(self._policy, status),
                    expiration_date=evaluator.expiration_date(self._policy, status, shift.shift_date),
                )
            )
        except GuardViolation as e:
            return self._rejected("no-call-no-show", staff, shift, e)

        logger.info("no-call-no-show staff=%s shift=%s points=%s", staff.staff_id, shift.shift_id, record.points)

        return WorkflowResult(
            ok=True,
            message=f"Recorded no-call-no-show. {record.points} points added.",
            record=record,
            notifications=(
                _notify(
                    staff,
                    f"You have been marked as a no-call-no-show. {record.points} points have been added to your record.",
                    priority=NotificationPriority.URGENT,
                    channels=URGENT_CHANNELS,
                ),
            ),
        )

    def cancel_shift(self, staff: StaffMember, shift: Shift, reason: str, *, now: datetime | None = None) -> WorkflowResult:
        now = now or now_local()
        try:
            reason = require_non_empty(reason, "Cancellation reason")
            self._guard_no_active_record(shift)
            self._guard_not_already_released(staff, shift)

            has_notice = evaluator.has_sufficient_notice(evaluator.shift_start_at(shift), now, self._cancel_notice_hours)
            status = AttendanceStatus.CALLED_OFF
            record = self._attendance.create(
                AttendanceRecord(
                    staff_id=staff.staff_id,
                    shift_id=shift.shift_id,
                    event_date=shift.shift_date,
                    status=status,
                    points=0 if has_notice else self._policy.called_off.without_approval,
                    cancel_reason=reason,
                    notification_time=now,
                    expiration_date=evaluator.expiration_date(self._policy, status, shift.shift_date),
                    is_cancelled=True,
                )
            )
        except GuardViolation as e:
            return self._rejected("cancel", staff, shift, e)

        logger.info("cancel staff=%s shift=%s has_notice=%s points=%s", staff.staff_id, shift.shift_id, has_notice, record.points)

        if record.points > 0:
            detail = f"{record.points} points have been added to your record."
            message = f"Shift cancelled with {record.points} points"
        else:
            detail = "No points added (sufficient notice provided)."
            message = "Shift cancelled (no points added)"

        return WorkflowResult(
            ok=True,
            message=message,
            record=record,
            has_notice=has_notice,
            notifications=(
                _notify(
                    staff,
                    f"Your shift has been cancelled. {detail}",
                    priority=NotificationPriority.MEDIUM if has_notice else NotificationPriority.HIGH,
                ),
            ),
        )

    def swap_shift(self, staff: StaffMember, target_staff_id: str, shift: Shift, *, now: datetime | None = None) -> WorkflowResult:
        # Only the initiating staff member is notified here.
        now = now or now_local()
        try:
            target_staff_id = require_non_empty(target_staff_id, "Swap target")
            if target_staff_id == staff.staff_id:
                raise GuardViolation("Cannot swap a shift with yourself")
            self._guard_no_active_record(shift)
            self._guard_not_already_released(staff, shift)

            status = AttendanceStatus.SWAPPED
            record = self._attendance.create(
                AttendanceRecord(
                    staff_id=staff.staff_id,
                    shift_id=shift.shift_id,
                    event_date=shift.shift_date,
                    status=status,
                    points=0,
                    notification_time=now,
                    expiration_date=evaluator.expiration_date(self._policy, status, shift.shift_date),
                    is_swapped=True,
                    swap_with_staff_id=target_staff_id,
                )
            )
        except GuardViolation as e:
            return self._rejected("swap", staff, shift, e)

        logger.info("swap staff=%s shift=%s target=%s", staff.staff_id, shift.shift_id, target_staff_id)

        return WorkflowResult(
            ok=True,
            message="Shift successfully swapped",
            record=record,
            notifications=(
                _notify(
                    staff,
                    f"Your shift has been swapped with staff ID: {target_staff_id}",
                    priority=NotificationPriority.MEDIUM,
                    type=NotificationType.INFO,
                ),
            ),
        )

    def complete_recovery_shift(self, staff: StaffMember, shift: Shift) -> WorkflowResult:
        """Credit a worked recovery shift against the staff member's points."""

        try:
            if shift.shift_type != ShiftType.RECOVERY:
                raise GuardViolation("Only recovery shifts earn a points credit")
            self._guard_no_active_record(shift)
            self._guard_not_already_released(staff, shift)

            recovery = self._policy.recovery
            used = self._points.recoveries_in_month(staff.staff_id, shift.shift_date)
            if used >= recovery.max_recovery_per_month:
                raise RecoveryLimitError(f"Recovery limit reached ({recovery.max_recovery_per_month} per month)")

            status = AttendanceStatus.COMPLETED
            record = self._attendance.create(
                AttendanceRecord(
                    staff_id=staff.staff_id,
                    shift_id=shift.shift_id,
                    event_date=shift.shift_date,
                    status=status,
                    points=recovery.recovery_shift_value,
                    expiration_date=evaluator.expiration_date(self._policy, status, shift.shift_date),
                ),
                monthly_credit_limit=recovery.max_recovery_per_month,
            )
        except GuardViolation as e:
            return self._rejected("recovery", staff, shift, e)

        recovered = abs(record.points)
        logger.info("recovery staff=%s shift=%s points=%s", staff.staff_id, shift.shift_id, record.points)

        return WorkflowResult(
            ok=True,
            message=f"Recovery shift completed. {recovered} points recovered.",
            record=record,
            notifications=(
                _notify(
                    staff,
                    f"You completed a recovery shift on {shift.shift_date.isoformat()}. {recovered} points have been removed from your record.",
                    priority=NotificationPriority.MEDIUM,
                    type=NotificationType.INFO,
                ),
            ),
        )
