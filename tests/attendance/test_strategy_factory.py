from datetime import date

from staff_attendance.attendance.factory import AttendanceStrategyFactory
from staff_attendance.attendance.strategies.on_time_strategy import OnTimeStrategy
from staff_attendance.attendance.strategies.tardy_strategy import TardyStrategy
from staff_attendance.core.enums import AttendanceStatus


def test_factory_clock_in_on_time_within_grace():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_clock_in(minutes_late=5, threshold_minutes=5)

    assert isinstance(strategy, OnTimeStrategy)


def test_factory_clock_in_tardy_after_grace(policy):
    factory = AttendanceStrategyFactory()
    strategy = factory.for_clock_in(minutes_late=6, threshold_minutes=5)

    assert isinstance(strategy, TardyStrategy)

    decision = strategy.decide(policy=policy, event_date=date(2024, 3, 5), minutes_late=6)
    assert decision.status == AttendanceStatus.TARDY
    assert decision.points == policy.tardy.under_15_min
    assert decision.tardy_minutes == 6
    assert decision.expiration_date == date(2024, 4, 4)
