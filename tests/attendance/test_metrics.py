from datetime import date, datetime, time
from decimal import Decimal

from src.attendance_payroll.attendance_payroll.attendance.metrics import (
    derive_day_metrics,
    early_departure_minutes,
    is_late,
    late_minutes,
    overtime_hours,
    worked_hours,
)
from src.attendance_payroll.attendance_payroll.rules.model import EffectiveRules
from src.attendance_payroll.attendance_payroll.schedules.model import ScheduledShift

RULES = EffectiveRules(
    grace_minutes=5,
    half_day_hours=Decimal("4"),
    overtime_threshold_hours=Decimal("8"),
    overtime_multiplier=Decimal("1.5"),
)
SHIFT = ScheduledShift(start_time=time(9, 0), end_time=time(17, 0), break_minutes=60)
MONDAY = date(2025, 1, 6)


def test_worked_hours_subtracts_break():
    hours = worked_hours(datetime(2025, 1, 6, 8, 0), datetime(2025, 1, 6, 17, 30), Decimal("1"))
    assert hours == Decimal("8.50")


def test_worked_hours_never_negative():
    hours = worked_hours(datetime(2025, 1, 6, 9, 0), datetime(2025, 1, 6, 10, 0), Decimal("2"))
    assert hours == Decimal("0")


def test_worked_hours_rounds_half_up_to_cents():
    # 20 minutes = 0.3333 h
    assert worked_hours(datetime(2025, 1, 6, 9, 0), datetime(2025, 1, 6, 9, 20)) == Decimal("0.33")
    # 9 minutes = 0.15 h exactly
    assert worked_hours(datetime(2025, 1, 6, 9, 0), datetime(2025, 1, 6, 9, 9)) == Decimal("0.15")


def test_overtime_only_above_threshold():
    assert overtime_hours(Decimal("7.5"), work_date=MONDAY, rules=RULES) == Decimal("0")
    assert overtime_hours(Decimal("8"), work_date=MONDAY, rules=RULES) == Decimal("0")
    assert overtime_hours(Decimal("9.25"), work_date=MONDAY, rules=RULES) == Decimal("1.25")


def test_weekend_and_holiday_hours_are_all_overtime_when_enabled():
    saturday = date(2025, 1, 11)
    weekend_rules = EffectiveRules(**{**RULES.__dict__, "weekend_overtime": True})
    holiday_rules = EffectiveRules(**{**RULES.__dict__, "holiday_overtime": True})

    assert overtime_hours(Decimal("5"), work_date=saturday, rules=RULES) == Decimal("0")
    assert overtime_hours(Decimal("5"), work_date=saturday, rules=weekend_rules) == Decimal("5.00")
    assert overtime_hours(Decimal("5"), work_date=MONDAY, rules=holiday_rules, is_holiday=True) == Decimal("5.00")
    assert overtime_hours(Decimal("5"), work_date=MONDAY, rules=holiday_rules) == Decimal("0")


def test_late_minutes_respects_grace():
    assert late_minutes(datetime(2025, 1, 6, 9, 5, 0), work_date=MONDAY, shift=SHIFT, grace_minutes=5) == 0
    assert late_minutes(datetime(2025, 1, 6, 9, 5, 59), work_date=MONDAY, shift=SHIFT, grace_minutes=5) == 5
    assert late_minutes(datetime(2025, 1, 6, 9, 6, 30), work_date=MONDAY, shift=SHIFT, grace_minutes=5) == 6
    assert late_minutes(datetime(2025, 1, 6, 10, 0), work_date=MONDAY, shift=None, grace_minutes=5) == 0


def test_grace_period_is_compared_to_the_second():
    limit = datetime(2025, 1, 6, 9, 5)

    assert not is_late(limit, work_date=MONDAY, shift=SHIFT, grace_minutes=5)
    assert is_late(limit.replace(second=1), work_date=MONDAY, shift=SHIFT, grace_minutes=5)
    # no grace: any second past the start is late, stored minutes are floored
    assert is_late(datetime(2025, 1, 6, 9, 0, 30), work_date=MONDAY, shift=SHIFT, grace_minutes=0)
    assert late_minutes(datetime(2025, 1, 6, 9, 0, 30), work_date=MONDAY, shift=SHIFT, grace_minutes=0) == 0
    assert not is_late(datetime(2025, 1, 6, 23, 0), work_date=MONDAY, shift=None, grace_minutes=0)


def test_early_departure_only_before_shift_end():
    assert early_departure_minutes(datetime(2025, 1, 6, 16, 30), work_date=MONDAY, shift=SHIFT) == 30
    assert early_departure_minutes(datetime(2025, 1, 6, 18, 0), work_date=MONDAY, shift=SHIFT) == 0


def test_derive_day_metrics_overnight_shift():
    night = ScheduledShift(start_time=time(22, 0), end_time=time(6, 0))
    metrics = derive_day_metrics(
        clock_in=datetime(2025, 1, 6, 22, 0),
        clock_out=datetime(2025, 1, 7, 5, 0),
        break_hours=Decimal("0.5"),
        work_date=MONDAY,
        shift=night,
        rules=RULES,
    )

    assert metrics.total_hours == Decimal("6.50")
    assert metrics.overtime_hours == Decimal("0")
    assert metrics.early_departure_minutes == 60
