import os


def policy_from_env() -> dict:
    """Attendance/payroll defaults, used whenever no attendance rule is active."""

    return {
        "late_grace_minutes": int(os.getenv("LATE_GRACE_MINUTES", "5")),
        "standard_daily_hours": os.getenv("STANDARD_DAILY_HOURS", "8"),
        "standard_monthly_hours": os.getenv("STANDARD_MONTHLY_HOURS", "160"),
        "overtime_multiplier": os.getenv("OVERTIME_MULTIPLIER", "1.5"),
        "half_day_hours": os.getenv("HALF_DAY_HOURS", "4"),
        "default_shift_start": os.getenv("DEFAULT_SHIFT_START", "09:00"),
        "default_shift_end": os.getenv("DEFAULT_SHIFT_END", "17:00"),
        # comma separated YYYY-MM-DD
        "public_holidays": os.getenv("PUBLIC_HOLIDAYS", ""),
    }
