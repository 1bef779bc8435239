"""Example: drive the services directly, without Flask.

Controllers are thin; every rule lives in the services used below.
"""

import importlib
from datetime import date

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_payroll.attendance_payroll.container import build_container
from src.attendance_payroll.attendance_payroll.core.policy import PayrollPolicy


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        policy=PayrollPolicy.from_settings(settings.PAYROLL_POLICY),
    )

    today = date.today()
    month_start = today.replace(day=1)

    stats = container.attendance_service.stats(employee_id=1, date_from=month_start, date_to=today)
    print("attendance:", stats)

    calc = container.payroll_service.calculate(1, month_start, today)
    print("payroll so far:", calc)


if __name__ == "__main__":
    main()
