from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..common.numbers import to_decimal
from ..core.enums import LatePenaltyType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRule
from .repository import AttendanceRuleRepository

_COLUMNS = """
    rule_id, rule_name, late_grace_period, half_day_threshold, overtime_threshold,
    overtime_rate, late_penalty_type, weekend_overtime, holiday_overtime, is_active
"""


def _row_to_rule(r: Dict[str, Any]) -> AttendanceRule:
    return AttendanceRule(
        rule_id=int(r["rule_id"]),
        rule_name=r["rule_name"],
        late_grace_period=int(r.get("late_grace_period") or 0),
        half_day_threshold=r.get("half_day_threshold"),
        overtime_threshold=r.get("overtime_threshold"),
        overtime_rate=to_decimal(r.get("overtime_rate"), Decimal("1.5")),
        late_penalty_type=LatePenaltyType(r.get("late_penalty_type") or LatePenaltyType.NONE.value),
        weekend_overtime=bool(r.get("weekend_overtime")),
        holiday_overtime=bool(r.get("holiday_overtime")),
        is_active=bool(r.get("is_active")),
    )


class MySQLAttendanceRuleRepository(AttendanceRuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self) -> Optional[AttendanceRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_rules
                WHERE is_active=1
                ORDER BY updated_at DESC, rule_id DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            return _row_to_rule(r) if r else None

    def get_by_id(self, rule_id: int) -> Optional[AttendanceRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_rules WHERE rule_id=%s", (int(rule_id),))
            r = fetchone(cur)
            return _row_to_rule(r) if r else None

    def list_all(self) -> Sequence[AttendanceRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_rules ORDER BY rule_id")
            return [_row_to_rule(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        rule_name: str,
        late_grace_period: int,
        half_day_threshold: Optional[int],
        overtime_threshold: Optional[int],
        overtime_rate: Decimal,
        late_penalty_type: LatePenaltyType,
        weekend_overtime: bool,
        holiday_overtime: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_rules(
                    rule_name, late_grace_period, half_day_threshold, overtime_threshold,
                    overtime_rate, late_penalty_type, weekend_overtime, holiday_overtime, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,0)
                """,
                (
                    rule_name,
                    int(late_grace_period),
                    half_day_threshold,
                    overtime_threshold,
                    overtime_rate,
                    late_penalty_type.value,
                    int(weekend_overtime),
                    int(holiday_overtime),
                ),
            )
            return int(cur.lastrowid)

    def activate(self, rule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT rule_id FROM attendance_rules WHERE rule_id=%s FOR UPDATE", (int(rule_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE attendance_rules SET is_active=0 WHERE rule_id<>%s AND is_active=1", (int(rule_id),))
            cur.execute("UPDATE attendance_rules SET is_active=1 WHERE rule_id=%s", (int(rule_id),))
            return True
