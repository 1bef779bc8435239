from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..common.numbers import ZERO, optional_decimal, to_decimal
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyClockedIn, DuplicateRecord
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, filtered_select, is_duplicate_key
from .model import AttendanceRecord, GeoPoint
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, clock_in_time, clock_out_time, total_hours,
    overtime_hours, break_hours, late_minutes, early_departure_minutes, status, notes,
    clock_in_latitude, clock_in_longitude, clock_out_latitude, clock_out_longitude
"""


def _point(lat: Any, lng: Any) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=float(lat), longitude=float(lng))


def _coords(point: Optional[GeoPoint]) -> tuple:
    if point is None:
        return (None, None)
    return (point.latitude, point.longitude)


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in_time=r.get("clock_in_time"),
        clock_out_time=r.get("clock_out_time"),
        total_hours=optional_decimal(r.get("total_hours")),
        overtime_hours=to_decimal(r.get("overtime_hours")),
        break_hours=to_decimal(r.get("break_hours")),
        late_minutes=int(r.get("late_minutes") or 0),
        early_departure_minutes=int(r.get("early_departure_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        clock_in_location=_point(r.get("clock_in_latitude"), r.get("clock_in_longitude")),
        clock_out_location=_point(r.get("clock_out_latitude"), r.get("clock_out_longitude")),
    )


def _record_params(record: AttendanceRecord) -> tuple:
    return (
        int(record.employee_id),
        record.work_date,
        record.clock_in_time,
        record.clock_out_time,
        record.total_hours,
        record.overtime_hours or ZERO,
        record.break_hours or ZERO,
        int(record.late_minutes),
        int(record.early_departure_minutes),
        record.status.value,
        record.notes,
        *_coords(record.clock_in_location),
        *_coords(record.clock_out_location),
    )


_INSERT = """
    INSERT INTO attendance_records(
        employee_id, work_date, clock_in_time, clock_out_time, total_hours,
        overtime_hours, break_hours, late_minutes, early_departure_minutes, status, notes,
        clock_in_latitude, clock_in_longitude, clock_out_latitude, clock_out_longitude
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_open_record(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                  AND clock_in_time IS NOT NULL AND clock_out_time IS NULL
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def query_records(
        self,
        *,
        employee_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        sql, params = filtered_select(
            "attendance_records",
            _COLUMNS,
            [
                ("employee_id=%s", None if employee_id is None else int(employee_id)),
                ("work_date>=%s", date_from),
                ("work_date<=%s", date_to),
                ("status=%s", status.value if status is not None else None),
            ],
            order_by="work_date DESC, employee_id",
            limit=limit,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in_time: datetime,
        status: AttendanceStatus,
        late_minutes: int = 0,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, clock_in_time, status, late_minutes, notes,
                        clock_in_latitude, clock_in_longitude
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, clock_in_time, status.value, int(late_minutes), notes, *_coords(location)),
                )
                return int(cur.lastrowid)
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                raise AlreadyClockedIn("Already clocked in for this day") from exc
            raise

    def fill_clock_in(
        self,
        *,
        attendance_id: int,
        clock_in_time: datetime,
        status: AttendanceStatus,
        late_minutes: int = 0,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_in_time=%s, status=%s, late_minutes=%s, notes=COALESCE(%s, notes),
                    clock_in_latitude=%s, clock_in_longitude=%s,
                    total_hours=NULL, overtime_hours=0, early_departure_minutes=0
                WHERE attendance_id=%s AND clock_in_time IS NULL
                """,
                (clock_in_time, status.value, int(late_minutes), notes, *_coords(location), int(attendance_id)),
            )
            return cur.rowcount > 0

    def close_record(
        self,
        *,
        attendance_id: int,
        clock_out_time: datetime,
        break_hours: Decimal,
        total_hours: Decimal,
        overtime_hours: Decimal,
        early_departure_minutes: int,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out_time=%s, break_hours=%s, total_hours=%s, overtime_hours=%s,
                    early_departure_minutes=%s, status=%s, notes=COALESCE(%s, notes),
                    clock_out_latitude=%s, clock_out_longitude=%s
                WHERE attendance_id=%s AND clock_in_time IS NOT NULL AND clock_out_time IS NULL
                """,
                (
                    clock_out_time,
                    break_hours,
                    total_hours,
                    overtime_hours,
                    int(early_departure_minutes),
                    status.value,
                    notes,
                    *_coords(location),
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def insert_record(self, record: AttendanceRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(_INSERT, _record_params(record))
                return int(cur.lastrowid)
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                raise DuplicateRecord("Attendance record already exists for this date") from exc
            raise

    def upsert_record(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _INSERT
                + """
                ON DUPLICATE KEY UPDATE
                    clock_in_time=VALUES(clock_in_time), clock_out_time=VALUES(clock_out_time),
                    total_hours=VALUES(total_hours), overtime_hours=VALUES(overtime_hours),
                    break_hours=VALUES(break_hours), late_minutes=VALUES(late_minutes),
                    early_departure_minutes=VALUES(early_departure_minutes), status=VALUES(status),
                    notes=VALUES(notes),
                    clock_in_latitude=VALUES(clock_in_latitude), clock_in_longitude=VALUES(clock_in_longitude),
                    clock_out_latitude=VALUES(clock_out_latitude), clock_out_longitude=VALUES(clock_out_longitude)
                """,
                _record_params(record),
            )
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT attendance_id FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(record.employee_id), record.work_date),
            )
            r = fetchone(cur)
            return int(r["attendance_id"]) if r else 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
