from __future__ import annotations

from flask import Flask

from ..common.http import dump, ok, parse_body, parse_query
from ..container import Container
from .schemas import (
    AttendanceListQuery,
    AttendanceRecordRead,
    AttendanceStatsRead,
    AttendanceSummaryRead,
    AttendanceUpdateRequest,
    ClockInRequest,
    ClockOutRequest,
    ManualAttendanceRequest,
    MonthlyStatsQuery,
    MonthlyStatsRead,
    StatsQuery,
    SummaryQuery,
    TodayQuery,
)


def _record(record) -> dict:
    return dump(AttendanceRecordRead.model_validate(record))


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.post("/api/attendance/clock-in", endpoint="attendance_clock_in")
    def clock_in():
        body = parse_body(ClockInRequest)
        record = service.clock_in(
            body.employee_id,
            timestamp=body.timestamp,
            location=body.location.to_point() if body.location else None,
            notes=body.notes,
        )
        return ok(_record(record), status=201)

    @app.post("/api/attendance/clock-out", endpoint="attendance_clock_out")
    def clock_out():
        body = parse_body(ClockOutRequest)
        record = service.clock_out(
            body.employee_id,
            timestamp=body.timestamp,
            location=body.location.to_point() if body.location else None,
            break_hours=body.break_hours,
            notes=body.notes,
        )
        return ok(_record(record))

    @app.get("/api/attendance/stats", endpoint="attendance_stats")
    def attendance_stats():
        q = parse_query(StatsQuery)
        stats = service.stats(employee_id=q.employee_id, date_from=q.date_from, date_to=q.date_to)
        return ok(dump(AttendanceStatsRead.model_validate(stats)))

    @app.get("/api/attendance/stats/monthly", endpoint="attendance_monthly_stats")
    def attendance_monthly_stats():
        q = parse_query(MonthlyStatsQuery)
        stats = service.monthly_stats(q.year, q.month, employee_id=q.employee_id)
        return ok(dump(MonthlyStatsRead.model_validate(stats)))

    @app.get("/api/attendance/stats/summary", endpoint="attendance_summary")
    def attendance_summary():
        q = parse_query(SummaryQuery)
        summary = service.summary(date_from=q.date_from, date_to=q.date_to)
        return ok(dump(AttendanceSummaryRead.model_validate(summary)))

    @app.get("/api/attendance/today", endpoint="attendance_today")
    def attendance_today():
        q = parse_query(TodayQuery)
        record = service.get_today_record(q.employee_id)
        return ok(_record(record) if record else None)

    @app.get("/api/attendance", endpoint="attendance_list")
    def attendance_list():
        q = parse_query(AttendanceListQuery)
        records = service.list_records(
            employee_id=q.employee_id,
            date_from=q.date_from,
            date_to=q.date_to,
            status=q.status,
            limit=q.limit,
        )
        return ok([_record(r) for r in records], count=len(records))

    @app.post("/api/attendance", endpoint="attendance_create")
    def attendance_create():
        body = parse_body(ManualAttendanceRequest)
        record = service.record_manual(**body.model_dump())
        return ok(_record(record), status=201)

    @app.put("/api/attendance/<int:attendance_id>", endpoint="attendance_update")
    def attendance_update(attendance_id: int):
        body = parse_body(AttendanceUpdateRequest)
        record = service.update_record(attendance_id, body.changes())
        return ok(_record(record))

    @app.delete("/api/attendance/<int:attendance_id>", endpoint="attendance_delete")
    def attendance_delete(attendance_id: int):
        service.delete_record(attendance_id)
        return ok({"attendance_id": attendance_id})
