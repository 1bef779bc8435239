from __future__ import annotations

from flask import Flask

from ..common.http import dump, ok, parse_body, parse_query
from ..container import Container
from .schemas import ScheduleQuery, ScheduleRead, ScheduleUpsertRequest


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.get("/api/work-schedules", endpoint="schedules_list")
    def schedules_list():
        q = parse_query(ScheduleQuery)
        rows = service.list_for_employee(q.employee_id)
        return ok([dump(ScheduleRead.model_validate(r)) for r in rows])

    @app.put("/api/work-schedules", endpoint="schedules_upsert")
    def schedules_upsert():
        body = parse_body(ScheduleUpsertRequest)
        schedule = service.assign(**body.model_dump())
        return ok(dump(ScheduleRead.model_validate(schedule)))

    @app.delete("/api/work-schedules/<int:schedule_id>", endpoint="schedules_delete")
    def schedules_delete(schedule_id: int):
        service.delete(schedule_id=schedule_id)
        return ok({"schedule_id": schedule_id})
