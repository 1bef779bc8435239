from __future__ import annotations

from flask import Flask

from ..common.http import dump, ok, parse_body, parse_query
from ..container import Container
from .schemas import (
    BulkCreateRequest,
    BulkResultRead,
    CalculateRequest,
    CalculationRead,
    PayrollCreateRequest,
    PayrollListQuery,
    PayrollRead,
    PayrollUpdateRequest,
    StatusChangeRequest,
    SummaryQuery,
    SummaryRead,
)


def _payroll(record) -> dict:
    return dump(PayrollRead.model_validate(record))


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.post("/api/payroll/calculate", endpoint="payroll_calculate")
    def payroll_calculate():
        body = parse_body(CalculateRequest)
        calc = service.calculate(body.employee_id, body.pay_period_start, body.pay_period_end)
        return ok(dump(CalculationRead.model_validate(calc)))

    @app.get("/api/payroll/stats/summary", endpoint="payroll_summary")
    def payroll_summary():
        q = parse_query(SummaryQuery)
        summary = service.summary(period_start=q.pay_period_start, period_end=q.pay_period_end)
        return ok(dump(SummaryRead.model_validate(summary)))

    @app.post("/api/payroll/bulk-create", endpoint="payroll_bulk_create")
    def payroll_bulk_create():
        body = parse_body(BulkCreateRequest)
        result = service.bulk_create(
            body.employee_ids,
            body.pay_period_start,
            body.pay_period_end,
            auto_calculate=body.auto_calculate,
        )
        return ok(dump(BulkResultRead.model_validate(result)))

    @app.get("/api/payroll", endpoint="payroll_list")
    def payroll_list():
        q = parse_query(PayrollListQuery)
        records = service.list(
            employee_id=q.employee_id,
            status=q.status,
            period_start=q.pay_period_start,
            period_end=q.pay_period_end,
            limit=q.limit,
        )
        return ok([_payroll(r) for r in records], count=len(records))

    @app.post("/api/payroll", endpoint="payroll_create")
    def payroll_create():
        body = parse_body(PayrollCreateRequest)
        record = service.create(**body.model_dump())
        return ok(_payroll(record), status=201)

    @app.get("/api/payroll/<int:payroll_id>", endpoint="payroll_get")
    def payroll_get(payroll_id: int):
        return ok(_payroll(service.get(payroll_id)))

    @app.put("/api/payroll/<int:payroll_id>", endpoint="payroll_update")
    def payroll_update(payroll_id: int):
        body = parse_body(PayrollUpdateRequest)
        return ok(_payroll(service.update(payroll_id, body.changes())))

    @app.put("/api/payroll/<int:payroll_id>/status", endpoint="payroll_status")
    def payroll_status(payroll_id: int):
        body = parse_body(StatusChangeRequest)
        record = service.change_status(payroll_id, body.status, payment_date=body.payment_date)
        return ok(_payroll(record))

    @app.delete("/api/payroll/<int:payroll_id>", endpoint="payroll_delete")
    def payroll_delete(payroll_id: int):
        service.delete(payroll_id)
        return ok({"payroll_id": payroll_id})
