from __future__ import annotations

from flask import Flask

from ..common.http import dump, ok, parse_body
from ..container import Container
from .schemas import RuleCreateRequest, RuleRead


def register(app: Flask, container: Container) -> None:
    service = container.rule_service

    @app.get("/api/attendance-rules", endpoint="rules_list")
    def rules_list():
        return ok([dump(RuleRead.model_validate(r)) for r in service.list_all()])

    @app.post("/api/attendance-rules", endpoint="rules_create")
    def rules_create():
        body = parse_body(RuleCreateRequest)
        rule = service.create(**body.model_dump())
        return ok(dump(RuleRead.model_validate(rule)), status=201)

    @app.put("/api/attendance-rules/<int:rule_id>/activate", endpoint="rules_activate")
    def rules_activate(rule_id: int):
        rule = service.activate(rule_id)
        return ok(dump(RuleRead.model_validate(rule)))
