from __future__ import annotations

import logging
from typing import Any, Type, TypeVar

import pydantic
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=pydantic.BaseModel)


def ok(data: Any = None, status: int = 200, **meta):
    payload = {"success": True, "data": data}
    if meta:
        payload["meta"] = meta
    return jsonify(payload), status


def fail(message: str = "Bad Request", status: int = 400, code: str = "bad_request", details: Any = None):
    payload = {"success": False, "error": code, "message": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def dump(model: pydantic.BaseModel) -> dict:
    return model.model_dump(mode="json")


def parse_body(schema: Type[M]) -> M:
    """Validate the JSON body; a missing or non-object body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    return schema.model_validate(data)


def parse_query(schema: Type[M]) -> M:
    return schema.model_validate(request.args.to_dict())


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e) or e.code, status=e.http_status, code=e.code)

    @app.errorhandler(pydantic.ValidationError)
    def _invalid(e: pydantic.ValidationError):
        return fail(
            "Invalid request",
            status=400,
            code="validation_error",
            details=e.errors(include_url=False, include_context=False),
        )

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500, code=e.name.lower().replace(" ", "_"))

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", status=500, code="internal_error")
