"""
Deferred request body parsing.

Some endpoints must check that the caller owns the target resource before
looking at the body, so the body cannot be declared as a normal FastAPI
parameter (FastAPI validates those before the handler runs).
"""
import json
from typing import Any, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def json_body_openapi(model: type[BaseModel]) -> dict[str, Any]:
    """``openapi_extra`` documenting a JSON body parsed by ``parse_json_body``."""
    return {
        "requestBody": {
            "required": False,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        },
    }


async def parse_json_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Parse the request body into ``model``.

    An empty body is treated as ``{}``.

    Raises:
        RequestValidationError: Body is not valid JSON or fails validation;
            rendered as 400 by the application's handler.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw.strip() else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}],
        ) from e

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in e.errors()],
        ) from e
