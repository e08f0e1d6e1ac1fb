"""
Realty CRM API - Schema Validation Gate
=========================================

What:  Validates and coerces request bodies and query strings against a
       pydantic schema before the handler body runs.
How:   `validate()` is the pure core: schema + raw mapping → model instance,
       or ValidationError with one entry per violated field.
       `validate_body()` / `validate_query()` wrap it as FastAPI dependencies.

Violation format:
    {"field": "leadScore", "message": "Input should be greater than or equal to 0",
     "type": "greater_than_equal"}

    `field` is the dotted camelCase location; "body" when the whole payload
    is wrong (not JSON, not an object).
"""

import json
from typing import Any, Callable, Dict, List, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)

BODY_ERROR = "Validation failed"
QUERY_ERROR = "Query validation failed"


def format_errors(errors: List[Dict[str, Any]], root: str = "body") -> List[Dict[str, Any]]:
    """Flatten pydantic error dicts into per-field violation entries."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or root,
            "message": err["msg"],
            "type": err["type"],
        }
        for err in errors
    ]


def validate(schema: Type[M], data: Any, message: str = BODY_ERROR, root: str = "body") -> M:
    """
    Validate `data` against `schema`.

    Returns the model instance. Raises ValidationError carrying the list of
    violations. No side effects.
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            message=message,
            details=format_errors(e.errors(), root=root),
            context={"schema": schema.__name__},
        ) from None


def validate_body(schema: Type[M]) -> Callable:
    """Dependency factory validating the JSON request body. An empty body counts as {}."""

    async def body_gate(request: Request) -> M:
        raw = await request.body()
        if not raw.strip():
            data: Any = {}
        else:
            try:
                data = json.loads(raw)
            except ValueError:
                raise ValidationError(
                    message=BODY_ERROR,
                    details=[{
                        "field": "body",
                        "message": "Request body must be valid JSON",
                        "type": "json_invalid",
                    }],
                ) from None
        return validate(schema, data)

    return body_gate


def validate_query(schema: Type[M]) -> Callable:
    """Dependency factory validating the query string."""

    async def query_gate(request: Request) -> M:
        return validate(schema, dict(request.query_params), message=QUERY_ERROR, root="query")

    return query_gate
