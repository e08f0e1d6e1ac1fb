"""
Realty CRM API - Shared Pydantic Schemas
==========================================

What:  Base model configuration, pagination query/envelope, and error bodies
       shared by every resource.
How:   FastAPI serializes responses by alias, so every field appears in
       camelCase on the wire while Python code uses snake_case names.

Wire conventions:
    - Inputs are accepted by camelCase alias or by field name.
    - Unknown input fields are ignored (dropped before persistence).
    - List responses use the envelope {"data": [...], "meta": {total, page, limit}}.
"""

from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from app.config import settings

# Largest value a PostgreSQL INTEGER column holds
INT32_MAX = 2**31 - 1


def bounded_str(max_length: int, required: bool = False) -> Any:
    """
    String type limited to its column width.

    Required fields must also carry at least one character.
    Example: FirstName = bounded_str(100, required=True)
    """
    return Annotated[
        str, StringConstraints(min_length=1 if required else 0, max_length=max_length)
    ]


class APIModel(BaseModel):
    """Base for every request/response schema: camelCase aliases, extras ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ══════════════════════════════════════════════════════════════════════════
# Pagination
# ══════════════════════════════════════════════════════════════════════════


class PaginationQuery(APIModel):
    """
    What:  Validated `?page=&limit=` query parameters for list endpoints.
    How:   Query values arrive as strings; pydantic coerces them to int.

    Parameters:
        page:  1-based page number, 1..INT32_MAX (default 1)
        limit: rows per page, 1..PAGINATION_MAX_LIMIT (default PAGINATION_DEFAULT_LIMIT)

    Both caps keep the computed OFFSET inside PostgreSQL's BIGINT range.
    """
    page: int = Field(default=1, gt=0, le=INT32_MAX)
    limit: int = Field(default_factory=lambda: settings.pagination_default_limit, gt=0)

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, value: int) -> int:
        if value > settings.pagination_max_limit:
            raise ValueError(f"must be at most {settings.pagination_max_limit}")
        return value

    @property
    def offset(self) -> int:
        """Rows to skip before this page: (page - 1) * limit."""
        return (self.page - 1) * self.limit


class PageMeta(APIModel):
    """
    Pagination metadata echoed back to the client.

    total is the count of all rows matching the owner filter, ignoring
    pagination. page/limit are the effective (possibly defaulted) values.
    """
    total: int
    page: int
    limit: int


T = TypeVar("T")


class Page(APIModel, Generic[T]):
    """List envelope: {"data": [...], "meta": {...}}."""
    data: List[T]
    meta: PageMeta


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models (OpenAPI documentation only)
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Body for 400, 404 and 500 responses.

    Example:
        {"error": "Validation failed", "details": [{"field": "email", ...}]}
        {"error": "Client not found"}
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[List[Dict[str, Any]]] = Field(
        default=None, description="Per-field violations (validation errors only)"
    )


class MessageResponse(BaseModel):
    """Body for 401 and 403 responses: {"message": "Unauthorized"}."""
    message: str


class HealthResponse(BaseModel):
    """Liveness/readiness body."""
    status: str = Field(description="ok or unavailable")
    database: Optional[str] = Field(default=None, description="connected or disconnected")
