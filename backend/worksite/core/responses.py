"""
Response envelope helpers.

Success:    {"success": true, "data": ...}
Paginated:  {"success": true, "data": {"items": [...], "pagination": {...}}}
Error:      {"success": false, "error": {"message", "code", "details"?}}
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from worksite.core.errors import ValidationFailedError


class PaginationMeta(BaseModel):
    """Pagination block; serialized with camelCase keys (hasMore)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    page: int
    limit: int
    total: int
    pages: int
    has_more: bool


def build_pagination(page: int, limit: int, total: int) -> PaginationMeta:
    """
    Compute pagination metadata from plain arithmetic.

    pages = ceil(total / limit), so 0 pages when total is 0.
    has_more = page < pages.
    """
    if limit <= 0:
        raise ValidationFailedError("limit must be greater than 0", details={"limit": limit})
    if page < 1:
        raise ValidationFailedError("page must be at least 1", details={"page": page})
    if total < 0:
        raise ValidationFailedError("total cannot be negative", details={"total": total})

    pages = math.ceil(total / limit)
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        pages=pages,
        has_more=page < pages,
    )


# ---------------------------------------------------------------------------
# Envelope bodies
# ---------------------------------------------------------------------------

def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [_dump(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump(item) for key, item in value.items()}
    return jsonable_encoder(value)


def success_body(data: Any) -> dict[str, Any]:
    return {"success": True, "data": _dump(data)}


def paginated_body(items: Sequence[Any], pagination: PaginationMeta) -> dict[str, Any]:
    return {
        "success": True,
        "data": {
            "items": _dump(list(items)),
            "pagination": pagination.model_dump(by_alias=True),
        },
    }


def error_body(message: str, code: str, details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"message": message, "code": code}
    if details is not None:
        error["details"] = _dump(details)
    return {"success": False, "error": error}


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

def send_success(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=success_body(data))


def send_created(data: Any) -> JSONResponse:
    return send_success(data, status_code=status.HTTP_201_CREATED)


def send_paginated(items: Sequence[Any], pagination: PaginationMeta) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_200_OK, content=paginated_body(items, pagination))


def send_no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def send_error(status_code: int, message: str, code: str, details: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, code, details))


def send_not_found(resource: str) -> JSONResponse:
    return send_error(status.HTTP_404_NOT_FOUND, f"{resource} not found", "NOT_FOUND")
