"""
Pagination and response envelope tests.

Verifies that:
- pages and hasMore are always consistent with total and limit
- invalid page, limit or total are rejected as validation failures
- envelope bodies have the documented shape
"""

import json

import pytest

from worksite.core.errors import ValidationFailedError
from worksite.core.responses import (
    build_pagination,
    error_body,
    paginated_body,
    send_no_content,
    send_not_found,
    send_success,
)


# ---------------------------------------------------------------------------
# build_pagination
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "page, limit, total, pages, has_more",
    [
        (1, 10, 0, 0, False),
        (1, 10, 10, 1, False),
        (1, 10, 11, 2, True),
        (2, 10, 11, 2, False),
        (3, 10, 25, 3, False),
        (5, 10, 25, 3, False),
        (1, 1, 3, 3, True),
    ],
)
def test_build_pagination(page, limit, total, pages, has_more):
    meta = build_pagination(page, limit, total)
    assert meta.page == page
    assert meta.limit == limit
    assert meta.total == total
    assert meta.pages == pages
    assert meta.has_more is has_more


def test_pagination_serializes_camel_case():
    meta = build_pagination(1, 10, 11)
    assert meta.model_dump(by_alias=True) == {
        "page": 1,
        "limit": 10,
        "total": 11,
        "pages": 2,
        "hasMore": True,
    }


@pytest.mark.parametrize(
    "page, limit, total",
    [(1, 0, 5), (1, -1, 5), (0, 10, 5), (-2, 10, 5), (1, 10, -1)],
)
def test_build_pagination_rejects_invalid_input(page, limit, total):
    with pytest.raises(ValidationFailedError) as exc_info:
        build_pagination(page, limit, total)
    assert exc_info.value.code == "VALIDATION_ERROR"
    assert exc_info.value.http_status == 400


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

def test_paginated_body_shape():
    body = paginated_body([{"id": "a"}, {"id": "b"}], build_pagination(1, 2, 5))
    assert body["success"] is True
    assert body["data"]["items"] == [{"id": "a"}, {"id": "b"}]
    assert body["data"]["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 5,
        "pages": 3,
        "hasMore": True,
    }


def test_error_body_omits_missing_details():
    assert error_body("Nope", "NOT_FOUND") == {
        "success": False,
        "error": {"message": "Nope", "code": "NOT_FOUND"},
    }
    with_details = error_body("Bad", "VALIDATION_ERROR", {"field": "name"})
    assert with_details["error"]["details"] == {"field": "name"}


def test_send_helpers():
    response = send_success({"id": "x"}, status_code=201)
    assert response.status_code == 201
    assert json.loads(response.body) == {"success": True, "data": {"id": "x"}}

    not_found = send_not_found("Project")
    assert not_found.status_code == 404
    assert json.loads(not_found.body)["error"] == {"message": "Project not found", "code": "NOT_FOUND"}

    empty = send_no_content()
    assert empty.status_code == 204
    assert empty.body == b""
