"""Tests for the response envelopes and pagination helpers."""

import pytest

from metanoia.core.pagination import PaginationParams, pagination_params
from metanoia.core.responses import (
    DataResponse,
    ErrorDetail,
    ErrorResponse,
    ListResponse,
    PaginationMeta,
)


class TestPaginationMeta:
    @pytest.mark.parametrize(
        ("total", "per_page", "pages"),
        [(0, 20, 0), (5, 20, 1), (40, 20, 2), (41, 20, 3)],
    )
    def test_total_pages(self, total, per_page, pages):
        """Total pages rounds up and is 0 for an empty collection."""
        meta = PaginationMeta(total=total, page=1, per_page=per_page)
        assert meta.total_pages == pages

    def test_total_pages_is_serialized(self):
        dumped = PaginationMeta(total=3, page=2, per_page=2).model_dump()
        assert dumped == {"total": 3, "page": 2, "per_page": 2, "total_pages": 2}


class TestEnvelopes:
    def test_data_response_wraps_card(self):
        card = {"user_id": "abc", "prompts": [{"question": "Q", "answer": "A"}]}
        assert DataResponse(data=card).model_dump() == {"data": card}

    def test_list_response_has_data_and_meta(self):
        """ListResponse should carry the page of items plus pagination meta."""
        response = ListResponse(
            data=[{"id": "1"}, {"id": "2"}],
            meta=PaginationMeta(total=12, page=1, per_page=2),
        )
        result = response.model_dump()
        assert len(result["data"]) == 2
        assert result["meta"]["total_pages"] == 6

    def test_error_response_defaults_details_to_none(self):
        result = ErrorResponse(
            error=ErrorDetail(code="NOTHING_TO_UNDO", message="Nothing to undo!")
        ).model_dump()
        assert result == {
            "error": {
                "code": "NOTHING_TO_UNDO",
                "message": "Nothing to undo!",
                "details": None,
            }
        }

    def test_error_response_keeps_field_details(self):
        detail = ErrorDetail(
            code="STEP_VALIDATION_FAILED",
            message="Fix the highlighted fields",
            details=[{"field": "location", "msg": "Required"}],
        )
        assert ErrorResponse(error=detail).model_dump()["error"]["details"] == [
            {"field": "location", "msg": "Required"}
        ]


class TestPaginationParams:
    @pytest.mark.parametrize(
        ("page", "per_page", "offset"), [(1, 20, 0), (2, 20, 20), (5, 10, 40)]
    )
    def test_offset(self, page, per_page, offset):
        """Offset should be (page - 1) * per_page."""
        assert PaginationParams(page=page, per_page=per_page).offset == offset

    def test_limit_equals_per_page(self):
        assert PaginationParams(page=3, per_page=15).limit == 15

    def test_dependency_builds_params(self):
        """pagination_params should return a PaginationParams instance."""
        params = pagination_params(page=3, per_page=25)
        assert isinstance(params, PaginationParams)
        assert params.offset == 50
