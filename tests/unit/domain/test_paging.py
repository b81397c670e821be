from __future__ import annotations

import pytest
from prompt_console.core.domain.paging import (
    build_paged_result,
    compute_total_pages,
    normalize_page_no,
    normalize_page_size,
)


@pytest.mark.parametrize(
    "record_count, page_size, expected",
    [
        (0, 10, 0),
        (-3, 10, 0),
        (1, 10, 1),
        (10, 10, 1),
        (11, 10, 2),
        (25, 5, 5),
        (501, 500, 2),
    ],
)
def test_compute_total_pages(record_count: int, page_size: int, expected: int) -> None:
    assert compute_total_pages(record_count, page_size) == expected


@pytest.mark.parametrize(
    "requested, expected",
    [(0, 10), (-5, 10), (1, 1), (25, 25), (500, 500), (501, 500), (10_000, 500)],
)
def test_normalize_page_size(requested: int, expected: int) -> None:
    assert normalize_page_size(requested) == expected


@pytest.mark.parametrize("requested, expected", [(0, 1), (-1, 1), (1, 1), (7, 7)])
def test_normalize_page_no(requested: int, expected: int) -> None:
    assert normalize_page_no(requested) == expected


class TestBuildPagedResult:
    def test_no_rows_and_no_records_yields_empty_message(self) -> None:
        result = build_paged_result([], 0, 1, 10, "Found.", "Nothing.")

        assert result.output == "Nothing."
        assert result.paging_info is None
        assert result.data == []
        assert result.records == 0

    def test_page_within_range(self) -> None:
        rows = [{"id": i} for i in range(10)]

        result = build_paged_result(rows, 23, 2, 10, "Found.", "Nothing.", ("id",))

        assert result.output == "Found."
        assert result.records == 10
        assert result.paging_info is not None
        assert result.paging_info.page_no == 2
        assert result.paging_info.total_pages == 3
        assert result.paging_info.page_size == 10
        assert result.field_order == ["id"]

    def test_page_past_the_end_is_not_an_error(self) -> None:
        result = build_paged_result([], 12, 5, 10, "Found.", "Nothing.")

        assert result.output == "Nothing."
        assert result.is_error is False
        assert result.paging_info is not None
        assert result.paging_info.page_no == 5
        assert result.paging_info.total_pages == 2

    def test_requested_size_and_page_are_normalized(self) -> None:
        result = build_paged_result([{"id": 1}], 1, 0, 0, "Found.", "Nothing.")

        assert result.paging_info is not None
        assert result.paging_info.page_no == 1
        assert result.paging_info.page_size == 10
        assert result.output == "Found."

    def test_envelope_serializes_with_pascal_case_keys(self) -> None:
        result = build_paged_result([{"id": 1}], 1, 1, 10, "Found.", "Nothing.")

        payload = result.model_dump(by_alias=True)

        assert payload["PagingInfo"] == {"PageNo": 1, "TotalPages": 1, "PageSize": 10}
        assert payload["Records"] == 1
        assert payload["Output"] == "Found."
        assert payload["MustReload"] is False
