"""
Paging arithmetic shared by list-style commands.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from prompt_console.core.constants import (
    DEFAULT_PAGE_NO,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from prompt_console.core.domain.command_results import ConsoleResult, PagingInfo


def normalize_page_size(requested: int) -> int:
    """Clamp a requested page size to ``[1, MAX_PAGE_SIZE]``.

    Non-positive sizes fall back to ``DEFAULT_PAGE_SIZE``.
    """
    if requested <= 0:
        return DEFAULT_PAGE_SIZE
    return min(requested, MAX_PAGE_SIZE)


def normalize_page_no(requested: int) -> int:
    return requested if requested > 0 else DEFAULT_PAGE_NO


def compute_total_pages(record_count: int, page_size: int) -> int:
    """Number of pages needed for ``record_count`` rows (ceiling division)."""
    if record_count <= 0:
        return 0
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return -(-record_count // page_size)


def build_paged_result(
    rows: Sequence[Any] | None,
    record_count: int,
    page: int,
    page_size: int,
    success_message: str,
    empty_message: str,
    field_order: Sequence[str] = (),
) -> ConsoleResult:
    """Shape a page of rows into the uniform result envelope.

    Args:
        rows: Rows of the requested page.
        record_count: Total number of matching records across all pages.
        page: Requested page number (1-based, normalized here).
        page_size: Requested page size (normalized here).
        success_message: Output when the page lies within the result set.
        empty_message: Output when there is nothing to show.
        field_order: Optional column order hint for renderers.

    Returns:
        The result; asking for a page past the end yields ``empty_message``
        rather than an error.
    """
    rows = list(rows or [])
    if not rows and record_count == 0:
        return ConsoleResult(output=empty_message)

    size = normalize_page_size(page_size)
    page_no = normalize_page_no(page)
    total_pages = compute_total_pages(record_count, size)

    return ConsoleResult(
        data=rows,
        paging_info=PagingInfo(page_no=page_no, total_pages=total_pages, page_size=size),
        records=len(rows),
        output=success_message if page_no <= total_pages else empty_message,
        field_order=list(field_order),
    )
