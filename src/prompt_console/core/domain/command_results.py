"""
Command Results Domain Model

This module defines the uniform output shapes returned by every console
command: the paged result envelope and the help document.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_pascal

from prompt_console.core.interfaces.model_bases import DomainModel


class _EnvelopeModel(DomainModel):
    """Immutable model serialized with PascalCase keys."""

    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, frozen=True
    )


class PagingInfo(_EnvelopeModel):
    page_no: int = 1
    total_pages: int = 0
    page_size: int = 10


class ConsoleResult(_EnvelopeModel):
    """
    Result of a command execution.

    ``records`` is the number of rows in ``data``; the overall record count of
    a paged query is only reflected through ``paging_info.total_pages``.
    """

    data: list[Any] = Field(default_factory=list)
    paging_info: PagingInfo | None = None
    records: int = 0
    output: str = ""
    is_error: bool = False
    must_reload: bool = False
    field_order: list[str] = Field(default_factory=list)

    @classmethod
    def error(cls, message: str) -> ConsoleResult:
        """Build a result reporting a handled, user-visible failure."""
        return cls(output=message, is_error=True)


class FlagHelp(_EnvelopeModel):
    flag: str
    type: str
    required: bool = False
    default_value: str = ""
    description: str = ""


class CommandHelp(_EnvelopeModel):
    """Help document for a command or a general help topic."""

    name: str = ""
    description: str = ""
    options: list[FlagHelp] = Field(default_factory=list)
    result_html: str = ""
    error: str = ""
