"""
Dispatch outcome model.

Every call to the dispatcher ends in exactly one ``DispatchResponse``: a
paged command result, a help document, or an error message with a 400-style
status.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from prompt_console.core.constants import HTTP_200_OK, HTTP_400_BAD_REQUEST
from prompt_console.core.domain.command_results import CommandHelp, ConsoleResult
from prompt_console.core.interfaces.model_bases import DomainModel


class DispatchState(str, Enum):
    """States of the dispatch state machine."""

    RECEIVED_HELP = "received_help"
    RECEIVED_EMPTY = "received_empty"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    BINDING = "binding"
    VALIDATING = "validating"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = frozenset(
    {
        DispatchState.RECEIVED_HELP,
        DispatchState.RECEIVED_EMPTY,
        DispatchState.NOT_FOUND,
        DispatchState.COMPLETED,
        DispatchState.FAILED,
    }
)


class DispatchResponse(DomainModel):
    """Envelope returned by the dispatcher for one command line."""

    state: DispatchState
    status_code: int = HTTP_200_OK
    result: ConsoleResult | None = None
    help: CommandHelp | None = None
    message: str = ""
    command_key: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status_code >= HTTP_400_BAD_REQUEST

    @property
    def output(self) -> str:
        """The human-readable status line of this outcome."""
        if self.result is not None:
            return self.result.output
        if self.help is not None:
            return self.help.error or self.help.result_html or self.help.description
        return self.message

    @classmethod
    def completed(cls, result: ConsoleResult, command_key: str) -> DispatchResponse:
        return cls(state=DispatchState.COMPLETED, result=result, command_key=command_key)

    @classmethod
    def help_outcome(
        cls, state: DispatchState, help: CommandHelp, command_key: str | None = None
    ) -> DispatchResponse:
        return cls(state=state, help=help, command_key=command_key)

    @classmethod
    def failed(
        cls, state: DispatchState, message: str, command_key: str | None = None
    ) -> DispatchResponse:
        return cls(
            state=state,
            status_code=HTTP_400_BAD_REQUEST,
            message=message,
            command_key=command_key,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body for transports: the result, the help document or an error."""
        if self.is_error:
            return {"status": self.status_code, "message": self.message}
        if self.help is not None:
            return self.help.model_dump(by_alias=True, mode="json")
        if self.result is not None:
            return self.result.model_dump(by_alias=True, mode="json")
        return {}
