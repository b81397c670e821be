"""
Command Controller

HTTP surface of the console: the command listing used for autocomplete and
the endpoint that runs one command line.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ConfigDict, Field

from prompt_console.core.config.app_config import HostContextConfig
from prompt_console.core.domain.command_context import CommandContext
from prompt_console.core.interfaces.model_bases import DomainModel
from prompt_console.core.services.command_dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prompt", tags=["prompt"])


class CommandInputModel(DomainModel):
    """Request body of ``POST /api/prompt/cmd``."""

    model_config = ConfigDict(populate_by_name=True)

    cmd_line: str = Field(default="", alias="cmdLine")
    current_page: int = Field(default=0, alias="currentPage")


def get_dispatcher(request: Request) -> CommandDispatcher:
    return request.app.state.dispatcher


def get_host_context(request: Request) -> HostContextConfig:
    return request.app.state.host_context


@router.get("/commands")
def list_commands(
    dispatcher: CommandDispatcher = Depends(get_dispatcher),
) -> list[dict[str, Any]]:
    """List every registered command with its localized description."""
    return [summary.model_dump() for summary in dispatcher.list_commands()]


@router.post("/cmd")
def run_command(
    command: CommandInputModel,
    dispatcher: CommandDispatcher = Depends(get_dispatcher),
    host_context: HostContextConfig = Depends(get_host_context),
) -> JSONResponse:
    """Run one command line.

    Returns 200 with a result or help document, or 400 with
    ``{"status", "message"}`` when the command could not be run.
    """
    context: CommandContext = host_context.to_context(command.current_page)
    response = dispatcher.execute(command.cmd_line, context)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Command %r finished in state %s (%d)",
            command.cmd_line,
            response.state.value,
            response.status_code,
        )
    return JSONResponse(status_code=response.status_code, content=response.to_payload())
