from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from prompt_console.core.common.exceptions import PromptConsoleError
from prompt_console.core.constants import (
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_500_INTERNAL_SERVER_ERROR_MESSAGE,
)

logger = logging.getLogger(__name__)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """Handle request body validation errors as 422 Unprocessable Entity."""
    if logger.isEnabledFor(logging.WARNING):
        logger.warning("Validation error: %s", exc.errors())

    error_details: list[dict[str, Any]] = [
        {
            "loc": list(error.get("loc", [])),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "status": HTTP_422_UNPROCESSABLE_ENTITY,
            "message": "Validation failed",
            "details": {"errors": error_details},
        },
    )


async def prompt_console_exception_handler(
    request: Request, exc: PromptConsoleError
) -> Response:
    """Handle application errors using the status code they carry."""
    if logger.isEnabledFor(logging.WARNING):
        logger.warning("%s: %s", type(exc).__name__, exc.message)
    content = exc.to_dict()
    content["status"] = exc.status_code
    content["message"] = exc.message
    return JSONResponse(status_code=exc.status_code, content=content)


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": HTTP_500_INTERNAL_SERVER_ERROR,
            "message": HTTP_500_INTERNAL_SERVER_ERROR_MESSAGE,
        },
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers for the FastAPI application.

    Args:
        app: The FastAPI application
    """
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PromptConsoleError, prompt_console_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
