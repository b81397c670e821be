"""
Command dispatcher.

Orchestrates one console invocation: help short-circuits, resolution,
handler instantiation, binding/validation, execution, and shaping of the
outcome into a ``DispatchResponse``. Handler failures never escape; every
terminal outcome produces exactly one response and one audit record.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta

from prompt_console.core.constants import (
    AUDIT_PROPERTY_COMMAND,
    AUDIT_PROPERTY_EXECUTION_TIME,
    AUDIT_PROPERTY_IS_VALID,
    AUDIT_PROPERTY_OUTPUT,
    AUDIT_PROPERTY_RECORDS,
    AUDIT_PROPERTY_TYPE_NAME,
    DID_YOU_MEAN_KEY,
    INVALID_COMMAND_KEY,
    PROMPT_RESOURCE_FILE,
)
from prompt_console.core.domain.command_context import CommandContext
from prompt_console.core.domain.commands.command_registry import (
    CommandRegistry,
    RegistryHolder,
)
from prompt_console.core.domain.dispatch import DispatchResponse, DispatchState
from prompt_console.core.interfaces.audit_log_interface import AuditLogRecord, IAuditLog
from prompt_console.core.interfaces.console_command_interface import IConsoleCommand
from prompt_console.core.interfaces.localization_interface import ILocalizationService
from prompt_console.core.services.command_resolver import CommandResolver
from prompt_console.core.services.command_tokenizer import tokenize
from prompt_console.core.services.help_service import HelpService

logger = logging.getLogger(__name__)

HELP_COMMAND = "HELP"
HELP_SYNTAX = "SYNTAX"
HELP_LEARN = "LEARN"


def format_execution_time(elapsed_seconds: float) -> str:
    """Format elapsed time as ``HH:MM:SS.ffffff``."""
    delta = timedelta(seconds=max(elapsed_seconds, 0.0))
    total_seconds = int(delta.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{delta.microseconds:06d}"


@dataclass
class _AuditTrail:
    """What the dispatcher learned along the way, for the audit record."""

    command_line: str
    started_at: float
    handler_type_name: str | None = None
    handler: IConsoleCommand | None = None
    exception: BaseException | None = None


class CommandDispatcher:
    """Runs console command lines against the current registry snapshot."""

    def __init__(
        self,
        registry_holder: RegistryHolder,
        resolver: CommandResolver,
        localization: ILocalizationService,
        audit_log: IAuditLog,
        help_service: HelpService | None = None,
    ) -> None:
        self._registry_holder = registry_holder
        self._resolver = resolver
        self._localization = localization
        self._audit_log = audit_log
        self._help = help_service or HelpService(localization)

    @property
    def help_service(self) -> HelpService:
        return self._help

    def list_commands(self):
        """Command summaries for listing and autocomplete."""
        return self._help.list_commands(self._registry_holder.current)

    def execute(
        self, command_line: str, context: CommandContext | None = None
    ) -> DispatchResponse:
        """Tokenize and dispatch a raw console line."""
        return self.execute_tokens(tokenize(command_line), context, command_line)

    def execute_tokens(
        self,
        tokens: Sequence[str],
        context: CommandContext | None = None,
        command_line: str | None = None,
    ) -> DispatchResponse:
        """Dispatch an already tokenized invocation.

        Args:
            tokens: Command name followed by its arguments.
            context: Portal, user and current page supplied by the host.
            command_line: Original text for the audit record.

        Returns:
            The single response for this invocation.
        """
        trail = _AuditTrail(
            command_line=command_line if command_line is not None else " ".join(tokens),
            started_at=time.perf_counter(),
        )
        # One snapshot for the whole call; a concurrent reload does not affect it
        registry = self._registry_holder.current
        try:
            response = self._dispatch(list(tokens), context or CommandContext(), registry, trail)
        except Exception as e:
            logger.error("Unexpected dispatch failure for %r: %s", trail.command_line, e, exc_info=True)
            trail.exception = e
            response = DispatchResponse.failed(DispatchState.FAILED, str(e))

        self._write_audit(trail, response)
        return response

    def _dispatch(
        self,
        tokens: list[str],
        context: CommandContext,
        registry: CommandRegistry,
        trail: _AuditTrail,
    ) -> DispatchResponse:
        if not tokens:
            return DispatchResponse.failed(
                DispatchState.RECEIVED_EMPTY, self._help.not_found_message("")
            )

        is_help = tokens[0].upper() == HELP_COMMAND
        if is_help:
            modifier = tokens[1].upper() if len(tokens) > 1 else ""
            if modifier in (HELP_SYNTAX, HELP_LEARN):
                return DispatchResponse.help_outcome(
                    DispatchState.RECEIVED_HELP,
                    self._help.get_topic_help(
                        show_syntax=modifier == HELP_SYNTAX,
                        show_learn=modifier == HELP_LEARN,
                    ),
                )
            if len(tokens) == 1:
                return DispatchResponse.failed(
                    DispatchState.RECEIVED_HELP, self._help.not_found_message("")
                )
            command_name = tokens[1]
        else:
            command_name = tokens[0]

        # Resolving
        resolution = self._resolver.resolve(command_name, registry)
        if resolution.descriptor is None:
            return DispatchResponse.failed(
                DispatchState.NOT_FOUND,
                self._not_found_message(command_name, resolution.suggestion),
            )

        # Resolved
        descriptor = resolution.descriptor
        try:
            handler = descriptor.handler_factory()
        except Exception as e:
            logger.error("Failed to create command %s: %s", descriptor.key, e, exc_info=True)
            trail.exception = e
            return DispatchResponse.failed(DispatchState.FAILED, str(e), descriptor.key)

        trail.handler_type_name = descriptor.handler_type_name or (
            f"{type(handler).__module__}.{type(handler).__qualname__}"
        )

        if is_help:
            return DispatchResponse.help_outcome(
                DispatchState.RECEIVED_HELP,
                self._help.get_command_help(descriptor, handler),
                descriptor.key,
            )

        # Binding / validating
        try:
            handler.init(tokens, context.portal, context.user, context.current_page)
        except Exception as e:
            logger.error("Command %s failed to initialize: %s", descriptor.key, e, exc_info=True)
            trail.exception = e
            return DispatchResponse.failed(DispatchState.FAILED, str(e), descriptor.key)

        trail.handler = handler
        if not handler.is_valid():
            message = handler.validation_message or self._localization.get_string(
                INVALID_COMMAND_KEY, PROMPT_RESOURCE_FILE
            )
            return DispatchResponse.failed(DispatchState.FAILED, message, descriptor.key)

        # Executing
        try:
            result = handler.run()
        except Exception as e:
            logger.error("Command %s failed: %s", descriptor.key, e, exc_info=True)
            trail.exception = e
            return DispatchResponse.failed(DispatchState.FAILED, str(e), descriptor.key)

        return DispatchResponse.completed(result, descriptor.key)

    def _not_found_message(self, command_name: str, suggestion: str | None) -> str:
        message = self._help.not_found_message(command_name)
        if suggestion:
            message += self._localization.format_string(
                DID_YOU_MEAN_KEY, PROMPT_RESOURCE_FILE, suggestion
            )
        return message

    def _write_audit(self, trail: _AuditTrail, response: DispatchResponse) -> None:
        elapsed = time.perf_counter() - trail.started_at
        is_valid = False
        if trail.handler is not None:
            try:
                is_valid = trail.handler.is_valid()
            except Exception:
                logger.debug("is_valid() raised while writing audit record", exc_info=True)

        record = AuditLogRecord(exception=trail.exception)
        record.add_property(AUDIT_PROPERTY_COMMAND, trail.command_line)
        record.add_property(AUDIT_PROPERTY_IS_VALID, is_valid)
        if trail.handler_type_name:
            record.add_property(AUDIT_PROPERTY_TYPE_NAME, trail.handler_type_name)
        if response.result is not None:
            record.add_property(AUDIT_PROPERTY_RECORDS, response.result.records)
        record.add_property(AUDIT_PROPERTY_OUTPUT, response.output)
        record.add_property(AUDIT_PROPERTY_EXECUTION_TIME, format_execution_time(elapsed))

        try:
            self._audit_log.add_log(record)
        except Exception:
            logger.warning("Failed to hand record to the audit log", exc_info=True)
