"""
Base command implementation.

This module provides the base class for console commands. It takes care of
argument binding, request context and validation state so concrete commands
only read their flags and implement ``run``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from prompt_console.core.domain.command_context import PortalContext, UserContext
from prompt_console.core.interfaces.console_command_interface import IConsoleCommand
from prompt_console.core.interfaces.localization_interface import ILocalizationService
from prompt_console.core.services.argument_binder import (
    ArgumentBinder,
    BoundArguments,
    PositionalResolver,
    is_flag,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationState:
    """Whether a handler's bound input may be executed, and why not."""

    is_valid: bool = True
    message: str = ""

    def with_message(self, message: str) -> ValidationState:
        combined = f"{self.message}\n{message}" if self.message else message
        return ValidationState(is_valid=False, message=combined)


class ConsoleCommandBase(IConsoleCommand):
    """
    Base class for console commands.

    Subclasses declare ``command_name``, ``description_key``,
    ``resource_file`` and ``flags`` as class attributes, override ``init`` to
    read their flags (calling ``super().init`` first) and implement ``run``.
    """

    positional_resolver: PositionalResolver | None = None

    def __init__(
        self,
        localization: ILocalizationService,
        binder: ArgumentBinder | None = None,
    ) -> None:
        self._localization = localization
        self._binder = binder or ArgumentBinder()
        self._validation = ValidationState()
        self._args: tuple[str, ...] = ()
        self._bound = BoundArguments()
        self.portal = PortalContext()
        self.user = UserContext()
        self.current_page = 0

    def init(
        self,
        args: Sequence[str],
        portal: PortalContext,
        user: UserContext,
        current_page: int,
    ) -> None:
        self._args = tuple(args)
        self.portal = portal
        self.user = user
        self.current_page = current_page
        self._validation = ValidationState()
        resolver = type(self).positional_resolver
        self._bound = self._binder.bind(self.flags, self._args[1:], resolver)

    @property
    def args(self) -> tuple[str, ...]:
        return self._args

    @property
    def bound_arguments(self) -> BoundArguments:
        return self._bound

    @property
    def portal_id(self) -> int:
        return self.portal.portal_id

    @property
    def validation_state(self) -> ValidationState:
        return self._validation

    def is_valid(self) -> bool:
        return self._validation.is_valid

    @property
    def validation_message(self) -> str:
        return self._validation.message

    def add_message(self, message: str) -> None:
        """Mark the command invalid and record why."""
        self._validation = self._validation.with_message(message)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s invalid: %s", self.command_name, message)

    def get_flag_value(self, name: str, default: Any = None) -> Any:
        return self._bound.get(name, default)

    def has_flag(self, name: str) -> bool:
        return self._bound.has_flag(name)

    @staticmethod
    def is_flag(token: str) -> bool:
        return is_flag(token)

    def localize_string(self, key: str) -> str:
        return self._localization.get_string(key, self.local_resource_file)

    def format_string(self, key: str, *args: object) -> str:
        return self._localization.format_string(key, self.local_resource_file, *args)
