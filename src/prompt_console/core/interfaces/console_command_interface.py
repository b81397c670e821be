"""
Interface for console command handlers.

This module defines the contract the dispatcher relies on. Concrete commands
normally derive from ``ConsoleCommandBase`` instead of implementing it
directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import ClassVar

from prompt_console.core.domain.command_context import PortalContext, UserContext
from prompt_console.core.domain.command_results import ConsoleResult
from prompt_console.core.domain.flags import FlagDescriptor


class IConsoleCommand(ABC):
    """Polymorphic unit of business logic behind one console command."""

    command_name: ClassVar[str]
    description_key: ClassVar[str]
    resource_file: ClassVar[str]
    flags: ClassVar[tuple[FlagDescriptor, ...]] = ()
    result_html_key: ClassVar[str | None] = None

    @abstractmethod
    def init(
        self,
        args: Sequence[str],
        portal: PortalContext,
        user: UserContext,
        current_page: int,
    ) -> None:
        """Bind arguments and set the validation state.

        Args:
            args: Raw invocation tokens, including the command name at index 0.
            portal: Portal the command runs against.
            user: User issuing the command.
            current_page: Page the console is currently shown on.
        """

    @abstractmethod
    def run(self) -> ConsoleResult:
        """Execute the command. Only called when ``is_valid()`` is true."""

    @abstractmethod
    def is_valid(self) -> bool:
        """Whether the bound input is acceptable to execute."""

    @property
    @abstractmethod
    def validation_message(self) -> str:
        """Explanation of why the input is invalid, empty when valid."""

    @property
    def local_resource_file(self) -> str:
        """Resource file the command resolves its own strings from."""
        return self.resource_file
