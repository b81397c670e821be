"""
Console commands.

Command sets live in sub-packages (``users``) that expose
``register_commands(builder, environment)``; they are imported by the command
set loader rather than discovered here.
"""

from prompt_console.core.domain.commands.base_command import (
    ConsoleCommandBase,
    ValidationState,
)
from prompt_console.core.domain.commands.command_registry import (
    CommandRegistry,
    CommandRegistryBuilder,
    RegistryHolder,
)

__all__ = [
    "CommandRegistry",
    "CommandRegistryBuilder",
    "ConsoleCommandBase",
    "RegistryHolder",
    "ValidationState",
]
