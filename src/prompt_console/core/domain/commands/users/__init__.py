"""
User management console commands.

Registered under the ``users`` namespace by ``register_commands``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prompt_console.core.domain.command_descriptor import CommandDescriptor
from prompt_console.core.domain.commands.users.list_users_command import (
    ListUsersCommand,
)

if TYPE_CHECKING:
    from prompt_console.core.domain.commands.command_registry import (
        CommandRegistryBuilder,
    )
    from prompt_console.core.services.command_set_loader import CommandEnvironment

NAMESPACE = "users"

__all__ = ["NAMESPACE", "ListUsersCommand", "register_commands"]


def register_commands(
    builder: CommandRegistryBuilder, environment: CommandEnvironment
) -> None:
    builder.register(
        CommandDescriptor.for_command(
            ListUsersCommand,
            namespace=NAMESPACE,
            factory=lambda: ListUsersCommand(
                environment.localization,
                environment.user_repository,
                environment.binder,
            ),
        )
    )
