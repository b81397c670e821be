"""
Help rendering for the console.

Topic help (``help syntax`` / ``help learn``) and the command listing only
need the registry and localization; per-command help reads flag
documentation from an instantiated handler.
"""

from __future__ import annotations

from prompt_console.core.constants import (
    COMMAND_NOT_FOUND_KEY,
    HELP_LEARN_KEY,
    HELP_SYNTAX_KEY,
    PROMPT_RESOURCE_FILE,
)
from prompt_console.core.domain.command_descriptor import (
    CommandDescriptor,
    CommandSummary,
)
from prompt_console.core.domain.command_results import CommandHelp, FlagHelp
from prompt_console.core.domain.commands.command_registry import CommandRegistry
from prompt_console.core.interfaces.console_command_interface import IConsoleCommand
from prompt_console.core.interfaces.localization_interface import ILocalizationService


class HelpService:
    def __init__(self, localization: ILocalizationService) -> None:
        self._localization = localization

    def list_commands(self, registry: CommandRegistry) -> list[CommandSummary]:
        """Summaries of every registered command, ordered by key."""
        return [
            descriptor.to_summary(
                self._localization.get_string(
                    descriptor.description_key, descriptor.resource_file
                )
            )
            for descriptor in registry.all()
        ]

    def get_topic_help(self, show_syntax: bool, show_learn: bool) -> CommandHelp:
        if show_syntax:
            return CommandHelp(
                result_html=self._localization.get_string(
                    HELP_SYNTAX_KEY, PROMPT_RESOURCE_FILE
                )
            )
        if show_learn:
            return CommandHelp(
                result_html=self._localization.get_string(
                    HELP_LEARN_KEY, PROMPT_RESOURCE_FILE
                )
            )
        return CommandHelp(error=self.not_found_message(""))

    def get_command_help(
        self, descriptor: CommandDescriptor, command: IConsoleCommand
    ) -> CommandHelp:
        """Render help for ``descriptor`` using the handler's own resources."""
        resource_file = command.local_resource_file
        options = [
            FlagHelp(
                flag=flag.name,
                type=flag.value_type.value,
                required=False,
                default_value=flag.default_value or "",
                description=self._localization.get_string(
                    flag.description_key, resource_file
                ),
            )
            for flag in descriptor.flags
        ]
        result_html = ""
        if descriptor.result_html_key:
            result_html = self._localization.get_string(
                descriptor.result_html_key, resource_file
            )
        return CommandHelp(
            name=descriptor.name,
            description=self._localization.get_string(
                descriptor.description_key, resource_file
            ),
            options=options,
            result_html=result_html,
        )

    def not_found_message(self, command_name: str) -> str:
        return self._localization.format_string(
            COMMAND_NOT_FOUND_KEY, PROMPT_RESOURCE_FILE, command_name.lower()
        )
