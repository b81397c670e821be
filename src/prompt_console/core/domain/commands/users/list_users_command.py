from __future__ import annotations

import logging
from collections.abc import Sequence

from prompt_console.core.constants import (
    DEFAULT_PAGE_NO,
    DEFAULT_PAGE_SIZE,
    ONLY_ONE_FLAG_REQUIRED_KEY,
)
from prompt_console.core.domain.command_context import PortalContext, UserContext
from prompt_console.core.domain.command_results import ConsoleResult
from prompt_console.core.domain.commands.base_command import ConsoleCommandBase
from prompt_console.core.domain.flags import FlagDescriptor, FlagType
from prompt_console.core.domain.paging import build_paged_result, normalize_page_size
from prompt_console.core.domain.users import USER_FIELD_ORDER, UserSearchQuery
from prompt_console.core.interfaces.localization_interface import ILocalizationService
from prompt_console.core.interfaces.user_repository_interface import IUserRepository
from prompt_console.core.services.argument_binder import ArgumentBinder

logger = logging.getLogger(__name__)

USERS_RESOURCE_FILE = "users.resources.yaml"

FLAG_EMAIL = "email"
FLAG_USERNAME = "username"
FLAG_ROLE = "role"
FLAG_PAGE = "page"
FLAG_MAX = "max"

_FILTER_FLAGS = frozenset({FLAG_EMAIL, FLAG_USERNAME, FLAG_ROLE})
_PAGING_FLAGS = frozenset({FLAG_PAGE, FLAG_MAX})
_WILDCARDS = ("%", "*")


def infer_user_filter(value: str) -> str:
    """Treat a bare value as an email when it contains ``@``, else a username."""
    return FLAG_EMAIL if "@" in value else FLAG_USERNAME


def strip_wildcards(text: str) -> str:
    for wildcard in _WILDCARDS:
        text = text.replace(wildcard, "")
    return text


class ListUsersCommand(ConsoleCommandBase):
    """Lists portal users by username, email or role, one page at a time."""

    command_name = "list-users"
    description_key = "Prompt_ListUsers_Description"
    resource_file = USERS_RESOURCE_FILE
    result_html_key = "Prompt_ListUsers_ResultHtml"
    flags = (
        FlagDescriptor(FLAG_EMAIL, "Prompt_ListUsers_FlagEmail"),
        FlagDescriptor(FLAG_USERNAME, "Prompt_ListUsers_FlagUsername"),
        FlagDescriptor(FLAG_ROLE, "Prompt_ListUsers_FlagRole"),
        FlagDescriptor(FLAG_PAGE, "Prompt_ListUsers_FlagPage", FlagType.INTEGER, "1"),
        FlagDescriptor(FLAG_MAX, "Prompt_ListUsers_FlagMax", FlagType.INTEGER, "10"),
    )
    positional_resolver = staticmethod(infer_user_filter)

    def __init__(
        self,
        localization: ILocalizationService,
        user_repository: IUserRepository,
        binder: ArgumentBinder | None = None,
    ) -> None:
        super().__init__(localization, binder)
        self._users = user_repository
        self.email = ""
        self.username = ""
        self.role = ""
        self.page = DEFAULT_PAGE_NO
        self.max = DEFAULT_PAGE_SIZE

    def init(
        self,
        args: Sequence[str],
        portal: PortalContext,
        user: UserContext,
        current_page: int,
    ) -> None:
        super().init(args, portal, user, current_page)
        self.email = self.get_flag_value(FLAG_EMAIL, "")
        self.username = self.get_flag_value(FLAG_USERNAME, "")
        self.role = self.get_flag_value(FLAG_ROLE, "")
        self.page = self.get_flag_value(FLAG_PAGE, DEFAULT_PAGE_NO)
        self.max = self.get_flag_value(FLAG_MAX, DEFAULT_PAGE_SIZE)

        if self._is_paging_only():
            return
        bound = self.bound_arguments
        if bound.inferred_flag is not None and (
            bound.supplied <= _PAGING_FLAGS or not self.is_flag(self.args[1])
        ):
            return

        # A bare value after a filter flag counts as a filter of its own
        filters = len(bound.positionals) + sum(
            1 for flag in _FILTER_FLAGS if bound.has_flag(flag) and bound.get(flag)
        )
        if filters != 1:
            self.add_message(
                self.format_string(
                    ONLY_ONE_FLAG_REQUIRED_KEY, FLAG_EMAIL, FLAG_USERNAME, FLAG_ROLE
                )
            )

    def _is_paging_only(self) -> bool:
        """Whether the invocation carries no filter, only paging flags.

        Counted on raw tokens: ``list-users``, ``list-users -page 2``,
        ``list-users -max 5`` and ``list-users -page 2 -max 5``.
        """
        count = len(self.args)
        if count == 1:
            return True
        if count == 3:
            return self.has_flag(FLAG_PAGE) or self.has_flag(FLAG_MAX)
        if count == 5:
            return self.has_flag(FLAG_PAGE) and self.has_flag(FLAG_MAX)
        return False

    def run(self) -> ConsoleResult:
        max_rows = normalize_page_size(self.max)
        page_index = self.page - 1 if self.page > 0 else 0
        include_superusers = self.user.is_superuser

        if self.username:
            rows, total = self._search(strip_wildcards(self.username), page_index, max_rows)
        elif self.email:
            rows, total = self._search(strip_wildcards(self.email), page_index, max_rows)
        elif self.role:
            found = self._users.get_users_in_role(
                self.portal_id, self.role, page_index, max_rows, include_superusers
            )
            if found is None:
                logger.info("Role '%s' not found in portal %d", self.role, self.portal_id)
                return ConsoleResult.error(self.format_string("Prompt_RoleNotFound", self.role))
            rows, total = found
        else:
            rows, total = self._search(None, page_index, max_rows)

        return build_paged_result(
            [user.to_row() for user in rows],
            total,
            self.page,
            max_rows,
            success_message=self.localize_string("Prompt_ListUsersOutput"),
            empty_message=self.localize_string("noUsers"),
            field_order=USER_FIELD_ORDER,
        )

    def _search(self, search_text: str | None, page_index: int, page_size: int):
        query = UserSearchQuery(
            portal_id=self.portal_id,
            search_text=search_text or None,
            page_index=page_index,
            page_size=page_size,
            include_superusers=self.user.is_superuser,
        )
        return self._users.get_users(query)
