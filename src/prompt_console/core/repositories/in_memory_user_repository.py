from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from prompt_console.core.domain.users import UserRecord, UserSearchQuery
from prompt_console.core.interfaces.user_repository_interface import IUserRepository

logger = logging.getLogger(__name__)

_SORT_KEYS = {
    "displayname": lambda user: (user.display_name.lower(), user.user_id),
    "username": lambda user: (user.username.lower(), user.user_id),
    "email": lambda user: (user.email.lower(), user.user_id),
    "userid": lambda user: (user.user_id,),
}


class InMemoryUserRepository(IUserRepository):
    """In-memory implementation of the user repository.

    Users and role names are kept in memory and are not persisted. A role
    exists when it is declared explicitly or held by at least one user.
    Suitable for development, demos and testing.
    """

    def __init__(
        self,
        users: Iterable[UserRecord] = (),
        roles: dict[int, Iterable[str]] | None = None,
    ) -> None:
        self._users: dict[int, UserRecord] = {}
        self._roles: dict[int, set[str]] = {}
        for portal_id, names in (roles or {}).items():
            for name in names:
                self.add_role(portal_id, name)
        for user in users:
            self.add(user)

    def add(self, user: UserRecord) -> UserRecord:
        self._users[user.user_id] = user
        for role in user.roles:
            self.add_role(user.portal_id, role)
        return user

    def add_role(self, portal_id: int, role_name: str) -> None:
        self._roles.setdefault(portal_id, set()).add(role_name.lower())

    def role_exists(self, portal_id: int, role_name: str) -> bool:
        return role_name.lower() in self._roles.get(portal_id, set())

    def get_all(self) -> list[UserRecord]:
        return list(self._users.values())

    def get_users(self, query: UserSearchQuery) -> tuple[Sequence[UserRecord], int]:
        matches = [
            user
            for user in self._visible(query.portal_id, query.include_superusers)
            if _matches(user, query.search_text)
        ]
        matches = _sort(matches, query.sort_column, query.sort_ascending)
        return _page(matches, query.page_index, query.page_size), len(matches)

    def get_users_in_role(
        self,
        portal_id: int,
        role_name: str,
        page_index: int,
        page_size: int,
        include_superusers: bool = False,
    ) -> tuple[Sequence[UserRecord], int] | None:
        if not self.role_exists(portal_id, role_name):
            return None
        members = [
            user
            for user in self._visible(portal_id, include_superusers)
            if user.in_role(role_name)
        ]
        members = _sort(members, "displayname", True)
        return _page(members, page_index, page_size), len(members)

    def _visible(self, portal_id: int, include_superusers: bool) -> list[UserRecord]:
        # Superusers are host-level accounts and belong to every portal
        return [
            user
            for user in self._users.values()
            if (user.is_superuser and include_superusers)
            or (not user.is_superuser and user.portal_id == portal_id)
        ]


def _matches(user: UserRecord, search_text: str | None) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    return (
        needle in user.username.lower()
        or needle in user.email.lower()
        or needle in user.display_name.lower()
    )


def _sort(users: list[UserRecord], column: str, ascending: bool) -> list[UserRecord]:
    key = _SORT_KEYS.get(column.lower(), _SORT_KEYS["displayname"])
    return sorted(users, key=key, reverse=not ascending)


def _page(users: list[UserRecord], page_index: int, page_size: int) -> list[UserRecord]:
    start = max(page_index, 0) * page_size
    return users[start : start + page_size]
