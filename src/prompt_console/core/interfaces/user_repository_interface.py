from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from prompt_console.core.domain.users import UserRecord, UserSearchQuery


class IUserRepository(ABC):
    """Read-only access to the portal user store."""

    @abstractmethod
    def get_users(self, query: UserSearchQuery) -> tuple[Sequence[UserRecord], int]:
        """Return one page of users matching ``query`` and the total match count."""

    @abstractmethod
    def get_users_in_role(
        self,
        portal_id: int,
        role_name: str,
        page_index: int,
        page_size: int,
        include_superusers: bool = False,
    ) -> tuple[Sequence[UserRecord], int] | None:
        """Return one page of the users in a role and the total member count.

        Returns:
            None when the role does not exist in the portal.
        """
