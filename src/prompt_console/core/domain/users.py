"""
User models exchanged with the user repository and returned as result rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_pascal

from prompt_console.core.interfaces.model_bases import DomainModel, InternalDTO

USER_FIELD_ORDER = ("UserId", "Username", "Email", "DisplayName", "LastLogin")


class UserRecord(DomainModel):
    """A user as stored by the portal."""

    user_id: int
    portal_id: int = 0
    username: str
    email: str = ""
    display_name: str = ""
    roles: list[str] = Field(default_factory=list)
    is_superuser: bool = False
    is_deleted: bool = False
    last_login: datetime | None = None

    def in_role(self, role_name: str) -> bool:
        lowered = role_name.lower()
        return any(role.lower() == lowered for role in self.roles)

    def to_row(self) -> UserModel:
        return UserModel(
            user_id=self.user_id,
            username=self.username,
            email=self.email,
            display_name=self.display_name,
            last_login=self.last_login,
            is_deleted=self.is_deleted,
        )


class UserModel(DomainModel):
    """Row model for user listings."""

    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, frozen=True
    )

    user_id: int
    username: str
    email: str = ""
    display_name: str = ""
    last_login: datetime | None = None
    is_deleted: bool = False


@dataclass(frozen=True)
class UserSearchQuery(InternalDTO):
    """Search parameters for a paged user listing."""

    portal_id: int
    search_text: str | None = None
    page_index: int = 0
    page_size: int = 10
    sort_column: str = "displayname"
    sort_ascending: bool = True
    include_superusers: bool = False
