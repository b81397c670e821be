from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class PortalContext:
    """Portal the console session operates on, supplied by the host."""

    portal_id: int = 0
    portal_name: str = ""


@dataclass(slots=True, frozen=True)
class UserContext:
    """Authenticated user issuing commands, supplied by the host."""

    user_id: int = 0
    username: str = ""
    display_name: str = ""
    is_superuser: bool = False


@dataclass(slots=True, frozen=True)
class CommandContext:
    """Typed request context passed to commands during ``init``.

    Authentication and permission checks happen in the host before dispatch;
    the context only carries the identity the host resolved.
    """

    portal: PortalContext = field(default_factory=PortalContext)
    user: UserContext = field(default_factory=UserContext)
    current_page: int = 0
