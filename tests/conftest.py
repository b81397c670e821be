from __future__ import annotations

from datetime import datetime

import pytest
from prompt_console.core.domain.command_context import (
    CommandContext,
    PortalContext,
    UserContext,
)
from prompt_console.core.domain.commands.command_registry import RegistryHolder
from prompt_console.core.domain.users import UserRecord
from prompt_console.core.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from prompt_console.core.services.audit_log_service import InMemoryAuditLog
from prompt_console.core.services.command_dispatcher import CommandDispatcher
from prompt_console.core.services.command_resolver import CommandResolver
from prompt_console.core.services.command_set_loader import (
    CommandEnvironment,
    CommandSet,
    CommandSetLoader,
)
from prompt_console.core.services.localization_service import YamlLocalizationService

PORTAL_ID = 0


def make_users() -> list[UserRecord]:
    return [
        UserRecord(
            user_id=1,
            username="host",
            email="host@example.com",
            display_name="SuperUser Account",
            is_superuser=True,
        ),
        UserRecord(
            user_id=2,
            portal_id=PORTAL_ID,
            username="admin",
            email="admin@example.com",
            display_name="Administrator",
            roles=["Administrators", "Registered Users"],
            last_login=datetime(2024, 5, 1, 9, 30),
        ),
        UserRecord(
            user_id=3,
            portal_id=PORTAL_ID,
            username="jsmith",
            email="john.smith@example.com",
            display_name="John Smith",
            roles=["Registered Users"],
        ),
        UserRecord(
            user_id=4,
            portal_id=PORTAL_ID,
            username="jdoe",
            email="jane.doe@example.org",
            display_name="Jane Doe",
            roles=["Registered Users", "Content Editors"],
        ),
        UserRecord(
            user_id=5,
            portal_id=1,
            username="other",
            email="other@example.net",
            display_name="Other Portal User",
            roles=["Registered Users"],
        ),
    ]


@pytest.fixture
def localization() -> YamlLocalizationService:
    return YamlLocalizationService()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository(make_users(), {PORTAL_ID: ["Empty Role"]})


@pytest.fixture
def audit_log() -> InMemoryAuditLog:
    return InMemoryAuditLog()


@pytest.fixture
def command_loader(
    localization: YamlLocalizationService, user_repository: InMemoryUserRepository
) -> CommandSetLoader:
    return CommandSetLoader(CommandEnvironment(localization, user_repository))


@pytest.fixture
def registry_holder(command_loader: CommandSetLoader) -> RegistryHolder:
    return RegistryHolder(command_loader.load(CommandSet()))


@pytest.fixture
def dispatcher(
    registry_holder: RegistryHolder,
    localization: YamlLocalizationService,
    audit_log: InMemoryAuditLog,
) -> CommandDispatcher:
    return CommandDispatcher(
        registry_holder, CommandResolver(registry_holder), localization, audit_log
    )


@pytest.fixture
def admin_context() -> CommandContext:
    return CommandContext(
        portal=PortalContext(portal_id=PORTAL_ID, portal_name="Test Portal"),
        user=UserContext(user_id=2, username="admin", display_name="Administrator"),
    )


@pytest.fixture
def host_context() -> CommandContext:
    return CommandContext(
        portal=PortalContext(portal_id=PORTAL_ID, portal_name="Test Portal"),
        user=UserContext(
            user_id=1, username="host", display_name="SuperUser Account", is_superuser=True
        ),
    )
