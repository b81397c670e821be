"""
Application factory for creating the console services and the FastAPI application.

``build_services`` wires the registry, resolver, dispatcher, audit log and
optional reloader from an ``AppConfig``; ``build_app`` exposes them over HTTP.
The CLI uses ``build_services`` directly for the interactive console.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI

from prompt_console.core.app.controllers.command_controller import router
from prompt_console.core.app.error_handlers import configure_exception_handlers
from prompt_console.core.common.logging_utils import get_logger
from prompt_console.core.config.app_config import AppConfig
from prompt_console.core.domain.commands.command_registry import RegistryHolder
from prompt_console.core.interfaces.audit_log_interface import IAuditLog
from prompt_console.core.interfaces.localization_interface import ILocalizationService
from prompt_console.core.interfaces.user_repository_interface import IUserRepository
from prompt_console.core.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from prompt_console.core.services.audit_log_service import NullAuditLog, QueuedAuditLog
from prompt_console.core.services.command_dispatcher import CommandDispatcher
from prompt_console.core.services.command_resolver import CommandResolver
from prompt_console.core.services.command_set_loader import (
    CommandEnvironment,
    CommandSetLoader,
)
from prompt_console.core.services.localization_service import YamlLocalizationService
from prompt_console.core.services.registry_reloader import RegistryReloader

logger = logging.getLogger(__name__)
lifecycle_logger = get_logger("prompt_console.lifecycle")


@dataclass
class ConsoleServices:
    """Everything a host needs to run console commands."""

    config: AppConfig
    registry_holder: RegistryHolder
    resolver: CommandResolver
    dispatcher: CommandDispatcher
    audit_log: IAuditLog
    loader: CommandSetLoader
    reloader: RegistryReloader | None = None

    def start(self) -> None:
        if isinstance(self.audit_log, QueuedAuditLog):
            self.audit_log.start()
        if self.reloader is not None and self.config.prompt.watch_command_set:
            self.reloader.start()
        lifecycle_logger.info(
            "console_started",
            commands=len(self.registry_holder.current),
            watching=self.reloader is not None and self.reloader.is_watching,
        )

    def stop(self) -> None:
        if self.reloader is not None:
            self.reloader.stop()
        if isinstance(self.audit_log, QueuedAuditLog):
            self.audit_log.close()
        lifecycle_logger.info("console_stopped")


def build_services(
    config: AppConfig | None = None,
    *,
    localization: ILocalizationService | None = None,
    user_repository: IUserRepository | None = None,
    audit_log: IAuditLog | None = None,
) -> ConsoleServices:
    """Wire the console from configuration.

    Collaborators can be passed in to replace the configured ones.

    Raises:
        RegistryLoadError: If the configured command set cannot be loaded
        DuplicateCommandError: If two commands share a key
    """
    config = config or AppConfig.from_env()
    prompt = config.prompt

    localization = localization or YamlLocalizationService(prompt.resources_dir)
    if user_repository is None:
        user_repository = InMemoryUserRepository(
            config.users, {config.host_context.portal_id: config.roles}
        )
    if audit_log is None:
        audit_log = (
            QueuedAuditLog(max_queue_size=prompt.audit_queue_size)
            if prompt.audit_enabled
            else NullAuditLog()
        )

    loader = CommandSetLoader(CommandEnvironment(localization, user_repository))
    holder = RegistryHolder()
    reloader: RegistryReloader | None = None
    if prompt.command_set_file:
        reloader = RegistryReloader(holder, loader, prompt.command_set_file)
        reloader.load_initial()
    else:
        holder.swap(loader.load(prompt.command_set()))

    resolver = CommandResolver(holder, prompt.suggestion_threshold)
    dispatcher = CommandDispatcher(holder, resolver, localization, audit_log)
    return ConsoleServices(
        config=config,
        registry_holder=holder,
        resolver=resolver,
        dispatcher=dispatcher,
        audit_log=audit_log,
        loader=loader,
        reloader=reloader,
    )


def build_app(
    config: AppConfig | dict[str, Any] | None = None,
    services: ConsoleServices | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: The application configuration (AppConfig object or dict)
        services: Pre-built services; built from ``config`` when omitted

    Returns:
        The FastAPI ASGI application instance.
    """
    if services is None:
        if isinstance(config, dict):
            config = AppConfig.model_validate(config)
        services = build_services(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        services.start()
        logger.info("Application startup complete")
        yield
        logger.info("Shutting down application")
        services.stop()

    app = FastAPI(title="Prompt Console", lifespan=lifespan)
    app.state.services = services
    app.state.dispatcher = services.dispatcher
    app.state.host_context = services.config.host_context
    app.include_router(router)
    configure_exception_handlers(app)
    return app
