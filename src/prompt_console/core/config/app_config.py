from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field

from prompt_console.core.common.exceptions import ConfigurationError
from prompt_console.core.config.config_loader import (
    env_overrides,
    load_dotenv_file,
    merge_dicts,
)
from prompt_console.core.config.yaml_validation import (
    load_yaml_file,
    validate_config_data,
)
from prompt_console.core.domain.command_context import (
    CommandContext,
    PortalContext,
    UserContext,
)
from prompt_console.core.domain.users import UserRecord
from prompt_console.core.interfaces.model_bases import DomainModel
from prompt_console.core.services.command_resolver import DEFAULT_SUGGESTION_THRESHOLD
from prompt_console.core.services.command_set_loader import (
    DEFAULT_COMMAND_MODULES,
    CommandSet,
)

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(DomainModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    log_file: str | None = None
    log_format: str | None = None


class PromptConfig(DomainModel):
    """Console dispatch settings."""

    suggestion_threshold: float = Field(
        default=DEFAULT_SUGGESTION_THRESHOLD, ge=0.0, le=1.0
    )
    resources_dir: str | None = None
    command_modules: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COMMAND_MODULES)
    )
    disabled_commands: list[str] = Field(default_factory=list)
    # When set, the command set is read from this YAML file instead of the
    # two lists above and can be reloaded while running.
    command_set_file: str | None = None
    watch_command_set: bool = False
    audit_enabled: bool = True
    audit_queue_size: int = Field(default=10000, ge=1)

    def command_set(self) -> CommandSet:
        return CommandSet(
            command_modules=tuple(self.command_modules),
            disabled_commands=tuple(self.disabled_commands),
        )


class HostContextConfig(DomainModel):
    """Portal and user every console request runs as.

    Authentication belongs to the embedding host; this is the identity the
    standalone server and CLI use.
    """

    portal_id: int = 0
    portal_name: str = "Default Portal"
    user_id: int = 1
    username: str = "host"
    display_name: str = "Host"
    is_superuser: bool = True

    def to_context(self, current_page: int = 0) -> CommandContext:
        return CommandContext(
            portal=PortalContext(portal_id=self.portal_id, portal_name=self.portal_name),
            user=UserContext(
                user_id=self.user_id,
                username=self.username,
                display_name=self.display_name,
                is_superuser=self.is_superuser,
            ),
            current_page=current_page,
        )


class AppConfig(DomainModel):
    """Top-level application configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    host_context: HostContextConfig = Field(default_factory=HostContextConfig)
    # Role names declared in the host portal, in addition to the ones users hold
    roles: list[str] = Field(default_factory=list)
    users: list[UserRecord] = Field(default_factory=list)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Create a configuration from defaults and environment variables only."""
        data = merge_dicts(cls().model_dump(), env_overrides(environ))
        return cls.model_validate(data)


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Load configuration from file and environment.

    Environment variables take precedence over the file. When ``environ`` is
    not given, ``os.environ`` is used after loading a ``.env`` file.

    Args:
        config_path: Optional path to a YAML configuration file

    Returns:
        AppConfig instance

    Raises:
        ConfigurationError: If the file is missing, not YAML, or invalid
    """
    if environ is None:
        load_dotenv_file()
        environ = os.environ

    config_data: dict[str, Any] = AppConfig().model_dump()

    if config_path:
        path = Path(config_path)
        if path.suffix.lower() not in (".yaml", ".yml"):
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {path.suffix}. Use YAML (.yaml/.yml).",
                details={"path": str(path)},
            )
        file_config = load_yaml_file(path) or {}
        validate_config_data(file_config, path)
        merge_dicts(config_data, file_config)
        logger.info("Loaded configuration from %s", path)

    merge_dicts(config_data, env_overrides(environ))
    try:
        return AppConfig.model_validate(config_data)
    except ValueError as e:
        raise ConfigurationError(
            message="Invalid configuration", details={"hint": str(e)}
        ) from e
