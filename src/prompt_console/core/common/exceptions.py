"""
Common exception classes for the prompt console.

This module defines custom exception classes used throughout the application
for better error handling and categorization.
"""

from __future__ import annotations


class PromptConsoleError(Exception):
    """Base exception class for all prompt console errors."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        *,
        status_code: int | None = None,
        **kwargs,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            status_code: Optional HTTP status code hint for transport adapters
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code or 500
        for key, value in (kwargs or {}).items():
            setattr(self, key, value)

    def to_dict(self) -> dict:
        error_dict = {
            "message": self.message,
            "type": self.__class__.__name__,
            "details": self.details,
        }

        for attr_name in dir(self):
            if (
                not attr_name.startswith("_")
                and attr_name not in ["message", "details", "status_code", "args"]
                and not callable(getattr(self, attr_name))
            ):
                error_dict[attr_name] = getattr(self, attr_name)

        return {"error": error_dict}


class ConfigurationError(PromptConsoleError):
    """Raised when there's a configuration issue."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=400, **kwargs)


class DuplicateCommandError(PromptConsoleError):
    """Raised when two command descriptors share the same key."""

    def __init__(
        self,
        message: str = "Command already registered",
        command_key: str | None = None,
        details: dict | None = None,
    ):
        det = details.copy() if details else {}
        if command_key:
            det.setdefault("command_key", command_key)
        super().__init__(message, det, status_code=500)


class DuplicateFlagError(PromptConsoleError):
    """Raised when a command declares the same flag name twice."""

    def __init__(
        self,
        message: str = "Flag declared more than once",
        flag_name: str | None = None,
        details: dict | None = None,
    ):
        det = details.copy() if details else {}
        if flag_name:
            det.setdefault("flag_name", flag_name)
        super().__init__(message, det, status_code=500)


class RegistryLoadError(PromptConsoleError):
    """Raised when a command set cannot be loaded into a registry."""

    def __init__(
        self,
        message: str = "Failed to load command set",
        module_name: str | None = None,
        details: dict | None = None,
    ):
        det = details.copy() if details else {}
        if module_name:
            det.setdefault("module_name", module_name)
        super().__init__(message, det, status_code=500)
