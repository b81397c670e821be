from __future__ import annotations

from abc import ABC, abstractmethod


class ILocalizationService(ABC):
    """Key to string lookup used for every user-facing message."""

    @abstractmethod
    def get_string(self, key: str, resource_file: str) -> str:
        """Return the localized string for ``key`` in ``resource_file``.

        Implementations return the key itself when no string is found so
        missing resources stay visible instead of producing empty output.
        """

    def format_string(self, key: str, resource_file: str, *args: object) -> str:
        """Look up ``key`` and apply ``str.format`` with positional arguments."""
        template = self.get_string(key, resource_file)
        if not args:
            return template
        try:
            return template.format(*args)
        except (IndexError, KeyError, ValueError):
            return template
