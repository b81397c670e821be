"""
Flag schema for console commands.

A command declares the flags it accepts as an explicit tuple of
``FlagDescriptor`` values. The tuple is read once when the command is
registered and again by the argument binder on every dispatch.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from prompt_console.core.common.exceptions import DuplicateFlagError
from prompt_console.core.interfaces.model_bases import InternalDTO

_TRUE_VALUES = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "n", "off"})


class FlagType(str, Enum):
    """Value types a flag can carry."""

    STRING = "String"
    INTEGER = "Integer"
    BOOLEAN = "Boolean"


FlagValue = str | int | bool


def parse_bool(text: str) -> bool | None:
    """Parse a boolean flag value, returning None when it is not recognised."""
    lowered = text.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


@dataclass(frozen=True)
class FlagDescriptor(InternalDTO):
    """Declarative description of one flag accepted by a command.

    Attributes:
        name: Flag name as typed after the dash (``-page``), case-insensitive.
        description_key: Resource key of the flag's help text.
        value_type: Type the raw text is converted to.
        default_value: Textual default, or None when the flag has no default.
    """

    name: str
    description_key: str
    value_type: FlagType = FlagType.STRING
    default_value: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Flag name must be a non-empty string.")
        # Flags are matched case-insensitively, so store the canonical form
        object.__setattr__(self, "name", self.name.strip().lower())

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    def typed_default(self) -> FlagValue | None:
        """Return the declared default converted to the flag's type."""
        if self.default_value is None:
            return None
        if self.value_type is FlagType.INTEGER:
            try:
                return int(self.default_value)
            except ValueError:
                return None
        if self.value_type is FlagType.BOOLEAN:
            return parse_bool(self.default_value)
        return self.default_value


def validate_flag_schema(flags: Iterable[FlagDescriptor]) -> tuple[FlagDescriptor, ...]:
    """Return the flags as a tuple, rejecting duplicate names."""
    seen: set[str] = set()
    result: list[FlagDescriptor] = []
    for flag in flags:
        if flag.name in seen:
            raise DuplicateFlagError(
                f"Flag '{flag.name}' is declared more than once.", flag_name=flag.name
            )
        seen.add(flag.name)
        result.append(flag)
    return tuple(result)
