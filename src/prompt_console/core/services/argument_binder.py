from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from prompt_console.core.domain.flags import (
    FlagDescriptor,
    FlagType,
    FlagValue,
    parse_bool,
)

logger = logging.getLogger(__name__)

_FLAG_PATTERN = re.compile(r"^--?[A-Za-z]")

PositionalResolver = Callable[[str], "str | None"]


def is_flag(token: str) -> bool:
    """Whether ``token`` is a flag marker (``-name`` or ``--name``).

    A dash followed by a digit is a value, so ``-1`` can be passed to a flag.
    """
    return bool(_FLAG_PATTERN.match(token))


def flag_name(token: str) -> str:
    return token.lstrip("-").lower()


@dataclass(frozen=True)
class BoundArguments:
    """Typed flag values produced for one dispatch.

    Attributes:
        values: Flag name to typed value, user supplied or defaulted. Flags
            without a value and without a default are absent.
        supplied: Names of schema flags given explicitly on the command line.
        positionals: Tokens not consumed by a flag.
        inferred_flag: Flag the single positional value was bound to, if any.
        unknown_flags: Flags not in the schema, with their raw values.
        duplicates: Flag names given more than once (last occurrence won).
    """

    values: Mapping[str, FlagValue] = field(default_factory=dict)
    supplied: frozenset[str] = frozenset()
    positionals: tuple[str, ...] = ()
    inferred_flag: str | None = None
    unknown_flags: Mapping[str, str] = field(default_factory=dict)
    duplicates: tuple[str, ...] = ()

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name.lower(), default)

    def has_flag(self, name: str) -> bool:
        """Whether the flag was given explicitly (inferred values do not count)."""
        return name.lower() in self.supplied

    def is_set(self, name: str) -> bool:
        """Whether the user provided a value, explicitly or by inference."""
        lowered = name.lower()
        return lowered in self.supplied or lowered == self.inferred_flag


class ArgumentBinder:
    """Binds raw tokens to a command's flag schema.

    - Supports ``-flag value`` and ``--flag value``
    - A flag followed by another flag (or nothing) has an empty value;
      Boolean flags become ``true``
    - Repeated flags: the last occurrence wins
    - Integer and Boolean values that fail to parse fall back to the declared
      default instead of failing the command
    - One unflagged value can be bound to a named flag through a
      command-supplied positional resolver
    """

    def bind(
        self,
        flags: Iterable[FlagDescriptor],
        tokens: Sequence[str],
        positional_resolver: PositionalResolver | None = None,
    ) -> BoundArguments:
        """Bind ``tokens`` (the arguments after the command name) to ``flags``."""
        schema = {flag.name: flag for flag in flags}
        raw: dict[str, str] = {}
        duplicates: list[str] = []
        positionals: list[str] = []

        index = 0
        while index < len(tokens):
            token = tokens[index]
            if not is_flag(token):
                positionals.append(token)
                index += 1
                continue

            name = flag_name(token)
            descriptor = schema.get(name)
            next_token = tokens[index + 1] if index + 1 < len(tokens) else None
            value = ""
            if next_token is not None and not is_flag(next_token):
                if descriptor is not None and descriptor.value_type is FlagType.BOOLEAN:
                    # Only consume the next token when it is a boolean literal
                    if parse_bool(next_token) is not None:
                        value = next_token
                        index += 1
                    else:
                        value = "true"
                else:
                    value = next_token
                    index += 1
            elif descriptor is not None and descriptor.value_type is FlagType.BOOLEAN:
                value = "true"

            if name in raw and name not in duplicates:
                duplicates.append(name)
            raw[name] = value
            index += 1

        if duplicates and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Repeated flags %s; last value wins", duplicates)

        values: dict[str, FlagValue] = {}
        for name, descriptor in schema.items():
            if name in raw:
                converted = self._convert(descriptor, raw[name])
                if converted is not None:
                    values[name] = converted
            elif descriptor.has_default:
                default = descriptor.typed_default()
                if default is not None:
                    values[name] = default

        inferred_flag: str | None = None
        if positional_resolver is not None and len(positionals) == 1:
            target = positional_resolver(positionals[0])
            if target:
                target = target.lower()
            if target in schema and target not in raw:
                converted = self._convert(schema[target], positionals[0])
                if converted is not None:
                    values[target] = converted
                    inferred_flag = target

        return BoundArguments(
            values=values,
            supplied=frozenset(name for name in raw if name in schema),
            positionals=tuple(positionals),
            inferred_flag=inferred_flag,
            unknown_flags={name: value for name, value in raw.items() if name not in schema},
            duplicates=tuple(duplicates),
        )

    def _convert(self, descriptor: FlagDescriptor, text: str) -> FlagValue | None:
        if descriptor.value_type is FlagType.INTEGER:
            try:
                return int(text.strip())
            except ValueError:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Flag '%s' value %r is not an integer; using default %r",
                        descriptor.name,
                        text,
                        descriptor.default_value,
                    )
                return descriptor.typed_default()
        if descriptor.value_type is FlagType.BOOLEAN:
            parsed = parse_bool(text)
            if parsed is None:
                return descriptor.typed_default()
            return parsed
        return text
