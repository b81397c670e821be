"""
Command name resolution.

Turns the first token of an invocation into a registered descriptor, inferring
the namespace for unambiguous bare names and offering a close registered name
when nothing matches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from prompt_console.core.domain.command_descriptor import (
    NAMESPACE_SEPARATOR,
    CommandDescriptor,
)
from prompt_console.core.domain.commands.command_registry import (
    CommandRegistry,
    RegistryHolder,
)

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_THRESHOLD = 0.6


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a command token."""

    descriptor: CommandDescriptor | None = None
    suggestion: str | None = None
    namespace_inferred: bool = False

    @property
    def found(self) -> bool:
        return self.descriptor is not None


def levenshtein(s1: str, s2: str) -> int:
    """Compute Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein(s2, s1)
    if len(s2) == 0:
        return len(s1)
    prev_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        curr_row = [i + 1]
        for j, c2 in enumerate(s2):
            cost = 0 if c1 == c2 else 1
            curr_row.append(
                min(
                    curr_row[j] + 1,
                    prev_row[j + 1] + 1,
                    prev_row[j] + cost,
                )
            )
        prev_row = curr_row
    return prev_row[-1]


def similarity(s1: str, s2: str) -> float:
    """Normalized similarity in ``[0, 1]``: ``1 - distance / longer length``."""
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(s1, s2) / longest


class CommandResolver:
    """Resolves typed command names against the current registry snapshot."""

    def __init__(
        self,
        registry_holder: RegistryHolder,
        suggestion_threshold: float = DEFAULT_SUGGESTION_THRESHOLD,
    ) -> None:
        if not 0.0 <= suggestion_threshold <= 1.0:
            raise ValueError("suggestion_threshold must be between 0 and 1")
        self._registry_holder = registry_holder
        self._suggestion_threshold = suggestion_threshold

    @property
    def suggestion_threshold(self) -> float:
        return self._suggestion_threshold

    def resolve(self, token: str, registry: CommandRegistry | None = None) -> Resolution:
        """Resolve ``token`` to a descriptor or a not-found outcome.

        Args:
            token: Command name as typed, bare or ``NAMESPACE.NAME``.
            registry: Snapshot to resolve against; defaults to the current one.
        """
        snapshot = registry if registry is not None else self._registry_holder.current
        name = token.strip().upper()
        if not name:
            return Resolution()

        descriptor = snapshot.lookup(name)
        if descriptor is not None:
            return Resolution(descriptor=descriptor)

        if NAMESPACE_SEPARATOR not in name:
            candidates = snapshot.all_by_bare_name(name)
            if len(candidates) == 1:
                return Resolution(descriptor=candidates[0], namespace_inferred=True)
            if len(candidates) > 1 and logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Bare command name %s is ambiguous across %s",
                    name,
                    [candidate.key for candidate in candidates],
                )

        return Resolution(suggestion=self.suggest(name, snapshot))

    def suggest(self, name: str, registry: CommandRegistry) -> str | None:
        """Return the closest registered command name, or None if none is close."""
        name = name.upper()
        bare_input = NAMESPACE_SEPARATOR not in name

        best: CommandDescriptor | None = None
        best_score = -1.0
        for descriptor in registry.all():
            score = similarity(name, descriptor.key)
            if bare_input:
                score = max(score, similarity(name, descriptor.bare_key))
            # registry.all() is key-ordered, so strict comparison keeps ties alphabetical
            if score > best_score:
                best, best_score = descriptor, score

        if best is None or best_score < self._suggestion_threshold:
            return None

        if len(registry.all_by_bare_name(best.name)) == 1:
            return best.name.lower()
        return best.key.lower()
