from __future__ import annotations

import pytest
from prompt_console.core.domain.command_descriptor import CommandDescriptor
from prompt_console.core.domain.commands.command_registry import (
    CommandRegistryBuilder,
    RegistryHolder,
)
from prompt_console.core.services.command_resolver import (
    CommandResolver,
    levenshtein,
    similarity,
)


def _descriptor(namespace: str, name: str) -> CommandDescriptor:
    return CommandDescriptor(
        name=name,
        namespace=namespace,
        description_key="D",
        resource_file="r.yaml",
        flags=(),
        handler_factory=object,
    )


def _holder(*keys: str) -> RegistryHolder:
    builder = CommandRegistryBuilder()
    for key in keys:
        namespace, name = key.split(".")
        builder.register(_descriptor(namespace, name))
    return RegistryHolder(builder.build())


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("", "", 0),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("LIST-USERS", "LIST-USER", 1),
        ("flaw", "lawn", 2),
    ],
)
def test_levenshtein(a: str, b: str, expected: int) -> None:
    assert levenshtein(a, b) == expected
    assert levenshtein(b, a) == expected


def test_similarity_is_normalized() -> None:
    assert similarity("", "") == 1.0
    assert similarity("ABCD", "ABCD") == 1.0
    assert similarity("ABCD", "WXYZ") == 0.0
    assert similarity("LIST-USERS", "LIST-USER") == pytest.approx(0.9)


class TestCommandResolver:
    def test_full_key_resolves_case_insensitively(self) -> None:
        resolver = CommandResolver(_holder("users.list-users"))

        resolution = resolver.resolve("Users.LIST-users")

        assert resolution.found
        assert resolution.descriptor.key == "USERS.LIST-USERS"
        assert resolution.namespace_inferred is False

    def test_unique_bare_name_infers_namespace(self) -> None:
        resolver = CommandResolver(_holder("users.list-users", "pages.list-pages"))

        resolution = resolver.resolve("list-users")

        assert resolution.descriptor.key == "USERS.LIST-USERS"
        assert resolution.namespace_inferred is True

    def test_ambiguous_bare_name_is_not_found(self) -> None:
        resolver = CommandResolver(_holder("users.list-users", "portal.list-users"))

        resolution = resolver.resolve("list-users")

        assert not resolution.found
        # Tie on the bare name goes to the alphabetically first key
        assert resolution.suggestion == "portal.list-users"

    def test_close_miss_suggests_bare_name(self) -> None:
        resolver = CommandResolver(_holder("users.list-users", "pages.list-pages"))

        resolution = resolver.resolve("list-user")

        assert not resolution.found
        assert resolution.suggestion == "list-users"

    def test_misspelled_full_key_suggests(self) -> None:
        resolver = CommandResolver(_holder("users.list-users"))

        resolution = resolver.resolve("users.lst-users")

        assert resolution.suggestion == "list-users"

    def test_far_miss_has_no_suggestion(self) -> None:
        resolver = CommandResolver(_holder("users.list-users"))

        resolution = resolver.resolve("xyz")

        assert not resolution.found
        assert resolution.suggestion is None

    def test_namespaced_token_never_falls_back_to_bare_lookup(self) -> None:
        resolver = CommandResolver(_holder("users.list-users"))

        assert not resolver.resolve("pages.list-users").found

    def test_threshold_controls_suggestions(self) -> None:
        holder = _holder("users.list-users")

        assert CommandResolver(holder, 1.0).resolve("list-user").suggestion is None
        assert CommandResolver(holder, 0.0).resolve("xyz").suggestion == "list-users"

    def test_invalid_threshold_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            CommandResolver(RegistryHolder(), 1.5)

    def test_resolves_against_given_snapshot(self) -> None:
        holder = _holder("users.list-users")
        snapshot = holder.current
        holder.swap(_holder("pages.list-pages").current)
        resolver = CommandResolver(holder)

        assert resolver.resolve("list-users", snapshot).found
        assert not resolver.resolve("list-users").found

    def test_empty_registry_has_no_suggestion(self) -> None:
        resolution = CommandResolver(RegistryHolder()).resolve("list-users")

        assert not resolution.found
        assert resolution.suggestion is None
