from __future__ import annotations

import pytest
from prompt_console.core.services.command_tokenizer import tokenize


@pytest.mark.parametrize(
    "line, expected",
    [
        (None, []),
        ("", []),
        ("   ", []),
        ("list-users", ["list-users"]),
        ("  list-users   -max  5 ", ["list-users", "-max", "5"]),
        ('list-users -role "Content Editors"', ["list-users", "-role", "Content Editors"]),
        ("list-users -role 'Registered Users'", ["list-users", "-role", "Registered Users"]),
    ],
)
def test_tokenize(line: str | None, expected: list[str]) -> None:
    assert tokenize(line) == expected


def test_unbalanced_quotes_fall_back_to_whitespace_split() -> None:
    assert tokenize('list-users -role "Content') == ["list-users", "-role", '"Content']
