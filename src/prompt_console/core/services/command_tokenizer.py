from __future__ import annotations

import shlex


def tokenize(command_line: str | None) -> list[str]:
    """Split a console line into tokens.

    - POSIX shell quoting so ``-role "Content Editors"`` stays one value
    - Falls back to whitespace splitting when quotes are unbalanced
    - No operators, pipes or redirection
    """
    if not command_line or not command_line.strip():
        return []

    try:
        return shlex.split(command_line, posix=True)
    except ValueError:
        return command_line.split()
