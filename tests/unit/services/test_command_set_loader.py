from __future__ import annotations

import sys
import types
from pathlib import Path

import pytest
from prompt_console.core.common.exceptions import (
    DuplicateCommandError,
    RegistryLoadError,
)
from prompt_console.core.services.command_set_loader import (
    DEFAULT_COMMAND_MODULES,
    CommandSet,
    CommandSetLoader,
)


@pytest.fixture
def fake_module(monkeypatch: pytest.MonkeyPatch):
    """Install an importable module whose register_commands can be swapped."""
    module = types.ModuleType("fake_command_set")
    monkeypatch.setitem(sys.modules, "fake_command_set", module)
    return module


class TestCommandSetLoader:
    def test_default_set_registers_bundled_commands(
        self, command_loader: CommandSetLoader
    ) -> None:
        registry = command_loader.load(CommandSet())

        assert registry.keys() == ["USERS.LIST-USERS"]

    def test_disabled_commands_are_removed(self, command_loader: CommandSetLoader) -> None:
        registry = command_loader.load_modules(DEFAULT_COMMAND_MODULES, ["list-users"])

        assert len(registry) == 0

    def test_unknown_disabled_command_is_ignored(
        self, command_loader: CommandSetLoader
    ) -> None:
        registry = command_loader.load_modules(DEFAULT_COMMAND_MODULES, ["nope"])

        assert len(registry) == 1

    def test_missing_module_raises(self, command_loader: CommandSetLoader) -> None:
        with pytest.raises(RegistryLoadError) as exc_info:
            command_loader.load_modules(["prompt_console.no_such_module"])

        assert exc_info.value.details["module_name"] == "prompt_console.no_such_module"

    def test_module_without_register_function_raises(
        self, command_loader: CommandSetLoader, fake_module
    ) -> None:
        with pytest.raises(RegistryLoadError):
            command_loader.load_modules(["fake_command_set"])

    def test_failing_register_function_raises(
        self, command_loader: CommandSetLoader, fake_module
    ) -> None:
        def register_commands(builder, environment):
            raise RuntimeError("bad module")

        fake_module.register_commands = register_commands

        with pytest.raises(RegistryLoadError, match="bad module"):
            command_loader.load_modules(["fake_command_set"])

    def test_duplicate_registration_across_modules_raises(
        self, command_loader: CommandSetLoader
    ) -> None:
        with pytest.raises(DuplicateCommandError):
            command_loader.load_modules(
                [DEFAULT_COMMAND_MODULES[0], DEFAULT_COMMAND_MODULES[0]]
            )

    def test_register_function_receives_environment(
        self, command_loader: CommandSetLoader, fake_module
    ) -> None:
        seen = []
        fake_module.register_commands = lambda builder, environment: seen.append(environment)

        command_loader.load_modules(["fake_command_set"])

        assert seen == [command_loader.environment]


class TestCommandSetFile:
    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "commands.yaml"
        path.write_text(
            "command_modules:\n  - a.b\n  - c.d\ndisabled_commands:\n  - users.x\n",
            encoding="utf-8",
        )

        command_set = CommandSet.from_file(path)

        assert command_set.command_modules == ("a.b", "c.d")
        assert command_set.disabled_commands == ("users.x",)

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "commands.yaml"
        path.write_text("", encoding="utf-8")

        assert CommandSet.from_file(path) == CommandSet()

    @pytest.mark.parametrize(
        "content", ["- a\n- b\n", "command_modules: users\n", "key: [unclosed\n"]
    )
    def test_malformed_file_raises(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "commands.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(RegistryLoadError):
            CommandSet.from_file(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RegistryLoadError):
            CommandSet.from_file(tmp_path / "missing.yaml")
