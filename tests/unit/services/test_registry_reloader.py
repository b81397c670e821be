from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from prompt_console.core.common.exceptions import RegistryLoadError
from prompt_console.core.domain.commands.command_registry import RegistryHolder
from prompt_console.core.services.command_set_loader import CommandSetLoader
from prompt_console.core.services.registry_reloader import (
    CommandSetFileHandler,
    RegistryReloader,
)

ENABLED = "command_modules:\n  - prompt_console.core.domain.commands.users\n"
DISABLED = ENABLED + "disabled_commands:\n  - list-users\n"


@pytest.fixture
def command_set_file(tmp_path: Path) -> Path:
    path = tmp_path / "commands.yaml"
    path.write_text(ENABLED, encoding="utf-8")
    return path


@pytest.fixture
def reloader(command_loader: CommandSetLoader, command_set_file: Path) -> RegistryReloader:
    return RegistryReloader(RegistryHolder(), command_loader, command_set_file)


class TestRegistryReloader:
    def test_load_initial_installs_registry(self, reloader: RegistryReloader) -> None:
        registry = reloader.load_initial()

        assert registry.keys() == ["USERS.LIST-USERS"]

    def test_load_initial_propagates_errors(
        self, command_loader: CommandSetLoader, tmp_path: Path
    ) -> None:
        reloader = RegistryReloader(RegistryHolder(), command_loader, tmp_path / "nope.yaml")

        with pytest.raises(RegistryLoadError):
            reloader.load_initial()

    def test_reload_swaps_in_new_snapshot(
        self, command_loader: CommandSetLoader, command_set_file: Path
    ) -> None:
        holder = RegistryHolder()
        reloader = RegistryReloader(holder, command_loader, command_set_file)
        reloader.load_initial()
        before = holder.current

        command_set_file.write_text(DISABLED, encoding="utf-8")

        assert reloader.reload() is True
        assert len(holder.current) == 0
        assert len(before) == 1
        assert holder.generation == 2

    def test_failed_reload_keeps_previous_snapshot(
        self, command_loader: CommandSetLoader, command_set_file: Path
    ) -> None:
        holder = RegistryHolder()
        reloader = RegistryReloader(holder, command_loader, command_set_file)
        reloader.load_initial()
        before = holder.current

        command_set_file.write_text(
            "command_modules:\n  - prompt_console.missing_module\n", encoding="utf-8"
        )

        assert reloader.reload() is False
        assert holder.current is before

    def test_start_and_stop_observer(self, reloader: RegistryReloader) -> None:
        with patch(
            "prompt_console.core.services.registry_reloader.Observer"
        ) as observer_cls:
            observer = observer_cls.return_value
            observer.is_alive.return_value = True

            reloader.start()
            assert reloader.is_watching
            observer.schedule.assert_called_once()
            assert observer.schedule.call_args.args[1] == str(
                reloader.command_set_file.parent
            )
            observer.start.assert_called_once()

            reloader.stop()
            observer.stop.assert_called_once()
            observer.join.assert_called_once()
            assert not reloader.is_watching

    def test_start_without_directory_does_nothing(
        self, command_loader: CommandSetLoader, tmp_path: Path
    ) -> None:
        reloader = RegistryReloader(
            RegistryHolder(), command_loader, tmp_path / "missing" / "commands.yaml"
        )

        reloader.start()

        assert not reloader.is_watching


class TestCommandSetFileHandler:
    def _event(self, path: Path, is_directory: bool = False) -> SimpleNamespace:
        return SimpleNamespace(src_path=str(path), is_directory=is_directory)

    def test_change_to_watched_file_triggers_reload(self, tmp_path: Path) -> None:
        reloader = MagicMock()
        reloader.command_set_file = (tmp_path / "commands.yaml").resolve()
        handler = CommandSetFileHandler(reloader)

        handler.on_modified(self._event(tmp_path / "commands.yaml"))

        reloader.reload.assert_called_once()

    def test_other_files_are_ignored(self, tmp_path: Path) -> None:
        reloader = MagicMock()
        reloader.command_set_file = (tmp_path / "commands.yaml").resolve()
        handler = CommandSetFileHandler(reloader)

        handler.on_modified(self._event(tmp_path / "other.yaml"))
        handler.on_modified(self._event(tmp_path, is_directory=True))

        reloader.reload.assert_not_called()

    def test_rename_onto_watched_file_triggers_reload(self, tmp_path: Path) -> None:
        reloader = MagicMock()
        reloader.command_set_file = (tmp_path / "commands.yaml").resolve()
        handler = CommandSetFileHandler(reloader)
        event = SimpleNamespace(
            src_path=str(tmp_path / "commands.yaml.tmp"),
            dest_path=str(tmp_path / "commands.yaml"),
            is_directory=False,
        )

        handler.on_moved(event)

        reloader.reload.assert_called_once()
