"""
Hot reload of the command registry.

``RegistryReloader`` watches the command set file with watchdog and swaps a
rebuilt registry into the holder when the file changes. A rebuild that fails
leaves the previous snapshot in place.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from prompt_console.core.common.exceptions import PromptConsoleError
from prompt_console.core.domain.commands.command_registry import (
    CommandRegistry,
    RegistryHolder,
)
from prompt_console.core.services.command_set_loader import CommandSet, CommandSetLoader

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)


class CommandSetFileHandler(FileSystemEventHandler):
    """Forwards changes of one command set file to the reloader."""

    def __init__(self, reloader: RegistryReloader) -> None:
        super().__init__()
        self.reloader = reloader

    def _matches(self, event) -> bool:
        if event.is_directory:
            return False
        target = self.reloader.command_set_file
        paths = [getattr(event, "src_path", ""), getattr(event, "dest_path", "")]
        return any(path and Path(path).resolve() == target for path in paths)

    def on_modified(self, event):
        if self._matches(event):
            if logger.isEnabledFor(logging.INFO):
                logger.info("Command set file modified: %s", event.src_path)
            self.reloader.reload()

    def on_created(self, event):
        self.on_modified(event)

    def on_moved(self, event):
        # Editors often save by writing a temp file and renaming it over the target
        if self._matches(event):
            self.reloader.reload()


class RegistryReloader:
    """Rebuilds and swaps the registry whenever the command set file changes."""

    def __init__(
        self,
        holder: RegistryHolder,
        loader: CommandSetLoader,
        command_set_file: str | Path,
    ) -> None:
        self._holder = holder
        self._loader = loader
        self._command_set_file = Path(command_set_file).resolve()
        self._observer: BaseObserver | None = None
        self._reload_lock = threading.Lock()

    @property
    def command_set_file(self) -> Path:
        return self._command_set_file

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    def load_initial(self) -> CommandRegistry:
        """Load the command set file and install it; errors propagate."""
        registry = self._loader.load(CommandSet.from_file(self._command_set_file))
        self._holder.swap(registry)
        return registry

    def reload(self) -> bool:
        """Rebuild from the file; returns whether a new snapshot was installed."""
        with self._reload_lock:
            try:
                registry = self._loader.load(CommandSet.from_file(self._command_set_file))
            except PromptConsoleError as e:
                logger.error(
                    "Command registry reload failed, keeping previous snapshot: %s",
                    e.message,
                )
                return False
            except Exception as e:
                logger.error(
                    "Command registry reload failed, keeping previous snapshot: %s",
                    e,
                    exc_info=True,
                )
                return False
            self._holder.swap(registry)
            return True

    def start(self) -> None:
        """Start watching the directory containing the command set file."""
        if self._observer is not None:
            return
        watch_dir = self._command_set_file.parent
        if not watch_dir.exists():
            logger.warning("Cannot watch %s: directory does not exist", watch_dir)
            return
        observer = Observer()
        observer.schedule(CommandSetFileHandler(self), str(watch_dir), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("Started watching command set file: %s", self._command_set_file)

    def stop(self) -> None:
        if self._observer is None:
            return
        try:
            self._observer.stop()
            if self._observer.is_alive():
                self._observer.join(timeout=5.0)
            logger.info("Stopped watching command set file")
        finally:
            self._observer = None
