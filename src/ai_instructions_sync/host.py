"""Capabilities the surrounding host application provides to sync operations."""
import logging
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from rich.console import Console
from rich.panel import Panel

logger = logging.getLogger(__name__)

ProjectOpenedCallback = Callable[[Path], object]

class Host(Protocol):
    """What export and import need from the application they run inside."""

    def notify_changed(self, path: Path) -> None:
        """Tell the host a file it may have cached was rewritten."""

    def prompt_result(self, message: str, error: bool = False) -> None:
        """Show the outcome of a user-triggered action."""

    def on_project_opened(self, callback: ProjectOpenedCallback) -> None:
        """Register a callback run with the project root when a project opens."""

class ConsoleHost:
    """Host backed by a terminal: results are printed, changes are logged."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize host with a rich console."""
        self.console = console or Console()
        self.changed_paths: List[Path] = []
        self.error_count = 0
        self._open_callbacks: List[ProjectOpenedCallback] = []

    def notify_changed(self, path: Path) -> None:
        self.changed_paths.append(path)
        logger.info(f"{path} changed on disk")

    def prompt_result(self, message: str, error: bool = False) -> None:
        if error:
            self.error_count += 1
            self.console.print(Panel(message, title="AI Assistant Instructions", border_style="red"))
        else:
            self.console.print(Panel(message, title="AI Assistant Instructions", border_style="green"))

    def on_project_opened(self, callback: ProjectOpenedCallback) -> None:
        self._open_callbacks.append(callback)

    def open_project(self, project_root: Path) -> None:
        """Fire the project-opened callbacks for project_root."""
        logger.info(f"Opening project {project_root}")
        for callback in self._open_callbacks:
            callback(project_root)
