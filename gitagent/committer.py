"""Execution of git commands with observers."""
from typing import List, Optional

from rich.console import Console

from .commands import GitCommand
from .log import get_logger
from .observers import GitOperationObserver

logger = get_logger(__name__)


class GitCommitter:
    """Runs git commands one at a time, notifying the registered observers."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.observers: List[GitOperationObserver] = []

    def add_observer(self, observer: GitOperationObserver) -> None:
        """Add an observer to be notified of git operations."""
        self.observers.append(observer)

    def remove_observer(self, observer: GitOperationObserver) -> None:
        """Remove an observer from the notification list."""
        self.observers.remove(observer)

    async def execute_command(self, command: GitCommand) -> bool:
        """Execute a git command with the registered observers attached."""
        for observer in self.observers:
            command.add_observer(observer)

        logger.debug("Running %s", command.description)
        success = await command.execute()

        if not success:
            logger.debug("%s failed: %s", command.description, command.error)

        return success
