"""Observer pattern for git operations."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from .models import CommitMessage


class GitOperationObserver(ABC):
    """Abstract base class for git operation observers."""

    @abstractmethod
    async def on_commit_created(self, message: CommitMessage, commit_hash: str) -> None:
        """Called when a commit is created."""
        pass

    @abstractmethod
    async def on_push_completed(self, success: bool, ref: Optional[str] = None) -> None:
        """Called when a push of the branch (``ref`` None) or a tag completes."""
        pass

    @abstractmethod
    async def on_tag_created(self, tag: str) -> None:
        """Called when a release tag is created."""
        pass


class ConsoleLogObserver(GitOperationObserver):
    """Observer that logs git operations to the console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    async def on_commit_created(self, message: CommitMessage, commit_hash: str) -> None:
        self.console.print(
            f"[green]Created commit {commit_hash[:7]}: {message.header}[/green]"
        )

    async def on_push_completed(self, success: bool, ref: Optional[str] = None) -> None:
        target = f"tag {ref}" if ref else "changes"
        if success:
            self.console.print(f"[green]Successfully pushed {target} to remote[/green]")
        else:
            self.console.print(f"[yellow]Failed to push {target} to remote[/yellow]")

    async def on_tag_created(self, tag: str) -> None:
        self.console.print(f"[green]Created tag {tag}[/green]")


class FileLogObserver(GitOperationObserver):
    """Observer that logs git operations to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    async def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a") as f:
            f.write(f"{timestamp} - {message}\n")

    async def on_commit_created(self, message: CommitMessage, commit_hash: str) -> None:
        await self._log(f"Created commit {commit_hash}: {message.header}")

    async def on_push_completed(self, success: bool, ref: Optional[str] = None) -> None:
        status = "Successfully" if success else "Failed to"
        target = f"tag {ref}" if ref else "changes"
        await self._log(f"{status} push {target} to remote")

    async def on_tag_created(self, tag: str) -> None:
        await self._log(f"Created tag {tag}")
