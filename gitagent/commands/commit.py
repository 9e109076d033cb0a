"""Command for creating git commits."""

from typing import Optional

from rich.console import Console

from ..errors import VersionControlError
from ..models import CommitMessage
from ..vcs import VersionControl
from .base import GitCommand


class CommitCommand(GitCommand):
    """Command for creating a git commit from the staged changes.

    Attributes:
        message (CommitMessage): The message to commit with
        commit_hash (Optional[str]): The hash of the created commit
    """

    def __init__(
        self,
        vcs: VersionControl,
        message: CommitMessage,
        console: Optional[Console] = None,
    ):
        """Initialize the commit command.

        Args:
            vcs: The repository to operate on
            message: The composed commit message
            console: Optional Rich console for output
        """
        super().__init__(vcs, console)
        self.message = message
        self.commit_hash: Optional[str] = None

    @property
    def description(self) -> str:
        return f"commit {self.message.header}"

    async def execute(self) -> bool:
        """Create the commit and notify observers.

        Returns:
            bool: True if the commit was created successfully, False otherwise
        """
        try:
            self.commit_hash = self.vcs.commit(self.message.text)
        except VersionControlError as e:
            self.error = f"Failed to create commit: {e}"
            return False

        for observer in self.observers:
            await observer.on_commit_created(self.message, self.commit_hash)

        return True
