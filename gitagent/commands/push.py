"""Command for pushing the branch or a tag to the remote."""

from typing import Optional

from rich.console import Console

from ..errors import VersionControlError
from ..vcs import VersionControl
from .base import GitCommand


class PushCommand(GitCommand):
    """Command for pushing to the remote repository.

    Pushing is best effort: a failure is printed as a warning and reported
    through the return value, never raised.

    Attributes:
        tag (Optional[str]): Tag to push; the current branch when None
    """

    def __init__(
        self,
        vcs: VersionControl,
        tag: Optional[str] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the push command.

        Args:
            vcs: The repository to operate on
            tag: Tag to push instead of the current branch
            console: Optional Rich console for output
        """
        super().__init__(vcs, console)
        self.tag = tag

    @property
    def description(self) -> str:
        return f"push tag {self.tag}" if self.tag else "push changes"

    async def execute(self) -> bool:
        """Push and notify observers.

        Returns:
            bool: True if the push was successful, False otherwise
        """
        try:
            if self.tag:
                self.vcs.push_tag(self.tag)
            else:
                self.vcs.push()
            success = True
        except VersionControlError as e:
            self.error = f"Failed to push {'tag ' + self.tag if self.tag else 'changes'}: {e}"
            self.console.print(f"[yellow]Warning: {self.error}[/yellow]")
            success = False

        for observer in self.observers:
            await observer.on_push_completed(success, self.tag)

        return success
