"""Command for staging changes."""

from typing import Optional, Sequence

from rich.console import Console

from ..errors import VersionControlError
from ..vcs import VersionControl
from .base import GitCommand


class StageCommand(GitCommand):
    """Stage the given paths, or every change when no paths are given."""

    def __init__(
        self,
        vcs: VersionControl,
        paths: Optional[Sequence[str]] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the stage command.

        Args:
            vcs: The repository to operate on
            paths: Paths to stage; every change when empty
            console: Optional Rich console for output
        """
        super().__init__(vcs, console)
        self.paths = list(paths) if paths else []

    @property
    def description(self) -> str:
        return f"stage {', '.join(self.paths)}" if self.paths else "stage all changes"

    async def execute(self) -> bool:
        """Stage the changes.

        Returns:
            bool: True if the changes were staged, False otherwise
        """
        try:
            if self.paths:
                self.vcs.stage(self.paths)
            else:
                self.vcs.stage_all()
            return True
        except VersionControlError as e:
            self.error = f"Failed to add changes: {e}"
            return False
