"""Command for creating release tags."""

from typing import Optional

from rich.console import Console

from ..errors import VersionControlError
from ..vcs import VersionControl
from .base import GitCommand


class TagCommand(GitCommand):
    """Create an annotated release tag at HEAD.

    A version is tagged at most once; an existing tag makes the command fail.
    """

    def __init__(
        self,
        vcs: VersionControl,
        version: str,
        message: Optional[str] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the tag command.

        Args:
            vcs: The repository to operate on
            version: Version to tag
            message: Tag annotation; defaults to "Release <version>"
            console: Optional Rich console for output
        """
        super().__init__(vcs, console)
        self.version = version
        self.message = message or f"Release {version}"

    @property
    def description(self) -> str:
        return f"tag {self.version}"

    async def execute(self) -> bool:
        """Create the tag and notify observers.

        Returns:
            bool: True if the tag was created, False otherwise
        """
        try:
            if self.vcs.has_tag(self.version):
                self.error = f"Tag {self.version} already exists"
                return False
            self.vcs.create_annotated_tag(self.version, self.message)
        except VersionControlError as e:
            self.error = f"Failed to create tag: {e}"
            return False

        for observer in self.observers:
            await observer.on_tag_created(self.version)

        return True
