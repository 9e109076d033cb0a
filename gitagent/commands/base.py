"""Base class for repository mutations run through GitCommitter."""

from abc import ABC, abstractmethod
from typing import List, Optional

from rich.console import Console

from ..observers import GitOperationObserver
from ..vcs import VersionControl


class GitCommand(ABC):
    """One repository mutation with observer notification.

    ``execute()`` reports failure by returning False and leaves the
    underlying message in ``error``; the caller decides whether that failure
    is fatal.

    Attributes:
        vcs (VersionControl): Repository the mutation applies to
        console (Console): Rich console for output
        observers (List[GitOperationObserver]): Notified after execution
        error (Optional[str]): Message of the last failure
    """

    def __init__(self, vcs: VersionControl, console: Optional[Console] = None):
        self.vcs = vcs
        self.console = console or Console()
        self.observers: List[GitOperationObserver] = []
        self.error: Optional[str] = None

    def add_observer(self, observer: GitOperationObserver) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: GitOperationObserver) -> None:
        self.observers.remove(observer)

    @property
    def description(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def execute(self) -> bool:
        """Run the mutation.

        Returns:
            bool: True on success, False with ``error`` set otherwise
        """
