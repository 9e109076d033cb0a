"""Git operation commands using the Command Pattern.

Each git mutation is wrapped in a command object so that it can be executed
uniformly, recorded in a history and observed.

Example:
    ```python
    from gitagent.commands import CommitCommand
    from gitagent.observers import FileLogObserver

    commit_cmd = CommitCommand(vcs, message)
    commit_cmd.add_observer(FileLogObserver("git.log"))
    success = await commit_cmd.execute()
    ```
"""

from .base import GitCommand
from .commit import CommitCommand
from .push import PushCommand
from .stage import StageCommand
from .tag import TagCommand

__all__ = [
    "GitCommand",
    "CommitCommand",
    "PushCommand",
    "StageCommand",
    "TagCommand",
]
