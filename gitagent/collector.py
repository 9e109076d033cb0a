"""Collection of staged changes."""
from typing import List

from .errors import VersionControlError
from .log import get_logger
from .models import ChangeSet, FileStat
from .vcs import VersionControl

logger = get_logger(__name__)


def _parse_count(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def parse_numstat(output: str) -> List[FileStat]:
    """Parse ``git diff --numstat`` lines into FileStat entries.

    Binary files report ``-`` for both counts; those become 0.
    """
    stats = []
    for line in output.splitlines():
        parts = line.split("\t", 2)
        if len(parts) != 3 or not parts[2].strip():
            continue
        insertions, deletions, path = parts
        stats.append(FileStat(
            path=path.strip(),
            insertions=_parse_count(insertions.strip()),
            deletions=_parse_count(deletions.strip()),
        ))
    return stats


class ChangeCollector:
    """Read-only queries for the staged working set.

    Every query fails soft: a git error is logged and an empty result is
    returned, which callers treat as "nothing to commit".
    """

    def __init__(self, vcs: VersionControl):
        self.vcs = vcs

    def staged_files(self) -> List[str]:
        try:
            return self.vcs.staged_files()
        except VersionControlError as e:
            logger.warning("Error reading staged files: %s", e)
            return []

    def diff_stat(self) -> str:
        try:
            return self.vcs.diff_stat()
        except VersionControlError as e:
            logger.warning("Error reading diff stat: %s", e)
            return ""

    def change_set(self) -> ChangeSet:
        """Staged files with their insertion/deletion counts."""
        paths = self.staged_files()
        if not paths:
            return ChangeSet(files=[])

        try:
            stats = {stat.path: stat for stat in parse_numstat(self.vcs.diff_numstat())}
        except VersionControlError as e:
            logger.warning("Error reading diff numstat: %s", e)
            stats = {}

        files = [stats.get(path, FileStat(path=path)) for path in paths]
        return ChangeSet(files=files, diff_stat=self.diff_stat())
