"""Commit type and scope detection."""
from collections import Counter
from pathlib import PurePosixPath
from typing import Iterable, Optional, Sequence, Tuple

from ..models import CommitType

# Checked top to bottom; the first row with a keyword in the diff text wins.
TYPE_KEYWORDS: Tuple[Tuple[CommitType, Tuple[str, ...]], ...] = (
    (CommitType.FEAT, ("breaking", "major")),
    (CommitType.FIX, ("fix", "bug")),
    (CommitType.TEST, ("test",)),
    (CommitType.DOCS, ("doc",)),
    (CommitType.STYLE, ("style", "format")),
    (CommitType.REFACTOR, ("refactor",)),
    (CommitType.PERF, ("perf",)),
    (CommitType.BUILD, ("build", "deps")),
    (CommitType.CI, ("ci", "github")),
)

DEFAULT_TYPE = CommitType.FEAT

CURRENT_DIRECTORY = "."


def top_level_directory(path: str) -> str:
    """First component of the path's directory, ``.`` for root-level files."""
    parent = PurePosixPath(path).parent
    return parent.parts[0] if parent.parts else CURRENT_DIRECTORY


class CommitClassifier:
    """Derives the conventional commit type and scope of a change set."""

    def __init__(
        self,
        type_keywords: Sequence[Tuple[CommitType, Tuple[str, ...]]] = TYPE_KEYWORDS,
        default_type: CommitType = DEFAULT_TYPE,
    ):
        self.type_keywords = type_keywords
        self.default_type = default_type

    def detect_type(self, diff_text: str) -> CommitType:
        content = diff_text.lower()
        for commit_type, keywords in self.type_keywords:
            if any(keyword in content for keyword in keywords):
                return commit_type
        return self.default_type

    def detect_scope(self, paths: Iterable[str]) -> Optional[str]:
        """Most common top-level directory of ``paths``.

        Root-level files do not count. Ties go to the directory seen first.
        """
        directories = [top_level_directory(path) for path in paths]
        counts = Counter(d for d in directories if d != CURRENT_DIRECTORY)
        if not counts:
            return None
        # Counter keeps insertion order, and max() returns the first maximum
        return max(counts, key=counts.__getitem__)
