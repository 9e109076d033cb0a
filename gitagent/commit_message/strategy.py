"""Commit message generation strategies."""
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import PurePosixPath
from typing import Optional

from ..models import ChangeSet, CommitMessage
from .classifier import CommitClassifier
from .composer import CommitComposer, describe_changes, summarize_files

AUTO_MODE = "auto"


class CommitMessageStrategy(ABC):
    """Abstract base class for commit message generation strategies."""

    def __init__(self, composer: Optional[CommitComposer] = None):
        self.composer = composer or CommitComposer()

    @abstractmethod
    def generate_message(self, change_set: ChangeSet, mode: str = AUTO_MODE) -> CommitMessage:
        """Generate a commit message for the change set.

        ``mode`` is ``"auto"`` or a caller-supplied description.
        """


class ConventionalCommitStrategy(CommitMessageStrategy):
    """``type(scope): description`` messages from the diff stat and paths."""

    def __init__(
        self,
        composer: Optional[CommitComposer] = None,
        classifier: Optional[CommitClassifier] = None,
    ):
        super().__init__(composer)
        self.classifier = classifier or CommitClassifier()

    def generate_message(self, change_set: ChangeSet, mode: str = AUTO_MODE) -> CommitMessage:
        commit_type = self.classifier.detect_type(change_set.diff_stat)
        scope = self.classifier.detect_scope(change_set.paths)
        description = describe_changes(change_set) if mode == AUTO_MODE else mode
        return self.composer.compose(
            commit_type, scope, description, summarize_files(change_set)
        )


class SimpleCommitStrategy(CommitMessageStrategy):
    """Literal messages, or a file-type summary in auto mode."""

    def generate_message(self, change_set: ChangeSet, mode: str = AUTO_MODE) -> CommitMessage:
        if mode != AUTO_MODE:
            return self.composer.literal(mode)

        extensions = Counter(
            PurePosixPath(path).suffix.lstrip(".") or "files" for path in change_set.paths
        )
        main_type = max(extensions, key=extensions.__getitem__) if extensions else "files"
        total = sum(stat.insertions + stat.deletions for stat in change_set.files)
        return self.composer.literal(f"{main_type}: {total} changes")


def create_strategy(conventional: bool, max_length: int) -> CommitMessageStrategy:
    composer = CommitComposer(max_length)
    if conventional:
        return ConventionalCommitStrategy(composer)
    return SimpleCommitStrategy(composer)
