"""Commit message generation package."""

from .classifier import TYPE_KEYWORDS, CommitClassifier
from .composer import CommitComposer, describe_changes, summarize_files, truncate_message
from .strategy import (
    AUTO_MODE,
    CommitMessageStrategy,
    ConventionalCommitStrategy,
    SimpleCommitStrategy,
    create_strategy,
)

__all__ = [
    'AUTO_MODE',
    'TYPE_KEYWORDS',
    'CommitClassifier',
    'CommitComposer',
    'CommitMessageStrategy',
    'ConventionalCommitStrategy',
    'SimpleCommitStrategy',
    'create_strategy',
    'describe_changes',
    'summarize_files',
    'truncate_message',
]
