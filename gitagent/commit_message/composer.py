"""Commit message composition and length policy."""
from pathlib import PurePosixPath
from typing import Optional

from ..models import ChangeSet, CommitMessage, CommitType

ELLIPSIS = "..."
BODY_SEPARATOR = "\n\n"
FALLBACK_DESCRIPTION = "Update files"
DEFAULT_MAX_LENGTH = 72


def describe_changes(change_set: ChangeSet) -> str:
    """One-line description from the first file with counted changes.

    Insertions only reads "add <file>", deletions only "remove <file>", both
    "update <file>".
    """
    for stat in change_set.files:
        name = PurePosixPath(stat.path).name
        if stat.insertions > 0 and stat.deletions > 0:
            return f"update {name}"
        if stat.insertions > 0:
            return f"add {name}"
        if stat.deletions > 0:
            return f"remove {name}"
    return FALLBACK_DESCRIPTION


def summarize_files(change_set: ChangeSet) -> Optional[str]:
    """Body listing the changed files, or None for a single-file change."""
    if len(change_set.files) > 1:
        return f"Files changed: {', '.join(change_set.paths)}"
    return None


def truncate_message(text: str, max_length: int) -> str:
    """Fit ``text`` into ``max_length`` characters.

    When the message has a body and its header fits, only the body is cut
    (or dropped if not a single character of it fits). Otherwise the whole
    message is cut to ``max_length - 3`` characters followed by ``...``.
    """
    if len(text) <= max_length:
        return text

    header, separator, body = text.partition(BODY_SEPARATOR)
    if separator and len(header) <= max_length:
        room = max_length - len(header) - len(BODY_SEPARATOR)
        if room > len(ELLIPSIS):
            return f"{header}{BODY_SEPARATOR}{body[:room - len(ELLIPSIS)]}{ELLIPSIS}"
        return header

    return text[:max_length - len(ELLIPSIS)] + ELLIPSIS


class CommitComposer:
    """Builds ``type(scope): description`` messages within a length limit."""

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH):
        if max_length <= len(ELLIPSIS):
            raise ValueError(f"max_length must be greater than {len(ELLIPSIS)}")
        self.max_length = max_length

    def compose(
        self,
        commit_type: CommitType,
        scope: Optional[str],
        description: str,
        body: Optional[str] = None,
    ) -> CommitMessage:
        header = commit_type.value
        if scope:
            header += f"({scope})"
        header += f": {description}"

        text = header
        if body:
            text += BODY_SEPARATOR + body

        final = truncate_message(text, self.max_length)
        return CommitMessage(
            commit_type=commit_type,
            scope=scope,
            description=description,
            body=body,
            text=final,
            truncated=final != text,
        )

    def literal(self, text: str) -> CommitMessage:
        """Wrap a caller-supplied message, applying the same length policy."""
        final = truncate_message(text, self.max_length)
        header, _, body = text.partition(BODY_SEPARATOR)
        return CommitMessage(
            description=header,
            body=body or None,
            text=final,
            truncated=final != text,
        )
