"""Version-control access for git-agent.

``VersionControl`` is the capability set the rest of the package needs from
git. ``GitRepository`` implements it on top of GitPython; tests use
``InMemoryVersionControl``, which keeps commits, tags and the staging area in
plain Python structures.
"""
import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from .errors import VersionControlError


class VersionControl(ABC):
    """Abstract interface over the working repository.

    ``repo_path`` is the working tree root git runs from, or None when the
    repository has no checkout on disk.
    """

    repo_path: Optional[Path] = None

    @abstractmethod
    def staged_files(self) -> List[str]:
        """Paths of the files staged for the next commit."""

    @abstractmethod
    def diff_stat(self) -> str:
        """``git diff --cached --stat`` output."""

    @abstractmethod
    def diff_numstat(self) -> str:
        """``git diff --cached --numstat`` output."""

    @abstractmethod
    def stage_all(self) -> None:
        """Stage every change in the working tree."""

    @abstractmethod
    def stage(self, paths: Sequence[str]) -> None:
        """Stage the given paths."""

    @abstractmethod
    def commit(self, message: str) -> str:
        """Commit the staged changes and return the new commit hash."""

    @abstractmethod
    def push(self) -> None:
        """Push the current branch to its remote."""

    @abstractmethod
    def push_tag(self, ref: str) -> None:
        """Push a single tag to the remote."""

    @abstractmethod
    def create_annotated_tag(self, name: str, message: str) -> None:
        """Create an annotated tag at HEAD."""

    @abstractmethod
    def log(self, rev_range: Optional[str], fmt: str) -> str:
        """``git log`` over ``rev_range`` (whole history when None) with a pretty format."""

    @abstractmethod
    def latest_tag(self, ref: str = "HEAD") -> Optional[str]:
        """Most recent tag reachable from ``ref``, or None."""

    @abstractmethod
    def tags(self) -> List[str]:
        """All tags, highest version first."""

    @abstractmethod
    def tag_date(self, tag: str) -> str:
        """Commit date of a tag."""

    @abstractmethod
    def current_branch(self) -> str:
        """Name of the checked out branch."""

    @abstractmethod
    def status(self) -> str:
        """``git status --porcelain`` output."""

    @abstractmethod
    def remote_url(self, remote: str = "origin") -> Optional[str]:
        """URL of a remote, or None if it is not configured."""

    def has_tag(self, name: str) -> bool:
        return name in self.tags()

    def commit_subjects(self, since_tag: Optional[str] = None) -> List[str]:
        """Subjects of the commits after ``since_tag`` up to HEAD."""
        rev_range = f"{since_tag}..HEAD" if since_tag else "HEAD"
        output = self.log(rev_range, "%s")
        return [line for line in output.splitlines() if line.strip()]


class GitRepository(VersionControl):
    """VersionControl adapter that runs git through GitPython."""

    def __init__(self, repo_path: str = ".", remote_name: str = "origin"):
        try:
            self.repo = Repo(repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise VersionControlError(f"Not a git repository: {repo_path}") from e
        self.repo_path = Path(self.repo.working_dir)
        self.remote_name = remote_name

    def _git(self, *args: str) -> str:
        try:
            return self.repo.git.execute(["git", *args])
        except GitCommandError as e:
            message = (e.stderr or str(e)).strip()
            raise VersionControlError(f"git {args[0]} failed: {message}") from e

    # Renames are listed as a deletion plus an addition so that the
    # --name-only paths and the --numstat paths line up.
    def staged_files(self) -> List[str]:
        output = self._git("diff", "--cached", "--no-renames", "--name-only")
        return [line for line in output.splitlines() if line.strip()]

    def diff_stat(self) -> str:
        return self._git("diff", "--cached", "--no-renames", "--stat")

    def diff_numstat(self) -> str:
        return self._git("diff", "--cached", "--no-renames", "--numstat")

    def stage_all(self) -> None:
        self._git("add", "--all")

    def stage(self, paths: Sequence[str]) -> None:
        self._git("add", "--", *paths)

    def commit(self, message: str) -> str:
        self._git("commit", "-m", message)
        return self.repo.head.commit.hexsha

    def push(self) -> None:
        self._git("push", self.remote_name, "HEAD")

    def push_tag(self, ref: str) -> None:
        self._git("push", self.remote_name, f"refs/tags/{ref}")

    def create_annotated_tag(self, name: str, message: str) -> None:
        self._git("tag", "-a", name, "-m", message)

    def log(self, rev_range: Optional[str], fmt: str) -> str:
        args = ["log", f"--pretty=format:{fmt}"]
        if rev_range:
            args.append(rev_range)
        try:
            return self._git(*args)
        except VersionControlError:
            # empty repository: no HEAD yet
            if not self.repo.head.is_valid():
                return ""
            raise

    def latest_tag(self, ref: str = "HEAD") -> Optional[str]:
        try:
            return self._git("describe", "--tags", "--abbrev=0", ref).strip() or None
        except VersionControlError:
            return None

    def tags(self) -> List[str]:
        output = self._git("tag", "--sort=-version:refname")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def tag_date(self, tag: str) -> str:
        return self._git("log", "-1", "--format=%ai", tag).strip()

    def current_branch(self) -> str:
        return self._git("rev-parse", "--abbrev-ref", "HEAD").strip()

    def status(self) -> str:
        return self._git("status", "--porcelain")

    def remote_url(self, remote: str = "origin") -> Optional[str]:
        try:
            return self._git("remote", "get-url", remote).strip() or None
        except VersionControlError:
            return None


@dataclass
class FakeCommit:
    sha: str
    subject: str
    body: str = ""
    date: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


class InMemoryVersionControl(VersionControl):
    """In-memory VersionControl used in tests.

    Staged files are ``(path, insertions, deletions)`` triples. Setting one of
    the ``fail_*`` attributes makes the matching operation raise
    ``VersionControlError``; ``stat_text`` replaces the rendered diff stat.
    """

    def __init__(self, branch: str = "main", remote: Optional[str] = None):
        self.branch = branch
        self.remote = remote
        self.commits: List[FakeCommit] = []
        self.tag_refs: Dict[str, int] = {}
        self.tag_messages: Dict[str, str] = {}
        self.staged: List[tuple] = []
        self.unstaged: List[tuple] = []
        self.pushed_commits: List[str] = []
        self.pushed_tags: List[str] = []
        self.fail_reads = False
        self.fail_commit = False
        self.fail_push = False
        self.fail_tag = False
        self.fail_push_tag = False
        self.fail_stage = False
        self.stat_text: Optional[str] = None

    def _check(self, flag: bool, operation: str) -> None:
        if flag:
            raise VersionControlError(f"git {operation} failed")

    # test helpers

    def add_commit(self, subject: str, body: str = "") -> FakeCommit:
        digest = hashlib.sha1(f"{len(self.commits)}:{subject}".encode()).hexdigest()
        commit = FakeCommit(
            sha=digest,
            subject=subject,
            body=body,
            date=datetime(2024, 1, 1).isoformat(),
        )
        self.commits.append(commit)
        return commit

    def add_tag(self, name: str, message: str = "") -> None:
        if not self.commits:
            raise VersionControlError("cannot tag an empty repository")
        self.tag_refs[name] = len(self.commits) - 1
        self.tag_messages[name] = message or name

    def stage_file(self, path: str, insertions: int = 0, deletions: int = 0) -> None:
        self.staged.append((path, insertions, deletions))

    # VersionControl

    def staged_files(self) -> List[str]:
        self._check(self.fail_reads, "diff")
        return [path for path, _, _ in self.staged]

    def diff_stat(self) -> str:
        self._check(self.fail_reads, "diff")
        if self.stat_text is not None:
            return self.stat_text
        if not self.staged:
            return ""
        width = max(len(path) for path, _, _ in self.staged)
        lines = []
        total_ins = total_del = 0
        for path, insertions, deletions in self.staged:
            total_ins += insertions
            total_del += deletions
            graph = "+" * insertions + "-" * deletions
            lines.append(f" {path.ljust(width)} | {insertions + deletions} {graph}".rstrip())
        count = len(self.staged)
        lines.append(
            f" {count} file{'s' if count != 1 else ''} changed, "
            f"{total_ins} insertions(+), {total_del} deletions(-)"
        )
        return "\n".join(lines)

    def diff_numstat(self) -> str:
        self._check(self.fail_reads, "diff")
        return "\n".join(
            f"{insertions}\t{deletions}\t{path}" for path, insertions, deletions in self.staged
        )

    def stage_all(self) -> None:
        self._check(self.fail_stage, "add")
        self.staged.extend(self.unstaged)
        self.unstaged = []

    def stage(self, paths: Sequence[str]) -> None:
        self._check(self.fail_stage, "add")
        remaining = []
        for entry in self.unstaged:
            if entry[0] in paths:
                self.staged.append(entry)
            else:
                remaining.append(entry)
        self.unstaged = remaining
        for path in paths:
            if path not in self.staged_files():
                self.staged.append((path, 1, 1))

    def commit(self, message: str) -> str:
        self._check(self.fail_commit, "commit")
        if not self.staged:
            raise VersionControlError("git commit failed: nothing to commit")
        subject, _, body = message.partition("\n\n")
        commit = self.add_commit(subject, body)
        self.staged = []
        return commit.sha

    def push(self) -> None:
        self._check(self.fail_push or self.remote is None, "push")
        self.pushed_commits = [commit.sha for commit in self.commits]

    def push_tag(self, ref: str) -> None:
        self._check(self.fail_push_tag or self.remote is None, "push")
        if ref not in self.tag_refs:
            raise VersionControlError(f"git push failed: unknown tag {ref}")
        self.pushed_tags.append(ref)

    def create_annotated_tag(self, name: str, message: str) -> None:
        self._check(self.fail_tag, "tag")
        if name in self.tag_refs:
            raise VersionControlError(f"git tag failed: tag '{name}' already exists")
        self.add_tag(name, message)

    def _resolve(self, ref: str) -> int:
        if ref == "HEAD":
            return len(self.commits) - 1
        if ref.endswith("^"):
            return self._resolve(ref[:-1]) - 1
        if ref in self.tag_refs:
            return self.tag_refs[ref]
        raise VersionControlError(f"unknown revision {ref}")

    def log(self, rev_range: Optional[str], fmt: str) -> str:
        self._check(self.fail_reads, "log")
        if not self.commits:
            return ""
        start, end = -1, len(self.commits) - 1
        if rev_range:
            if ".." in rev_range:
                left, right = rev_range.split("..", 1)
                start, end = self._resolve(left), self._resolve(right)
            else:
                end = self._resolve(rev_range)
        selected = self.commits[start + 1:end + 1]
        lines = []
        for commit in reversed(selected):
            lines.append(
                fmt.replace("%s", commit.subject)
                .replace("%h", commit.short_sha)
                .replace("%H", commit.sha)
            )
        return "\n".join(lines)

    def latest_tag(self, ref: str = "HEAD") -> Optional[str]:
        if self.fail_reads:
            return None
        try:
            position = self._resolve(ref)
        except VersionControlError:
            return None
        candidates = [
            (index, name) for name, index in self.tag_refs.items() if index <= position
        ]
        if not candidates:
            return None
        return max(reversed(candidates), key=lambda item: item[0])[1]

    def tags(self) -> List[str]:
        self._check(self.fail_reads, "tag")
        return sorted(self.tag_refs, key=lambda name: self.tag_refs[name], reverse=True)

    def tag_date(self, tag: str) -> str:
        return self.commits[self._resolve(tag)].date

    def current_branch(self) -> str:
        self._check(self.fail_reads, "rev-parse")
        return self.branch

    def status(self) -> str:
        self._check(self.fail_reads, "status")
        lines = [f"M  {path}" for path, _, _ in self.staged]
        lines.extend(f" M {path}" for path, _, _ in self.unstaged)
        return "\n".join(lines)

    def remote_url(self, remote: str = "origin") -> Optional[str]:
        return self.remote
