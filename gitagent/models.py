"""Shared models for git-agent."""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CommitType(str, Enum):
    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    BUILD = "build"
    CI = "ci"
    TEST = "test"
    CHORE = "chore"


class BumpTier(str, Enum):
    """Severity of a version increment, ordered major > minor > patch."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {BumpTier.PATCH: 0, BumpTier.MINOR: 1, BumpTier.MAJOR: 2}


class VersionStrategy(str, Enum):
    SEMANTIC = "semantic"
    CALENDAR = "calendar"
    CUSTOM = "custom"


@dataclass(frozen=True)
class FileStat:
    path: str
    insertions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class ChangeSet:
    """Staged files with their aggregate insertion/deletion counts."""

    files: List[FileStat]
    diff_stat: str = ""

    @property
    def paths(self) -> List[str]:
        return [stat.path for stat in self.files]

    def is_empty(self) -> bool:
        return not self.files


class CommitMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    commit_type: Optional[CommitType] = None
    scope: Optional[str] = None
    description: str
    body: Optional[str] = None
    text: str = Field(description="Final message passed to git commit")
    truncated: bool = False

    @property
    def header(self) -> str:
        return self.text.split("\n", 1)[0]

    def __str__(self) -> str:
        return self.text


class ReleaseNotes(BaseModel):
    version: str
    features: List[str] = Field(default_factory=list)
    fixes: List[str] = Field(default_factory=list)
    other: List[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.features or self.fixes or self.other)

    def render(self) -> str:
        """Render the notes as a markdown block, one section per non-empty bucket."""
        content = f"# {self.version}\n\n"
        sections = (
            ("Features", self.features),
            ("Bug Fixes", self.fixes),
            ("Other Changes", self.other),
        )
        for title, lines in sections:
            if lines:
                content += f"## {title}\n" + "\n".join(lines) + "\n\n"
        return content


class WorkflowState(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    NO_CHANGES = "no_changes"
    CLASSIFYING = "classifying"
    COMPOSING = "composing"
    TEST_GATE = "test_gate"
    COMMITTING = "committing"
    PUSHING = "pushing"
    COMMITTED = "committed"
    CHECK_RELEASE = "check_release"
    NO_RELEASE_NEEDED = "no_release_needed"
    BUMPING = "bumping"
    TAGGING = "tagging"
    NOTES_GENERATED = "notes_generated"
    FAILED = "failed"


class StepOutcome(BaseModel):
    state: WorkflowState
    success: bool = True
    detail: str = ""


class WorkflowResult(BaseModel):
    """Outcome of one smart commit run."""

    state: WorkflowState = WorkflowState.IDLE
    message: Optional[CommitMessage] = None
    version: Optional[str] = None
    steps: List[StepOutcome] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    release_error: Optional[str] = None

    @property
    def committed(self) -> bool:
        return any(
            step.state == WorkflowState.COMMITTED and step.success for step in self.steps
        )

    @property
    def success(self) -> bool:
        return self.error is None

    def record(self, state: WorkflowState, success: bool = True, detail: str = "") -> None:
        self.state = state
        self.steps.append(StepOutcome(state=state, success=success, detail=detail))

    @property
    def visited(self) -> List[WorkflowState]:
        return [step.state for step in self.steps]
