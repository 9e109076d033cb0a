"""Release notes generation and changelog persistence."""
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import VersionControlError
from .log import get_logger
from .models import ReleaseNotes
from .vcs import VersionControl

logger = get_logger(__name__)

NOTES_LOG_FORMAT = "- %s (%h)"
FEATURE_KEYWORD = "feat"
FIX_KEYWORD = "fix"


def categorize(lines: List[str]) -> Tuple[List[str], List[str], List[str]]:
    """Split lines into features, fixes and everything else.

    A line mentioning both keywords is a feature.
    """
    features, fixes, other = [], [], []
    for line in lines:
        lowered = line.lower()
        if FEATURE_KEYWORD in lowered:
            features.append(line)
        elif FIX_KEYWORD in lowered:
            fixes.append(line)
        else:
            other.append(line)
    return features, fixes, other


class ReleaseNotesGenerator:
    """Builds release notes from the commits between two tags."""

    def __init__(self, vcs: VersionControl, changelog_path: Path = Path("CHANGELOG.md")):
        self.vcs = vcs
        self.changelog_path = Path(changelog_path)

    def _revision_range(self, version: str) -> Optional[str]:
        """``previous_tag..end`` where ``end`` is the version's tag or HEAD."""
        if self.vcs.has_tag(version):
            end = version
            previous = self.vcs.latest_tag(f"{version}^")
        else:
            end = "HEAD"
            previous = self.vcs.latest_tag("HEAD")
        return f"{previous}..{end}" if previous else end

    def commit_lines(self, version: str) -> List[str]:
        try:
            output = self.vcs.log(self._revision_range(version), NOTES_LOG_FORMAT)
        except VersionControlError as e:
            logger.warning("Error reading commits for release notes: %s", e)
            return []
        return [line for line in output.splitlines() if line.strip()]

    def generate(self, version: str) -> ReleaseNotes:
        features, fixes, other = categorize(self.commit_lines(version))
        return ReleaseNotes(version=version, features=features, fixes=fixes, other=other)

    def persist(self, notes: ReleaseNotes) -> Path:
        """Prepend the rendered notes to the changelog, creating it if needed."""
        content = notes.render()
        if self.changelog_path.exists():
            content += "\n\n" + self.changelog_path.read_text(encoding="utf-8")
        self.changelog_path.parent.mkdir(parents=True, exist_ok=True)
        self.changelog_path.write_text(content, encoding="utf-8")
        return self.changelog_path
