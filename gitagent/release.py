"""Release follow-through: version bump, tag, release notes and GitHub release."""
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from rich.console import Console

from .commands import CommitCommand, PushCommand, StageCommand, TagCommand
from .commit_message import CommitComposer
from .committer import GitCommitter
from .config import Config
from .errors import CommitError, ManifestError, TagError, VersionControlError
from .github import GitHubClient
from .log import get_logger
from .manifest import VersionManifest
from .models import CommitType, ReleaseNotes, WorkflowResult, WorkflowState
from .release_notes import ReleaseNotesGenerator
from .resolver import VersionResolver
from .vcs import VersionControl
from .version import Version

logger = get_logger(__name__)


class ReleaseManager:
    """Decides whether a release is due and carries it out.

    The release runs in a fixed order: bump the manifest and commit it, tag
    the commit and push the tag, write release notes, then optionally create
    the GitHub release. Manifest, commit and tag failures stop the sequence;
    pushing the tag, writing the changelog and the GitHub release only warn.
    Nothing already done is rolled back.
    """

    def __init__(
        self,
        vcs: VersionControl,
        config: Config,
        repo_path: Path = Path("."),
        committer: Optional[GitCommitter] = None,
        console: Optional[Console] = None,
        github: Optional[GitHubClient] = None,
        today: Callable[[], date] = date.today,
    ):
        self.vcs = vcs
        self.config = config
        self.repo_path = Path(repo_path)
        self.console = console or Console()
        self.committer = committer or GitCommitter(self.console)
        self.github = github
        versioning = config.versioning
        self.resolver = VersionResolver(vcs, versioning.strategy, versioning.bump_rules, today)
        self.notes_generator = ReleaseNotesGenerator(vcs, self.repo_path / versioning.changelog_file)
        self.manifest = VersionManifest(self.repo_path / versioning.manifest_file)

    def current_version(self) -> str:
        return self.manifest.read_version()

    def next_version(self) -> str:
        return self.resolver.resolve(self.current_version())

    def is_release_needed(self) -> bool:
        return self.resolver.is_release_needed(self.current_version())

    async def run(self, result: Optional[WorkflowResult] = None) -> WorkflowResult:
        """Check for a pending release and carry it out, recording each step."""
        if result is None:
            result = WorkflowResult()
        versioning = self.config.versioning

        try:
            current = self.current_version()
            new_version = self.resolver.resolve(current)
        except ValueError as e:
            result.release_error = str(e)
            result.record(WorkflowState.CHECK_RELEASE, False, str(e))
            return result

        if new_version == current:
            result.record(WorkflowState.CHECK_RELEASE, detail=f"{current} is up to date")
            result.record(WorkflowState.NO_RELEASE_NEEDED)
            return result

        result.record(WorkflowState.CHECK_RELEASE, detail=f"{current} -> {new_version}")
        self.console.print(f"[blue]📦 Bumping version: {current} → {new_version}[/blue]")
        state = WorkflowState.BUMPING
        try:
            await self.bump(new_version)
            result.version = new_version
            result.record(WorkflowState.BUMPING, detail=new_version)

            if versioning.auto_tag:
                state = WorkflowState.TAGGING
                result.warnings.extend(await self.tag(new_version))
                result.record(WorkflowState.TAGGING, detail=new_version)

            notes = None
            if versioning.release_notes:
                state = WorkflowState.NOTES_GENERATED
                notes, warning = self.write_notes(new_version)
                if warning:
                    result.warnings.append(warning)
                result.record(WorkflowState.NOTES_GENERATED, detail=str(self.notes_generator.changelog_path))

            if versioning.auto_release:
                warning = await self.publish(new_version, notes)
                if warning:
                    result.warnings.append(warning)
        except (ManifestError, CommitError, TagError) as e:
            result.release_error = str(e)
            result.record(state, False, str(e))
            return result

        self.console.print(f"[green]✅ Version bumped to {new_version}[/green]")
        return result

    async def bump(self, new_version: str) -> None:
        """Write the manifest and commit it as ``chore: bump version to X``."""
        self.manifest.write_version(new_version)

        # git runs from the repository root, which may be above --path
        manifest_path = self._relative(self.manifest.path, self.vcs.repo_path)
        stage = StageCommand(self.vcs, [manifest_path], self.console)
        if not await self.committer.execute_command(stage):
            raise CommitError(stage.error)

        composer = CommitComposer(self.config.commits.max_commit_message_length)
        message = composer.compose(CommitType.CHORE, None, f"bump version to {new_version}")
        commit = CommitCommand(self.vcs, message, self.console)
        if not await self.committer.execute_command(commit):
            raise CommitError(commit.error)

    async def tag(self, version: str) -> List[str]:
        """Create and push the release tag; returns warnings."""
        tag = TagCommand(self.vcs, version, console=self.console)
        if not await self.committer.execute_command(tag):
            raise TagError(tag.error)

        push = PushCommand(self.vcs, tag=version, console=self.console)
        if not await self.committer.execute_command(push):
            return [push.error]
        return []

    def write_notes(self, version: str) -> Tuple[ReleaseNotes, Optional[str]]:
        """Generate notes and prepend them to the changelog; returns a warning on write failure."""
        notes = self.notes_generator.generate(version)
        try:
            path = self.notes_generator.persist(notes)
        except OSError as e:
            warning = f"Could not update changelog: {e}"
            self.console.print(f"[yellow]Warning: {warning}[/yellow]")
            return notes, warning
        self.console.print(f"[green]✅ Changelog updated in {self._relative(path)}[/green]")
        return notes, None

    async def publish(self, version: str, notes: Optional[ReleaseNotes] = None) -> Optional[str]:
        """Create the GitHub release; returns a warning when it could not be created."""
        if self.github is None:
            warning = "GitHub release skipped: token or repository not configured"
            self.console.print(f"[yellow]Warning: {warning}[/yellow]")
            return warning

        notes = notes or self.notes_generator.generate(version)
        prerelease = Version.is_valid(version) and Version.parse(version).is_prerelease
        release = await self.github.create_release(version, notes.render(), prerelease=prerelease)
        if release is None:
            warning = f"Failed to create release {version}"
            self.console.print(f"[yellow]Warning: {warning}[/yellow]")
            return warning

        self.console.print(f"[green]✅ Release {version} created[/green]")
        return None

    def history(self) -> List[Tuple[str, str]]:
        """Tags, highest version first, with their commit dates."""
        try:
            return [(tag, self.vcs.tag_date(tag)) for tag in self.vcs.tags()]
        except VersionControlError as e:
            logger.warning("Failed to get version history: %s", e)
            return []

    def changelog(self) -> Tuple[ReleaseNotes, Optional[str]]:
        """Notes for the manifest version; persisted when release notes are enabled."""
        version = self.current_version()
        if self.config.versioning.release_notes:
            return self.write_notes(version)
        return self.notes_generator.generate(version), None

    def _relative(self, path: Path, root: Optional[Path] = None) -> str:
        try:
            return str(path.resolve().relative_to(Path(root or self.repo_path).resolve()))
        except ValueError:
            return str(path)
