"""Core functionality for git-agent: the smart commit workflow."""
from pathlib import Path
from typing import Optional

from rich.console import Console

from .collector import ChangeCollector
from .commands import CommitCommand, PushCommand, StageCommand
from .commit_message import AUTO_MODE, CommitMessageStrategy, create_strategy
from .committer import GitCommitter
from .config import Config
from .errors import CommitError, TestGateError
from .gate import TestGate
from .log import get_logger
from .models import WorkflowResult, WorkflowState
from .release import ReleaseManager
from .vcs import VersionControl

logger = get_logger(__name__)


class SmartCommitWorkflow:
    """Collects staged changes, commits them with a generated message and
    optionally follows through with a release.

    The workflow never raises for expected failures. Each step is recorded on
    the returned ``WorkflowResult``; a fatal failure sets ``error`` and ends in
    ``FAILED``, a failed push only adds a warning, and release failures land
    in ``release_error`` without touching the commit that was already made.
    """

    def __init__(
        self,
        vcs: VersionControl,
        config: Optional[Config] = None,
        repo_path: Path = Path("."),
        console: Optional[Console] = None,
        committer: Optional[GitCommitter] = None,
        test_gate: Optional[TestGate] = None,
        release_manager: Optional[ReleaseManager] = None,
        strategy: Optional[CommitMessageStrategy] = None,
    ):
        self.vcs = vcs
        self.config = config or Config()
        self.repo_path = Path(repo_path)
        self.console = console or Console()
        self.committer = committer or GitCommitter(self.console)
        commits = self.config.commits
        self.collector = ChangeCollector(vcs)
        self.strategy = strategy or create_strategy(
            commits.conventional_commits, commits.max_commit_message_length
        )
        self.test_gate = test_gate or TestGate(commits.test_command, cwd=self.repo_path)
        self.release_manager = release_manager or ReleaseManager(
            vcs, self.config, self.repo_path, self.committer, self.console
        )

    async def run(self, mode: str = AUTO_MODE, dry_run: bool = False) -> WorkflowResult:
        """Run one smart commit.

        Args:
            mode: ``"auto"`` to describe the changes, or the description to use
            dry_run: Compose and report the message without committing

        Returns:
            WorkflowResult: Final state, message, warnings and every step taken
        """
        result = WorkflowResult()
        commits = self.config.commits

        try:
            if commits.auto_add and not dry_run:
                await self._stage_all()

            result.record(WorkflowState.COLLECTING)
            change_set = self.collector.change_set()
            if change_set.is_empty():
                self.console.print("[yellow]No changes to commit[/yellow]")
                result.record(WorkflowState.NO_CHANGES)
                return result

            result.record(WorkflowState.CLASSIFYING, detail=", ".join(change_set.paths))
            message = self.strategy.generate_message(change_set, mode)
            result.message = message
            result.record(WorkflowState.COMPOSING, detail=message.header)

            if dry_run:
                self.console.print("[blue]Dry run - commit message would be:[/blue]")
                self.console.print(message.text)
                return result

            if commits.require_tests:
                self.console.print("[blue]🧪 Running tests...[/blue]")
                self.test_gate.run()
                result.record(WorkflowState.TEST_GATE)

            commit_hash = await self._commit(message)
            result.record(WorkflowState.COMMITTING, detail=commit_hash)
        except (TestGateError, CommitError) as e:
            result.error = str(e)
            result.record(WorkflowState.FAILED, False, str(e))
            self.console.print(f"[red]❌ {e}[/red]")
            return result

        if commits.auto_push:
            push = PushCommand(self.vcs, console=self.console)
            pushed = await self.committer.execute_command(push)
            if not pushed:
                result.warnings.append(push.error)
            result.record(WorkflowState.PUSHING, pushed, push.error or "")

        result.record(WorkflowState.COMMITTED)
        self.console.print(f"[green]✅ Committed: {message.header}[/green]")

        if self.config.versioning.auto_tag:
            await self.release_manager.run(result)

        return result

    async def _stage_all(self) -> None:
        stage = StageCommand(self.vcs, console=self.console)
        if not await self.committer.execute_command(stage):
            raise CommitError(stage.error)

    async def _commit(self, message) -> str:
        commit = CommitCommand(self.vcs, message, self.console)
        if not await self.committer.execute_command(commit):
            raise CommitError(commit.error)
        return commit.commit_hash
