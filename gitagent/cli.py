#!/usr/bin/env python3
import asyncio
import functools
from pathlib import Path
from typing import List, Optional, Tuple

import click
import pyperclip
from rich.console import Console
from rich.markup import escape

from .comments import CommentManager
from .commit_message import AUTO_MODE
from .committer import GitCommitter
from .config import DEFAULT_CONFIG_FILENAME, Config
from .core import SmartCommitWorkflow
from .errors import ConfigError, GitAgentError, ReleaseError
from .github import GitHubClient, create_github_client
from .log import set_log_level
from .manifest import VersionManifest
from .models import WorkflowResult
from .observers import ConsoleLogObserver, FileLogObserver
from .release import ReleaseManager
from .vcs import GitRepository, VersionControl

console = Console()

COMMENT_ACTIONS = ("auto-reply", "list", "create", "delete")
VERSION_ACTIONS = ("bump", "release", "history", "changelog", "next")
CONFIG_ACTIONS = ("list", "set", "path")
RECENT_COMMITS = 5

STATUS_ICONS = {"M": "📝", "A": "➕", "D": "🗑️"}
UNKNOWN_STATUS_ICON = "❓"


def run_async(coro):
    """Run an async coroutine from a synchronous click command."""
    return asyncio.run(coro)


def handle_errors(func):
    """Print failures as ``Error: <message>`` and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise click.Abort()
        except Exception as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise click.exceptions.Exit(1)

    return wrapper


def parse_status(status: str) -> List[Tuple[str, str]]:
    """``(icon, path)`` pairs from ``git status --porcelain`` output."""
    entries = []
    for line in status.splitlines():
        if not line.strip():
            continue
        code = line[:2].strip()[:1]
        entries.append((STATUS_ICONS.get(code, UNKNOWN_STATUS_ICON), line[3:]))
    return entries


def open_repository(repo_path: Path, config: Config) -> GitRepository:
    return GitRepository(str(repo_path), config.github.remote_name)


def github_client(config: Config, vcs: VersionControl) -> Optional[GitHubClient]:
    github = config.github
    return create_github_client(
        github.token,
        github.repo_owner,
        github.repo_name,
        vcs.remote_url(github.remote_name),
    )


def release_manager(
    repo_path: Path,
    config: Config,
    vcs: VersionControl,
    committer: Optional[GitCommitter] = None,
) -> ReleaseManager:
    if committer is None:
        committer = GitCommitter(console)
        committer.add_observer(ConsoleLogObserver(console))
    return ReleaseManager(
        vcs,
        config,
        repo_path,
        committer=committer,
        console=console,
        github=github_client(config, vcs),
    )


def report(result: WorkflowResult) -> None:
    """Raise for a failed workflow so the command exits non-zero."""
    if result.error:
        raise GitAgentError(result.error)
    if result.release_error:
        raise ReleaseError(f"Release failed: {result.release_error}")


@click.group()
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option("--debug", is_flag=True, help="Show diagnostic logging")
@click.version_option(package_name="git-agent")
@click.pass_context
def main(ctx: click.Context, path: Path, debug: bool):
    """
    Git workflow agent: smart commits, versioning, releases and comments.

    Configuration can be set in .gitagent.toml in the repository root.
    GITHUB_TOKEN, GITHUB_USER and GITHUB_REPO override the GitHub settings.
    """
    if debug:
        set_log_level("DEBUG")
    ctx.obj = path.absolute()


@main.command()
@click.argument("mode", default=AUTO_MODE)
@click.option(
    "-d", "--dry-run", is_flag=True, help="Show the commit message without committing"
)
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log git operations",
)
@click.pass_obj
@handle_errors
def commit(repo_path: Path, mode: str, dry_run: bool, log_file: Optional[Path]):
    """Commit staged changes with a generated message.

    MODE is "auto" to describe the changes, or the description to use.
    """
    config = Config.load(repo_path)
    vcs = open_repository(repo_path, config)

    committer = GitCommitter(console)
    committer.add_observer(ConsoleLogObserver(console))
    if log_file is not None:
        committer.add_observer(FileLogObserver(str(log_file)))

    workflow = SmartCommitWorkflow(
        vcs,
        config,
        repo_path,
        console=console,
        committer=committer,
        release_manager=release_manager(repo_path, config, vcs, committer),
    )
    report(run_async(workflow.run(mode, dry_run=dry_run)))


@main.command()
@click.argument("action", type=click.Choice(COMMENT_ACTIONS))
@click.argument("target", required=False)
@click.argument("message", required=False, default="Automated comment")
@click.pass_obj
@handle_errors
def comment(repo_path: Path, action: str, target: Optional[str], message: str):
    """Reply to issues and pull requests or manage single comments.

    TARGET is issue#123 or pr#456 (comment#789 for delete).
    """
    config = Config.load(repo_path)
    vcs = open_repository(repo_path, config)
    github = github_client(config, vcs)
    if github is None:
        raise ConfigError(
            "GitHub token and repository are required (set GITHUB_TOKEN or github.token)"
        )
    manager = CommentManager(config.comments, github, console)

    if action == "auto-reply":
        posted = run_async(manager.auto_reply())
        console.print(f"[green]Posted {posted} automated replies[/green]")
        return

    if not target:
        raise click.UsageError(f"'{action}' needs a TARGET such as issue#123")
    if action == "list":
        run_async(manager.list_comments(target))
    elif action == "create":
        if run_async(manager.create_comment(target, message)) is None:
            raise GitAgentError(f"Failed to create comment on {target}")
    elif action == "delete":
        if not run_async(manager.delete_comment(target)):
            raise GitAgentError(f"Failed to delete {target}")


@main.command()
@click.argument("action", type=click.Choice(VERSION_ACTIONS), default="bump")
@click.pass_obj
@handle_errors
def version(repo_path: Path, action: str):
    """Bump, release or inspect the project version."""
    config = Config.load(repo_path)
    vcs = open_repository(repo_path, config)
    manager = release_manager(repo_path, config, vcs)

    if action == "bump":
        result = run_async(manager.run())
        if not result.version and not result.release_error:
            console.print(f"[green]No release needed ({manager.current_version()})[/green]")
        report(result)
    elif action == "release":
        current = manager.current_version()
        warning = run_async(manager.publish(current))
        if warning:
            raise ReleaseError(warning)
    elif action == "history":
        tags = manager.history()
        console.print("[bold]Version History:[/bold]")
        if not tags:
            console.print("[dim]No tags yet[/dim]")
        for index, (tag, tag_date) in enumerate(tags, 1):
            console.print(f"{index}. {tag} ({tag_date})")
    elif action == "changelog":
        notes, warning = manager.changelog()
        console.print(notes.render(), markup=False)
        if warning:
            raise ReleaseError(warning)
    elif action == "next":
        current = manager.current_version()
        console.print(f"Current version: {current}")
        console.print(f"Next version: {manager.next_version()}")


@main.command()
@click.pass_obj
@handle_errors
def status(repo_path: Path):
    """Show branch, version, latest tag, modified files and recent commits."""
    config = Config.load(repo_path)
    vcs = open_repository(repo_path, config)
    manifest = VersionManifest(repo_path / config.versioning.manifest_file)

    console.print("[bold]📊 Repository Status Report[/bold]")
    console.print(f"Branch: {vcs.current_branch()}")
    console.print(f"Current Version: {manifest.read_version()}")
    console.print(f"Latest Tag: {vcs.latest_tag() or 'None'}")

    entries = parse_status(vcs.status())
    if entries:
        console.print("\n📝 Modified Files:")
        for icon, file_path in entries:
            console.print(f"{icon} {file_path}", markup=False)
    else:
        console.print("\n[green]✅ Working directory clean[/green]")

    recent = vcs.log(None, "%h %s").splitlines()[:RECENT_COMMITS]
    console.print("\n📜 Recent Commits:")
    for line in recent:
        console.print(f"  {line}", markup=False)


@main.command(name="config")
@click.argument("action", type=click.Choice(CONFIG_ACTIONS), default="list")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.pass_obj
@handle_errors
def config_command(repo_path: Path, action: str, key: Optional[str], value: Optional[str]):
    """List, set or locate configuration options.

    KEY is a dotted option name such as commits.autoPush.
    """
    config_path = repo_path / DEFAULT_CONFIG_FILENAME
    config = Config.load(repo_path)

    if action == "list":
        console.print("\n[bold]Current Configuration Settings:[/bold]")
        if config_path.exists():
            console.print(f"[dim]Config file: {config_path.as_posix()}[/dim]")
        else:
            console.print("[dim]Using default values (no config file found)[/dim]")
        for name, option in config.to_flat_dict().items():
            if name == "github.token" and option:
                option = "********"
            console.print(f"{name:<40} {option}", markup=False)
        return

    if action == "set":
        if not key or value is None:
            raise click.UsageError("'config set' needs KEY and VALUE")
        updated = config.with_option(key, value)
        saved = updated.save(repo_path)
        console.print(f"[green]Set {key} = {updated.get_option(key)}[/green]")
        console.print(f"[dim]Saved to {saved.as_posix()}[/dim]")
        return

    if not config_path.exists():
        config.save(repo_path)
        console.print("[yellow]Created new config file with default values[/yellow]")
    try:
        pyperclip.copy(str(config_path))
        copied = True
    except pyperclip.PyperclipException:
        copied = False
    console.print(f"[green]Config file location:[/green] {config_path}")
    if copied:
        console.print("[green]Path copied to clipboard![/green]")


if __name__ == "__main__":
    main()
