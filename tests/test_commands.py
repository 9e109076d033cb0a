"""Tests for git commands."""

import logging
from unittest.mock import AsyncMock, Mock

import pytest

from gitagent.commands import CommitCommand, PushCommand, StageCommand, TagCommand
from gitagent.commit_message import CommitComposer
from gitagent.committer import GitCommitter
from gitagent.models import CommitType
from gitagent.observers import FileLogObserver, GitOperationObserver


@pytest.fixture
def message():
    return CommitComposer().compose(CommitType.FEAT, "test", "test commit", "Test commit body")


@pytest.fixture
def mock_observer():
    observer = Mock(spec=GitOperationObserver)
    observer.on_commit_created = AsyncMock()
    observer.on_push_completed = AsyncMock()
    observer.on_tag_created = AsyncMock()
    return observer


@pytest.mark.asyncio
async def test_commit_command(fake_vcs, message, mock_console):
    """Test creating a commit."""
    fake_vcs.stage_file("test.txt", 1, 0)

    command = CommitCommand(fake_vcs, message, mock_console)
    success = await command.execute()

    assert success is True
    assert command.commit_hash == fake_vcs.commits[-1].sha
    assert fake_vcs.commits[-1].subject == "feat(test): test commit"
    assert fake_vcs.commits[-1].body == "Test commit body"
    assert command.description == "commit feat(test): test commit"


@pytest.mark.asyncio
async def test_commit_command_failure(fake_vcs, message, mock_console):
    command = CommitCommand(fake_vcs, message, mock_console)
    success = await command.execute()
    assert success is False
    assert command.error.startswith("Failed to create commit")
    assert command.commit_hash is None


@pytest.mark.asyncio
async def test_stage_command(fake_vcs, mock_console):
    fake_vcs.unstaged = [("a.py", 1, 0), ("b.py", 2, 0)]

    assert await StageCommand(fake_vcs, ["a.py"], mock_console).execute() is True
    assert fake_vcs.staged_files() == ["a.py"]

    assert await StageCommand(fake_vcs, console=mock_console).execute() is True
    assert fake_vcs.staged_files() == ["a.py", "b.py"]


@pytest.mark.asyncio
async def test_stage_command_failure(fake_vcs, mock_console):
    fake_vcs.fail_stage = True
    command = StageCommand(fake_vcs, console=mock_console)
    assert await command.execute() is False
    assert command.error.startswith("Failed to add changes")


@pytest.mark.asyncio
async def test_push_command_no_remote(mock_console):
    """Test pushing when no remote is configured."""
    from gitagent.vcs import InMemoryVersionControl

    vcs = InMemoryVersionControl(remote=None)
    vcs.add_commit("test commit")

    command = PushCommand(vcs, console=mock_console)
    success = await command.execute()

    assert success is False
    assert "Failed to push changes" in command.error
    mock_console.print.assert_called_once()


@pytest.mark.asyncio
async def test_push_tag(fake_vcs, mock_console):
    fake_vcs.add_tag("1.0.0")
    command = PushCommand(fake_vcs, tag="1.0.0", console=mock_console)
    assert await command.execute() is True
    assert fake_vcs.pushed_tags == ["1.0.0"]


@pytest.mark.asyncio
async def test_tag_command(fake_vcs, mock_console):
    command = TagCommand(fake_vcs, "1.0.0", console=mock_console)
    assert await command.execute() is True
    assert fake_vcs.tag_messages["1.0.0"] == "Release 1.0.0"


@pytest.mark.asyncio
async def test_tag_command_existing_tag(fake_vcs, mock_console):
    fake_vcs.add_tag("1.0.0")
    command = TagCommand(fake_vcs, "1.0.0", console=mock_console)
    assert await command.execute() is False
    assert command.error == "Tag 1.0.0 already exists"


@pytest.mark.asyncio
async def test_command_observers(fake_vcs, message, mock_observer, mock_console):
    """Test that commands notify observers correctly."""
    fake_vcs.stage_file("test.txt", 1, 0)

    commit_command = CommitCommand(fake_vcs, message, mock_console)
    commit_command.add_observer(mock_observer)
    assert await commit_command.execute() is True
    mock_observer.on_commit_created.assert_called_once_with(message, commit_command.commit_hash)

    tag_command = TagCommand(fake_vcs, "1.0.0", console=mock_console)
    tag_command.add_observer(mock_observer)
    assert await tag_command.execute() is True
    mock_observer.on_tag_created.assert_called_once_with("1.0.0")

    fake_vcs.fail_push = True
    push_command = PushCommand(fake_vcs, console=mock_console)
    push_command.add_observer(mock_observer)
    assert await push_command.execute() is False
    mock_observer.on_push_completed.assert_called_once_with(False, None)


@pytest.mark.asyncio
async def test_remove_observer(fake_vcs, message, mock_observer, mock_console):
    fake_vcs.stage_file("test.txt", 1, 0)
    command = CommitCommand(fake_vcs, message, mock_console)
    command.add_observer(mock_observer)
    command.remove_observer(mock_observer)
    await command.execute()
    mock_observer.on_commit_created.assert_not_called()


@pytest.mark.asyncio
async def test_committer_runs_commands(fake_vcs, message, mock_observer, mock_console, caplog):
    """Observers are attached and failures are logged with the command description."""
    caplog.set_level(logging.DEBUG, logger="gitagent.committer")
    committer = GitCommitter(mock_console)
    committer.add_observer(mock_observer)
    fake_vcs.stage_file("test.txt", 1, 0)

    assert await committer.execute_command(CommitCommand(fake_vcs, message)) is True
    fake_vcs.fail_commit = True
    assert await committer.execute_command(CommitCommand(fake_vcs, message)) is False

    mock_observer.on_commit_created.assert_called_once()
    assert "Running commit feat(test): test commit" in caplog.text
    assert "commit feat(test): test commit failed: Failed to create commit" in caplog.text


@pytest.mark.asyncio
async def test_file_log_observer(tmp_path, message):
    log_file = tmp_path / "logs" / "git.log"
    observer = FileLogObserver(str(log_file))

    await observer.on_commit_created(message, "abc1234def")
    await observer.on_push_completed(True)
    await observer.on_tag_created("1.0.0")

    lines = log_file.read_text().splitlines()
    assert lines[0].endswith("Created commit abc1234def: feat(test): test commit")
    assert lines[1].endswith("Successfully push changes to remote")
    assert lines[2].endswith("Created tag 1.0.0")
