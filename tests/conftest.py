import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
from git import Repo
from rich.console import Console

from gitagent.vcs import InMemoryVersionControl

pytest_plugins = ('pytest_asyncio',)


def configure_identity(repo: Repo) -> None:
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")
        writer.set_value("tag", "gpgsign", "false")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep GitHub credentials from the host out of the tests."""
    for name in ("GITHUB_TOKEN", "GITHUB_USER", "GITHUB_REPO", "GITAGENT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def temp_git_repo():
    """Create a temporary git repository for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        # Initialize git repo
        repo = Repo.init(tmp_dir)
        configure_identity(repo)

        # Create a test file
        test_file = Path(tmp_dir) / "test.txt"
        test_file.write_text("Initial content")

        # Initial commit
        repo.index.add(["test.txt"])
        repo.index.commit("Initial commit")

        yield tmp_dir


@pytest.fixture
def temp_project_repo(temp_git_repo):
    """A temporary repository with a pyproject.toml at version 1.2.3."""
    repo = Repo(temp_git_repo)
    manifest = Path(temp_git_repo) / "pyproject.toml"
    manifest.write_text('[project]\nname = "demo"\nversion = "1.2.3"\n')
    repo.index.add(["pyproject.toml"])
    repo.index.commit("chore: add manifest")
    repo.create_tag("1.2.3", message="Release 1.2.3")
    yield temp_git_repo


@pytest.fixture
def fake_vcs():
    """An in-memory repository with one commit."""
    vcs = InMemoryVersionControl(remote="git@github.com:octo/demo.git")
    vcs.add_commit("Initial commit")
    return vcs


@pytest.fixture
def mock_console():
    """Mock console for testing."""
    console = Mock(spec=Console)
    console.print = Mock()
    return console
