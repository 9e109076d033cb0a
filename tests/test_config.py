"""Tests for configuration functionality."""

import pytest

from gitagent.config import (
    DEFAULT_CONFIG_FILENAME,
    Config,
    option_name,
    resolve_repo_slug,
)
from gitagent.errors import ConfigError
from gitagent.models import VersionStrategy


def test_default_config():
    """Test default configuration values."""
    config = Config()
    assert config.commits.auto_add is True
    assert config.commits.conventional_commits is True
    assert config.commits.max_commit_message_length == 72
    assert config.commits.auto_push is False
    assert config.commits.require_tests is False
    assert config.versioning.strategy == VersionStrategy.SEMANTIC
    assert config.versioning.auto_tag is True
    assert config.versioning.auto_release is False
    assert config.versioning.release_notes is True
    assert config.versioning.bump_rules["major"] == ["BREAKING CHANGE:"]
    assert config.comments.keywords == ["bug", "feature", "help wanted", "documentation"]
    assert config.github.remote_name == "origin"


def test_config_load_nonexistent(tmp_path):
    """Test loading configuration when file doesn't exist."""
    config = Config.load(tmp_path)
    assert config == Config()


def test_config_load_and_save(tmp_path):
    """Test saving and loading configuration."""
    config = Config().with_option("commits.autoPush", True)
    config = config.with_option("versioning.strategy", "calendar")

    path = config.save(tmp_path)
    assert path == tmp_path / DEFAULT_CONFIG_FILENAME
    assert "autoPush = true" in path.read_text()

    loaded = Config.load(tmp_path)
    assert loaded.commits.auto_push is True
    assert loaded.versioning.strategy == VersionStrategy.CALENDAR


def test_save_never_writes_token(tmp_path):
    config = Config().with_option("github.token", "secret")
    path = config.save(tmp_path)
    assert "secret" not in path.read_text()


def test_config_load_invalid(tmp_path, caplog):
    """Test loading invalid configuration file."""
    config_path = tmp_path / DEFAULT_CONFIG_FILENAME
    config_path.write_text("invalid [ toml")

    config = Config.load(tmp_path)
    assert config == Config()
    assert "Error reading config file" in caplog.text


def test_config_load_invalid_value(tmp_path):
    config_path = tmp_path / DEFAULT_CONFIG_FILENAME
    config_path.write_text("[commits]\nmaxCommitMessageLength = 2\n")
    assert Config.load(tmp_path).commits.max_commit_message_length == 72


def test_with_option_returns_new_config():
    config = Config()
    updated = config.with_option("commits.maxCommitMessageLength", "50")
    assert updated.commits.max_commit_message_length == 50
    assert config.commits.max_commit_message_length == 72


def test_with_option_accepts_snake_case():
    updated = Config().with_option("commits.auto_push", "true")
    assert updated.commits.auto_push is True


def test_with_option_splits_lists():
    updated = Config().with_option("comments.keywords", "bug, question")
    assert updated.comments.keywords == ["bug", "question"]
    rules = Config().with_option("versioning.bumpRules.minor", "feat:,add:")
    assert rules.versioning.bump_rules["minor"] == ["feat:", "add:"]


def test_with_option_new_template():
    updated = Config().with_option("comments.templates.question", "Thanks for asking!")
    assert updated.comments.templates["question"] == "Thanks for asking!"


@pytest.mark.parametrize("key", ["commits", "commits.unknown", "nope.autoAdd", "x"])
def test_with_option_unknown_key(key):
    with pytest.raises(ConfigError):
        Config().with_option(key, "1")


def test_with_option_invalid_value():
    with pytest.raises(ConfigError):
        Config().with_option("versioning.strategy", "lunar")
    with pytest.raises(ConfigError):
        Config().with_option("commits.maxCommitMessageLength", "3")


def test_config_is_immutable():
    config = Config()
    with pytest.raises(Exception):
        config.commits.auto_push = True


def test_get_option():
    config = Config()
    assert config.get_option("commits.autoAdd") is True
    assert config.get_option("versioning.strategy") == "semantic"
    with pytest.raises(ConfigError):
        config.get_option("commits.missing")


def test_to_flat_dict():
    flat = Config().to_flat_dict()
    assert flat["commits.autoAdd"] is True
    assert flat["versioning.changelogFile"] == "CHANGELOG.md"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    monkeypatch.setenv("GITHUB_USER", "octo")
    monkeypatch.setenv("GITHUB_REPO", "demo")
    config = Config()
    assert config.github.token == "env-token"
    assert config.github.is_configured


def test_environment_does_not_override_file(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_USER", "env-owner")
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text('[github]\nrepoOwner = "file-owner"\n')
    assert Config.load(tmp_path).github.repo_owner == "file-owner"


def test_option_name():
    assert option_name("auto_push") == "autoPush"
    assert option_name("autoPush") == "autoPush"


@pytest.mark.parametrize(
    "url,expected",
    [
        ("git@github.com:octo/demo.git", ("octo", "demo")),
        ("https://github.com/octo/demo.git", ("octo", "demo")),
        ("https://github.com/octo/demo", ("octo", "demo")),
        ("https://gitlab.com/octo/demo.git", None),
        (None, None),
    ],
)
def test_resolve_repo_slug(url, expected):
    assert resolve_repo_slug(url) == expected
