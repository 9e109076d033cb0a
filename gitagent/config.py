"""Configuration management for git-agent."""
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import tomli
import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigError
from .log import get_logger
from .models import VersionStrategy

DEFAULT_CONFIG_FILENAME = ".gitagent.toml"

logger = get_logger(__name__)


class _Section(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CommitsConfig(_Section):
    auto_add: bool = Field(
        default=True,
        description="Stage all changes before composing the commit",
    )
    conventional_commits: bool = Field(
        default=True,
        description="Generate type(scope): description messages instead of literal ones",
    )
    max_commit_message_length: int = Field(
        default=72,
        gt=3,
        description="Maximum length of the full commit message",
    )
    auto_push: bool = Field(
        default=False,
        description="Push after committing",
    )
    require_tests: bool = Field(
        default=False,
        description="Run the test command before committing and abort on failure",
    )
    test_command: str = Field(
        default="pytest",
        description="Command run by the test gate",
    )


def _default_bump_rules() -> Dict[str, List[str]]:
    return {
        "major": ["BREAKING CHANGE:"],
        "minor": ["feat:", "feature:"],
        "patch": ["fix:", "docs:", "style:", "refactor:", "test:", "chore:"],
    }


class VersioningConfig(_Section):
    strategy: VersionStrategy = Field(
        default=VersionStrategy.SEMANTIC,
        description="Version bump strategy (semantic, calendar or custom)",
    )
    auto_tag: bool = Field(
        default=True,
        description="Bump, tag and write release notes after a commit that needs a release",
    )
    auto_release: bool = Field(
        default=False,
        description="Create a GitHub release after tagging",
    )
    release_notes: bool = Field(
        default=True,
        description="Prepend release notes to the changelog file",
    )
    bump_rules: Dict[str, List[str]] = Field(
        default_factory=_default_bump_rules,
        description="Keywords per bump tier (major, minor, patch)",
    )
    manifest_file: str = Field(
        default="pyproject.toml",
        description="File holding the project version (pyproject.toml or package.json)",
    )
    changelog_file: str = Field(
        default="CHANGELOG.md",
        description="Changelog that release notes are prepended to",
    )


class GitHubConfig(_Section):
    token: str = ""
    repo_owner: str = ""
    repo_name: str = ""
    remote_name: str = "origin"

    @model_validator(mode="before")
    @classmethod
    def _apply_environment(cls, data: Any) -> Any:
        """Fill credentials and repository from the environment."""
        if not isinstance(data, dict):
            return data
        env_mapping = {
            "GITHUB_TOKEN": "token",
            "GITHUB_USER": "repoOwner",
            "GITHUB_REPO": "repoName",
        }
        provided = {option_name(key): value for key, value in data.items()}
        for env_var, alias in env_mapping.items():
            if os.environ.get(env_var) and not provided.get(alias):
                provided[alias] = os.environ[env_var]
        return provided

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.repo_owner and self.repo_name)


def _default_templates() -> Dict[str, str]:
    return {
        "mergeRequest": "Thank you for your contribution! 🚀",
        "issue": "We are looking into this issue. 👍",
        "bugReport": "Bug acknowledged. Will prioritize this fix. 🐛",
    }


class CommentsConfig(_Section):
    auto_reply: bool = True
    templates: Dict[str, str] = Field(default_factory=_default_templates)
    keywords: List[str] = Field(
        default_factory=lambda: ["bug", "feature", "help wanted", "documentation"]
    )


class Config(_Section):
    """Configuration settings for git-agent.

    Instances are immutable. ``with_option`` returns an updated copy, so a
    component only ever sees the configuration it was constructed with.
    """

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    versioning: VersioningConfig = Field(default_factory=VersioningConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    comments: CommentsConfig = Field(default_factory=CommentsConfig)

    @classmethod
    def load(cls, repo_path: Path) -> "Config":
        """Load configuration from the config file.

        Args:
            repo_path: Path to the git repository

        Returns:
            Config: Configuration object with values from file or defaults
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with config_path.open("rb") as f:
                config_data = tomli.load(f)
            return cls.model_validate(config_data)
        except (tomli.TOMLDecodeError, ValidationError, OSError) as e:
            logger.warning("Error reading config file %s: %s", config_path, e)
            return cls()

    def save(self, repo_path: Path) -> Path:
        """Save configuration to the config file.

        The GitHub token is never written to disk.
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME
        data = self.model_dump(mode="json", by_alias=True)
        data["github"].pop("token", None)

        with config_path.open("wb") as f:
            tomli_w.dump(data, f)
        return config_path

    def get_option(self, key: str) -> Any:
        """Return the value at a dotted key such as ``commits.autoPush``."""
        node: Any = self.model_dump(mode="json", by_alias=True)
        for part in key.split("."):
            name = option_name(part)
            if not isinstance(node, dict) or name not in node:
                raise ConfigError(f"Unknown configuration option: {key}")
            node = node[name]
        return node

    def with_option(self, key: str, value: Any) -> "Config":
        """Return a new configuration with ``key`` set to ``value``.

        String values are coerced to the option's type; list options accept a
        comma-separated string.
        """
        parts = [option_name(part) for part in key.split(".")]
        if len(parts) < 2:
            raise ConfigError(f"Unknown configuration option: {key}")

        data = self.model_dump(mode="json", by_alias=True)
        node = data
        for part in parts[:-1]:
            if not isinstance(node.get(part), dict):
                raise ConfigError(f"Unknown configuration option: {key}")
            node = node[part]

        leaf = parts[-1]
        # bump rules and reply templates accept new keys
        open_mapping = len(parts) == 3 and parts[1] in OPEN_MAPPINGS
        if leaf not in node and not open_mapping:
            raise ConfigError(f"Unknown configuration option: {key}")

        current = node.get(leaf)
        if isinstance(value, str) and (
            isinstance(current, list) or (open_mapping and parts[1] == "bumpRules")
        ):
            value = [item.strip() for item in value.split(",") if item.strip()]
        node[leaf] = value

        try:
            return type(self).model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from e

    def to_flat_dict(self) -> Dict[str, Any]:
        """Return every option keyed by its dotted name."""
        flat: Dict[str, Any] = {}
        for section, options in self.model_dump(mode="json", by_alias=True).items():
            for name, value in options.items():
                flat[f"{section}.{name}"] = value
        return flat


OPEN_MAPPINGS = ("bumpRules", "templates")


def option_name(part: str) -> str:
    """Normalize a snake_case option name to its camelCase key."""
    return to_camel(part) if "_" in part else part


def resolve_repo_slug(remote_url: Optional[str]) -> Optional[Tuple[str, str]]:
    """Extract ``(owner, repo)`` from a GitHub remote URL."""
    if not remote_url:
        return None
    match = re.search(r"github\.com[:/]([^/]+)/(.+?)(?:\.git)?/?$", remote_url.strip())
    if not match:
        return None
    return match.group(1), match.group(2)
