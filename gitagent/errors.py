"""Exceptions raised by git-agent."""


class GitAgentError(Exception):
    """Base exception for git-agent errors."""


class VersionControlError(GitAgentError):
    """Raised when a git operation fails."""


class TestGateError(GitAgentError):
    """Raised when the configured test command fails before committing."""

    __test__ = False


class CommitError(GitAgentError):
    """Raised when staging or committing changes fails."""


class TagError(GitAgentError):
    """Raised when a release tag cannot be created."""


class ManifestError(GitAgentError):
    """Raised when the version manifest cannot be written."""


class ConfigError(GitAgentError):
    """Raised for unknown configuration options or invalid values."""


class ReleaseError(GitAgentError):
    """Raised when the release sub-flow stops before completing."""
