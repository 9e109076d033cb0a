"""git-agent: conventional commits and release versioning for git repositories."""

__version__ = "0.1.0"
