"""Test gate run before committing."""
import shlex
import subprocess
from pathlib import Path
from typing import Optional

from .errors import TestGateError
from .log import get_logger

logger = get_logger(__name__)


class TestGate:
    """Runs the project's test command and raises when it fails."""

    __test__ = False

    def __init__(self, command: str = "pytest", cwd: Optional[Path] = None):
        self.command = command
        self.cwd = cwd

    def run(self) -> None:
        logger.info("Running tests: %s", self.command)
        try:
            result = subprocess.run(
                shlex.split(self.command),
                cwd=self.cwd,
                capture_output=True,
                text=True,
            )
        except (OSError, ValueError) as e:
            raise TestGateError(f"Tests failed. Commit aborted. ({e})") from e

        if result.returncode != 0:
            logger.debug("Test output:\n%s%s", result.stdout, result.stderr)
            raise TestGateError("Tests failed. Commit aborted.")
