"""Project version manifest (pyproject.toml or package.json)."""
import json
import re
from pathlib import Path

import tomli

from .errors import ManifestError
from .log import get_logger

logger = get_logger(__name__)

DEFAULT_VERSION = "1.0.0"

_TOML_SECTIONS = ("project", "tool.poetry")
_TABLE_HEADER = re.compile(r"^\s*\[([^\[\]]+)\]\s*(?:#.*)?$")
_VERSION_LINE = re.compile(r"^(\s*version\s*=\s*)([\"']).*?\2(.*)$", re.DOTALL)


class VersionManifest:
    """Reads and writes the version field of a project manifest."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def is_json(self) -> bool:
        return self.path.suffix == ".json"

    def read_version(self) -> str:
        """Current version, or ``1.0.0`` when the manifest has none."""
        try:
            if self.is_json:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                version = data.get("version")
            else:
                with self.path.open("rb") as f:
                    data = tomli.load(f)
                version = data.get("project", {}).get("version") or \
                    data.get("tool", {}).get("poetry", {}).get("version")
        except (OSError, ValueError, tomli.TOMLDecodeError) as e:
            logger.warning("Could not read %s (%s), using default version", self.path, e)
            return DEFAULT_VERSION

        if not version:
            logger.warning("No version in %s, using default version", self.path)
            return DEFAULT_VERSION
        return str(version)

    def write_version(self, new_version: str) -> None:
        try:
            if self.is_json:
                self._write_json(new_version)
            else:
                self._write_toml(new_version)
        except (OSError, ValueError) as e:
            raise ManifestError(f"Failed to update {self.path}: {e}") from e

    def _write_json(self, new_version: str) -> None:
        data = {}
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
        data["version"] = new_version
        self.path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    def _write_toml(self, new_version: str) -> None:
        """Replace the version line of the project table, keeping formatting."""
        lines = self.path.read_text(encoding="utf-8").splitlines(keepends=True)
        section = None
        for index, line in enumerate(lines):
            header = _TABLE_HEADER.match(line)
            if header:
                section = header.group(1).strip()
                continue
            if section not in _TOML_SECTIONS:
                continue
            match = _VERSION_LINE.match(line)
            if match:
                lines[index] = f'{match.group(1)}"{new_version}"{match.group(3)}'
                self.path.write_text("".join(lines), encoding="utf-8")
                return
        raise ManifestError(f"No version field found in {self.path}")
