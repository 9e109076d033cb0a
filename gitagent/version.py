"""Semantic version values for git-agent."""
import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Tuple, Union

from .models import BumpTier

VERSION_PATTERN = re.compile(
    r"^[vV=]?\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?"
    r"(?:-([0-9A-Za-z.-]+))?"
    r"(?:\+([0-9A-Za-z.-]+))?$"
)

_LEADING_INT = re.compile(r"^\s*(\d+)")


def leading_int(text: str, default: int = 0) -> int:
    """Integer value of the leading digits of ``text``."""
    match = _LEADING_INT.match(text or "")
    return int(match.group(1)) if match else default


def _prerelease_key(identifier: str) -> Tuple[int, Union[int, str]]:
    # numeric identifiers sort before alphanumeric ones
    if identifier.isdigit():
        return (0, int(identifier))
    return (1, identifier)


@total_ordering
@dataclass(frozen=True)
class Version:
    """A ``major.minor.patch[-prerelease][+build]`` version.

    Parsing is loose: a leading ``v`` and missing minor/patch components are
    accepted, and leading zeros are read as plain integers so calendar values
    like ``2026.01.05`` parse. Build metadata does not affect ordering.
    """

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "Version":
        match = VERSION_PATTERN.match((text or "").strip())
        if not match:
            raise ValueError(f"Invalid version format: {text}")
        major, minor, patch, prerelease, build = match.groups()
        return cls(
            major=int(major),
            minor=int(minor or 0),
            patch=int(patch or 0),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return VERSION_PATTERN.match((text or "").strip()) is not None

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def _precedence(self):
        return (self.major, self.minor, self.patch)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() == other._precedence() and self.prerelease == other.prerelease

    def __hash__(self) -> int:
        return hash((self._precedence(), self.prerelease))

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        if self._precedence() != other._precedence():
            return self._precedence() < other._precedence()
        # a pre-release sorts before the release it precedes
        if not self.prerelease or not other.prerelease:
            return bool(self.prerelease) and not other.prerelease
        mine = [_prerelease_key(part) for part in self.prerelease]
        theirs = [_prerelease_key(part) for part in other.prerelease]
        return mine < theirs

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def bump(self, tier: BumpTier) -> "Version":
        """Increment by ``tier``.

        A pre-release is released first: ``2.0.0-rc.1`` bumped by major gives
        ``2.0.0``, ``1.3.0-beta`` bumped by minor gives ``1.3.0`` and
        ``1.2.3-rc.1`` bumped by patch gives ``1.2.3``.
        """
        if tier == BumpTier.MAJOR:
            if self.prerelease and self.minor == 0 and self.patch == 0:
                return Version(self.major, 0, 0)
            return Version(self.major + 1, 0, 0)
        if tier == BumpTier.MINOR:
            if self.prerelease and self.patch == 0:
                return Version(self.major, self.minor, 0)
            return Version(self.major, self.minor + 1, 0)
        if self.prerelease:
            return Version(self.major, self.minor, self.patch)
        return Version(self.major, self.minor, self.patch + 1)
