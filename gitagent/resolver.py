"""Next-version resolution.

Three strategies are available:

* ``semantic`` scans commit subjects for bump keywords (major > minor > patch)
  and applies the highest tier found;
* ``calendar`` uses today's ``YYYY.MM.DD`` when it is newer than the current
  version, otherwise increments the third component;
* ``custom`` always increments the minor component.
"""
import re
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import VersionControlError
from .log import get_logger
from .models import BumpTier, VersionStrategy
from .vcs import VersionControl
from .version import Version, leading_int

logger = get_logger(__name__)

# Order in which bump tiers are tested against each subject.
TIER_ORDER = (BumpTier.MAJOR, BumpTier.MINOR, BumpTier.PATCH)

# "feat(api): x" is also tested as "feat: x"
_SCOPE = re.compile(r"^(\w+)\([^)]*\)")


class BumpRules:
    """Keyword sets per bump tier, matched case-insensitively as substrings."""

    def __init__(self, rules: Mapping[str, Iterable[str]]):
        self.keywords: Dict[BumpTier, List[str]] = {tier: [] for tier in TIER_ORDER}
        for tier_name, keywords in rules.items():
            try:
                tier = BumpTier(tier_name.lower())
            except ValueError:
                logger.warning("Ignoring unknown bump tier %r", tier_name)
                continue
            self.keywords[tier] = [keyword.lower() for keyword in keywords if keyword]

    def matches(self, tier: BumpTier, subject: str) -> bool:
        subject = subject.lower()
        unscoped = _SCOPE.sub(r"\1", subject)
        return any(
            keyword in subject or keyword in unscoped for keyword in self.keywords[tier]
        )

    def severity(self, subjects: Iterable[str]) -> BumpTier:
        """Highest tier matched by ``subjects``; stops at the first major match."""
        running = BumpTier.PATCH
        for subject in subjects:
            for tier in TIER_ORDER:
                if not self.matches(tier, subject):
                    continue
                if tier == BumpTier.MAJOR:
                    return BumpTier.MAJOR
                if tier == BumpTier.MINOR:
                    running = BumpTier.MINOR
        return running


class BumpStrategy(ABC):
    """Abstract base class for version bump strategies."""

    @abstractmethod
    def next_version(self, current_version: str, subjects: Sequence[str]) -> str:
        """Return the version that follows ``current_version``."""


class SemanticBumpStrategy(BumpStrategy):
    def __init__(self, rules: BumpRules):
        self.rules = rules

    def next_version(self, current_version: str, subjects: Sequence[str]) -> str:
        tier = self.rules.severity(subjects)
        return str(Version.parse(current_version).bump(tier))


class CalendarBumpStrategy(BumpStrategy):
    def __init__(self, today: Callable[[], date] = date.today):
        self.today = today

    def next_version(self, current_version: str, subjects: Sequence[str]) -> str:
        calendar_version = self.today().strftime("%Y.%m.%d")
        if not Version.is_valid(current_version) or \
                Version.parse(calendar_version) > Version.parse(current_version):
            return calendar_version

        parts = current_version.split(".")
        year_month = parts[:2] if len(parts) >= 2 else calendar_version.split(".")[:2]
        # a non-numeric third component counts from its leading digits, or 0
        patch = leading_int(parts[2] if len(parts) > 2 else "") + 1
        return f"{year_month[0]}.{year_month[1]}.{patch}"


class CustomBumpStrategy(BumpStrategy):
    def next_version(self, current_version: str, subjects: Sequence[str]) -> str:
        parts = current_version.split(".")
        minor = leading_int(parts[1] if len(parts) > 1 else "") + 1
        return f"{parts[0]}.{minor}.0"


class VersionResolver:
    """Computes the next version from the commits since the latest tag."""

    def __init__(
        self,
        vcs: VersionControl,
        strategy: VersionStrategy = VersionStrategy.SEMANTIC,
        bump_rules: Optional[Mapping[str, Iterable[str]]] = None,
        today: Callable[[], date] = date.today,
    ):
        self.vcs = vcs
        self.strategy = VersionStrategy(strategy)
        self.rules = BumpRules(bump_rules or {})
        self.strategies: Dict[VersionStrategy, BumpStrategy] = {
            VersionStrategy.SEMANTIC: SemanticBumpStrategy(self.rules),
            VersionStrategy.CALENDAR: CalendarBumpStrategy(today),
            VersionStrategy.CUSTOM: CustomBumpStrategy(),
        }

    def commit_subjects(self) -> List[str]:
        """Subjects in ``(latest tag, HEAD]``, or the whole history without a tag."""
        try:
            return self.vcs.commit_subjects(self.vcs.latest_tag())
        except VersionControlError as e:
            logger.warning("Error reading commit history: %s", e)
            return []

    def resolve(
        self,
        current_version: str,
        subjects: Optional[Sequence[str]] = None,
        strategy: Optional[VersionStrategy] = None,
    ) -> str:
        if subjects is None:
            subjects = self.commit_subjects()
        chosen = self.strategies[VersionStrategy(strategy or self.strategy)]
        return chosen.next_version(current_version, list(subjects))

    def is_release_needed(self, current_version: str) -> bool:
        return self.resolve(current_version) != current_version
