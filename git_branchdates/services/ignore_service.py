"""Service applying configured ignore rules to the status matrix"""

import re
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Set

from git_branchdates.constants import CONFIG_NAMESPACE, IGNORE_ALL_KEY
from git_branchdates.logging_config import get_logger
from git_branchdates.models.status import StatusMatrix

logger = get_logger(__name__)

IGNORE_SECTION = f"{CONFIG_NAMESPACE}.ignore."


class IgnoreService:
    """Removes branches from status keys according to exclusion lists.

    Each key's list is unioned with the ``all`` list; names are matched
    exactly against the whole branch name.
    """

    def __init__(self, rules: Mapping[str, Iterable[str]]):
        """Initialize the service.

        Args:
            rules: Status key (or "all") -> branch names to exclude
        """
        self.rules: Dict[str, List[str]] = {key: list(names) for key, names in rules.items()}
        self._global = self.rules.get(IGNORE_ALL_KEY, [])

    @classmethod
    def from_git_config(cls, entries: Mapping[str, List[Optional[str]]]) -> "IgnoreService":
        """Build rules from ``branchdates.ignore.<key>`` entries (multi-valued)."""
        rules: Dict[str, List[str]] = {}
        for config_key, values in entries.items():
            if not config_key.startswith(IGNORE_SECTION):
                continue
            key = config_key[len(IGNORE_SECTION):]
            rules.setdefault(key, []).extend(value for value in values if value)
        return cls(rules)

    def pattern_for(self, key: str) -> Optional[Pattern]:
        """Whole-name pattern for a key, or None when nothing is ignored for it."""
        names = self.rules.get(key, []) + self._global
        if not names:
            return None
        alternatives = "|".join(re.escape(name) for name in dict.fromkeys(names))
        return re.compile(f"(?:{alternatives})")

    def hidden_branches(self, branches: Iterable[str]) -> Set[str]:
        """Branches excluded from every key, which are not rendered at all."""
        if not self._global:
            return set()
        return set(branches).intersection(self._global)

    def apply(self, matrix: StatusMatrix) -> None:
        """Remove every ignored branch from the keys it is ignored for."""
        for key in matrix.keys():
            pattern = self.pattern_for(key)
            if pattern is None:
                continue
            removed = matrix.remove_matching(key, lambda name: pattern.fullmatch(name) is not None)
            if removed:
                logger.debug(f"Ignored {sorted(removed)} for {key}")
