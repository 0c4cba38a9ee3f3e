"""Indicator key catalogue and the resolved per-key style table."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from git_branchdates.constants import (
    HYPERLINK_CLOSE,
    HYPERLINK_OPEN,
    NEGATIVE_PREFIX,
    POSITIVE_KEYS,
    PR_KEY_PREFIXES,
    RESET,
)


class IndicatorCatalogue:
    """Ordered, immutable catalogue of status keys for one run.

    Each positive key is immediately followed by its ``non-`` partner. When
    PR gathering is disabled every PR and CI key is left out.
    """

    def __init__(self, pr_enabled: bool = True, positive_keys: Tuple[str, ...] = POSITIVE_KEYS):
        self.pr_enabled = pr_enabled
        positives = tuple(
            key for key in positive_keys
            if pr_enabled or not key.startswith(PR_KEY_PREFIXES)
        )
        self._positive_keys = positives
        self._order = tuple(
            name for key in positives for name in (key, NEGATIVE_PREFIX + key)
        )

    @property
    def order(self) -> Tuple[str, ...]:
        return self._order

    @property
    def positive_keys(self) -> Tuple[str, ...]:
        return self._positive_keys

    @staticmethod
    def is_negative(key: str) -> bool:
        return key.startswith(NEGATIVE_PREFIX)

    @staticmethod
    def negative_of(key: str) -> str:
        return NEGATIVE_PREFIX + key

    @staticmethod
    def positive_of(key: str) -> str:
        return key[len(NEGATIVE_PREFIX):] if key.startswith(NEGATIVE_PREFIX) else key

    def __contains__(self, key: str) -> bool:
        return key in self._order

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)


@dataclass
class IndicatorTable:
    """Resolved style attributes per status key, plus reset and hyperlink templates."""

    order: Tuple[str, ...]
    styles: Dict[str, Dict[str, str]] = field(default_factory=dict)
    reset: str = RESET
    hyperlink_open: str = HYPERLINK_OPEN
    hyperlink_close: str = HYPERLINK_CLOSE

    def get(self, key: str, attribute: str, default: Optional[str] = None) -> Optional[str]:
        return self.styles.get(key, {}).get(attribute, default)

    def keys_with(self, attribute: str) -> List[str]:
        """Keys, in indicator order, that define the given attribute."""
        return [key for key in self.order if attribute in self.styles.get(key, {})]

    def hyperlink(self, url: str) -> Tuple[str, str]:
        return self.hyperlink_open.replace("{url}", url), self.hyperlink_close
