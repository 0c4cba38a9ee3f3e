"""Service deducing non-<status> keys from the positive status matrix"""

from typing import Iterable

from git_branchdates.constants import (
    CI_KEY_PREFIX,
    PR_GATE_KEY,
    REMOTE_GATE_KEY,
    REMOTE_KEY_PREFIX,
    REMOTE_UNGATED_KEYS,
    REVIEW_KEY_PREFIX,
)
from git_branchdates.logging_config import get_logger
from git_branchdates.models.indicators import IndicatorCatalogue
from git_branchdates.models.status import StatusMatrix

logger = get_logger(__name__)

# A review status means nothing once the PR or the branch itself is done
REVIEW_BLOCKING_KEYS = ("pr-closed", "pr-merged", "merged")


class DeductionService:
    """Sets the negative partner of every applicable positive key a branch lacks."""

    def __init__(self, catalogue: IndicatorCatalogue):
        self.catalogue = catalogue
        self._ci_keys = [key for key in catalogue.positive_keys if key.startswith(CI_KEY_PREFIX)]

    def is_applicable(self, matrix: StatusMatrix, key: str, branch: str) -> bool:
        """
        Whether a positive key, or its negation, makes sense for a branch.

        PR keys need a PR, upstream relation keys need an upstream, review
        keys need a PR that is still in review, and CI keys need CI to have
        been evaluated at all.
        """
        if key.startswith("pr-") and key != PR_GATE_KEY:
            if not matrix.holds(PR_GATE_KEY, branch):
                return False
        if key.startswith(REMOTE_KEY_PREFIX) and key not in REMOTE_UNGATED_KEYS:
            if not matrix.holds(REMOTE_GATE_KEY, branch):
                return False
        if key.startswith(REVIEW_KEY_PREFIX):
            if any(matrix.holds(blocking, branch) for blocking in REVIEW_BLOCKING_KEYS):
                return False
        if key.startswith(CI_KEY_PREFIX):
            if not any(matrix.holds(ci_key, branch) for ci_key in self._ci_keys):
                return False
        return True

    def deduce(self, matrix: StatusMatrix, branches: Iterable[str]) -> None:
        """
        Add non-<key> for every applicable positive key a branch does not hold.

        Inapplicable pairs end up with neither side held, so review statuses
        gathered for a PR that has since closed or merged are dropped.
        """
        added = 0
        for branch in branches:
            for key in self.catalogue.positive_keys:
                if not self.is_applicable(matrix, key, branch):
                    matrix.discard(key, branch)
                    continue
                if not matrix.holds(key, branch):
                    matrix.add(self.catalogue.negative_of(key), branch)
                    added += 1
        logger.debug(f"Deduced {added} negative statuses")
