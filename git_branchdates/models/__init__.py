"""Data models for git-branchdates."""

from .branch import Branch, TrackingRecord, PRState, Reviewer, PullRequestRecord
from .status import StatusMatrix
from .indicators import IndicatorCatalogue, IndicatorTable

__all__ = [
    "Branch",
    "TrackingRecord",
    "PRState",
    "Reviewer",
    "PullRequestRecord",
    "StatusMatrix",
    "IndicatorCatalogue",
    "IndicatorTable",
]
