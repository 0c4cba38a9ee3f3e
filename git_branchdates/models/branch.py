"""Branch model and the raw records the status matrix is built from"""
from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Branch:
    """A local branch and its timing information."""
    name: str
    commit_timestamp: int
    checkout_timestamp: Optional[int] = None

    @property
    def effective_timestamp(self) -> int:
        """Later of the last commit and last checkout; ties keep the commit time."""
        if self.checkout_timestamp is not None and self.checkout_timestamp > self.commit_timestamp:
            return self.checkout_timestamp
        return self.commit_timestamp


@dataclass
class TrackingRecord:
    """One line of the for-each-ref timing feed."""
    commit_timestamp: int
    name: str
    relation: str = ""  # %(upstream:trackshort), empty without upstream
    worktree_path: str = ""


class PRState(Enum):
    """State of a pull request."""
    OPEN = "open"
    DRAFT = "draft"
    CLOSED = "closed"
    MERGED = "merged"


class ReviewAnnotation:
    """Annotations a reviewer can carry."""
    APPROVED = "approved"
    COMMENTED = "commented"
    CHANGES_REQUESTED = "changes-requested"


@dataclass
class Reviewer:
    """A reviewer of a pull request; annotation is None while only requested."""
    login: str
    annotation: Optional[str] = None


@dataclass
class PullRequestRecord:
    """Pull request facts for one branch."""
    url: str
    state: Optional[PRState] = None
    reviewers: List[Reviewer] = field(default_factory=list)
    head_sha: Optional[str] = None
