"""Services that gather, deduce, filter and render branch statuses."""

from .branch_status_service import BranchStatusService
from .cache_service import CacheService
from .deduction_service import DeductionService
from .display_service import DisplayService, display_structured
from .git_service import GitService
from .github_service import GitHubService
from .ignore_service import IgnoreService
from .indicator_service import IndicatorService

__all__ = [
    "BranchStatusService",
    "CacheService",
    "DeductionService",
    "DisplayService",
    "display_structured",
    "GitService",
    "GitHubService",
    "IgnoreService",
    "IndicatorService",
]
