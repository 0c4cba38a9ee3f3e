"""Core orchestration for git-branchdates."""

from .branch_dates import BranchDates, BranchReport

__all__ = ["BranchDates", "BranchReport"]
