"""Custom exceptions for git-branchdates"""

from typing import Any, Optional


class GitBranchDatesError(Exception):
    """Base exception for all git-branchdates errors."""
    pass


class ConfigurationError(GitBranchDatesError):
    """Exception raised for malformed configuration or option values."""

    def __init__(self, key: str, value: Any = None, message: Optional[str] = None):
        self.key = key
        self.value = value
        self.message = message

        error_msg = f"Invalid configuration for '{key}'"
        if value is not None:
            error_msg += f" (value {value!r})"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitOperationError(GitBranchDatesError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitHubAPIError(GitBranchDatesError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class EnvironmentCheckError(GitBranchDatesError):
    """Exception raised when the environment cannot support PR lookups."""

    def __init__(self, check: str, message: str):
        self.check = check
        self.message = message
        super().__init__(f"Environment check '{check}' failed: {message}")


class PullRequestLookupError(GitHubAPIError):
    """Exception raised when every pull request lookup of a run failed."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            "get_pulls",
            f"all {attempts} pull request lookup(s) failed although the environment looks usable",
        )
