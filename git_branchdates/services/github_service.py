"""GitHub API integration service"""

import os
from typing import Dict, List, Optional, TYPE_CHECKING, Union
from urllib.parse import urlparse

from github import Auth, BadCredentialsException, Github, GithubException, UnknownObjectException

from git_branchdates.exceptions import EnvironmentCheckError, GitHubAPIError
from git_branchdates.logging_config import get_logger
from git_branchdates.models.branch import PRState, PullRequestRecord, ReviewAnnotation, Reviewer

if TYPE_CHECKING:
    from github.PullRequest import PullRequest
    from github.Repository import Repository
    from git_branchdates.config import Config
    from git_branchdates.services.git_service import GitService

logger = get_logger(__name__)

REVIEW_ANNOTATIONS = {
    "APPROVED": ReviewAnnotation.APPROVED,
    "COMMENTED": ReviewAnnotation.COMMENTED,
    "CHANGES_REQUESTED": ReviewAnnotation.CHANGES_REQUESTED,
}

CHECK_RUN_PASS = ("success", "neutral", "skipped")
CHECK_RUN_FAIL = ("failure", "timed_out", "action_required", "cancelled")
COMMIT_STATUS_STATES = {
    "success": "pass",
    "pending": "pending",
    "failure": "fail",
    "error": "fail",
}


def parse_github_repo(remote_url: str) -> Optional[str]:
    """Extract ``owner/repo`` from a GitHub remote URL, None for other hosts."""
    if "github.com" not in remote_url:
        return None
    if remote_url.startswith("git@"):
        # Handle SSH URL format (git@github.com:org/repo.git)
        path = remote_url.split("github.com:", 1)[1]
    else:
        # Handle HTTPS URL format (https://github.com/org/repo.git)
        path = urlparse(remote_url).path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    return path or None


def check_run_state(status: Optional[str], conclusion: Optional[str]) -> str:
    """Map a check run to fail/pending/pass."""
    if status != "completed" or not conclusion:
        return "pending"
    if conclusion in CHECK_RUN_PASS:
        return "pass"
    if conclusion in CHECK_RUN_FAIL:
        return "fail"
    return "pending"


class GitHubService:
    """Looks up pull request and CI facts per branch through the GitHub API."""

    def __init__(self, config: Union["Config", dict], git_service: "GitService"):
        """Initialize the service.

        The API connection is set up on first use, so a missing token only
        matters once lookups are actually attempted.
        """
        self.config = config
        self.git_service = git_service
        self.github_token = config.get("github_token") or os.environ.get("GITHUB_TOKEN")
        self.github_repo: Optional[str] = None
        self.github: Optional[Github] = None
        self.gh_repo: Optional["Repository"] = None
        self._head_shas: Dict[str, str] = {}
        self._setup_error: Optional[GitHubAPIError] = None
        self._environment_error: Optional[EnvironmentCheckError] = None
        self._environment_checked = False

    def setup_github_api(self, remote_url: str) -> None:
        """Setup GitHub API access for the repository behind a remote URL.

        Raises:
            GitHubAPIError: If the remote is not on GitHub, no token is set, or the repo is unreachable
        """
        github_repo = parse_github_repo(remote_url)
        if not github_repo:
            raise GitHubAPIError("setup", f"not a GitHub remote: {remote_url}")
        if not self.github_token:
            raise GitHubAPIError("setup", "no GitHub token configured")
        try:
            self.github = Github(auth=Auth.Token(self.github_token))
            self.gh_repo = self.github.get_repo(github_repo)
        except (GithubException, OSError) as e:
            raise GitHubAPIError("get_repo", str(e))
        self.github_repo = github_repo
        logger.debug(f"[GitHub] GitHub integration enabled for: {github_repo}")

    def _ensure_api(self) -> "Repository":
        if self._setup_error is not None:
            raise self._setup_error
        if self.gh_repo is None:
            try:
                remote_url = self.git_service.get_remote_url()
                if not remote_url:
                    raise GitHubAPIError("setup", "repository has no 'origin' remote")
                self.setup_github_api(remote_url)
            except GitHubAPIError as e:
                self._setup_error = e
                raise
        assert self.gh_repo is not None
        return self.gh_repo

    def get_pull_request(self, branch_name: str) -> Optional[PullRequestRecord]:
        """
        Most recent pull request whose head is the branch.

        Returns:
            PullRequestRecord, or None when the branch has no pull request

        Raises:
            GitHubAPIError: If the lookup itself failed
        """
        gh_repo = self._ensure_api()
        assert self.github_repo is not None
        owner = self.github_repo.split("/")[0]
        try:
            pulls = gh_repo.get_pulls(state="all", head=f"{owner}:{branch_name}")
            pr = next(iter(pulls), None)
            if pr is None:
                logger.debug(f"[GitHub] No pull request for {branch_name}")
                return None
            record = PullRequestRecord(
                url=pr.html_url,
                state=self._pull_state(pr),
                reviewers=self._reviewers(pr),
                head_sha=pr.head.sha,
            )
            self._head_shas[branch_name] = record.head_sha
        except (GithubException, OSError) as e:
            raise GitHubAPIError("get_pulls", f"{branch_name}: {e}")
        logger.debug(f"[GitHub] {branch_name}: {record.state.value if record.state else '?'} {record.url}")
        return record

    @staticmethod
    def _pull_state(pr: "PullRequest") -> PRState:
        if pr.merged:
            return PRState.MERGED
        if pr.state == "closed":
            return PRState.CLOSED
        if pr.draft:
            return PRState.DRAFT
        return PRState.OPEN

    @staticmethod
    def _reviewers(pr: "PullRequest") -> List[Reviewer]:
        """Latest review annotation per reviewer, plus still-requested reviewers."""
        latest: Dict[str, Optional[str]] = {}
        for review in pr.get_reviews():
            if review.user is None or review.state == "PENDING":
                continue
            latest[review.user.login] = REVIEW_ANNOTATIONS.get(review.state)

        users, teams = pr.get_review_requests()
        for user in users:
            latest.setdefault(user.login, None)
        for team in teams:
            latest.setdefault(team.slug, None)

        return [Reviewer(login=login, annotation=annotation) for login, annotation in latest.items()]

    def get_ci_states(self, branch_name: str) -> List[str]:
        """
        fail/pending/pass tokens for every check on the pull request's head commit.

        Raises:
            GitHubAPIError: If the branch has no looked-up PR or the lookup failed
        """
        head_sha = self._head_shas.get(branch_name)
        if head_sha is None:
            raise GitHubAPIError("get_commit", f"{branch_name}: no pull request looked up")
        gh_repo = self._ensure_api()
        try:
            commit = gh_repo.get_commit(head_sha)
            states = [check_run_state(run.status, run.conclusion) for run in commit.get_check_runs()]
            for status in commit.get_combined_status().statuses:
                states.append(COMMIT_STATUS_STATES.get(status.state, "pending"))
        except (GithubException, OSError) as e:
            raise GitHubAPIError("get_commit", f"{branch_name}: {e}")
        logger.debug(f"[GitHub] CI for {branch_name}: {states}")
        return states

    def check_environment(self) -> None:
        """
        Verify git, remote, token and API access, once per run.

        Raises:
            EnvironmentCheckError: Naming the first check that failed
        """
        if not self._environment_checked:
            self._environment_checked = True
            try:
                self._run_environment_checks()
            except EnvironmentCheckError as e:
                self._environment_error = e
        if self._environment_error is not None:
            raise self._environment_error

    def _run_environment_checks(self) -> None:
        self.git_service.check_version()

        remote_url = self.git_service.get_remote_url()
        if not remote_url:
            raise EnvironmentCheckError("github-remote", "repository has no 'origin' remote")
        github_repo = parse_github_repo(remote_url)
        if not github_repo:
            raise EnvironmentCheckError("github-remote", f"'origin' is not a GitHub remote: {remote_url}")

        if not self.github_token:
            raise EnvironmentCheckError(
                "github-token",
                "set GITHUB_TOKEN or 'git config branchdates.githubtoken <token>'",
            )

        github = self.github or Github(auth=Auth.Token(self.github_token))
        try:
            login = github.get_user().login
        except BadCredentialsException:
            raise EnvironmentCheckError("authentication", "GitHub rejected the configured token")
        except Exception as e:
            raise EnvironmentCheckError("connectivity", f"cannot reach the GitHub API: {e}")

        try:
            github.get_repo(github_repo)
        except UnknownObjectException:
            raise EnvironmentCheckError("repository", f"{login} cannot access {github_repo}")
        logger.debug(f"[GitHub] Environment looks usable for {login} on {github_repo}")

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            try:
                self.github.close()
                logger.debug("[GitHub] Closed GitHub API connection")
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")
