"""Service aggregating raw branch facts into the status matrix"""

from contextlib import nullcontext
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from rich.console import Console
from rich.progress import Progress

from git_branchdates.constants import PROGRESS_THRESHOLD, UPSTREAM_RELATIONS
from git_branchdates.exceptions import GitHubAPIError, PullRequestLookupError
from git_branchdates.logging_config import get_logger
from git_branchdates.models.branch import PRState, PullRequestRecord, ReviewAnnotation, TrackingRecord
from git_branchdates.models.status import StatusMatrix

if TYPE_CHECKING:
    from git_branchdates.services.cache_service import CacheService
    from git_branchdates.services.github_service import GitHubService

console = Console(stderr=True)
logger = get_logger(__name__)

PR_STATE_KEYS = {
    PRState.OPEN: "pr-open",
    PRState.DRAFT: "pr-draft",
    PRState.CLOSED: "pr-closed",
    PRState.MERGED: "pr-merged",
}

# Precedence of CI signals, strongest first
CI_STATE_KEYS = (
    ("fail", "ci-fail"),
    ("pending", "ci-pending"),
    ("pass", "ci-pass"),
)
CI_DEFAULT_KEY = "ci-pending"


class BranchStatusService:
    """Builds the positive half of the status matrix from independent sources."""

    def __init__(self, matrix: StatusMatrix, branches: Iterable[str]):
        """Initialize the service.

        Args:
            matrix: Matrix to populate
            branches: Names of every known local branch
        """
        self.matrix = matrix
        self.branches = set(branches)
        self.pr_urls: Dict[str, str] = {}

    def add_tracking_facts(self, records: Iterable[TrackingRecord]) -> None:
        """Set checked-out, remote-tracking and at most one upstream relation."""
        for record in records:
            if record.worktree_path:
                self.matrix.add("checked-out", record.name)
            if not record.relation:
                continue
            self.matrix.add("remote-tracking", record.name)
            relation_key = UPSTREAM_RELATIONS.get(record.relation)
            if relation_key:
                self.matrix.add(relation_key, record.name)
            else:
                logger.debug(f"Unknown upstream relation {record.relation!r} for {record.name}")

    def add_merge_facts(self, merged: Iterable[str], current_branch: Optional[str]) -> None:
        """Set merged for every branch merged into the current reference but itself."""
        for name in merged:
            if name == current_branch or name not in self.branches:
                continue
            self.matrix.add("merged", name)

    def add_remote_facts(self, remote_branch_names: Iterable[str]) -> None:
        """Set remote-associated for branches whose name exists on any remote.

        Names are compared verbatim, so a local branch tracking a remote
        branch of a different name is not associated, and an unrelated
        remote branch that happens to share the name is.
        """
        for name in self.branches.intersection(remote_branch_names):
            self.matrix.add("remote-associated", name)

    def add_pull_request_facts(self, branch: str, record: PullRequestRecord) -> None:
        """Set PR association, state and review statuses from one record."""
        self.matrix.add("pr-associated", branch)
        if record.url:
            self.pr_urls[branch] = record.url
        if record.state is not None:
            self.matrix.add(PR_STATE_KEYS[record.state], branch)

        reviewers = record.reviewers
        if not reviewers:
            return
        self.matrix.add("pr-review-assigned", branch)
        annotations = [reviewer.annotation for reviewer in reviewers]
        if ReviewAnnotation.COMMENTED in annotations:
            self.matrix.add("pr-review-commented", branch)
        if ReviewAnnotation.CHANGES_REQUESTED in annotations:
            self.matrix.add("pr-review-changes-requested", branch)
        if all(annotation == ReviewAnnotation.APPROVED for annotation in annotations):
            self.matrix.add("pr-review-approved", branch)

    def add_ci_facts(self, branch: str, states: Iterable[str]) -> None:
        """Set exactly one CI key; no explicit signal reads as pending."""
        seen = set(states)
        for state, key in CI_STATE_KEYS:
            if state in seen:
                self.matrix.add(key, branch)
                return
        self.matrix.add(CI_DEFAULT_KEY, branch)

    def gather_pull_requests(
        self,
        branches: List[str],
        github_service: "GitHubService",
        cache_service: Optional["CacheService"] = None,
        use_cache: bool = True,
        gather_ci: bool = True,
    ) -> None:
        """
        Look up pull requests (and CI for open/draft ones) one branch at a time.

        Cached pr-merged entries short-circuit the lookup. Failed lookups are
        skipped; if lookups were attempted and none succeeded, the environment
        is checked and the run fails.

        Raises:
            EnvironmentCheckError: If the environment cannot support lookups
            PullRequestLookupError: If every lookup failed in a sane environment
        """
        cached = cache_service.load_cache() if cache_service and use_cache else {}
        to_query = []
        for branch in branches:
            if branch in cached:
                logger.debug(f"Using cached merged PR for {branch}")
                self.matrix.add("pr-associated", branch)
                self.matrix.add("pr-merged", branch)
                self.pr_urls[branch] = cached[branch]
            else:
                to_query.append(branch)

        attempts = 0
        successes = 0
        with self._progress(len(to_query), "Looking up pull requests...") as advance:
            for branch in to_query:
                attempts += 1
                try:
                    record = github_service.get_pull_request(branch)
                except GitHubAPIError as e:
                    logger.debug(f"Skipping {branch}: {e}")
                else:
                    successes += 1
                    if record is not None:
                        self.add_pull_request_facts(branch, record)
                advance()

        if attempts and not successes:
            github_service.check_environment()
            raise PullRequestLookupError(attempts)

        logger.info(f"Pull request lookups: {successes} of {attempts} succeeded, {len(cached)} cached")

        if gather_ci:
            self.gather_ci(github_service)

        if cache_service is not None:
            merged = {
                branch: self.pr_urls.get(branch, "")
                for branch in sorted(self.matrix.members("pr-merged"))
            }
            cache_service.save_cache(merged)

    def gather_ci(self, github_service: "GitHubService") -> None:
        """Look up CI for every branch with an open or draft pull request."""
        candidates = sorted(self.matrix.members("pr-open") | self.matrix.members("pr-draft"))
        with self._progress(len(candidates), "Looking up CI status...") as advance:
            for branch in candidates:
                try:
                    states = github_service.get_ci_states(branch)
                except GitHubAPIError as e:
                    logger.debug(f"No CI status for {branch}: {e}")
                else:
                    self.add_ci_facts(branch, states)
                advance()

    def _progress(self, total: int, description: str):
        """Progress bar on stderr when enough branches are looked up interactively."""
        if total <= PROGRESS_THRESHOLD or not console.is_terminal:
            return nullcontext(lambda: None)
        return _ProgressAdvance(total, description)


class _ProgressAdvance:
    """Context manager yielding a callable that advances a transient progress bar."""

    def __init__(self, total: int, description: str):
        self.progress = Progress(console=console, transient=True)
        self.total = total
        self.description = description

    def __enter__(self):
        self.progress.__enter__()
        task = self.progress.add_task(self.description, total=self.total)
        return lambda: self.progress.update(task, advance=1)

    def __exit__(self, *exc_info):
        return self.progress.__exit__(*exc_info)
