"""Git operations service"""
import git
from typing import Dict, List, Optional, Set, Tuple

from git_branchdates.constants import CONFIG_NAMESPACE, MIN_GIT_VERSION
from git_branchdates.exceptions import EnvironmentCheckError, GitOperationError
from git_branchdates.logging_config import get_logger
from git_branchdates.models.branch import Branch, TrackingRecord

logger = get_logger(__name__)

TRACKING_FORMAT = (
    "%(committerdate:unix)%09%(refname:short)%09%(upstream:trackshort)%09%(worktreepath)"
)
CHECKOUT_PREFIX = "checkout: moving from "


def parse_tracking_line(line: str) -> Optional[TrackingRecord]:
    """Parse one for-each-ref line of the timing feed."""
    fields = line.split("\t")
    if len(fields) < 2 or not fields[0].strip().isdigit():
        logger.debug(f"Skipping malformed for-each-ref line: {line!r}")
        return None
    fields += [""] * (4 - len(fields))
    return TrackingRecord(
        commit_timestamp=int(fields[0]),
        name=fields[1],
        relation=fields[2].strip(),
        worktree_path=fields[3].strip(),
    )


def parse_checkout_message(message: str) -> Optional[str]:
    """Branch switched to by a reflog message, or None for other events."""
    if not message.startswith(CHECKOUT_PREFIX):
        return None
    _, separator, target = message[len(CHECKOUT_PREFIX):].rpartition(" to ")
    if not separator or not target:
        return None
    return target.strip()


def parse_config_entries(output: str) -> Dict[str, List[Optional[str]]]:
    """
    Parse ``git config --null --get-regexp`` output.

    Entries end in NUL and the key is separated from its value by a newline,
    so values may themselves span lines. A bare key has value None.
    """
    entries: Dict[str, List[Optional[str]]] = {}
    for record in output.split("\0"):
        if not record:
            continue
        key, separator, value = record.partition("\n")
        entries.setdefault(key, []).append(value if separator else None)
    return entries


def build_branches(records: List[TrackingRecord], checkouts: List[Tuple[int, str]]) -> Dict[str, Branch]:
    """
    Combine the timing feed with checkout history.

    The newest checkout event per branch is kept; events for branches that
    no longer exist are dropped.
    """
    branches = {
        record.name: Branch(name=record.name, commit_timestamp=record.commit_timestamp)
        for record in records
    }
    for timestamp, name in checkouts:
        branch = branches.get(name)
        if branch is None:
            continue
        if branch.checkout_timestamp is None or timestamp > branch.checkout_timestamp:
            branch.checkout_timestamp = timestamp
    return branches


class GitService:
    """Service for reading branch facts from a git repository."""

    def __init__(self, repo_path: str):
        """Initialize the service.

        Args:
            repo_path: Path inside the git repository

        Raises:
            GitOperationError: If the path is not inside a git repository
        """
        try:
            self.repo = git.Repo(repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise GitOperationError("open_repository", f"not a git repository: {e}")
        self.repo_path = self.repo.working_tree_dir or self.repo.git_dir
        logger.info(f"Git service initialized for {self.repo_path}")

    def get_tracking_records(self) -> List[TrackingRecord]:
        """Commit time, upstream relation and worktree of every local branch."""
        try:
            output = self.repo.git.for_each_ref(f"--format={TRACKING_FORMAT}", "refs/heads")
        except git.exc.GitCommandError as e:
            self.check_version()
            raise GitOperationError("for-each-ref", str(e))
        records = [parse_tracking_line(line) for line in output.splitlines() if line]
        records = [record for record in records if record is not None]
        logger.debug(f"Found {len(records)} local branches")
        return records

    def get_checkout_events(self) -> List[Tuple[int, str]]:
        """(timestamp, branch) for every checkout recorded in the HEAD reflog."""
        events = []
        for entry in self.repo.head.log():
            target = parse_checkout_message(entry.message)
            if target:
                events.append((entry.time[0], target))
        logger.debug(f"Found {len(events)} checkout events")
        return events

    def get_current_branch(self) -> Optional[str]:
        """Name of the checked out branch, None on a detached HEAD."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return None

    def get_merged_branches(self) -> List[str]:
        """Local branches whose tips are reachable from HEAD."""
        try:
            output = self.repo.git.branch("--merged", "HEAD", "--format=%(refname:short)")
        except git.exc.GitCommandError as e:
            raise GitOperationError("branch --merged", str(e))
        return [line.strip() for line in output.splitlines() if line.strip()]

    def get_remote_branches(self) -> Dict[str, List[str]]:
        """Branch names visible on each remote, from local remote-tracking refs."""
        remotes: Dict[str, List[str]] = {}
        for remote in self.repo.remotes:
            try:
                output = self.repo.git.for_each_ref(
                    "--format=%(refname:lstrip=3)", f"refs/remotes/{remote.name}"
                )
            except git.exc.GitCommandError as e:
                logger.debug(f"Error listing branches of remote {remote.name}: {e}")
                continue
            remotes[remote.name] = [
                name for name in output.splitlines() if name and name != "HEAD"
            ]
        return remotes

    def get_remote_branch_names(self) -> Set[str]:
        """Union of branch names over all remotes."""
        return {name for names in self.get_remote_branches().values() for name in names}

    def get_remote_url(self, remote_name: str = "origin") -> Optional[str]:
        """URL of a remote, or None if it does not exist."""
        try:
            return self.repo.remote(remote_name).url
        except ValueError:
            return None

    def read_config(self, local_only: bool = False) -> Dict[str, List[Optional[str]]]:
        """
        Read every ``branchdates.*`` config entry.

        Args:
            local_only: Read the repository's own config file only

        Returns:
            Full config key -> values in the order git reports them
        """
        args = ["--local"] if local_only else []
        args += ["--null", "--get-regexp", rf"^{CONFIG_NAMESPACE}\."]
        try:
            output = self.repo.git.config(*args)
        except git.exc.GitCommandError as e:
            # Exit status 1 just means no matching keys
            if e.status == 1:
                return {}
            raise GitOperationError("config", str(e))
        return parse_config_entries(output)

    def check_version(self) -> None:
        """Fail when git is too old for the for-each-ref fields used here."""
        version = self.repo.git.version_info
        if tuple(version[:2]) < MIN_GIT_VERSION:
            wanted = ".".join(str(part) for part in MIN_GIT_VERSION)
            found = ".".join(str(part) for part in version)
            raise EnvironmentCheckError("git-version", f"git {wanted} or newer is required, found {found}")
