"""Pytest fixtures for git-branchdates tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock
import pytest
import git

from git_branchdates.models.branch import Branch
from git_branchdates.models.indicators import IndicatorCatalogue
from git_branchdates.models.status import StatusMatrix


def git_env(timestamp):
    """Environment pinning both author and committer time (also used for reflog entries)."""
    date = f"@{timestamp} +0000"
    return {"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date}


def commit_file(repo, name, content, message, timestamp):
    """Write a file and commit it at a fixed time."""
    path = Path(repo.working_dir) / name
    path.write_text(content)
    repo.git.add(name)
    repo.git.commit("-m", message, env=git_env(timestamp))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'prs': True,
        'ci': True,
        'refresh': False,
        'github_token': 'test_token_for_testing',
    }


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main at t=1000."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit", 1000)

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def dated_repo(git_repo, temp_dir):
    """
    Repository with two branches:

    - main: commit at t=1000, pushed to a bare origin with upstream set
    - feature: commit at t=2000, checked out at t=3000, no upstream, HEAD
    """
    repo = git_repo

    origin_path = temp_dir / "origin.git"
    git.Repo.init(origin_path, bare=True).close()
    repo.create_remote('origin', str(origin_path))
    repo.git.push('-u', 'origin', 'main', env=git_env(1000))

    repo.git.branch('feature')
    repo.git.checkout('feature', env=git_env(3000))
    commit_file(repo, "feature.txt", "Feature content\n", "Add feature", 2000)

    yield repo


@pytest.fixture
def full_catalogue():
    """Catalogue with PR and CI keys."""
    return IndicatorCatalogue(pr_enabled=True)


@pytest.fixture
def git_only_catalogue():
    """Catalogue with PR and CI keys pruned."""
    return IndicatorCatalogue(pr_enabled=False)


@pytest.fixture
def matrix(full_catalogue):
    """Empty status matrix over the full catalogue."""
    return StatusMatrix(full_catalogue.order)


@pytest.fixture
def sample_branches():
    """main and feature as in a typical two-branch repository."""
    return {
        "main": Branch(name="main", commit_timestamp=1000),
        "feature": Branch(name="feature", commit_timestamp=2000, checkout_timestamp=3000),
    }


@pytest.fixture
def mock_git_service():
    """Create a mock GitService with a GitHub origin."""
    from git_branchdates.services.git_service import GitService

    service = Mock(spec=GitService)
    service.repo_path = "/fake/repo/path"
    service.get_remote_url = Mock(return_value="git@github.com:test/repo.git")
    service.check_version = Mock(return_value=None)
    return service


@pytest.fixture
def mock_github_service(mock_config, mock_git_service):
    """Create a GitHubService with the API already wired to a mock repository."""
    from git_branchdates.services.github_service import GitHubService

    service = GitHubService(mock_config, mock_git_service)
    service.github_repo = "test/repo"
    service.github = Mock()
    service.gh_repo = Mock()
    return service


def make_pull(state="open", merged=False, draft=False, url="https://github.com/test/repo/pull/1",
              sha="abc123", reviews=(), requested=()):
    """Create a mock PyGithub PullRequest."""
    pr = Mock()
    pr.state = state
    pr.merged = merged
    pr.draft = draft
    pr.html_url = url
    pr.head.sha = sha
    review_mocks = []
    for login, review_state in reviews:
        review = Mock()
        review.user.login = login
        review.state = review_state
        review_mocks.append(review)
    pr.get_reviews.return_value = review_mocks
    users = []
    for login in requested:
        user = Mock()
        user.login = login
        users.append(user)
    pr.get_review_requests.return_value = (users, [])
    return pr
