"""Tests for GitService"""
from pathlib import Path

import pytest

from conftest import commit_file, git_env
from git_branchdates.exceptions import GitOperationError
from git_branchdates.models.branch import TrackingRecord
from git_branchdates.services.git_service import (
    GitService,
    build_branches,
    parse_checkout_message,
    parse_config_entries,
    parse_tracking_line,
)


class TestParsers:
    """Test parsing of raw git output."""

    def test_tracking_line(self):
        record = parse_tracking_line("1000\tmain\t=\t/src/repo")
        assert record == TrackingRecord(1000, "main", "=", "/src/repo")

    def test_tracking_line_without_upstream(self):
        assert parse_tracking_line("2000\tfeature\t\t") == TrackingRecord(2000, "feature", "", "")

    def test_tracking_line_malformed(self):
        assert parse_tracking_line("garbage") is None
        assert parse_tracking_line("notanumber\tmain") is None

    @pytest.mark.parametrize("message,target", [
        ("checkout: moving from main to feature", "feature"),
        ("checkout: moving from feature to main", "main"),
        ("checkout: moving from 1a2b3c to topic/x", "topic/x"),
        ("commit: Add feature", None),
        ("reset: moving to HEAD~1", None),
    ])
    def test_checkout_message(self, message, target):
        assert parse_checkout_message(message) == target

    def test_config_entries(self):
        output = "branchdates.color\nalways\0branchdates.ignore.merged\nmain\0branchdates.ignore.merged\ndevelop\0branchdates.reverse\0"
        assert parse_config_entries(output) == {
            "branchdates.color": ["always"],
            "branchdates.ignore.merged": ["main", "develop"],
            "branchdates.reverse": [None],
        }

    def test_build_branches_keeps_latest_checkout(self):
        records = [TrackingRecord(1000, "main"), TrackingRecord(2000, "feature")]
        checkouts = [(1500, "feature"), (3000, "feature"), (2500, "feature"), (9999, "deleted")]
        branches = build_branches(records, checkouts)
        assert set(branches) == {"main", "feature"}
        assert branches["main"].checkout_timestamp is None
        assert branches["feature"].checkout_timestamp == 3000
        assert branches["feature"].effective_timestamp == 3000


class TestGitServiceInit:
    """Test GitService initialization."""

    def test_init_with_repo_path(self, git_repo):
        service = GitService(git_repo.working_dir)
        assert service.repo_path == git_repo.working_dir

    def test_init_from_subdirectory(self, git_repo):
        subdir = Path(git_repo.working_dir) / "nested"
        subdir.mkdir()
        service = GitService(str(subdir))
        assert service.repo_path == git_repo.working_dir

    def test_init_with_invalid_path(self, temp_dir):
        with pytest.raises(GitOperationError):
            GitService(str(temp_dir / "nonexistent"))

    def test_init_outside_repository(self, temp_dir):
        with pytest.raises(GitOperationError):
            GitService(str(temp_dir))


class TestGitServiceFeeds:
    """Test the raw fact feeds against a real repository."""

    def test_tracking_records(self, dated_repo):
        records = {r.name: r for r in GitService(dated_repo.working_dir).get_tracking_records()}
        assert set(records) == {"main", "feature"}
        assert records["main"].commit_timestamp == 1000
        assert records["main"].relation == "="
        assert records["main"].worktree_path == ""
        assert records["feature"].commit_timestamp == 2000
        assert records["feature"].relation == ""
        assert records["feature"].worktree_path

    def test_ahead_of_upstream(self, dated_repo):
        dated_repo.git.checkout("main", env=git_env(4000))
        commit_file(dated_repo, "more.txt", "More\n", "More", 5000)
        records = {r.name: r for r in GitService(dated_repo.working_dir).get_tracking_records()}
        assert records["main"].relation == ">"

    def test_checkout_events(self, dated_repo):
        events = GitService(dated_repo.working_dir).get_checkout_events()
        assert (3000, "feature") in events
        assert all(name != "main" for _, name in events)

    def test_current_branch(self, dated_repo):
        assert GitService(dated_repo.working_dir).get_current_branch() == "feature"

    def test_detached_head(self, dated_repo):
        dated_repo.git.checkout("--detach", env=git_env(4000))
        assert GitService(dated_repo.working_dir).get_current_branch() is None

    def test_merged_branches(self, dated_repo):
        merged = GitService(dated_repo.working_dir).get_merged_branches()
        assert set(merged) == {"main", "feature"}

    def test_remote_branches(self, dated_repo):
        service = GitService(dated_repo.working_dir)
        assert service.get_remote_branches() == {"origin": ["main"]}
        assert service.get_remote_branch_names() == {"main"}

    def test_remote_url(self, dated_repo, temp_dir):
        service = GitService(dated_repo.working_dir)
        assert service.get_remote_url() == str(temp_dir / "origin.git")
        assert service.get_remote_url("upstream") is None


class TestReadConfig:
    """Test reading branchdates.* settings."""

    def test_local_settings(self, git_repo):
        with git_repo.config_writer() as writer:
            writer.set_value("branchdates", "color", "never")
            writer.set_value('branchdates "ignore"', "merged", "main")
        entries = GitService(git_repo.working_dir).read_config(local_only=True)
        assert entries == {
            "branchdates.color": ["never"],
            "branchdates.ignore.merged": ["main"],
        }

    def test_indicator_subsection(self, git_repo):
        with git_repo.config_writer() as writer:
            writer.set_value('branchdates "indicators.pr-review-approved"', "suffix", "ok")
        entries = GitService(git_repo.working_dir).read_config(local_only=True)
        assert entries["branchdates.indicators.pr-review-approved.suffix"] == ["ok"]

    def test_multiline_value(self, git_repo):
        git_repo.git.config("branchdates.indicators.merged.suffix", " one\ntwo")
        git_repo.git.config("branchdates.reverse", "true")
        entries = GitService(git_repo.working_dir).read_config(local_only=True)
        assert entries == {
            "branchdates.indicators.merged.suffix": [" one\ntwo"],
            "branchdates.reverse": ["true"],
        }

    def test_three_values_kept_in_order(self, git_repo):
        for component in ("10", "20", "200"):
            git_repo.git.config("--add", "branchdates.indicators.merged.bg", component)
        entries = GitService(git_repo.working_dir).read_config(local_only=True)
        assert entries["branchdates.indicators.merged.bg"] == ["10", "20", "200"]

    def test_no_settings(self, git_repo):
        assert GitService(git_repo.working_dir).read_config(local_only=True) == {}
