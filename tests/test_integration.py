"""End-to-end tests running the whole pipeline against real repositories"""
import io
import json
from unittest.mock import Mock, patch

import pytest

from git_branchdates.cli.main import main
from git_branchdates.core import BranchDates
from git_branchdates.exceptions import ConfigurationError
from git_branchdates.formatters.date import format_timestamp
from git_branchdates.models.branch import PRState, PullRequestRecord
from git_branchdates.services.cache_service import CacheService

MERGED_BG = "\033[48;2;68;68;68m"


def statuses(report, branch):
    return {key for key in report.matrix.keys() if report.matrix.holds(key, branch)}


class TestTwoBranchScenario:
    """main (t=1000, merged, synced) and feature (t=2000, checked out at t=3000, no upstream)."""

    def test_statuses(self, dated_repo):
        report = BranchDates(dated_repo.working_dir, stdout=io.StringIO()).collect()

        assert statuses(report, "main") == {
            "non-checked-out",
            "merged",
            "remote-associated",
            "remote-tracking",
            "non-remote-ahead",
            "non-remote-behind",
            "remote-synced",
            "non-remote-mixed",
        }
        assert statuses(report, "feature") == {
            "checked-out",
            "non-merged",
            "non-remote-associated",
            "non-remote-tracking",
        }

    def test_effective_timestamps(self, dated_repo):
        report = BranchDates(dated_repo.working_dir, stdout=io.StringIO()).collect()
        timestamps = {branch.name: branch.effective_timestamp for branch in report.branches}
        assert timestamps == {"main": 1000, "feature": 3000}

    def test_plain_text(self, dated_repo):
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream).run()
        assert stream.getvalue() == (
            f"{format_timestamp(1000)}\t  main    \n"
            f"{format_timestamp(3000)}\t* feature \n"
        )

    def test_reverse(self, dated_repo):
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream, reverse=True).run()
        lines = stream.getvalue().splitlines()
        assert "feature" in lines[0]
        assert "main" in lines[1]

    def test_structured(self, dated_repo):
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream, structured=True, color=True).run()
        document = json.loads(stream.getvalue())
        assert document["branches"] == {"main": 1000, "feature": 3000}
        assert document["statuses"]["merged"] == ["main"]
        assert document["statuses"]["non-merged"] == ["feature"]
        assert document["statuses"]["non-remote-synced"] == []
        assert "pr-associated" not in document["statuses"]

    def test_color_uses_merged_background(self, dated_repo):
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream, color=True).run()
        main_line = stream.getvalue().splitlines()[0]
        assert main_line.startswith(MERGED_BG)
        assert "    " in main_line

    def test_false_override_removes_background(self, dated_repo):
        with dated_repo.config_writer() as writer:
            writer.set_value('branchdates "indicators.merged"', "bg", "false")
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream, color=True).run()
        assert MERGED_BG not in stream.getvalue()
        assert "48;2" not in stream.getvalue()

    def test_rgb_background_from_three_values(self, dated_repo):
        for component in ("10", "20", "200"):
            dated_repo.git.config("--add", "branchdates.indicators.merged.bg", component)
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream, color=True).run()
        assert stream.getvalue().splitlines()[0].startswith("\033[48;2;10;20;200m")

    def test_configured_reset(self, dated_repo):
        dated_repo.git.config("branchdates.indicators.reset.escape", "<END>")
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream, color=True).run()
        assert "main   <END> " in stream.getvalue()

    def test_bad_style_aborts_before_output(self, dated_repo):
        with dated_repo.config_writer() as writer:
            writer.set_value('branchdates "indicators.merged"', "bg", "grey")
        stream = io.StringIO()
        with pytest.raises(ConfigurationError):
            BranchDates(dated_repo.working_dir, stdout=stream).run()
        assert stream.getvalue() == ""

    def test_ignore_rules(self, dated_repo):
        with dated_repo.config_writer() as writer:
            writer.set_value('branchdates "ignore"', "merged", "main")
        report = BranchDates(dated_repo.working_dir, stdout=io.StringIO()).collect()
        assert not report.matrix.holds("merged", "main")
        assert report.matrix.holds("remote-synced", "main")

    def test_ignore_all_hides_branch(self, dated_repo):
        with dated_repo.config_writer() as writer:
            writer.set_value('branchdates "ignore"', "all", "feature")
        stream = io.StringIO()
        BranchDates(dated_repo.working_dir, stdout=stream).run()
        assert "feature" not in stream.getvalue()
        assert "main" in stream.getvalue()


class TestPullRequests:
    """Pipeline with PR gathering switched on and GitHub replaced by a double."""

    @pytest.fixture
    def dates(self, dated_repo, temp_dir):
        dates = BranchDates(dated_repo.working_dir, stdout=io.StringIO(), prs=True)
        github = Mock()
        github.get_pull_request.side_effect = lambda branch: (
            PullRequestRecord(url="https://github.com/test/repo/pull/1", state=PRState.OPEN)
            if branch == "feature" else None
        )
        github.get_ci_states.return_value = ["pass", "fail"]
        dates.github_service = github
        dates.cache_service = CacheService(dated_repo.working_dir, cache_dir=temp_dir / "cache")
        return dates

    def test_statuses(self, dates):
        report = dates.collect()
        assert {"pr-associated", "pr-open", "ci-fail", "non-ci-pass", "non-pr-review-assigned"} <= statuses(report, "feature")
        assert "non-pr-associated" in statuses(report, "main")
        assert "non-pr-open" not in statuses(report, "main")
        assert report.urls == {"feature": "https://github.com/test/repo/pull/1"}
        dates.github_service.close.assert_called_once()

    def test_plain_suffixes(self, dates):
        dates.run()
        assert dates.stdout.getvalue().splitlines()[1].endswith("* feature [pr-open][ci-fail]")

    def test_no_ci(self, dates):
        dates.config.ci = False
        report = dates.collect()
        assert not any(key.startswith(("ci-", "non-ci-")) for key in statuses(report, "feature"))
        dates.github_service.get_ci_states.assert_not_called()


class TestCli:
    """Test the command line entry point."""

    @pytest.fixture(autouse=True)
    def no_logging_setup(self):
        with patch("git_branchdates.cli.main.setup_logging"):
            yield

    def test_json(self, dated_repo, monkeypatch, capsys):
        monkeypatch.chdir(dated_repo.working_dir)
        assert main(["--json"]) == 0
        document = json.loads(capsys.readouterr().out)
        assert document["branches"]["feature"] == 3000

    def test_text(self, dated_repo, monkeypatch, capsys):
        monkeypatch.chdir(dated_repo.working_dir)
        assert main(["--no-color", "--no-pager"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0].endswith("main    ")

    def test_configuration_error(self, dated_repo, monkeypatch, capsys):
        with dated_repo.config_writer() as writer:
            writer.set_value("branchdates", "reverse", "sometimes")
        monkeypatch.chdir(dated_repo.working_dir)
        assert main([]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "branchdates.reverse" in captured.err

    def test_outside_repository(self, temp_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)
        assert main([]) == 1
        assert "not a git repository" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "git-branchdates" in capsys.readouterr().out
