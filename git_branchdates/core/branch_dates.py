"""Core functionality for git-branchdates"""

import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO, Union

from git_branchdates.config import Config
from git_branchdates.formatters.color import Target
from git_branchdates.logging_config import get_logger
from git_branchdates.models.branch import Branch
from git_branchdates.models.indicators import IndicatorCatalogue, IndicatorTable
from git_branchdates.models.status import StatusMatrix
from git_branchdates.services.branch_status_service import BranchStatusService
from git_branchdates.services.cache_service import CacheService
from git_branchdates.services.deduction_service import DeductionService
from git_branchdates.services.display_service import DisplayService, display_structured
from git_branchdates.services.git_service import GitService, build_branches
from git_branchdates.services.github_service import GitHubService
from git_branchdates.services.ignore_service import IgnoreService
from git_branchdates.services.indicator_service import IndicatorService
from git_branchdates.utils.pager import is_interactive, open_output

logger = get_logger(__name__)


@dataclass
class BranchReport:
    """Everything the renderer needs, after aggregation, deduction and filtering."""
    branches: List[Branch]
    matrix: StatusMatrix
    urls: Dict[str, str] = field(default_factory=dict)


class BranchDates:
    """Gathers branch facts for a repository and renders the report."""

    def __init__(
        self,
        repo_path: str,
        config: Optional[Union[Config, dict]] = None,
        stdout: Optional[TextIO] = None,
        **overrides,
    ):
        """Initialize BranchDates.

        Args:
            repo_path: Path inside a git repository
            config: Ready-made configuration; read from git config when omitted
            stdout: Stream the report goes to (default sys.stdout)
            **overrides: Command line values layered over git config
        """
        self.git_service = GitService(repo_path)
        self.config_entries = self.git_service.read_config()
        if config is None:
            self.config = Config.from_git_config(self.config_entries, **overrides)
        elif isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.stdout = stdout or sys.stdout

        self.catalogue = IndicatorCatalogue(pr_enabled=self.config.prs)
        self.indicator_service = IndicatorService(self.catalogue)
        self.deduction_service = DeductionService(self.catalogue)
        self.cache_service = CacheService(self.git_service.repo_path)
        self.github_service: Optional[GitHubService] = (
            GitHubService(self.config, self.git_service) if self.config.prs else None
        )

    def color_enabled(self) -> bool:
        if self.config.color is not None:
            return self.config.color
        return is_interactive(self.stdout)

    def pager_enabled(self) -> bool:
        if self.config.pager is not None:
            return self.config.pager
        return is_interactive(self.stdout)

    def resolve_indicators(self, target: Target) -> IndicatorTable:
        """Indicator table for this run; raises ConfigurationError on bad values."""
        overrides = self.indicator_service.parse_overrides(self.config_entries)
        return self.indicator_service.resolve(overrides, target)

    def collect(self) -> BranchReport:
        """Run aggregation, deduction and ignore filtering."""
        records = self.git_service.get_tracking_records()
        branches = build_branches(records, self.git_service.get_checkout_events())
        matrix = StatusMatrix(self.catalogue.order)

        aggregator = BranchStatusService(matrix, branches)
        aggregator.add_tracking_facts(records)
        aggregator.add_merge_facts(
            self.git_service.get_merged_branches(), self.git_service.get_current_branch()
        )
        aggregator.add_remote_facts(self.git_service.get_remote_branch_names())

        if self.github_service is not None:
            try:
                aggregator.gather_pull_requests(
                    [record.name for record in records],
                    self.github_service,
                    self.cache_service,
                    use_cache=not self.config.refresh,
                    gather_ci=self.config.ci_enabled,
                )
            finally:
                self.github_service.close()

        self.deduction_service.deduce(matrix, branches)

        # Ignore rules are only honoured from the repository's own config
        ignore_service = IgnoreService.from_git_config(self.git_service.read_config(local_only=True))
        ignore_service.apply(matrix)
        hidden = ignore_service.hidden_branches(branches)
        if hidden:
            logger.debug(f"Hiding ignored branches: {sorted(hidden)}")

        visible = [branch for name, branch in branches.items() if name not in hidden]
        return BranchReport(branches=visible, matrix=matrix, urls=aggregator.pr_urls)

    def run(self) -> None:
        """Produce the report: structured JSON, or text lines through the pager."""
        color = self.color_enabled()
        # Resolve before gathering so configuration errors abort before any output
        table = self.resolve_indicators(Target.ANSI if color else Target.PLAIN)
        report = self.collect()

        if self.config.structured:
            display_structured(self.stdout, report.branches, report.matrix)
            return

        display_service = DisplayService(
            table, color=color, date_format=self.config.date_format, links=self.config.links
        )
        with open_output(self.pager_enabled(), self.stdout) as stream:
            display_service.display(
                stream, report.branches, report.matrix, report.urls, reverse=self.config.reverse
            )
