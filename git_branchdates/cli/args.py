"""Command-line argument parsing for git-branchdates."""

import argparse
from typing import List, Optional

from git_branchdates.__version__ import __version__


def _add_switch(parser: argparse.ArgumentParser, name: str, help_on: str, help_off: str) -> None:
    """Add a --name/--no-name pair that leaves the git config value alone when absent."""
    dest = name.replace("-", "_")
    group = parser.add_mutually_exclusive_group()
    group.add_argument(f"--{name}", dest=dest, action="store_true", default=None, help=help_on)
    group.add_argument(f"--no-{name}", dest=dest, action="store_false", help=help_off)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="git-branchdates",
        description="List local git branches by date, decorated with status indicators",
        epilog="Defaults come from git config (branchdates.*). Pull request lookups need "
        "GITHUB_TOKEN or 'branchdates.githubtoken' (scopes: repo or public_repo)",
    )
    _add_switch(parser, "color", "Always use colors", "Never use colors")
    _add_switch(parser, "pager", "Always page the output", "Never page the output")
    _add_switch(parser, "prs", "Look up pull requests on GitHub", "Skip pull request lookups")
    _add_switch(parser, "ci", "Look up CI results of open pull requests", "Skip CI lookups")
    parser.add_argument(
        "--reverse", action="store_true", default=None, help="Show the most recent branch first"
    )
    parser.add_argument(
        "--links",
        action="store_true",
        default=None,
        help="Hyperlink branch names to their pull requests (colored output only)",
    )
    parser.add_argument(
        "--json",
        dest="structured",
        action="store_true",
        help="Print timestamps and statuses as JSON instead of text lines",
    )
    parser.add_argument(
        "--refresh", action="store_true", help="Ignore cached merged pull requests"
    )
    parser.add_argument(
        "--date-format",
        metavar="FMT",
        help="strftime format for the date column (default: branchdates.dateformat or %%Y-%%m-%%d %%H:%%M)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-branchdates {__version__}")

    return parser.parse_args(argv)
