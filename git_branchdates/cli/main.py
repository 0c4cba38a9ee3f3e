"""Command-line interface for git-branchdates"""

import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_branchdates.cli.args import parse_args
from git_branchdates.core import BranchDates
from git_branchdates.exceptions import GitBranchDatesError
from git_branchdates.logging_config import setup_logging

console = Console(stderr=True)

OVERRIDE_OPTIONS = (
    "color",
    "pager",
    "prs",
    "ci",
    "reverse",
    "links",
    "structured",
    "refresh",
    "date_format",
    "verbose",
    "debug",
)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        overrides = {name: getattr(parsed_args, name) for name in OVERRIDE_OPTIONS}
        dates = BranchDates(os.getcwd(), **overrides)

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in dates.config.to_dict().items():
                if key == "github_token" and value:
                    value = "***"
                console.print(f"  {key}: {value}")

        dates.run()
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except GitBranchDatesError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False, soft_wrap=True)
        if parsed_args.debug:
            console.print_exception()
        return 1
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]", highlight=False, soft_wrap=True)
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
