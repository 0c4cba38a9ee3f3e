"""Utility functions for git-branchdates.

This package provides utility modules:
- pager: Streaming report output through the user's pager
"""

from .pager import is_interactive, open_output, pager_command

__all__ = ["is_interactive", "open_output", "pager_command"]
