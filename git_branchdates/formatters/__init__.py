"""Formatting utilities for git-branchdates.

This package provides the pieces a report line is built from:
- color: Style value compilation into escape sequences
- date: Timestamp formatting
- links: Terminal hyperlink escapes
"""

from .color import Target, compile_attribute, compile_color, compile_flag, is_disabled
from .date import format_timestamp
from .links import hyperlink_parts

__all__ = [
    # Color
    "Target",
    "compile_attribute",
    "compile_color",
    "compile_flag",
    "is_disabled",
    # Date
    "format_timestamp",
    # Links
    "hyperlink_parts",
]
