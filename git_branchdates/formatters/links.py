"""Terminal hyperlink formatting utilities."""

from typing import Optional, Tuple

from git_branchdates.models.indicators import IndicatorTable


def hyperlink_parts(table: IndicatorTable, url: Optional[str], enabled: bool) -> Tuple[str, str]:
    """
    Opening and closing hyperlink escapes for a branch name.

    Args:
        table: Resolved indicator table holding the hyperlink templates
        url: Pull request URL of the branch, if known
        enabled: Whether hyperlinks were requested for this run

    Returns:
        (open, close) escapes, both empty when no link should be drawn
    """
    if not enabled or not url:
        return "", ""
    return table.hyperlink(url)
