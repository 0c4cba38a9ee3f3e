"""Date and time formatting utilities."""

from datetime import datetime

from git_branchdates.constants import DEFAULT_DATE_FORMAT


def format_timestamp(timestamp: int, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """
    Format a unix timestamp in local time.

    Args:
        timestamp: Seconds since the epoch
        date_format: strftime format string

    Returns:
        Formatted date string
    """
    return datetime.fromtimestamp(timestamp).strftime(date_format)
