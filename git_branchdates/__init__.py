"""
git-branchdates - list git branches by date, decorated with status indicators
"""

from .__version__ import __version__
from .core import BranchDates
from .cli.main import main

__all__ = ["BranchDates", "main", "__version__"]
