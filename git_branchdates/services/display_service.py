"""Display service: renders the status matrix as report lines or JSON"""
import json
from typing import Dict, Iterable, Iterator, List, Optional, TextIO

from rich.cells import cell_len

from git_branchdates.constants import (
    COLOR_SEPARATOR,
    DEFAULT_DATE_FORMAT,
    LINE_STYLE_ATTRIBUTES,
    PLAIN_SEPARATOR,
    Attr,
)
from git_branchdates.formatters import format_timestamp, hyperlink_parts
from git_branchdates.logging_config import get_logger
from git_branchdates.models.branch import Branch
from git_branchdates.models.indicators import IndicatorTable
from git_branchdates.models.status import StatusMatrix

logger = get_logger(__name__)


def sort_branches(branches: Iterable[Branch], reverse: bool = False) -> List[Branch]:
    """Order by effective timestamp, oldest first; ties keep their input order."""
    return sorted(branches, key=lambda b: b.effective_timestamp, reverse=reverse)


def structured_document(branches: Iterable[Branch], matrix: StatusMatrix) -> dict:
    """Machine-readable view: effective timestamps plus the full status matrix."""
    return {
        "branches": {branch.name: branch.effective_timestamp for branch in branches},
        "statuses": matrix.to_dict(),
    }


class DisplayService:
    """Composes one report line per branch for the ANSI or plain target."""

    def __init__(
        self,
        table: IndicatorTable,
        color: bool,
        date_format: str = DEFAULT_DATE_FORMAT,
        links: bool = False,
    ):
        self.table = table
        self.color = color
        self.date_format = date_format
        self.links = links and color
        self.separator = COLOR_SEPARATOR if color else PLAIN_SEPARATOR
        prefix_attr = Attr.PREFIX if color else Attr.PLAIN_PREFIX
        self._prefix_keys = table.keys_with(prefix_attr)
        self._prefix_attr = prefix_attr
        self._suffix_attr = Attr.SUFFIX if color else Attr.PLAIN_SUFFIX

    def leading_style(self, held: List[str]) -> str:
        """Fold the line style of every held key in indicator order; later keys win."""
        style = ""
        for key in held:
            for attribute in LINE_STYLE_ATTRIBUTES:
                style += self.table.get(key, attribute, "")
        return style

    def prefixes(self, held: List[str], leading: str) -> str:
        """One column per key that has a prefix; blank of equal width when not held."""
        columns = []
        for key in self._prefix_keys:
            text = self.table.get(key, self._prefix_attr, "")
            if key not in held:
                columns.append(" " * cell_len(text))
            elif self.color:
                prefix_color = self.table.get(key, Attr.PREFIX_COLOR)
                if prefix_color:
                    text = f"{prefix_color}{text}{self.table.reset}{leading}"
                columns.append(text)
            else:
                columns.append(text)
        if not columns:
            return ""
        return "".join(columns) + " "

    def suffixes(self, held: List[str]) -> str:
        parts = []
        for key in held:
            text = self.table.get(key, self._suffix_attr)
            if not text:
                continue
            if self.color:
                suffix_color = self.table.get(key, Attr.SUFFIX_COLOR)
                if suffix_color:
                    text = f"{suffix_color}{text}{self.table.reset}"
            parts.append(text)
        return "".join(parts)

    def render_line(self, branch: Branch, matrix: StatusMatrix, width: int, url: Optional[str] = None) -> str:
        """
        Compose one report line.

        Shape: style, date, separator, prefixes, linked name, padding, reset,
        a space, then the suffixes.
        """
        held = matrix.statuses_of(branch.name, self.table.order)
        date = format_timestamp(branch.effective_timestamp, self.date_format)
        padding = " " * max(width - cell_len(branch.name), 0)

        if self.color:
            leading = self.leading_style(held)
            link_open, link_close = hyperlink_parts(self.table, url, self.links)
            reset = self.table.reset
        else:
            leading = link_open = link_close = reset = ""

        return (
            f"{leading}{date}{self.separator}{self.prefixes(held, leading)}"
            f"{link_open}{branch.name}{link_close}{padding}{reset} {self.suffixes(held)}\n"
        )

    def render_lines(
        self,
        branches: Iterable[Branch],
        matrix: StatusMatrix,
        urls: Optional[Dict[str, str]] = None,
        reverse: bool = False,
    ) -> Iterator[str]:
        """Report lines for every branch in effective-timestamp order."""
        ordered = sort_branches(branches, reverse=reverse)
        width = max((cell_len(branch.name) for branch in ordered), default=0)
        urls = urls or {}
        for branch in ordered:
            yield self.render_line(branch, matrix, width, urls.get(branch.name))

    def display(
        self,
        stream: TextIO,
        branches: Iterable[Branch],
        matrix: StatusMatrix,
        urls: Optional[Dict[str, str]] = None,
        reverse: bool = False,
    ) -> None:
        count = 0
        for line in self.render_lines(branches, matrix, urls, reverse):
            stream.write(line)
            count += 1
        logger.debug(f"Rendered {count} branches ({'color' if self.color else 'plain'})")


def display_structured(stream: TextIO, branches: Iterable[Branch], matrix: StatusMatrix) -> None:
    """Write the structured document as a single JSON object."""
    json.dump(structured_document(branches, matrix), stream, indent=2, sort_keys=True)
    stream.write("\n")
