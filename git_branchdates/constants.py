"""Shared constants for git-branchdates."""

from typing import Dict, Tuple


# Git config namespace for every setting this tool reads
CONFIG_NAMESPACE = "branchdates"

NEGATIVE_PREFIX = "non-"

# Positive status keys in indicator order. The order decides which style wins
# when several held statuses set the same attribute (later keys win).
POSITIVE_KEYS: Tuple[str, ...] = (
    "checked-out",
    "merged",
    "remote-associated",
    "remote-tracking",
    "remote-ahead",
    "remote-behind",
    "remote-synced",
    "remote-mixed",
    "pr-associated",
    "pr-open",
    "pr-draft",
    "pr-closed",
    "pr-merged",
    "pr-review-assigned",
    "pr-review-approved",
    "pr-review-commented",
    "pr-review-changes-requested",
    "ci-pass",
    "ci-pending",
    "ci-fail",
)

# Prefixes of keys that only exist when PR gathering is enabled
PR_KEY_PREFIXES: Tuple[str, ...] = ("pr-", "ci-")

REMOTE_KEY_PREFIX = "remote-"
REVIEW_KEY_PREFIX = "pr-review-"
CI_KEY_PREFIX = "ci-"

# Keys that gate the applicability of their family and are never gated themselves
PR_GATE_KEY = "pr-associated"
REMOTE_GATE_KEY = "remote-tracking"
REMOTE_UNGATED_KEYS: Tuple[str, ...] = ("remote-tracking", "remote-associated")

# Pseudo key of the ignore rules that applies to every status key
IGNORE_ALL_KEY = "all"

# Upstream relation symbols as printed by %(upstream:trackshort)
UPSTREAM_RELATIONS: Dict[str, str] = {
    ">": "remote-ahead",
    "<": "remote-behind",
    "=": "remote-synced",
    "<>": "remote-mixed",
}


# Indicator attributes
class Attr:
    """Attribute names of an indicator."""

    FG = "fg"
    BG = "bg"
    BOLD = "bold"
    UNDERLINE = "underline"
    ITALIC = "italic"
    PREFIX = "prefix"
    PREFIX_COLOR = "prefix-color"
    SUFFIX = "suffix"
    SUFFIX_COLOR = "suffix-color"
    PLAIN_PREFIX = "plain-prefix"
    PLAIN_SUFFIX = "plain-suffix"


COLOR_ATTRIBUTES = (Attr.FG, Attr.BG, Attr.PREFIX_COLOR, Attr.SUFFIX_COLOR)
FLAG_ATTRIBUTES = (Attr.BOLD, Attr.UNDERLINE, Attr.ITALIC)
TEXT_ATTRIBUTES = (Attr.PREFIX, Attr.SUFFIX, Attr.PLAIN_PREFIX, Attr.PLAIN_SUFFIX)
ALL_ATTRIBUTES = COLOR_ATTRIBUTES + FLAG_ATTRIBUTES + TEXT_ATTRIBUTES

# Attributes that make up the leading style of a line, folded in key order
LINE_STYLE_ATTRIBUTES = (Attr.FG, Attr.BG, Attr.BOLD, Attr.UNDERLINE, Attr.ITALIC)

# Values that switch an attribute off entirely
DISABLED_VALUES = ("", "0", "false")


# ANSI escapes
ESC = "\033"
RESET = f"{ESC}[0m"
FLAG_ESCAPES: Dict[str, str] = {
    Attr.BOLD: f"{ESC}[1m",
    Attr.ITALIC: f"{ESC}[3m",
    Attr.UNDERLINE: f"{ESC}[4m",
}
HYPERLINK_OPEN = f"{ESC}]8;;{{url}}{ESC}\\"
HYPERLINK_CLOSE = f"{ESC}]8;;{ESC}\\"

# Reserved indicator entries holding raw escapes rather than status styles;
# "{url}" in the hyperlink opener is replaced by the pull request URL
PSEUDO_INDICATORS: Dict[str, Tuple[str, ...]] = {
    "reset": ("escape",),
    "hyperlink": ("open", "close"),
}

# Legacy SGR color codes accepted as a bare integer
LEGACY_COLOR_RANGE = (30, 107)


# Built-in indicator defaults, written the way a user would write them in git config
DEFAULT_INDICATORS: Dict[str, Dict[str, object]] = {
    "checked-out": {
        Attr.BOLD: "true",
        Attr.PREFIX: "*",
        Attr.PREFIX_COLOR: "#5fd700",
        Attr.PLAIN_PREFIX: "*",
    },
    "merged": {
        Attr.BG: (68, 68, 68),  # gray
    },
    "remote-ahead": {
        Attr.SUFFIX: "↑",
        Attr.SUFFIX_COLOR: "32",
        Attr.PLAIN_SUFFIX: "[ahead]",
    },
    "remote-behind": {
        Attr.SUFFIX: "↓",
        Attr.SUFFIX_COLOR: "33",
        Attr.PLAIN_SUFFIX: "[behind]",
    },
    "remote-mixed": {
        Attr.SUFFIX: "↕",
        Attr.SUFFIX_COLOR: "31",
        Attr.PLAIN_SUFFIX: "[diverged]",
    },
    "non-remote-associated": {
        Attr.ITALIC: "true",
    },
    "pr-open": {
        Attr.SUFFIX: " PR",
        Attr.SUFFIX_COLOR: "#5faf5f",
        Attr.PLAIN_SUFFIX: "[pr-open]",
    },
    "pr-draft": {
        Attr.SUFFIX: " PR",
        Attr.SUFFIX_COLOR: "90",
        Attr.PLAIN_SUFFIX: "[pr-draft]",
    },
    "pr-closed": {
        Attr.SUFFIX: " PR",
        Attr.SUFFIX_COLOR: "#d75f5f",
        Attr.PLAIN_SUFFIX: "[pr-closed]",
    },
    "pr-merged": {
        Attr.FG: "90",
        Attr.SUFFIX: " PR",
        Attr.SUFFIX_COLOR: "#af87d7",
        Attr.PLAIN_SUFFIX: "[pr-merged]",
    },
    "ci-pass": {
        Attr.SUFFIX: " ✔",
        Attr.SUFFIX_COLOR: "32",
        Attr.PLAIN_SUFFIX: "[ci-pass]",
    },
    "ci-pending": {
        Attr.SUFFIX: " …",
        Attr.SUFFIX_COLOR: "33",
        Attr.PLAIN_SUFFIX: "[ci-pending]",
    },
    "ci-fail": {
        Attr.SUFFIX: " ✘",
        Attr.SUFFIX_COLOR: "31",
        Attr.PLAIN_SUFFIX: "[ci-fail]",
    },
}


# Rendering
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M"
COLOR_SEPARATOR = "    "
PLAIN_SEPARATOR = "\t"

# Progress bar only appears when more branches than this are looked up
PROGRESS_THRESHOLD = 5

# Oldest git that understands %(worktreepath) in for-each-ref
MIN_GIT_VERSION = (2, 23)

# Pager defaults, same as git's
DEFAULT_PAGER = "less"
DEFAULT_LESS = "FRX"
