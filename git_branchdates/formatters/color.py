"""Compile configured style values into terminal escape sequences."""

import re
from enum import Enum
from typing import Any, Optional, Sequence

from git_branchdates.constants import (
    COLOR_ATTRIBUTES,
    DISABLED_VALUES,
    ESC,
    FLAG_ATTRIBUTES,
    FLAG_ESCAPES,
    LEGACY_COLOR_RANGE,
    Attr,
)
from git_branchdates.exceptions import ConfigurationError

_HEX_COLOR = re.compile(r"#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")
_RGB_TRIPLE = re.compile(r"(\d{1,3})[\s,]+(\d{1,3})[\s,]+(\d{1,3})")
_INTEGER = re.compile(r"\d+")


class Target(Enum):
    """Rendering target a style is compiled for."""
    ANSI = "ansi"
    PLAIN = "plain"


def is_disabled(value: Any) -> bool:
    """True for the values that switch an attribute off: "", 0 and false."""
    if value is None or value is False:
        return True
    if isinstance(value, (list, tuple)):
        return False
    return str(value).strip().lower() in DISABLED_VALUES


def rgb_escape(red: int, green: int, blue: int, background: bool = False) -> str:
    """24-bit SGR escape for a foreground or background color."""
    layer = 48 if background else 38
    return f"{ESC}[{layer};2;{red};{green};{blue}m"


def _checked_rgb(components: Sequence[Any], key: str, value: Any) -> tuple:
    try:
        rgb = tuple(int(c) for c in components)
    except (TypeError, ValueError):
        raise ConfigurationError(key, value, "RGB components must be integers")
    if any(c < 0 or c > 255 for c in rgb):
        raise ConfigurationError(key, value, "RGB components must be between 0 and 255")
    return rgb


def compile_color(value: Any, key: str, background: bool = False, target: Target = Target.ANSI) -> str:
    """
    Compile a color value.

    Accepted forms, in order: a literal escape sequence, ``#RRGGBB``, a
    3-element sequence, a legacy SGR code in [30, 107], or three integers
    separated by commas and/or spaces.

    Args:
        value: Configured value
        key: Configuration key, used in error messages
        background: Emit a background (48) instead of foreground (38) color
        target: Plain target validates the value but renders nothing

    Returns:
        Escape sequence (empty string for the plain target)

    Raises:
        ConfigurationError: If the value is not a recognised color
    """
    if isinstance(value, (list, tuple)):
        if len(value) != 3:
            raise ConfigurationError(key, value, "RGB value needs exactly three components")
        escape = rgb_escape(*_checked_rgb(value, key, value), background=background)
        return escape if target is Target.ANSI else ""

    text = str(value).strip()
    hex_match = _HEX_COLOR.fullmatch(text)
    rgb_match = _RGB_TRIPLE.fullmatch(text)
    if text.startswith(ESC):
        escape = text
    elif hex_match:
        escape = rgb_escape(*(int(part, 16) for part in hex_match.groups()), background=background)
    elif _INTEGER.fullmatch(text):
        code = int(text)
        low, high = LEGACY_COLOR_RANGE
        if not low <= code <= high:
            raise ConfigurationError(key, value, f"color codes must be between {low} and {high}")
        escape = f"{ESC}[{code}m"
    elif rgb_match:
        escape = rgb_escape(*_checked_rgb(rgb_match.groups(), key, value), background=background)
    else:
        raise ConfigurationError(
            key, value, "expected an escape sequence, #RRGGBB, 'R,G,B' or a color code"
        )
    return escape if target is Target.ANSI else ""


def compile_flag(attribute: str, target: Target = Target.ANSI) -> str:
    """Fixed escape of a bold/underline/italic flag; presence means enabled."""
    return FLAG_ESCAPES[attribute] if target is Target.ANSI else ""


def compile_attribute(key: str, attribute: str, value: Any, target: Target = Target.ANSI) -> Optional[str]:
    """
    Compile one indicator attribute.

    Returns None when the value disables the attribute, so callers drop it.
    """
    if is_disabled(value):
        return None
    if attribute in COLOR_ATTRIBUTES:
        return compile_color(value, key, background=attribute == Attr.BG, target=target)
    if attribute in FLAG_ATTRIBUTES:
        return compile_flag(attribute, target)
    return str(value)
