"""Configuration handling for git-branchdates"""

from dataclasses import dataclass, fields
from typing import Dict, List, Optional

from git_branchdates.constants import CONFIG_NAMESPACE, DEFAULT_DATE_FORMAT
from git_branchdates.exceptions import ConfigurationError

TRUE_VALUES = ("true", "yes", "on", "1")
FALSE_VALUES = ("false", "no", "off", "0", "")
AUTO_VALUES = ("auto",)
ALWAYS_VALUES = ("always",)
NEVER_VALUES = ("never",)


def parse_bool(key: str, value: Optional[str]) -> bool:
    """Parse a git boolean. A key given without a value means true."""
    if value is None:
        return True
    text = value.strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigurationError(key, value, "expected a boolean (true/false/yes/no/on/off/1/0)")


def parse_mode(key: str, value: Optional[str]) -> Optional[bool]:
    """Parse a color/pager mode: a boolean, or auto/always/never. Auto is None."""
    if value is not None:
        text = value.strip().lower()
        if text in AUTO_VALUES:
            return None
        if text in ALWAYS_VALUES:
            return True
        if text in NEVER_VALUES:
            return False
    return parse_bool(key, value)


@dataclass
class Config:
    """Configuration for git-branchdates with validation."""

    # Rendering
    date_format: str = DEFAULT_DATE_FORMAT
    color: Optional[bool] = None  # None = auto (stdout is a terminal)
    pager: Optional[bool] = None  # None = auto (stdout is a terminal)
    reverse: bool = False
    links: bool = False
    structured: bool = False

    # Pull request and CI gathering
    prs: bool = False
    ci: bool = True
    refresh: bool = False  # Ignore the pr-merged cache when reading
    github_token: Optional[str] = None

    # Diagnostics
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_date_format()
        self._validate_modes()

    def _validate_date_format(self):
        """Validate date_format is not empty."""
        if not self.date_format or not self.date_format.strip():
            raise ConfigurationError(f"{CONFIG_NAMESPACE}.dateformat", self.date_format, "cannot be empty")

    def _validate_modes(self):
        """Validate tri-state modes are booleans or None."""
        for name in ("color", "pager"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, bool):
                raise ConfigurationError(f"{CONFIG_NAMESPACE}.{name}", value, "must be a boolean or auto")

    @property
    def ci_enabled(self) -> bool:
        """CI lookups only happen on top of PR lookups."""
        return self.prs and self.ci

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @classmethod
    def from_git_config(cls, entries: Dict[str, List[Optional[str]]], **overrides) -> "Config":
        """
        Build a Config from ``branchdates.*`` git config entries.

        Args:
            entries: Full config key -> list of values (last value wins)
            **overrides: Values from the command line; None means "not given"

        Returns:
            Validated Config

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        def last(name: str):
            values = entries.get(f"{CONFIG_NAMESPACE}.{name}")
            return (True, values[-1]) if values else (False, None)

        settings: dict = {}
        found, value = last("dateformat")
        if found and value is not None:
            settings["date_format"] = value
        for name in ("color", "pager"):
            found, value = last(name)
            if found:
                settings[name] = parse_mode(f"{CONFIG_NAMESPACE}.{name}", value)
        for name in ("reverse", "links", "prs", "ci"):
            found, value = last(name)
            if found:
                settings[name] = parse_bool(f"{CONFIG_NAMESPACE}.{name}", value)
        found, value = last("githubtoken")
        if found and value:
            settings["github_token"] = value

        settings.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(settings)
