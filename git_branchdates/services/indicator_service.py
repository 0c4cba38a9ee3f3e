"""Service resolving the per-status indicator table for a run"""

from typing import Any, Dict, List, Mapping, Optional

from git_branchdates.constants import (
    ALL_ATTRIBUTES,
    COLOR_ATTRIBUTES,
    CONFIG_NAMESPACE,
    DEFAULT_INDICATORS,
    HYPERLINK_CLOSE,
    HYPERLINK_OPEN,
    PSEUDO_INDICATORS,
    RESET,
)
from git_branchdates.formatters.color import Target, compile_attribute
from git_branchdates.logging_config import get_logger
from git_branchdates.models.indicators import IndicatorCatalogue, IndicatorTable

logger = get_logger(__name__)

INDICATOR_SECTION = f"{CONFIG_NAMESPACE}.indicators."


class IndicatorService:
    """Merges built-in indicator defaults with configured overrides."""

    def __init__(
        self,
        catalogue: IndicatorCatalogue,
        defaults: Mapping[str, Mapping[str, Any]] = DEFAULT_INDICATORS,
    ):
        self.catalogue = catalogue
        self.defaults = defaults
        # Every key that could exist, so pruned PR keys are not reported as typos
        self._known_keys = set(IndicatorCatalogue(pr_enabled=True).order)

    def parse_overrides(self, entries: Mapping[str, List[Optional[str]]]) -> Dict[str, Dict[str, Any]]:
        """
        Extract ``branchdates.indicators.<key>.<attribute>`` entries.

        A color attribute given exactly three times is an R, G, B triple;
        otherwise the last value wins. ``reset.escape``, ``hyperlink.open``
        and ``hyperlink.close`` are kept verbatim.

        Args:
            entries: Full config key -> list of values

        Returns:
            Status key -> attribute -> raw value
        """
        overrides: Dict[str, Dict[str, Any]] = {}
        for config_key, values in entries.items():
            if not config_key.startswith(INDICATOR_SECTION) or not values:
                continue
            remainder = config_key[len(INDICATOR_SECTION):]
            if "." not in remainder:
                logger.warning(f"Ignoring indicator setting without attribute: {config_key}")
                continue
            key, attribute = remainder.rsplit(".", 1)
            attribute = attribute.lower()

            if key in PSEUDO_INDICATORS:
                if attribute not in PSEUDO_INDICATORS[key]:
                    logger.warning(f"Ignoring unknown indicator attribute '{attribute}' for '{key}'")
                    continue
                overrides.setdefault(key, {})[attribute] = values[-1] or ""
                continue

            if key not in self._known_keys:
                logger.warning(f"Ignoring indicator setting for unknown status '{key}'")
                continue
            if attribute not in ALL_ATTRIBUTES:
                logger.warning(f"Ignoring unknown indicator attribute '{attribute}' for '{key}'")
                continue

            if attribute in COLOR_ATTRIBUTES and len(values) == 3 and None not in values:
                value: Any = list(values)
            else:
                value = values[-1]
            # A key given without a value reads as true
            overrides.setdefault(key, {})[attribute] = "true" if value is None else value
        return overrides

    def resolve(
        self,
        overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
        target: Target = Target.ANSI,
    ) -> IndicatorTable:
        """
        Build the complete indicator table.

        An override replaces the default of the same attribute; a disabling
        value removes the attribute instead of falling back to the default.

        Raises:
            ConfigurationError: If any value cannot be compiled
        """
        overrides = overrides or {}
        styles: Dict[str, Dict[str, str]] = {}

        for key in self.catalogue.order:
            raw: Dict[str, Any] = dict(self.defaults.get(key, {}))
            raw.update(overrides.get(key, {}))

            compiled: Dict[str, str] = {}
            for attribute, value in raw.items():
                token = compile_attribute(f"{INDICATOR_SECTION}{key}.{attribute}", attribute, value, target)
                if token is None:
                    logger.debug(f"Indicator {key}.{attribute} disabled")
                    continue
                compiled[attribute] = token
            if compiled:
                styles[key] = compiled

        reset = overrides.get("reset", {})
        hyperlink = overrides.get("hyperlink", {})

        logger.debug(f"Resolved indicators for {len(styles)} of {len(self.catalogue)} status keys")
        return IndicatorTable(
            order=self.catalogue.order,
            styles=styles,
            reset=reset.get("escape", RESET),
            hyperlink_open=hyperlink.get("open", HYPERLINK_OPEN),
            hyperlink_close=hyperlink.get("close", HYPERLINK_CLOSE),
        )
