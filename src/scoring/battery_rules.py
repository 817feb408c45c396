"""
Battery rules for instruments that mix score types under one battery name.

A rule is data: an ordered list of composite-name patterns plus the tag to
assign on a match and the tag to assign otherwise.  The classifier walks
the rule; it holds no battery-specific branches of its own.

Rule evaluation order for one scale name:
  1. exact (normalized) match against ``subtest_names`` → subtest tag
  2. first matching ``composite_name_patterns`` entry  → composite tag
  3. no match                                          → subtest tag
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType

from src.errors import ConfigurationError

from .config import BATTERY_RULES, SCORE_TYPE_TAGS
from .lookup import normalize_scale_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatteryRule:
    """Name-matching rule for one mixed-score-type battery."""

    battery_id: str
    composite_name_patterns: tuple[str, ...]
    default_tag_for_subtests: str
    default_tag_for_composites: str
    subtest_names: frozenset[str] = field(default_factory=frozenset)
    _compiled: tuple[re.Pattern, ...] = field(
        default=(), init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        compiled = tuple(
            re.compile(pattern, re.IGNORECASE)
            for pattern in self.composite_name_patterns
        )
        object.__setattr__(self, "_compiled", compiled)
        object.__setattr__(
            self,
            "subtest_names",
            frozenset(normalize_scale_name(n) for n in self.subtest_names),
        )

    def is_composite(self, scale_name: str) -> bool:
        """True when ``scale_name`` is a composite under this rule."""
        if normalize_scale_name(scale_name) in self.subtest_names:
            return False
        return any(pattern.search(str(scale_name)) for pattern in self._compiled)

    def tag_for(self, scale_name: str) -> str:
        """Score-type tag this rule assigns to ``scale_name``."""
        if self.is_composite(scale_name):
            return self.default_tag_for_composites
        return self.default_tag_for_subtests


def _battery_token_pattern(battery_id: str) -> re.Pattern:
    # Whole-token match where '-' is part of the token: "NAB" must not
    # claim "NAB-S", and "WAIS-IV" must not claim "WAIS-IVX".
    return re.compile(
        r"(?<![\w-])" + re.escape(battery_id) + r"(?![\w-])",
        re.IGNORECASE,
    )


class BatteryRuleSet:
    """
    Read-only registry of :class:`BatteryRule` objects keyed by battery id.

    :meth:`rule_for` resolves a battery *name* as it appears in the data
    (e.g. ``"RBANS Update Form A"``) to the rule whose id occurs in it as a
    whole token.  When several ids match, the longest id wins.
    """

    def __init__(self, rules: list[BatteryRule] | tuple[BatteryRule, ...] = ()) -> None:
        table: dict[str, BatteryRule] = {}
        for rule in rules:
            key = rule.battery_id.casefold()
            if key in table:
                raise ConfigurationError(f"duplicate battery rule: {rule.battery_id}")
            table[key] = rule
        self._rules = MappingProxyType(table)
        self._matchers = tuple(
            (rule, _battery_token_pattern(rule.battery_id))
            for rule in sorted(table.values(), key=lambda r: -len(r.battery_id))
        )

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules.values())

    def __contains__(self, battery_name: object) -> bool:
        return self.rule_for(battery_name) is not None

    @property
    def battery_ids(self) -> list[str]:
        return sorted(rule.battery_id for rule in self._rules.values())

    def rule_for(self, battery_name: object) -> BatteryRule | None:
        """Return the rule registered for ``battery_name``, or None."""
        if battery_name is None:
            return None
        name = str(battery_name)
        for rule, matcher in self._matchers:
            if matcher.search(name):
                return rule
        return None


def _validate_rule_entry(entry: dict) -> BatteryRule:
    battery_id = str(entry.get("battery_id") or "").strip()
    if not battery_id:
        raise ConfigurationError(f"battery rule without battery_id: {entry!r}")

    for key in ("default_tag_for_subtests", "default_tag_for_composites"):
        tag = entry.get(key)
        if tag not in SCORE_TYPE_TAGS:
            raise ConfigurationError(
                f"battery rule {battery_id}: {key}={tag!r} is not a known score type"
            )

    patterns = tuple(entry.get("composite_name_patterns") or ())
    subtests = tuple(entry.get("subtest_names") or ())
    if not patterns and not subtests:
        raise ConfigurationError(
            f"battery rule {battery_id}: needs composite_name_patterns or subtest_names"
        )
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigurationError(
                f"battery rule {battery_id}: bad pattern {pattern!r}: {exc}"
            ) from exc

    return BatteryRule(
        battery_id=battery_id,
        composite_name_patterns=patterns,
        default_tag_for_subtests=entry["default_tag_for_subtests"],
        default_tag_for_composites=entry["default_tag_for_composites"],
        subtest_names=frozenset(subtests),
    )


def load_battery_rules(rule_specs: list[dict] = BATTERY_RULES) -> BatteryRuleSet:
    """
    Validate rule specifications and build the run's :class:`BatteryRuleSet`.

    Args:
        rule_specs: Rule dictionaries (defaults to ``config.BATTERY_RULES``).

    Returns:
        The validated rule set.

    Raises:
        ConfigurationError: Any malformed or duplicate rule.  Fatal at
            startup since every unit classifies with the same rules.
    """
    rules = [_validate_rule_entry(entry) for entry in rule_specs]
    rule_set = BatteryRuleSet(rules)
    logger.info("Loaded %d battery rules: %s", len(rule_set), ", ".join(rule_set.battery_ids))
    return rule_set
