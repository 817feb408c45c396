"""
Scale classification: one score-type tag per (battery, scale) instance.

Decision table for each unique (battery, scale) pair in a domain's records:

  - Battery has a registered rule       → rule tag            (battery_rule)
  - Scale name has exactly one tag      → that tag            (lookup)
  - Scale name has several tags         → narrowed by the battery's own
                                          lookup tags when that leaves one
                                          (lookup); otherwise the domain
                                          default if it is a candidate, else
                                          the highest-priority candidate
                                          (ambiguous, warning logged)
  - Scale name has no tags              → battery name's tag when it has
                                          exactly one (lookup); otherwise the
                                          domain default (inferred, warning)

Every instance receives exactly one tag and unknown scales never raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple

import pandas as pd

from .battery_rules import BatteryRuleSet
from .config import DOMAIN_DEFAULT_TAG, FALLBACK_DEFAULT_TAG, TAG_PRIORITY
from .lookup import ScoreTypeLookup

logger = logging.getLogger(__name__)

METHOD_LOOKUP = "lookup"
METHOD_BATTERY_RULE = "battery_rule"
METHOD_AMBIGUOUS = "ambiguous"
METHOD_INFERRED = "inferred"


class ScaleKey(NamedTuple):
    """Identifies one scale instance within a domain's record set."""

    battery: str
    scale: str

    @classmethod
    def of(cls, battery: object, scale: object) -> ScaleKey:
        """Key for raw record values; missing values become ''."""
        return cls(_clean(battery), _clean(scale))


@dataclass(frozen=True)
class ScaleClassification:
    """Classifier output for one scale instance."""

    tag: str
    method: str
    candidates: tuple[str, ...] = ()

    @property
    def is_override(self) -> bool:
        return self.method == METHOD_BATTERY_RULE

    @property
    def is_inferred(self) -> bool:
        return self.method in (METHOD_INFERRED, METHOD_AMBIGUOUS)


def _clean(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def _by_priority(tags) -> tuple[str, ...]:
    return tuple(sorted(tags, key=TAG_PRIORITY.index))


def default_tag_for(domain_family: str | None) -> str:
    """Domain-convention tag for scales nothing else can classify."""
    return DOMAIN_DEFAULT_TAG.get(domain_family or "", FALLBACK_DEFAULT_TAG)


def classify_scale(
    battery: str,
    scale: str,
    lookup: ScoreTypeLookup,
    rules: BatteryRuleSet,
    domain_family: str | None = None,
) -> ScaleClassification:
    """
    Classify a single (battery, scale) pair.

    Args:
        battery: Battery name as it appears in the records.
        scale: Scale name as it appears in the records.
        lookup: The run's score-type lookup.
        rules: The run's battery rule set.
        domain_family: Family of the domain being classified; selects the
            default tag when nothing else applies.

    Returns:
        A :class:`ScaleClassification`.  Never raises for unknown names.
    """
    candidates = _by_priority(lookup.candidates(scale))

    rule = rules.rule_for(battery)
    if rule is not None:
        tag = rule.tag_for(scale)
        if len(candidates) == 1 and candidates[0] != tag:
            logger.debug(
                "%s / %s: battery rule %s assigns %s over lookup %s",
                battery, scale, rule.battery_id, tag, candidates[0],
            )
        return ScaleClassification(tag, METHOD_BATTERY_RULE, candidates)

    if len(candidates) == 1:
        return ScaleClassification(candidates[0], METHOD_LOOKUP, candidates)

    battery_tags = lookup.candidates(battery)
    default = default_tag_for(domain_family)

    if candidates:
        narrowed = _by_priority(set(candidates) & battery_tags)
        if len(narrowed) == 1:
            return ScaleClassification(narrowed[0], METHOD_LOOKUP, candidates)
        tag = default if default in candidates else candidates[0]
        logger.warning(
            "Ambiguous score type for %s / %s (candidates: %s); assigned %s",
            battery or "(no battery)", scale, ", ".join(candidates), tag,
        )
        return ScaleClassification(tag, METHOD_AMBIGUOUS, candidates)

    if len(battery_tags) == 1:
        (tag,) = battery_tags
        return ScaleClassification(tag, METHOD_LOOKUP, candidates)

    logger.warning(
        "No score type known for %s / %s; inferred %s from %s domain convention",
        battery or "(no battery)", scale, default, domain_family or "default",
    )
    return ScaleClassification(default, METHOD_INFERRED, candidates)


def classify_scales(
    records: pd.DataFrame,
    lookup: ScoreTypeLookup,
    rules: BatteryRuleSet,
    domain_family: str | None = None,
) -> dict[ScaleKey, ScaleClassification]:
    """
    Assign exactly one score-type tag to every scale instance in ``records``.

    Args:
        records: Domain-filtered ScaleRecord DataFrame (``test_name`` and
            ``scale`` columns).  May be empty.
        lookup: The run's score-type lookup.
        rules: The run's battery rule set.
        domain_family: Family of the domain (see ``config.DOMAIN_DEFAULT_TAG``).

    Returns:
        Dict keyed by :class:`ScaleKey` in first-seen order.  Empty input
        yields an empty dict.
    """
    classified: dict[ScaleKey, ScaleClassification] = {}
    if records.empty:
        return classified

    batteries = records["test_name"] if "test_name" in records.columns else pd.Series(
        [""] * len(records), index=records.index,
    )
    for battery, scale in zip(batteries, records["scale"]):
        key = ScaleKey.of(battery, scale)
        if key in classified:
            continue
        classified[key] = classify_scale(
            key.battery, key.scale, lookup, rules, domain_family=domain_family,
        )

    by_method = pd.Series([c.method for c in classified.values()]).value_counts()
    logger.info(
        "Classified %d scale instances (%s)",
        len(classified),
        ", ".join(f"{method}={count}" for method, count in by_method.items()),
    )
    return classified


def apply_score_types(
    records: pd.DataFrame,
    classified: dict[ScaleKey, ScaleClassification],
) -> pd.DataFrame:
    """
    Return a copy of ``records`` with ``score_type`` and
    ``score_type_method`` columns taken from ``classified``.
    """
    result_df = records.copy()
    if result_df.empty:
        result_df["score_type"] = pd.Series(dtype=object)
        result_df["score_type_method"] = pd.Series(dtype=object)
        return result_df

    batteries = (
        result_df["test_name"] if "test_name" in result_df.columns
        else pd.Series([""] * len(result_df), index=result_df.index)
    )
    keys = [ScaleKey.of(b, s) for b, s in zip(batteries, result_df["scale"])]
    result_df["score_type"] = [classified[k].tag for k in keys]
    result_df["score_type_method"] = [classified[k].method for k in keys]
    return result_df
