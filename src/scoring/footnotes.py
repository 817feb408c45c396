"""
Footnote grouping: partition classified scales into one group per
score-type tag, each naming the batteries that contribute to it.

The partition is over (battery, tag) pairs.  A battery resolved through a
battery rule may contribute to several groups (subtests and composites),
but only to the groups its rule assigned; any other claim on that battery
is dropped with a warning so no (battery, tag) pair is claimed twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .classifier import ScaleClassification, ScaleKey
from .config import DISTRIBUTIONS, FOOTNOTE_SYMBOLS, FOOTNOTE_TEXT, STANDARD_SCORE, TAG_PRIORITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FootnoteGroup:
    """One footnote: a score type and the batteries reported on it."""

    score_type_tag: str
    contributing_batteries: frozenset[str]
    footnote_text: str
    symbol: str

    @property
    def has_distribution(self) -> bool:
        return self.score_type_tag in DISTRIBUTIONS

    def label(self) -> str:
        """Footnote line as printed under a table, e.g. ``"a Standard score: ..."``."""
        return f"{self.symbol} {self.footnote_text}"


def _priority(tag: str) -> tuple[int, str]:
    if tag in TAG_PRIORITY:
        return (TAG_PRIORITY.index(tag), tag)
    return (len(TAG_PRIORITY), tag)


def group_footnotes(
    classified: dict[ScaleKey, ScaleClassification],
) -> list[FootnoteGroup]:
    """
    Build the ordered footnote groups for one table.

    Args:
        classified: Classifier output for the table's records.

    Returns:
        Groups in fixed priority order (standard, scaled, t, z, percentile,
        raw, base_rate, percent_mastery) with symbols a, b, c, ... handed
        out in that order.  Empty input yields an empty list.
    """
    buckets: dict[str, set[str]] = {}
    rule_tags: dict[str, set[str]] = {}

    for key, result in classified.items():
        buckets.setdefault(result.tag, set()).add(key.battery)
        if result.is_override:
            rule_tags.setdefault(key.battery, set()).add(result.tag)

    # A rule-resolved battery keeps only the buckets its rule assigned
    for battery, assigned in sorted(rule_tags.items()):
        for tag, batteries in buckets.items():
            if battery in batteries and tag not in assigned:
                logger.warning(
                    "Battery %s claimed by %s footnote but its rule assigns %s; "
                    "keeping the rule assignment",
                    battery, tag, ", ".join(sorted(assigned, key=_priority)),
                )
                batteries.discard(battery)

    groups: list[FootnoteGroup] = []
    for tag in sorted(buckets, key=_priority):
        batteries = buckets[tag]
        if not batteries:
            continue
        index = len(groups)
        symbol = FOOTNOTE_SYMBOLS[index] if index < len(FOOTNOTE_SYMBOLS) else str(index + 1)
        groups.append(
            FootnoteGroup(
                score_type_tag=tag,
                contributing_batteries=frozenset(batteries),
                footnote_text=FOOTNOTE_TEXT.get(tag, tag.replace("_", " ").capitalize()),
                symbol=symbol,
            )
        )
    return groups


def footnote_for(groups: list[FootnoteGroup], battery: str, tag: str) -> str | None:
    """
    Return the footnote symbol for a row with ``battery`` and ``tag``.

    Falls back to the tag's group when the battery was dropped from it
    during partition resolution, so every classified row gets a marker.
    """
    tag_group = None
    for group in groups:
        if group.score_type_tag != tag:
            continue
        if battery in group.contributing_batteries:
            return group.symbol
        tag_group = group
    return tag_group.symbol if tag_group is not None else None


def source_note(groups: list[FootnoteGroup]) -> str:
    """
    Combined distribution note for a table, e.g. for a caption line.

    Joins the distribution texts of the groups that have one with ``"; "``.
    Falls back to the standard-score text when none do.
    """
    texts = [group.footnote_text for group in groups if group.has_distribution]
    if not texts:
        return FOOTNOTE_TEXT[STANDARD_SCORE]
    return "; ".join(texts)
