"""
src/scoring — Score-type classification and footnote grouping.

Module layout
-------------
config.py         — Score-type tags, priority, distributions, footnote text,
                    battery rule data, domain-default tags, lookup path
lookup.py         — ScoreTypeLookup (normalized name → candidate tags) and
                    loader for the packaged CSV artifact
battery_rules.py  — BatteryRule / BatteryRuleSet for mixed-score batteries
classifier.py     — One score-type tag per (battery, scale) instance
footnotes.py      — Partition of classified scales into footnote groups

Public interface
----------------
Load the run-wide, read-only tables once:
    load_score_type_lookup()
    load_battery_rules()

Classify one domain's records and group footnotes:
    classify_scales(records, lookup, rules, domain_family)
    apply_score_types(records, classified)
    group_footnotes(classified)
    footnote_for(groups, battery, tag)
    source_note(groups)
"""

from .lookup import (
    ScoreTypeLookup,
    load_score_type_lookup,
    normalize_scale_name,
)
from .battery_rules import (
    BatteryRule,
    BatteryRuleSet,
    load_battery_rules,
)
from .classifier import (
    ScaleClassification,
    ScaleKey,
    apply_score_types,
    classify_scale,
    classify_scales,
    default_tag_for,
)
from .footnotes import (
    FootnoteGroup,
    footnote_for,
    group_footnotes,
    source_note,
)

__all__ = [
    # Lookup
    "ScoreTypeLookup",
    "load_score_type_lookup",
    "normalize_scale_name",
    # Battery rules
    "BatteryRule",
    "BatteryRuleSet",
    "load_battery_rules",
    # Classification
    "ScaleClassification",
    "ScaleKey",
    "apply_score_types",
    "classify_scale",
    "classify_scales",
    "default_tag_for",
    # Footnotes
    "FootnoteGroup",
    "footnote_for",
    "group_footnotes",
    "source_note",
]
