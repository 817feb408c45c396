"""
Unit tests for src/scoring/battery_rules.py.

Covers:
- BatteryRule.tag_for: ordered patterns, subtest list precedence, no-match
  default to the subtest tag.
- BatteryRuleSet.rule_for: whole-token battery matching, longest id wins.
- load_battery_rules: validation errors are ConfigurationError.
"""

from __future__ import annotations

import pytest

from src.errors import ConfigurationError
from src.scoring.battery_rules import BatteryRule, BatteryRuleSet, load_battery_rules
from src.scoring.classifier import classify_scales
from src.scoring.config import BATTERY_RULES

from .conftest import make_records


def _rule_spec(**overrides) -> dict:
    spec = {
        "battery_id": "TESTBAT",
        "composite_name_patterns": [r"\bIndex\b"],
        "default_tag_for_subtests": "scaled_score",
        "default_tag_for_composites": "standard_score",
    }
    spec.update(overrides)
    return spec


class TestBatteryRule:

    @pytest.fixture
    def wisc(self, rules):
        return rules.rule_for("WISC-V")

    @pytest.mark.parametrize("scale", [
        "Working Memory Index",
        "Full Scale IQ (FSIQ)",
        "Fluid Reasoning (FRI)",
        "Sum of Scaled Scores",
        "General Ability Composite",
    ])
    def test_composite_patterns_assign_composite_tag(self, wisc, scale):
        assert wisc.tag_for(scale) == "standard_score"

    @pytest.mark.parametrize("scale", ["Block Design", "Similarities", "Digit Span", "Coding"])
    def test_plain_names_assign_subtest_tag(self, wisc, scale):
        assert wisc.tag_for(scale) == "scaled_score"

    @pytest.mark.parametrize("battery, scale, expected", [
        ("WISC-V", "Coding (raw)", "scaled_score"),
        ("WISC-V", "Processing Speed (PSI)", "standard_score"),
        ("WAIS-IV", "Trail Making (time)", "scaled_score"),
        ("WMS-IV", "Logical Memory (delayed)", "scaled_score"),
        ("NAB", "Digits Forward (errors)", "t_score"),
        ("NAB", "Attention (ATT)", "standard_score"),
    ])
    def test_lowercase_parenthetical_is_not_an_abbreviation(self, rules, battery, scale, expected):
        assert rules.rule_for(battery).tag_for(scale) == expected

    def test_lowercase_parenthetical_through_classifier(self, lookup, rules):
        records = make_records([
            {"scale": "Coding (raw)"},
            {"scale": "Trail Making (time)"},
            {"scale": "Processing Speed (PSI)"},
        ])
        classified = classify_scales(records, lookup, rules, "cognitive")
        tags = {key.scale: result.tag for key, result in classified.items()}
        assert tags == {
            "Coding (raw)": "scaled_score",
            "Trail Making (time)": "scaled_score",
            "Processing Speed (PSI)": "standard_score",
        }

    def test_first_matching_pattern_wins(self):
        rule = BatteryRule(
            battery_id="X",
            composite_name_patterns=(r"Total", r"Index"),
            default_tag_for_subtests="t_score",
            default_tag_for_composites="standard_score",
        )
        assert rule.is_composite("Index Total")
        assert rule.tag_for("Index Total") == "standard_score"

    def test_subtest_names_checked_before_patterns(self):
        rule = BatteryRule(
            battery_id="X",
            composite_name_patterns=(r"Total",),
            default_tag_for_subtests="scaled_score",
            default_tag_for_composites="standard_score",
            subtest_names=frozenset({"Trial Total"}),
        )
        assert rule.tag_for("trial  total") == "scaled_score"
        assert rule.tag_for("Grand Total") == "standard_score"

    def test_rbans_subtests_and_indexes(self, rules):
        rbans = rules.rule_for("RBANS Update Form A")
        assert rbans.battery_id == "RBANS"
        assert rbans.tag_for("Immediate Memory Index") == "standard_score"
        assert rbans.tag_for("RBANS Total Index") == "standard_score"
        assert rbans.tag_for("List Learning") == "scaled_score"
        assert rbans.tag_for("Story Recall") == "scaled_score"

    def test_nab_subtests_are_t_scores(self, rules):
        nab = rules.rule_for("NAB")
        assert nab.tag_for("Digits Forward") == "t_score"
        assert nab.tag_for("Attention Index") == "standard_score"


class TestBatteryRuleSet:

    def test_rule_lookup_is_case_insensitive(self, rules):
        assert rules.rule_for("wais-iv").battery_id == "WAIS-IV"

    def test_whole_token_match_only(self, rules):
        assert rules.rule_for("WAIS-IVX") is None
        assert rules.rule_for("SWAIS-IV") is None

    def test_battery_id_inside_longer_name(self, rules):
        assert rules.rule_for("WAIS-IV (2008 norms)").battery_id == "WAIS-IV"

    def test_longest_matching_id_wins(self, rules):
        assert rules.rule_for("NAB-S").battery_id == "NAB-S"
        assert rules.rule_for("NAB").battery_id == "NAB"

    def test_unregistered_battery(self, rules):
        assert rules.rule_for("Trail Making Test") is None
        assert rules.rule_for(None) is None
        assert "Trail Making Test" not in rules
        assert "WISC-V" in rules

    def test_duplicate_ids_rejected(self):
        rule = BatteryRule("X", (r"Index",), "scaled_score", "standard_score")
        with pytest.raises(ConfigurationError, match="duplicate"):
            BatteryRuleSet([rule, rule])


class TestLoadBatteryRules:

    def test_builtin_rules_load(self, rules):
        assert len(rules) == len(BATTERY_RULES)
        assert "RBANS" in rules.battery_ids

    def test_empty_rule_list_is_valid(self):
        assert len(load_battery_rules([])) == 0

    @pytest.mark.parametrize("overrides, message", [
        ({"battery_id": ""}, "battery_id"),
        ({"default_tag_for_subtests": "stanine"}, "stanine"),
        ({"default_tag_for_composites": None}, "default_tag_for_composites"),
        ({"composite_name_patterns": ["(unclosed"]}, "bad pattern"),
        ({"composite_name_patterns": []}, "needs"),
    ])
    def test_malformed_rules_rejected(self, overrides, message):
        with pytest.raises(ConfigurationError, match=message):
            load_battery_rules([_rule_spec(**overrides)])

    def test_duplicate_battery_ids_rejected(self):
        with pytest.raises(ConfigurationError, match="duplicate"):
            load_battery_rules([_rule_spec(), _rule_spec()])
