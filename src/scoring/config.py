"""
Scoring-layer configuration: score-type tags, distribution conventions,
footnote text, mixed-battery rule data, and the lookup artifact path.

All constants used by the classifier and the footnote grouper are
centralized here so that rule data is separated from rule logic.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

DATA_DIR = Path(__file__).resolve().parent / "data"

# Packaged lookup artifact: columns test, test_name, scale, score_type
LOOKUP_PATH = DATA_DIR / "score_type_lookup.csv"

# ---------------------------------------------------------------------------
# Score-type tags
# ---------------------------------------------------------------------------

STANDARD_SCORE = "standard_score"
SCALED_SCORE = "scaled_score"
T_SCORE = "t_score"
Z_SCORE = "z_score"
PERCENTILE = "percentile"
RAW_SCORE = "raw_score"
BASE_RATE = "base_rate"
PERCENT_MASTERY = "percent_mastery"

# Fixed priority order (also the footnote group order in every table)
TAG_PRIORITY: list[str] = [
    STANDARD_SCORE,
    SCALED_SCORE,
    T_SCORE,
    Z_SCORE,
    PERCENTILE,
    RAW_SCORE,
    BASE_RATE,
    PERCENT_MASTERY,
]

SCORE_TYPE_TAGS: frozenset[str] = frozenset(TAG_PRIORITY)

# Normal-distribution conventions (mean, sd) for the standardized families.
# Tags absent here carry no distribution text in their footnote.
DISTRIBUTIONS: dict[str, tuple[float, float]] = {
    STANDARD_SCORE: (100.0, 15.0),
    SCALED_SCORE:   (10.0, 3.0),
    T_SCORE:        (50.0, 10.0),
    Z_SCORE:        (0.0, 1.0),
}

# ---------------------------------------------------------------------------
# Footnote text
# ---------------------------------------------------------------------------

FOOTNOTE_TEXT: dict[str, str] = {
    STANDARD_SCORE:  "Standard score: Mean = 100 [50th‰], SD ± 15 [16th‰, 84th‰]",
    SCALED_SCORE:    "Scaled score: Mean = 10 [50th‰], SD ± 3 [16th‰, 84th‰]",
    T_SCORE:         "T score: Mean = 50 [50th‰], SD ± 10 [16th‰, 84th‰]",
    Z_SCORE:         "z-score: Mean = 0 [50th‰], SD ± 1 [16th‰, 84th‰]",
    PERCENTILE:      "Percentile rank",
    RAW_SCORE:       "Raw score",
    BASE_RATE:       "Base rate",
    PERCENT_MASTERY: "Percent mastery",
}

# Marker symbols handed out to footnote groups in priority order
FOOTNOTE_SYMBOLS: list[str] = ["a", "b", "c", "d", "e", "f", "g", "h"]

# ---------------------------------------------------------------------------
# Domain-convention defaults for scales nothing else can classify
# ---------------------------------------------------------------------------

# Rating-scale families default to T scores; everything else (performance
# tests: cognitive, academic, validity) defaults to standard scores.
RATING_FAMILIES: frozenset[str] = frozenset({"symptom", "attention", "adaptive"})

DOMAIN_DEFAULT_TAG: dict[str, str] = {
    "cognitive": STANDARD_SCORE,
    "academic":  STANDARD_SCORE,
    "validity":  STANDARD_SCORE,
    "symptom":   T_SCORE,
    "attention": T_SCORE,
    "adaptive":  T_SCORE,
}

FALLBACK_DEFAULT_TAG: str = STANDARD_SCORE

# ---------------------------------------------------------------------------
# Mixed-score-type batteries
# ---------------------------------------------------------------------------
#
# Batteries reporting composites/indices on the standard-score metric and
# subtests on the scaled-score metric under one battery name.  Patterns are
# case-insensitive regular expressions evaluated in order; the first match
# marks a composite.  `subtest_names` are checked before the patterns.
# The parenthesized abbreviation pattern turns case folding off locally.

COMPOSITE_NAME_PATTERNS: list[str] = [
    r"\bIndex\b",
    r"\bComposite\b",
    r"\bIQ\b",
    r"\bSum\b",
    r"\bTotal\b",
    r"\bQuotient\b",
    r"\bGIA\b",
    r"\bBCA\b",
    r"(?-i:\([A-Z]{2,5}\))",  # uppercase index abbreviation only, e.g. "(VCI)" not "(raw)"
]

BATTERY_RULES: list[dict] = [
    {
        "battery_id": "RBANS",
        "composite_name_patterns": [r"\bIndex\b", r"\bTotal\b"],
        "default_tag_for_subtests": SCALED_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
        "subtest_names": [
            "Digit Span", "Coding", "Picture Naming", "Semantic Fluency",
            "List Learning", "Story Memory", "Figure Copy", "Line Orientation",
            "List Recall", "List Recognition", "Story Recall", "Figure Recall",
        ],
    },
    {
        "battery_id": "WISC-V",
        "composite_name_patterns": COMPOSITE_NAME_PATTERNS,
        "default_tag_for_subtests": SCALED_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
    },
    {
        "battery_id": "WAIS-IV",
        "composite_name_patterns": COMPOSITE_NAME_PATTERNS,
        "default_tag_for_subtests": SCALED_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
    },
    {
        "battery_id": "WAIS-5",
        "composite_name_patterns": COMPOSITE_NAME_PATTERNS,
        "default_tag_for_subtests": SCALED_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
    },
    {
        "battery_id": "WPPSI-IV",
        "composite_name_patterns": COMPOSITE_NAME_PATTERNS,
        "default_tag_for_subtests": SCALED_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
    },
    {
        "battery_id": "NAB",
        "composite_name_patterns": COMPOSITE_NAME_PATTERNS,
        "default_tag_for_subtests": T_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
    },
    {
        "battery_id": "NAB-S",
        "composite_name_patterns": COMPOSITE_NAME_PATTERNS,
        "default_tag_for_subtests": T_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
    },
    {
        "battery_id": "WMS-IV",
        "composite_name_patterns": COMPOSITE_NAME_PATTERNS,
        "default_tag_for_subtests": SCALED_SCORE,
        "default_tag_for_composites": STANDARD_SCORE,
    },
]
