"""
Domain-layer constants: record schema, domain families, age-variant hints,
informant tables and informant instrument patterns.

Instrument patterns are case-insensitive regular expressions matched
against instrument names, i.e. the ``test`` column of the records and the
file stems of per-instrument raw exports.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Record schema
# ---------------------------------------------------------------------------

REQUIRED_COLUMNS: list[str] = ["test_name", "scale", "score", "domain"]

OPTIONAL_COLUMNS: list[str] = [
    "test",
    "raw_score",
    "percentile",
    "range",
    "subdomain",
    "narrow",
    "rater",
    "z",
]

NUMERIC_COLUMNS: list[str] = ["score", "raw_score", "percentile", "z"]

TEXT_COLUMNS: list[str] = [
    "test", "test_name", "scale", "domain", "range", "subdomain", "narrow", "rater",
]

# Alternative column names accepted on load
RECORD_COLUMN_RENAMES: dict[str, str] = {
    "battery_name":       "test_name",
    "scale_name":         "scale",
    "standardized_value": "score",
    "raw_value":          "raw_score",
    "narrow_category":    "narrow",
    "informant_tag":      "rater",
}

# Percentiles are clipped into this open interval before the z conversion
PERCENTILE_CLIP: tuple[float, float] = (0.1, 99.9)

# ---------------------------------------------------------------------------
# Domain families
# ---------------------------------------------------------------------------

DOMAIN_FAMILIES: tuple[str, ...] = (
    "cognitive", "academic", "symptom", "attention", "adaptive", "validity",
)

# Families whose ratings are split by informant
MULTI_INFORMANT_FAMILIES: tuple[str, ...] = ("symptom", "attention")

AGE_VARIANTS: tuple[str, ...] = ("child", "adult")
DEFAULT_AGE_VARIANT: str = "child"

# Informant tag for domains that are not split by informant
PRIMARY_INFORMANT: str = "primary"

# Family tag for per-instrument raw exports (data_dir/csv/*.csv); they only
# contribute instrument names, never records
RAW_INSTRUMENT_FAMILY: str = "instrument"

# ---------------------------------------------------------------------------
# Age-variant inference
# ---------------------------------------------------------------------------

# Domain labels that only occur in one age variant's data
AGE_HINT_LABELS: dict[str, list[str]] = {
    "child": ["Behavioral/Emotional/Social"],
    "adult": ["Emotional/Behavioral/Personality"],
}

AGE_INSTRUMENT_PATTERNS: dict[str, list[str]] = {
    "child": [
        r"^basc3_\w+_(child|adolescent|preschool)$",
        r"^pai_adol",
        r"^conners",
    ],
    "adult": [
        r"^pai$",
        r"^pai_(clinical|validity|attention)$",
        r"^caars",
    ],
}

# ---------------------------------------------------------------------------
# Informants
# ---------------------------------------------------------------------------

INFORMANT_TABLE: dict[tuple[str, str], tuple[str, ...]] = {
    ("attention", "adult"): ("self", "observer"),
    ("attention", "child"): ("self", "parent", "teacher"),
    ("symptom", "adult"):   ("self",),
    ("symptom", "child"):   ("self", "parent", "teacher"),
}

# Instrument-name patterns per age variant and informant
INFORMANT_PATTERNS: dict[str, dict[str, list[str]]] = {
    "child": {
        "self":    [r"^basc3_srp", r"^pai_adol"],
        "parent":  [r"^basc3_prs", r"^conners\w*parent"],
        "teacher": [r"^basc3_trs", r"^conners\w*teacher"],
    },
    "adult": {
        "self":     [r"^pai$", r"^pai_(clinical|validity|attention)$",
                     r"^caars\w*self", r"^caars2?_sr"],
        "observer": [r"^caars\w*obs", r"^caars2?_or"],
    },
}
