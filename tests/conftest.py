"""
Shared pytest fixtures for the report-artifact tests.

Record builders produce normalized ScaleRecord DataFrames (the same shape
SourceHandle.load() returns).  Battery and scale names are taken from the
packaged score-type lookup so classification outcomes are predictable:

  WISC-V          mixed battery (rule): composites → standard, subtests → scaled
  RBANS           mixed battery (rule with an explicit subtest list)
  BASC-3 PRS/TRS/SRP Child   child rating scales, t_score
  CAARS-2 Self / Observer    adult ADHD rating scales, t_score
  "Communication"            ambiguous scale name (standard / scaled)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from src.domains.registry import DomainConfig, load_domain_registry
from src.domains.sources import SourceHandle, normalize_records
from src.scoring.battery_rules import load_battery_rules
from src.scoring.lookup import load_score_type_lookup


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------

RECORD_DEFAULTS: dict = {
    "test": "wisc5",
    "test_name": "WISC-V",
    "scale": "Block Design",
    "score": 10.0,
    "percentile": 50.0,
    "range": "Average",
    "domain": "General Cognitive Ability",
    "subdomain": "Perceptual Reasoning",
    "narrow": "Visual Processing",
    "rater": np.nan,
}


def make_record(**overrides) -> dict:
    """One ScaleRecord row with RECORD_DEFAULTS filled in."""
    return {**RECORD_DEFAULTS, **overrides}


def make_records(rows: list[dict]) -> pd.DataFrame:
    """Normalized ScaleRecord DataFrame from partial row dicts."""
    return normalize_records(pd.DataFrame([make_record(**row) for row in rows]))


def scenario_a_records() -> pd.DataFrame:
    """One battery: two composite-pattern scales plus three plain subtests."""
    return make_records([
        {"scale": "Working Memory Index", "score": 92, "percentile": 30,
         "subdomain": "Working Memory", "narrow": "Working Memory"},
        {"scale": "Fluid Reasoning (FRI)", "score": 104, "percentile": 61,
         "subdomain": "Fluid Reasoning", "narrow": "Induction"},
        {"scale": "Block Design", "score": 9, "percentile": 37},
        {"scale": "Similarities", "score": 12, "percentile": 75,
         "subdomain": "Verbal Comprehension", "narrow": "Lexical Knowledge"},
        {"scale": "Digit Span", "score": 8, "percentile": 25,
         "subdomain": "Working Memory", "narrow": "Working Memory"},
    ])


def parent_report_records() -> pd.DataFrame:
    """Child emotion-domain records from the parent rating scale only."""
    common = {
        "test": "basc3_prs_child",
        "test_name": "BASC-3 PRS Child",
        "domain": "Behavioral/Emotional/Social",
        "range": "At-Risk",
    }
    return make_records([
        {**common, "scale": "Anxiety", "score": 62, "percentile": 88,
         "subdomain": "Internalizing", "narrow": "Anxiety"},
        {**common, "scale": "Depression", "score": 58, "percentile": 79,
         "subdomain": "Internalizing", "narrow": "Depression"},
        {**common, "scale": "Aggression", "score": 49, "percentile": 50,
         "subdomain": "Externalizing", "narrow": "Aggression"},
    ])


def write_source(directory: Path, family: str, records: pd.DataFrame) -> SourceHandle:
    """Write ``records`` to ``{family}.csv`` under ``directory`` and wrap it."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{family}.csv"
    records.to_csv(path, index=False)
    return SourceHandle(path, family=family)


def make_domain_config(**overrides) -> DomainConfig:
    fields = {
        "key": "memory",
        "display_names": ("Memory",),
        "phenotype_key": "memory",
        "ordinal": "05",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": "Memory",
    }
    fields.update(overrides)
    return DomainConfig(**fields)


# ---------------------------------------------------------------------------
# Run-wide tables
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def lookup():
    """The packaged score-type lookup."""
    return load_score_type_lookup()


@pytest.fixture(scope="session")
def rules():
    """The built-in battery rule set."""
    return load_battery_rules()


@pytest.fixture(scope="session")
def registry():
    """The static domain registry."""
    return load_domain_registry()


# ---------------------------------------------------------------------------
# Domain configs
# ---------------------------------------------------------------------------

@pytest.fixture
def iq_domain(registry):
    return registry["iq"]


@pytest.fixture
def emotion_child_domain(registry):
    return registry["emotion_child"]


@pytest.fixture
def emotion_adult_domain(registry):
    return registry["emotion_adult"]


@pytest.fixture
def adhd_domain(registry):
    return registry["adhd"]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@pytest.fixture
def scenario_a_df():
    return scenario_a_records()


@pytest.fixture
def parent_only_df():
    return parent_report_records()
