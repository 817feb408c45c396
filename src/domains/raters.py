"""
Informant resolution for report domains.

For a domain and the available sources, decides which age variant applies,
which informants (self, parent, teacher, observer) the domain is split by,
and whether each informant has data.  Resolution reads only the sources and
the static tables in config.py, so identical inputs give identical results.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import pandas as pd

from src.errors import SourceReadError

from .config import (
    AGE_HINT_LABELS,
    AGE_INSTRUMENT_PATTERNS,
    DEFAULT_AGE_VARIANT,
    INFORMANT_PATTERNS,
    INFORMANT_TABLE,
    PRIMARY_INFORMANT,
    RAW_INSTRUMENT_FAMILY,
)
from .registry import DomainConfig
from .sources import SourceHandle, load_family_records, select_domain_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InformantEntry:
    """One informant of a domain and whether any records back it."""

    tag: str
    has_data: bool
    instrument_matches: tuple[str, ...] = ()
    record_count: int = 0


@dataclass(frozen=True)
class InformantResolution:
    """Informant variants to generate for one domain."""

    domain_config: DomainConfig
    age_variant: str | None
    informants: tuple[InformantEntry, ...]
    source_error: str | None = None

    @property
    def no_data(self) -> bool:
        return not any(entry.has_data for entry in self.informants)

    @property
    def tags(self) -> list[str]:
        return [entry.tag for entry in self.informants]


# ---------------------------------------------------------------------------
# Pattern helpers
# ---------------------------------------------------------------------------

def _matches_any(name: str, patterns: list[str]) -> bool:
    return any(re.search(pattern, name, re.IGNORECASE) for pattern in patterns)


def _all_informant_patterns() -> list[str]:
    return [
        pattern
        for by_informant in INFORMANT_PATTERNS.values()
        for patterns in by_informant.values()
        for pattern in patterns
    ]


def _text_column(records: pd.DataFrame, column: str) -> pd.Series:
    # Optional columns absent from the frame read as all-empty.
    if column not in records.columns:
        return pd.Series("", index=records.index, dtype=object)
    return records[column].fillna("").astype(str).str.strip()


def _instrument_names(records: pd.DataFrame) -> list[str]:
    if records.empty:
        return []
    tests = _text_column(records, "test").str.lower()
    return sorted(set(t for t in tests if t))


# ---------------------------------------------------------------------------
# Age variant
# ---------------------------------------------------------------------------

def infer_age_variant(
    domain_config: DomainConfig,
    records: pd.DataFrame | None = None,
    instrument_names: list[str] | None = None,
) -> str:
    """
    Decide the age variant for a multi-informant domain.

    Order: explicit ``age_variant`` in the domain config, then domain
    labels that only one variant uses, then child- or adult-specific
    instrument names, then the default (``child``).  Evidence for both
    variants resolves to ``child`` with a warning.
    """
    if domain_config.age_variant is not None:
        return domain_config.age_variant

    found: set[str] = set()
    if records is not None and not records.empty:
        labels = set(_text_column(records, "domain")) - {""}
        found = {v for v, hints in AGE_HINT_LABELS.items() if labels & set(hints)}

    if not found:
        names = list(instrument_names or [])
        if records is not None:
            names += _instrument_names(records)
        found = {
            variant
            for variant, patterns in AGE_INSTRUMENT_PATTERNS.items()
            if any(_matches_any(name, patterns) for name in names)
        }

    if len(found) == 1:
        return found.pop()
    if len(found) > 1:
        logger.warning(
            "%s: both child and adult instruments present; using %s",
            domain_config.key, DEFAULT_AGE_VARIANT,
        )
    return DEFAULT_AGE_VARIANT


# ---------------------------------------------------------------------------
# Informant records
# ---------------------------------------------------------------------------

def informant_mask(records: pd.DataFrame, informant: str, age_variant: str | None) -> pd.Series:
    """
    Boolean mask of the records that belong to ``informant``.

    A record belongs to an informant when its instrument matches the
    informant's patterns for the age variant, or when its instrument is
    not a known informant instrument and its ``rater`` column names the
    informant.
    """
    if informant == PRIMARY_INFORMANT:
        return pd.Series(True, index=records.index)

    patterns = INFORMANT_PATTERNS.get(age_variant or DEFAULT_AGE_VARIANT, {}).get(informant, [])
    known = _all_informant_patterns()

    tests = _text_column(records, "test").str.lower()
    by_instrument = tests.map(lambda name: bool(name) and _matches_any(name, patterns))
    unknown_instrument = tests.map(lambda name: not name or not _matches_any(name, known))
    raters = _text_column(records, "rater").str.lower()
    by_rater = unknown_instrument & (raters == informant)
    return (by_instrument | by_rater).astype(bool)


def filter_informant_records(
    records: pd.DataFrame,
    informant: str,
    age_variant: str | None = None,
) -> pd.DataFrame:
    """Return the slice of ``records`` reported by ``informant``."""
    if records.empty:
        return records.copy()
    return records.loc[informant_mask(records, informant, age_variant)].reset_index(drop=True)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_informants(
    domain_config: DomainConfig,
    available_sources: list[SourceHandle],
    records: pd.DataFrame | None = None,
) -> InformantResolution:
    """
    Resolve the informant variants of one domain.

    Args:
        domain_config: The domain to resolve.
        available_sources: All sources of the run.
        records: The domain's records when the caller already has them;
            otherwise they are read from the sources of the domain's
            ``data_source`` family.

    Returns:
        An InformantResolution.  Non-multi-informant domains get a single
        ``primary`` entry.  An unreadable family source marks every entry
        as having data so the unit fails with the read error instead of
        being skipped.
    """
    source_error = None
    if records is None:
        try:
            records = select_domain_records(
                load_family_records(available_sources, domain_config.data_source),
                domain_config,
            )
        except SourceReadError as exc:
            source_error = str(exc)
            records = None

    if not domain_config.multi_informant:
        count = 0 if records is None else len(records)
        entry = InformantEntry(
            tag=PRIMARY_INFORMANT,
            has_data=source_error is not None or count > 0,
            record_count=count,
        )
        return InformantResolution(domain_config, domain_config.age_variant, (entry,), source_error)

    raw_names = sorted(
        name
        for source in available_sources
        if source.family == RAW_INSTRUMENT_FAMILY
        for name in source.instrument_names()
    )
    age_variant = infer_age_variant(domain_config, records, raw_names)
    tags = INFORMANT_TABLE[(domain_config.domain_family, age_variant)]
    record_names = [] if records is None else _instrument_names(records)

    entries = []
    for tag in tags:
        patterns = INFORMANT_PATTERNS[age_variant].get(tag, [])
        matches = tuple(
            name for name in sorted(set(record_names) | set(raw_names))
            if _matches_any(name, patterns)
        )
        count = 0
        if records is not None and not records.empty:
            count = int(informant_mask(records, tag, age_variant).sum())
        entries.append(
            InformantEntry(
                tag=tag,
                has_data=source_error is not None or count > 0 or bool(matches),
                instrument_matches=matches,
                record_count=count,
            )
        )

    resolution = InformantResolution(domain_config, age_variant, tuple(entries), source_error)
    logger.info(
        "%s (%s): %s",
        domain_config.key, age_variant,
        ", ".join(f"{e.tag}={'yes' if e.has_data else 'no'}" for e in entries),
    )
    return resolution
