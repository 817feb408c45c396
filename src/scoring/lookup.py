"""
Score-type lookup: normalized scale name → candidate score-type tags.

The lookup is built once per run from the packaged CSV artifact and is
read-only afterwards; every processing unit receives the same instance.

Every non-empty ``test``, ``test_name`` and ``scale`` value of a lookup row
is registered as a key for that row's tag, so a battery name can also be
queried when its scale name is unknown.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import pandas as pd

from src.errors import ConfigurationError

from .config import LOOKUP_PATH, SCORE_TYPE_TAGS

logger = logging.getLogger(__name__)

LOOKUP_KEY_COLUMNS: list[str] = ["test", "test_name", "scale"]

_DASHES = re.compile(r"[‐-―−]")
_WHITESPACE = re.compile(r"\s+")


def normalize_scale_name(name: object) -> str:
    """
    Normalize a scale or battery name for lookup.

    Casefolds, trims, collapses internal whitespace and maps the Unicode
    dash variants to ``-``.  Missing values normalize to ``""``.
    """
    if name is None or (isinstance(name, float) and pd.isna(name)):
        return ""
    text = _DASHES.sub("-", str(name))
    return _WHITESPACE.sub(" ", text).strip().casefold()


class ScoreTypeLookup(Mapping):
    """
    Immutable mapping of normalized name → frozenset of score-type tags.

    Lookups normalize the key, and a missing key yields an empty frozenset
    through :meth:`candidates` rather than raising.
    """

    def __init__(self, entries: Mapping[str, frozenset[str]]) -> None:
        table = {
            normalize_scale_name(key): frozenset(tags)
            for key, tags in entries.items()
            if normalize_scale_name(key)
        }
        self._table = MappingProxyType(table)

    def __getitem__(self, key: str) -> frozenset[str]:
        return self._table[normalize_scale_name(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def candidates(self, name: object) -> frozenset[str]:
        """Return the candidate tags for ``name`` (empty when unknown)."""
        return self._table.get(normalize_scale_name(name), frozenset())

    @classmethod
    def from_frame(cls, lookup_df: pd.DataFrame) -> ScoreTypeLookup:
        """
        Build a lookup from a DataFrame with a ``score_type`` column and at
        least one of the key columns ``test``, ``test_name``, ``scale``.

        Raises:
            ConfigurationError: Missing columns or an unknown score type.
        """
        if "score_type" not in lookup_df.columns:
            raise ConfigurationError("score-type lookup has no 'score_type' column")
        key_columns = [c for c in LOOKUP_KEY_COLUMNS if c in lookup_df.columns]
        if not key_columns:
            raise ConfigurationError(
                "score-type lookup needs at least one of: "
                + ", ".join(LOOKUP_KEY_COLUMNS)
            )

        tags_seen = set(lookup_df["score_type"].dropna().astype(str).str.strip())
        unknown = sorted(tags_seen - SCORE_TYPE_TAGS)
        if unknown:
            raise ConfigurationError(
                f"score-type lookup contains unknown score types: {', '.join(unknown)}"
            )

        entries: dict[str, set[str]] = {}
        for _, row in lookup_df.iterrows():
            tag = row["score_type"]
            if pd.isna(tag):
                continue
            for column in key_columns:
                key = normalize_scale_name(row[column])
                if key:
                    entries.setdefault(key, set()).add(str(tag).strip())

        return cls({key: frozenset(tags) for key, tags in entries.items()})


def load_score_type_lookup(path: Path = LOOKUP_PATH) -> ScoreTypeLookup:
    """
    Load the packaged score-type lookup artifact.

    Args:
        path: CSV file with columns test, test_name, scale, score_type.

    Returns:
        A read-only :class:`ScoreTypeLookup`.

    Raises:
        ConfigurationError: The artifact is missing or malformed.  This is
            fatal for the run because every unit depends on it.
    """
    if not path.exists():
        raise ConfigurationError(f"score-type lookup not found: {path}")

    try:
        lookup_df = pd.read_csv(path, dtype=str)
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"score-type lookup unreadable: {path}: {exc}") from exc

    lookup = ScoreTypeLookup.from_frame(lookup_df)
    ambiguous = sum(1 for tags in lookup.values() if len(tags) > 1)
    logger.info(
        "Loaded score-type lookup from %s: %d keys (%d with multiple score types)",
        path.name, len(lookup), ambiguous,
    )
    return lookup
