"""
Raw data sources: discovery, reading and record normalization.

A SourceHandle wraps one file (csv, parquet or feather).  Reading happens
at most once per handle; the records, or the read error, are cached so
every unit that shares the handle sees the same outcome.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import numpy as np
import pandas as pd
from scipy.stats import norm

from config.run_params import (
    DATA_SOURCE_FAMILIES,
    RAW_INSTRUMENT_SUBDIR,
    SOURCE_SUFFIX_PREFERENCE,
)
from src.errors import SourceReadError

from .config import (
    NUMERIC_COLUMNS,
    OPTIONAL_COLUMNS,
    PERCENTILE_CLIP,
    RAW_INSTRUMENT_FAMILY,
    RECORD_COLUMN_RENAMES,
    REQUIRED_COLUMNS,
    TEXT_COLUMNS,
)
from .registry import DomainConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Record normalization
# ---------------------------------------------------------------------------

def percentile_to_z(percentile: pd.Series) -> pd.Series:
    """z-equivalent of percentile ranks, rounded to 2 decimals."""
    low, high = PERCENTILE_CLIP
    clipped = pd.to_numeric(percentile, errors="coerce").clip(lower=low, upper=high)
    return pd.Series(np.round(norm.ppf(clipped / 100.0), 2), index=percentile.index)


def normalize_records(raw_df: pd.DataFrame) -> pd.DataFrame:
    """
    Bring a raw score table onto the ScaleRecord columns.

    Renames alternative column names, adds missing optional columns, coerces
    numeric columns, trims text columns, and fills ``z`` from ``percentile``
    where ``z`` is missing.

    Raises:
        ValueError: A required column is missing after renaming.
    """
    records_df = raw_df.rename(
        columns={k: v for k, v in RECORD_COLUMN_RENAMES.items() if v not in raw_df.columns}
    ).copy()

    missing = [c for c in REQUIRED_COLUMNS if c not in records_df.columns]
    if missing:
        raise ValueError(f"missing required columns: {', '.join(missing)}")

    for column in OPTIONAL_COLUMNS:
        if column not in records_df.columns:
            records_df[column] = np.nan

    for column in NUMERIC_COLUMNS:
        records_df[column] = pd.to_numeric(records_df[column], errors="coerce")

    for column in TEXT_COLUMNS:
        values = records_df[column]
        records_df[column] = values.where(values.isna(), values.astype(str).str.strip())

    missing_z = records_df["z"].isna() & records_df["percentile"].notna()
    if missing_z.any():
        records_df.loc[missing_z, "z"] = percentile_to_z(records_df.loc[missing_z, "percentile"])

    return records_df.reset_index(drop=True)


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix == ".parquet":
        return pd.read_parquet(path)
    if suffix == ".feather":
        return pd.read_feather(path)
    raise ValueError(f"unsupported source format {suffix!r}")


# ---------------------------------------------------------------------------
# Source handles
# ---------------------------------------------------------------------------

class SourceHandle:
    """
    One raw data source file.

    Args:
        path: File path (csv, parquet or feather).
        family: Source family (``neurocog``, ``neurobehav``, ``validity``,
            or ``instrument`` for per-instrument raw exports).  Defaults to
            the file stem when that names a family.
        name: Display name; defaults to the file stem.
    """

    def __init__(self, path: Path | str, family: str | None = None, name: str | None = None) -> None:
        self.path = Path(path)
        self.name = name or self.path.stem
        if family is None:
            family = self.path.stem if self.path.stem in DATA_SOURCE_FAMILIES else RAW_INSTRUMENT_FAMILY
        self.family = family
        self._lock = threading.Lock()
        self._records: pd.DataFrame | None = None
        self._error: SourceReadError | None = None

    def __repr__(self) -> str:
        return f"SourceHandle(name={self.name!r}, family={self.family!r}, path={str(self.path)!r})"

    @property
    def error(self) -> SourceReadError | None:
        """Cached read error, if the source was read and failed."""
        return self._error

    def load(self) -> pd.DataFrame:
        """
        Return the normalized records of this source (a fresh copy).

        Raises:
            SourceReadError: File missing, unreadable, or lacking required
                columns.  The error is cached and re-raised on later calls.
        """
        with self._lock:
            if self._records is None and self._error is None:
                try:
                    self._records = normalize_records(_read_frame(self.path))
                    logger.debug("Read %d records from %s", len(self._records), self.path)
                except (OSError, ValueError, ImportError) as exc:
                    self._error = SourceReadError(self.path, str(exc))
                    logger.error("Cannot read source %s: %s", self.path, exc)
            if self._error is not None:
                raise self._error
            return self._records.copy()

    def is_readable(self) -> bool:
        try:
            self.load()
        except SourceReadError:
            return False
        return True

    def instrument_names(self) -> list[str]:
        """File stem plus the distinct ``test`` values of readable records."""
        names = [self.path.stem.lower()]
        if self.family == RAW_INSTRUMENT_FAMILY:
            return names
        try:
            records_df = self.load()
        except SourceReadError:
            return names
        tests = records_df["test"].dropna().astype(str).str.lower().unique()
        return names + sorted(t for t in tests if t and t not in names)


def discover_sources(data_dir: Path | str) -> list[SourceHandle]:
    """
    Find the family sources and raw instrument exports under ``data_dir``.

    For each family in DATA_SOURCE_FAMILIES the first existing file in
    SOURCE_SUFFIX_PREFERENCE order wins (``neurocog.parquet`` over
    ``neurocog.csv``).  Per-instrument CSVs in ``data_dir/csv/`` are added
    as ``instrument`` sources.
    """
    data_dir = Path(data_dir)
    sources: list[SourceHandle] = []

    for family in DATA_SOURCE_FAMILIES:
        for suffix in SOURCE_SUFFIX_PREFERENCE:
            path = data_dir / f"{family}{suffix}"
            if path.exists():
                sources.append(SourceHandle(path, family=family))
                break
        else:
            logger.info("No %s source found in %s", family, data_dir)

    raw_dir = data_dir / RAW_INSTRUMENT_SUBDIR
    if raw_dir.is_dir():
        for path in sorted(raw_dir.glob("*.csv")):
            sources.append(SourceHandle(path, family=RAW_INSTRUMENT_FAMILY))

    return sources


def load_family_records(sources: list[SourceHandle], family: str) -> pd.DataFrame:
    """
    Concatenate the records of every source in ``family``.

    Raises:
        SourceReadError: Any source of the family is unreadable.
    """
    frames = [source.load() for source in sources if source.family == family]
    frames = [frame for frame in frames if not frame.empty]
    if not frames:
        return normalize_records(pd.DataFrame(columns=REQUIRED_COLUMNS))
    return pd.concat(frames, ignore_index=True)


def select_domain_records(records: pd.DataFrame, domain_config: DomainConfig) -> pd.DataFrame:
    """Rows whose ``domain`` is one of the domain's display names (and allowlisted scales)."""
    mask = records["domain"].isin(domain_config.display_names)
    if domain_config.scale_allowlist is not None:
        mask &= records["scale"].isin(domain_config.scale_allowlist)
    return records.loc[mask].reset_index(drop=True)
