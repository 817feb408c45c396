"""
Execution parameters, output formats, and rendering constants for a
report-artifact run.

This is the AUTHORITATIVE source for run-level constants.  The orchestrator
and the artifact writers take keyword arguments defaulting to these values,
so a caller overrides them per call rather than by editing globals.

Design rationale:
- MAX_WORKERS = 1 keeps small runs sequential and deterministic; batch runs
  opt in to a thread pool by passing a larger value.
- MAX_FAILURES = None runs every unit and reports all failures at the end.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Concurrency and cancellation
# ---------------------------------------------------------------------------

# Worker pool size for (domain, informant) units; 1 → sequential execution
MAX_WORKERS: int = 1

# Stop processing new units after this many FAILED units (None → never stop)
MAX_FAILURES: int | None = None

# ---------------------------------------------------------------------------
# Data sources
# ---------------------------------------------------------------------------

# Source families the registry refers to via `data_source`
DATA_SOURCE_FAMILIES: list[str] = ["neurocog", "neurobehav", "validity"]

# When several files exist for one family, the first suffix found wins
SOURCE_SUFFIX_PREFERENCE: list[str] = [".parquet", ".feather", ".csv"]

# Sub-directory of the data directory holding per-instrument raw exports
# (e.g. basc3_prs_child.csv); their file stems count as instrument names
RAW_INSTRUMENT_SUBDIR: str = "csv"

# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------

# Table: one raster and one print format
TABLE_FORMATS: tuple[str, ...] = ("png", "docx")

# Chart: vector format
CHART_FORMATS: tuple[str, ...] = ("svg",)

# Leave existing chart files untouched instead of re-rendering them
SKIP_IF_EXISTS: bool = False

# Section directory pattern; the ordinal keeps report sections in order
SECTION_DIR_TEMPLATE: str = "_02-{ordinal}_{phenotype_key}"

# ---------------------------------------------------------------------------
# Chart geometry (inches → pixels at CHART_DPI)
# ---------------------------------------------------------------------------

CHART_WIDTH_IN: float = 8.0
CHART_BASE_HEIGHT_IN: float = 0.4   # per plotted category
CHART_MIN_HEIGHT_IN: float = 4.0
CHART_DPI: int = 96

# Table raster geometry
TABLE_WIDTH_PX: int = 900
TABLE_ROW_HEIGHT_PX: int = 28
TABLE_SCALE: int = 2                # kaleido scale factor for crisper PNGs
