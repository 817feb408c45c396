"""
Chart artifacts: per-category z-score summaries drawn as a point-range
dot chart and rendered to SVG.

Each record contributes one z-equivalent:
  1. its ``z`` value, if present
  2. else the z of its percentile rank
  3. else its score standardized by the distribution of its score type
Categories (subdomain, or narrow when the domain has no subdomains) are
summarized by mean z and a 95% range; categories with no finite values
are left out of the chart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from config.run_params import (
    CHART_BASE_HEIGHT_IN,
    CHART_DPI,
    CHART_FORMATS,
    CHART_MIN_HEIGHT_IN,
    CHART_WIDTH_IN,
    SKIP_IF_EXISTS,
)
from src.domains.config import PRIMARY_INFORMANT
from src.domains.registry import DomainConfig
from src.domains.sources import percentile_to_z
from src.errors import ArtifactWriteError
from src.scoring.config import DISTRIBUTIONS

from .config import (
    CHART_HEIGHT_PADDING_IN,
    CHART_LEVELS,
    CHART_PALETTE,
    CHART_Z_RANGE,
    CI_Z,
    FONT_FAMILY,
    LINE_COLOR,
    POINT_SIZE,
)
from .naming import artifact_stem, chart_filename
from .tables import EmptyArtifact

logger = logging.getLogger(__name__)


@dataclass
class ChartArtifact:
    stem: str
    level: str
    title: str
    summary: pd.DataFrame      # category, mean_z, lower, upper, n

    @property
    def is_empty(self) -> bool:
        return False


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def z_equivalents(records: pd.DataFrame) -> pd.Series:
    """One z-equivalent per record (NaN where none can be derived)."""
    z = pd.to_numeric(
        records.get("z", pd.Series(np.nan, index=records.index)), errors="coerce",
    ).astype(float).copy()

    if "percentile" in records.columns:
        missing = z.isna() & records["percentile"].notna()
        if missing.any():
            z[missing] = percentile_to_z(records.loc[missing, "percentile"])

    if "score_type" in records.columns:
        missing = z.isna() & records["score"].notna()
        for idx in records.index[missing]:
            distribution = DISTRIBUTIONS.get(records.at[idx, "score_type"])
            if distribution is not None:
                mean, sd = distribution
                z[idx] = (float(records.at[idx, "score"]) - mean) / sd

    return z.astype(float)


def chart_level(records: pd.DataFrame) -> str:
    """``subdomain`` when any record has one, otherwise ``narrow``."""
    if "subdomain" in records.columns and records["subdomain"].notna().any():
        return "subdomain"
    return "narrow"


def summarize_categories(records: pd.DataFrame, level: str) -> pd.DataFrame:
    """
    Mean z and 95% range per category at ``level``.

    Returns:
        DataFrame with columns category, mean_z, lower, upper, n, sorted by
        mean_z.  Categories whose mean is not finite are dropped.
    """
    frame = pd.DataFrame({
        "category": records[level] if level in records.columns else np.nan,
        "z": z_equivalents(records),
    })
    frame = frame[frame["category"].notna() & np.isfinite(frame["z"])]
    if frame.empty:
        return pd.DataFrame(columns=["category", "mean_z", "lower", "upper", "n"])

    summary = (
        frame.groupby("category", sort=True)["z"]
        .agg(mean_z="mean", sd="std", n="count")
        .reset_index()
    )
    half_width = (CI_Z * summary["sd"] / np.sqrt(summary["n"])).fillna(0.0)
    summary["lower"] = summary["mean_z"] - half_width
    summary["upper"] = summary["mean_z"] + half_width
    summary = summary[np.isfinite(summary["mean_z"])]
    summary = summary.sort_values(["mean_z", "category"], kind="mergesort")
    return summary[["category", "mean_z", "lower", "upper", "n"]].reset_index(drop=True)


def compose_chart(
    records: pd.DataFrame,
    domain_config: DomainConfig,
    informant: str = PRIMARY_INFORMANT,
    level: str | None = None,
    age_variant: str | None = None,
) -> ChartArtifact | EmptyArtifact:
    """
    Build the chart artifact for one unit.

    Args:
        records: The unit's filtered records (with ``score_type`` when
            available, see ``apply_score_types``).
        domain_config: The unit's domain; ``plot_title`` becomes the title.
        informant: The unit's informant tag.
        level: ``subdomain`` or ``narrow``; chosen from the data when None.
        age_variant: Resolved age variant (multi-informant domains).

    Returns:
        ChartArtifact, or EmptyArtifact when there are no records or no
        category has a finite value.
    """
    stem = artifact_stem(domain_config, informant, age_variant)
    if records.empty:
        return EmptyArtifact("chart", stem)

    level = level or chart_level(records)
    if level not in CHART_LEVELS:
        raise ValueError(f"unknown chart level {level!r}")

    summary = summarize_categories(records, level)
    if summary.empty:
        return EmptyArtifact("chart", stem, reason="no finite values")

    return ChartArtifact(
        stem=stem,
        level=level,
        title=domain_config.plot_title,
        summary=summary,
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def chart_height_in(n_categories: int) -> float:
    return max(CHART_MIN_HEIGHT_IN, n_categories * CHART_BASE_HEIGHT_IN + CHART_HEIGHT_PADDING_IN)


def build_chart_figure(artifact: ChartArtifact) -> go.Figure:
    summary = artifact.summary
    low, high = CHART_Z_RANGE
    fig = go.Figure(
        go.Scatter(
            x=summary["mean_z"],
            y=summary["category"],
            mode="markers",
            error_x=dict(
                type="data",
                symmetric=False,
                array=summary["upper"] - summary["mean_z"],
                arrayminus=summary["mean_z"] - summary["lower"],
                color=LINE_COLOR,
                thickness=1.5,
                width=0,
            ),
            marker=dict(
                size=POINT_SIZE,
                color=summary["mean_z"],
                colorscale=CHART_PALETTE,
                cmin=low,
                cmax=high,
                line=dict(color=LINE_COLOR, width=1),
            ),
            hoverinfo="skip",
        )
    )
    fig.add_vline(x=0, line=dict(color=LINE_COLOR, width=1, dash="dot"))
    fig.update_layout(
        title=dict(text=artifact.title, font=dict(family=FONT_FAMILY, size=12)),
        font=dict(family=FONT_FAMILY),
        plot_bgcolor="white",
        paper_bgcolor="white",
        showlegend=False,
        margin=dict(l=10, r=10, t=60, b=40),
    )
    fig.update_xaxes(title_text="z-score", range=[low - 0.5, high + 0.5], gridcolor="#EEEEEE", zeroline=False)
    fig.update_yaxes(automargin=True, categoryorder="array", categoryarray=list(summary["category"]))
    return fig


def _write_chart_image(artifact: ChartArtifact, path: Path, fmt: str) -> None:
    height_in = chart_height_in(len(artifact.summary))
    fig = build_chart_figure(artifact)
    fig.write_image(
        str(path),
        format=fmt,
        width=int(CHART_WIDTH_IN * CHART_DPI),
        height=int(height_in * CHART_DPI),
    )


def write_chart_artifact(
    artifact: ChartArtifact,
    directory: Path | str,
    formats: tuple[str, ...] = CHART_FORMATS,
    skip_if_exists: bool = SKIP_IF_EXISTS,
) -> list[Path]:
    """
    Render ``artifact`` into ``directory`` once per format.

    Args:
        artifact: Composed chart.
        directory: Output directory (created if missing).
        formats: Image formats understood by kaleido (``svg``, ``pdf``, ``png``).
        skip_if_exists: Leave an existing file in place instead of
            re-rendering it; the path is still reported.

    Returns:
        Paths of the chart files, in ``formats`` order.

    Raises:
        ArtifactWriteError: The directory or a file cannot be written.
    """
    directory = Path(directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ArtifactWriteError(directory, str(exc)) from exc

    written = []
    for fmt in formats:
        path = directory / chart_filename(artifact.stem, artifact.level, fmt)
        if skip_if_exists and path.exists():
            logger.info("%s exists, skipping", path.name)
            written.append(path)
            continue
        try:
            _write_chart_image(artifact, path, fmt)
        except (OSError, ValueError, RuntimeError) as exc:
            raise ArtifactWriteError(path, str(exc)) from exc
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
