"""
Table artifacts: composition of the footnoted score table for one
(domain, informant) unit and its PNG / DOCX renditions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import parse_xml
from docx.shared import Pt

from config.run_params import TABLE_FORMATS, TABLE_ROW_HEIGHT_PX, TABLE_SCALE, TABLE_WIDTH_PX
from src.domains.config import PRIMARY_INFORMANT
from src.domains.registry import DomainConfig
from src.errors import ArtifactWriteError
from src.scoring.classifier import ScaleClassification, ScaleKey
from src.scoring.footnotes import FootnoteGroup, footnote_for, source_note

from .config import (
    COLUMN_LABELS,
    FONT_FAMILY,
    HEADER_FILL,
    MISSING_TEXT,
    RENDERED_COLUMNS,
    ROW_FILL,
    ROW_ORDER,
    TABLE_COLUMNS,
    TABLE_FONT_PT,
)
from .naming import artifact_stem, table_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmptyArtifact:
    """Marker returned instead of a table or chart when there is nothing to draw."""

    kind: str
    stem: str
    reason: str = "no data"

    @property
    def is_empty(self) -> bool:
        return True


@dataclass
class TableArtifact:
    stem: str
    title: str
    rows: pd.DataFrame
    footnote_groups: list[FootnoteGroup] = field(default_factory=list)
    source_note: str = ""

    @property
    def is_empty(self) -> bool:
        return False

    def footnote_lines(self) -> list[str]:
        return [group.label() for group in self.footnote_groups]


def table_title(domain_config: DomainConfig, informant: str) -> str:
    title = domain_config.display_names[0]
    if domain_config.multi_informant and informant != PRIMARY_INFORMANT:
        title = f"{title} ({informant.capitalize()} Report)"
    return title


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def compose_table(
    records: pd.DataFrame,
    classified: dict[ScaleKey, ScaleClassification],
    footnote_groups: list[FootnoteGroup],
    domain_config: DomainConfig,
    informant: str = PRIMARY_INFORMANT,
    age_variant: str | None = None,
) -> TableArtifact | EmptyArtifact:
    """
    Build the table artifact for one unit.

    Args:
        records: The unit's filtered ScaleRecord DataFrame.
        classified: Classifier output covering every (battery, scale) pair
            in ``records``.
        footnote_groups: Output of ``group_footnotes(classified)``.
        domain_config: The unit's domain.
        informant: The unit's informant tag.
        age_variant: Resolved age variant (multi-informant domains).

    Returns:
        TableArtifact with rows ordered by (subdomain, narrow, scale),
        missing values last, or EmptyArtifact when ``records`` is empty.

    Raises:
        ValueError: A row's scale is missing from ``classified`` or has no
            footnote group.
    """
    stem = artifact_stem(domain_config, informant, age_variant)
    if records.empty:
        return EmptyArtifact("table", stem)

    table_df = records.copy()
    tags, markers = [], []
    for battery, scale in zip(table_df["test_name"], table_df["scale"]):
        key = ScaleKey.of(battery, scale)
        if key not in classified:
            raise ValueError(f"unclassified scale in table input: {key.battery} / {key.scale}")
        tag = classified[key].tag
        marker = footnote_for(footnote_groups, key.battery, tag)
        if marker is None:
            raise ValueError(f"no footnote group for {tag} ({key.battery} / {key.scale})")
        tags.append(tag)
        markers.append(marker)
    table_df["score_type"] = tags
    table_df["footnote"] = markers

    # A zero score or percentile is a placeholder, not a measurement
    for column in ("score", "percentile"):
        table_df[column] = table_df[column].where(table_df[column] != 0, np.nan)

    for column in ROW_ORDER + ["range"]:
        if column not in table_df.columns:
            table_df[column] = np.nan

    table_df = table_df.sort_values(ROW_ORDER, na_position="last", kind="mergesort")
    rows = table_df[TABLE_COLUMNS].reset_index(drop=True)

    return TableArtifact(
        stem=stem,
        title=table_title(domain_config, informant),
        rows=rows,
        footnote_groups=list(footnote_groups),
        source_note=source_note(footnote_groups),
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def format_cell(value) -> str:
    if value is None or (np.isscalar(value) and pd.isna(value)):
        return MISSING_TEXT
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    text = str(value).strip()
    return text if text and text.lower() != "nan" else MISSING_TEXT


def _write_table_png(artifact: TableArtifact, path: Path) -> None:
    columns = [
        [format_cell(v) for v in artifact.rows[column]] for column in RENDERED_COLUMNS
    ]
    scale_index = RENDERED_COLUMNS.index("scale")
    columns[scale_index] = [
        f"{scale}<sup>{marker}</sup>"
        for scale, marker in zip(columns[scale_index], artifact.rows["footnote"])
    ]

    fig = go.Figure(
        go.Table(
            header=dict(
                values=[f"<b>{COLUMN_LABELS[c]}</b>" for c in RENDERED_COLUMNS],
                fill_color=HEADER_FILL,
                align="center",
                font=dict(family=FONT_FAMILY, size=TABLE_FONT_PT + 2),
            ),
            cells=dict(
                values=columns,
                fill_color=ROW_FILL,
                align=["left", "left", "center", "center", "center"],
                font=dict(family=FONT_FAMILY, size=TABLE_FONT_PT + 1),
                height=TABLE_ROW_HEIGHT_PX,
            ),
        )
    )

    notes = artifact.footnote_lines()
    notes_height = 18 * (len(notes) + 1)
    height = TABLE_ROW_HEIGHT_PX * (len(artifact.rows) + 2) + notes_height + 60
    fig.update_layout(
        title=dict(text=artifact.title, font=dict(family=FONT_FAMILY, size=14)),
        margin=dict(l=10, r=10, t=40, b=notes_height),
        annotations=[
            dict(
                text="<br>".join(f"<sup>{g.symbol}</sup> {g.footnote_text}" for g in artifact.footnote_groups),
                showarrow=False,
                xref="paper",
                yref="paper",
                x=0,
                y=0,
                xanchor="left",
                yanchor="top",
                align="left",
                font=dict(family=FONT_FAMILY, size=TABLE_FONT_PT),
            )
        ],
    )
    fig.write_image(str(path), width=TABLE_WIDTH_PX, height=height, scale=TABLE_SCALE)


def _shade(cell, fill: str) -> None:
    shading = parse_xml(
        r'<w:shd {} w:fill="{}"/>'.format(
            'xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"',
            fill.lstrip("#"),
        )
    )
    cell._tc.get_or_add_tcPr().append(shading)


def _write_table_docx(artifact: TableArtifact, path: Path) -> None:
    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = FONT_FAMILY
    style.font.size = Pt(TABLE_FONT_PT)

    heading = doc.add_paragraph()
    run = heading.add_run(artifact.title)
    run.font.bold = True
    run.font.size = Pt(TABLE_FONT_PT + 2)

    table = doc.add_table(rows=1, cols=len(RENDERED_COLUMNS))
    table.style = "Table Grid"
    for cell, column in zip(table.rows[0].cells, RENDERED_COLUMNS):
        cell.text = COLUMN_LABELS[column]
        cell.paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER
        for header_run in cell.paragraphs[0].runs:
            header_run.font.bold = True
        _shade(cell, HEADER_FILL)

    for _, row in artifact.rows.iterrows():
        cells = table.add_row().cells
        for cell, column in zip(cells, RENDERED_COLUMNS):
            cell.text = format_cell(row[column])
            if column == "scale":
                marker = cell.paragraphs[0].add_run(str(row["footnote"]))
                marker.font.superscript = True
            elif column != "test_name":
                cell.paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER

    for group in artifact.footnote_groups:
        p = doc.add_paragraph()
        p.paragraph_format.space_after = Pt(0)
        symbol = p.add_run(group.symbol)
        symbol.font.superscript = True
        p.add_run(f" {group.footnote_text}")

    if artifact.source_note:
        p = doc.add_paragraph()
        p.paragraph_format.space_before = Pt(6)
        note = p.add_run(f"Note. {artifact.source_note}")
        note.font.italic = True

    doc.save(str(path))


SUPPORTED_TABLE_FORMATS: tuple[str, ...] = ("png", "docx")


def _writer_for(fmt: str):
    return _write_table_png if fmt == "png" else _write_table_docx


def write_table_artifact(
    artifact: TableArtifact,
    directory: Path | str,
    formats: tuple[str, ...] = TABLE_FORMATS,
) -> list[Path]:
    """
    Render ``artifact`` into ``directory`` once per format.

    Returns:
        Paths written, in ``formats`` order.

    Raises:
        ValueError: Unknown format.
        ArtifactWriteError: The directory or a file cannot be written.
    """
    unknown = [fmt for fmt in formats if fmt not in SUPPORTED_TABLE_FORMATS]
    if unknown:
        raise ValueError(f"unsupported table format(s): {', '.join(unknown)}")

    directory = Path(directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ArtifactWriteError(directory, str(exc)) from exc

    written = []
    for fmt in formats:
        path = directory / table_filename(artifact.stem, fmt)
        try:
            _writer_for(fmt)(artifact, path)
        except (OSError, ValueError, RuntimeError) as exc:
            raise ArtifactWriteError(path, str(exc)) from exc
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
