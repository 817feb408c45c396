"""
src/artifacts — Table and chart artifacts for one (domain, informant) unit.

Module layout
-------------
config.py  — Table columns and labels, missing text, chart palette
naming.py  — Artifact stems, section directory, file names
tables.py  — compose_table / write_table_artifact (PNG via plotly+kaleido,
             DOCX via python-docx)
charts.py  — compose_chart / write_chart_artifact (SVG via plotly+kaleido)
"""

from .naming import artifact_stem, chart_filename, section_dir, table_filename
from .tables import (
    EmptyArtifact,
    TableArtifact,
    compose_table,
    format_cell,
    write_table_artifact,
)
from .charts import (
    ChartArtifact,
    chart_height_in,
    chart_level,
    compose_chart,
    summarize_categories,
    write_chart_artifact,
    z_equivalents,
)

__all__ = [
    # Naming
    "artifact_stem",
    "chart_filename",
    "section_dir",
    "table_filename",
    # Tables
    "EmptyArtifact",
    "TableArtifact",
    "compose_table",
    "format_cell",
    "write_table_artifact",
    # Charts
    "ChartArtifact",
    "chart_height_in",
    "chart_level",
    "compose_chart",
    "summarize_categories",
    "write_chart_artifact",
    "z_equivalents",
]
