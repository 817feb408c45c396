"""
Artifact-layer constants: table columns and labels, missing-value text,
chart palette and chart geometry defaults.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

TABLE_COLUMNS: list[str] = [
    "test_name", "scale", "score", "percentile", "range", "score_type", "footnote",
]

# Header labels for rendered tables (score_type is carried in the data but
# shown only through the footnote marker)
COLUMN_LABELS: dict[str, str] = {
    "test_name":  "Test",
    "scale":      "Scale",
    "score":      "Score",
    "percentile": "‰ Rank",
    "range":      "Range",
}

# Columns rendered in PNG and DOCX tables, in order
RENDERED_COLUMNS: list[str] = ["test_name", "scale", "score", "percentile", "range"]

# Sort keys for table rows; missing values sort last
ROW_ORDER: list[str] = ["subdomain", "narrow", "scale"]

MISSING_TEXT: str = "--"

HEADER_FILL: str = "#D9D9D9"
ROW_FILL: str = "#FFFFFF"
FONT_FAMILY: str = "Times New Roman"
TABLE_FONT_PT: int = 10

# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------

CHART_LEVELS: tuple[str, ...] = ("subdomain", "narrow")

# 95% range around the category mean
CI_Z: float = 1.96

# Extra inches added to the per-category height
CHART_HEIGHT_PADDING_IN: float = 2.0

# Diverging palette from low (red-brown) to high (blue) z-scores
CHART_PALETTE: list[str] = [
    "#7E1700", "#8E3B0B", "#9C5717", "#A86F22", "#B58A30", "#C2A647",
    "#CEC56C", "#D2D78A", "#CBE7B3", "#A7E6D2", "#80D6D7", "#59BDD2",
    "#3DA3C8", "#2E8ABF", "#2471B4", "#1F60AD", "#184EA4", "#0C3B9C",
    "#023198",
]

# z range the colour scale spans
CHART_Z_RANGE: tuple[float, float] = (-3.0, 3.0)

LINE_COLOR: str = "#404040"
POINT_SIZE: int = 12
