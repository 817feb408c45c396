"""
Unit tests for src/artifacts/charts.py.

Image rendering (kaleido) is stubbed out; the tests cover z-equivalents,
category summaries, level choice, chart geometry and file naming.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import numpy as np
import pandas as pd
import pytest

from src.artifacts.charts import (
    ChartArtifact,
    build_chart_figure,
    chart_height_in,
    chart_level,
    compose_chart,
    summarize_categories,
    write_chart_artifact,
    z_equivalents,
)
from src.artifacts.tables import EmptyArtifact
from src.errors import ArtifactWriteError

from .conftest import make_records


def _fake_image(artifact, path, fmt):
    Path(path).write_text("<svg/>")


@pytest.fixture
def rendered():
    with patch("src.artifacts.charts._write_chart_image", side_effect=_fake_image) as mock_image:
        yield mock_image


def _rendered_calls(mock_image):
    return [(artifact.stem, Path(path).name, fmt) for (artifact, path, fmt), _ in mock_image.call_args_list]


class TestZEquivalents:

    def test_precedence_z_then_percentile_then_score(self):
        records = pd.DataFrame({
            "z": [1.0, np.nan, np.nan, np.nan],
            "percentile": [50.0, 84.0, np.nan, np.nan],
            "score": [100.0, 100.0, 115.0, 7.0],
            "score_type": ["standard_score", "standard_score", "standard_score", "raw_score"],
        })
        z = z_equivalents(records)
        assert z.iloc[0] == 1.0
        assert z.iloc[1] == 0.99
        assert z.iloc[2] == pytest.approx(1.0)
        assert np.isnan(z.iloc[3])

    def test_scaled_and_t_scores(self):
        records = pd.DataFrame({
            "score": [13.0, 40.0],
            "score_type": ["scaled_score", "t_score"],
        })
        assert list(z_equivalents(records)) == pytest.approx([1.0, -1.0])

    def test_input_not_modified(self):
        records = pd.DataFrame({"z": [np.nan], "percentile": [50.0]})
        z_equivalents(records)
        assert np.isnan(records["z"].iloc[0])


class TestSummaries:

    def test_level_prefers_subdomain(self, scenario_a_df):
        assert chart_level(scenario_a_df) == "subdomain"
        assert chart_level(scenario_a_df.assign(subdomain=np.nan)) == "narrow"

    def test_sorted_by_mean(self, scenario_a_df):
        summary = summarize_categories(scenario_a_df, "subdomain")
        assert list(summary.columns) == ["category", "mean_z", "lower", "upper", "n"]
        assert list(summary["mean_z"]) == sorted(summary["mean_z"])
        assert summary["n"].sum() == 5

    def test_single_value_collapses_range(self):
        records = make_records([{"percentile": 50, "subdomain": "Working Memory"}])
        row = summarize_categories(records, "subdomain").iloc[0]
        assert row["lower"] == row["mean_z"] == row["upper"] == 0.0
        assert row["n"] == 1

    def test_range_widens_with_spread(self):
        records = make_records([
            {"z": -1.0, "subdomain": "Memory"},
            {"z": 1.0, "subdomain": "Memory"},
        ])
        row = summarize_categories(records, "subdomain").iloc[0]
        assert row["mean_z"] == 0.0
        assert row["lower"] < 0.0 < row["upper"]

    def test_categories_without_finite_values_dropped(self):
        records = make_records([
            {"percentile": None, "score": None, "subdomain": "Nothing"},
            {"percentile": 50, "subdomain": "Something"},
        ])
        summary = summarize_categories(records, "subdomain")
        assert list(summary["category"]) == ["Something"]


class TestComposeChart:

    def test_subdomain_chart(self, iq_domain, scenario_a_df):
        artifact = compose_chart(scenario_a_df, iq_domain)
        assert isinstance(artifact, ChartArtifact)
        assert artifact.level == "subdomain"
        assert artifact.stem == "iq"
        assert artifact.title == iq_domain.plot_title
        assert len(artifact.summary) == 4

    def test_narrow_level_without_subdomains(self, iq_domain, scenario_a_df):
        artifact = compose_chart(scenario_a_df.assign(subdomain=np.nan), iq_domain)
        assert artifact.level == "narrow"

    def test_informant_stem(self, emotion_child_domain, parent_only_df):
        artifact = compose_chart(parent_only_df, emotion_child_domain, "parent", age_variant="child")
        assert artifact.stem == "emotion_child_parent"

    def test_empty_records(self, iq_domain, scenario_a_df):
        artifact = compose_chart(scenario_a_df.iloc[0:0], iq_domain)
        assert isinstance(artifact, EmptyArtifact)
        assert artifact.reason == "no data"

    def test_no_finite_values(self, iq_domain):
        records = make_records([{"percentile": None, "score": None}])
        artifact = compose_chart(records, iq_domain)
        assert isinstance(artifact, EmptyArtifact)
        assert artifact.reason == "no finite values"

    def test_unknown_level(self, iq_domain, scenario_a_df):
        with pytest.raises(ValueError, match="level"):
            compose_chart(scenario_a_df, iq_domain, level="scale")


class TestRendering:

    def test_height_grows_with_categories(self):
        assert chart_height_in(1) == 4.0
        assert chart_height_in(10) == pytest.approx(6.0)
        assert chart_height_in(20) > chart_height_in(10)

    def test_figure_orders_categories_by_mean(self, iq_domain, scenario_a_df):
        artifact = compose_chart(scenario_a_df, iq_domain)
        fig = build_chart_figure(artifact)
        assert list(fig.layout.yaxis.categoryarray) == list(artifact.summary["category"])
        assert fig.layout.title.text == iq_domain.plot_title

    def test_write_names(self, tmp_path, rendered, iq_domain, scenario_a_df):
        artifact = compose_chart(scenario_a_df, iq_domain)
        paths = write_chart_artifact(artifact, tmp_path / "_02-01_iq")
        assert [p.name for p in paths] == ["fig_iq_subdomain.svg"]
        assert _rendered_calls(rendered) == [("iq", "fig_iq_subdomain.svg", "svg")]

    def test_skip_if_exists(self, tmp_path, rendered, iq_domain, scenario_a_df):
        artifact = compose_chart(scenario_a_df, iq_domain)
        existing = tmp_path / "fig_iq_subdomain.svg"
        existing.write_text("old")
        paths = write_chart_artifact(artifact, tmp_path, formats=("svg", "pdf"), skip_if_exists=True)
        assert [p.name for p in paths] == ["fig_iq_subdomain.svg", "fig_iq_subdomain.pdf"]
        assert existing.read_text() == "old"
        assert _rendered_calls(rendered) == [("iq", "fig_iq_subdomain.pdf", "pdf")]

    def test_renderer_failure_wrapped(self, tmp_path, iq_domain, scenario_a_df):
        artifact = compose_chart(scenario_a_df, iq_domain)
        with patch("src.artifacts.charts._write_chart_image",
                   side_effect=ValueError("kaleido missing")), \
             pytest.raises(ArtifactWriteError, match="kaleido missing"):
            write_chart_artifact(artifact, tmp_path)
