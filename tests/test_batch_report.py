"""
Unit tests for src/reporting/batch_report.py.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.reporting.batch_report import BatchReport
from src.reporting.units import ProcessingUnit, UnitStatus


@pytest.fixture
def report(iq_domain, emotion_child_domain):
    written = ProcessingUnit(emotion_child_domain, "parent", "child")
    for status in (UnitStatus.DATA_LOADED, UnitStatus.CLASSIFIED, UnitStatus.COMPOSED, UnitStatus.WRITTEN):
        written.advance(status)
    written.outputs.append(Path("_02-10_emotion/table_emotion_child_parent.docx"))

    skipped = ProcessingUnit(emotion_child_domain, "self", "child")
    skipped.skip("no data")

    failed = ProcessingUnit(iq_domain, "primary")
    failed.fail("neurocog.csv: unreadable")
    return BatchReport([written, skipped, failed])


class TestBatchReport:

    def test_counts(self, report):
        assert report.counts() == {"written": 1, "skipped": 1, "failed": 1}

    def test_reasons(self, report):
        assert report.reasons() == {
            "skipped": {"emotion_child/child/self": "no data"},
            "failed": {"iq/primary": "neurocog.csv: unreadable"},
        }

    def test_frame(self, report):
        frame = report.to_frame()
        assert list(frame["status"]) == ["written", "skipped", "failed"]
        assert list(frame["ordinal"]) == ["10", "10", "01"]
        assert frame.loc[0, "outputs"].endswith("table_emotion_child_parent.docx")

    def test_empty_report(self):
        report = BatchReport()
        assert report.counts() == {"written": 0, "skipped": 0, "failed": 0}
        assert report.to_frame().empty

    def test_json(self, tmp_path, report):
        path = report.to_json(tmp_path / "reports" / "batch_report.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["counts"] == report.counts()
        assert list(data["written"]) == ["emotion_child/child/parent"]

    def test_summary_lists_reasons(self, report, capsys):
        report.print_summary()
        out = capsys.readouterr().out
        assert "Written:  1" in out
        assert "emotion_child/child/self" in out
        assert "neurocog.csv: unreadable" in out
