"""
src/reporting — Orchestration of report-artifact runs.

Module layout
-------------
units.py           — UnitStatus and the ProcessingUnit state machine
batch_report.py    — BatchReport: counts and reasons per unit
runner.py          — plan_units / process_unit / run_report_artifacts
logging_config.py  — configure_logging

Public interface
----------------
    run_report_artifacts(sources, output_dir, ...)
    configure_logging(level, log_dir)
"""

from .batch_report import BatchReport
from .logging_config import configure_logging
from .runner import plan_units, process_unit, run_report_artifacts
from .units import ProcessingUnit, UnitStatus

__all__ = [
    "BatchReport",
    "ProcessingUnit",
    "UnitStatus",
    "configure_logging",
    "plan_units",
    "process_unit",
    "run_report_artifacts",
]
