"""
Report-artifact orchestration: domains × informants → table and chart files.

This module is the single entry point for artifact generation.  It loads
the read-only scoring tables once, resolves informants per domain, runs
each (domain, informant) unit through its state machine, and returns a
BatchReport instead of raising on unit failures.

Per-unit steps:
  1. Load      — family records → domain filter → informant filter
  2. Classify  — score types + footnote groups
  3. Compose   — table and chart artifacts
  4. Write     — section directory _02-{ordinal}_{phenotype_key}/

Only configuration errors (lookup, battery rules, registry, unknown domain
names) propagate to the caller.
"""

from __future__ import annotations

import argparse
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path

from config.run_params import (
    CHART_FORMATS,
    MAX_FAILURES,
    MAX_WORKERS,
    SKIP_IF_EXISTS,
    TABLE_FORMATS,
)
from src.artifacts.charts import compose_chart, write_chart_artifact
from src.artifacts.naming import section_dir
from src.artifacts.tables import compose_table, write_table_artifact
from src.domains.raters import filter_informant_records, resolve_informants
from src.domains.registry import DomainConfig, load_domain_registry, select_domains
from src.domains.sources import SourceHandle, discover_sources, load_family_records, select_domain_records
from src.errors import ArtifactWriteError, ConfigurationError, SourceReadError
from src.scoring.battery_rules import BatteryRuleSet, load_battery_rules
from src.scoring.classifier import apply_score_types, classify_scales
from src.scoring.footnotes import group_footnotes
from src.scoring.lookup import ScoreTypeLookup, load_score_type_lookup

from .batch_report import BatchReport
from .logging_config import configure_logging
from .units import ProcessingUnit, UnitStatus

logger = logging.getLogger(__name__)

NO_DATA = "no data"


class _FailureBudget:
    """Thread-safe failure counter behind the stop-after-N-failures option."""

    def __init__(self, max_failures: int | None) -> None:
        self.max_failures = max_failures
        self.failures = 0
        self._lock = threading.Lock()

    def exhausted(self) -> bool:
        with self._lock:
            return self.max_failures is not None and self.failures >= self.max_failures

    def record(self, unit: ProcessingUnit) -> None:
        if unit.status is UnitStatus.FAILED:
            with self._lock:
                self.failures += 1


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def plan_units(
    domain_configs: list[DomainConfig],
    sources: list[SourceHandle],
) -> list[ProcessingUnit]:
    """
    One unit per (domain, informant); informants without data are SKIPPED
    immediately.
    """
    units = []
    for domain_config in domain_configs:
        resolution = resolve_informants(domain_config, sources)
        for entry in resolution.informants:
            unit = ProcessingUnit(domain_config, entry.tag, resolution.age_variant)
            if not entry.has_data:
                unit.skip(NO_DATA)
            units.append(unit)
        if resolution.no_data:
            logger.info("%s: no data, no artifacts", domain_config.key)
    return units


# ---------------------------------------------------------------------------
# Per-unit processing
# ---------------------------------------------------------------------------

def process_unit(
    unit: ProcessingUnit,
    sources: list[SourceHandle],
    lookup: ScoreTypeLookup,
    rules: BatteryRuleSet,
    output_dir: Path,
    table_formats: tuple[str, ...] = TABLE_FORMATS,
    chart_formats: tuple[str, ...] = CHART_FORMATS,
    skip_if_exists: bool = SKIP_IF_EXISTS,
) -> ProcessingUnit:
    """
    Drive one PENDING unit to a terminal status.

    Read errors, write errors and malformed composer input end the unit as
    FAILED with the error text as its reason.
    """
    domain_config = unit.domain_config
    try:
        # ── Load ──
        records = select_domain_records(
            load_family_records(sources, domain_config.data_source), domain_config,
        )
        records = filter_informant_records(records, unit.informant, unit.age_variant)
        unit.advance(UnitStatus.DATA_LOADED)
        if records.empty:
            unit.skip(NO_DATA)
            return unit

        # ── Classify ──
        classified = classify_scales(records, lookup, rules, domain_config.domain_family)
        scored = apply_score_types(records, classified)
        groups = group_footnotes(classified)
        unit.advance(UnitStatus.CLASSIFIED)

        # ── Compose ──
        table = compose_table(
            scored, classified, groups, domain_config, unit.informant, unit.age_variant,
        )
        chart = compose_chart(
            scored, domain_config, unit.informant, age_variant=unit.age_variant,
        )
        if table.is_empty:
            unit.skip(table.reason)
            return unit
        unit.advance(UnitStatus.COMPOSED)

        # ── Write ──
        directory = section_dir(output_dir, domain_config)
        unit.outputs.extend(write_table_artifact(table, directory, formats=table_formats))
        if chart.is_empty:
            logger.info("%s: chart omitted (%s)", unit.unit_id, chart.reason)
        else:
            unit.outputs.extend(
                write_chart_artifact(
                    chart, directory, formats=chart_formats, skip_if_exists=skip_if_exists,
                )
            )
        unit.advance(UnitStatus.WRITTEN)

    except ConfigurationError:
        raise
    except (SourceReadError, ArtifactWriteError, ValueError, KeyError) as exc:
        logger.error("%s failed: %s", unit.unit_id, exc)
        unit.fail(str(exc))

    return unit


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def run_report_artifacts(
    sources: list[SourceHandle] | Path | str,
    output_dir: Path | str,
    lookup: ScoreTypeLookup | None = None,
    rules: BatteryRuleSet | None = None,
    registry: dict[str, DomainConfig] | None = None,
    max_workers: int = MAX_WORKERS,
    max_failures: int | None = MAX_FAILURES,
    domains: list[str] | None = None,
    table_formats: tuple[str, ...] = TABLE_FORMATS,
    chart_formats: tuple[str, ...] = CHART_FORMATS,
    skip_if_exists: bool = SKIP_IF_EXISTS,
    report_path: Path | None = None,
) -> BatchReport:
    """
    Generate table and chart artifacts for every (domain, informant) unit.

    Args:
        sources: Source handles, or a data directory to discover them in.
        output_dir: Root directory; each domain writes into its
            ``_02-{ordinal}_{phenotype_key}`` section directory.
        lookup: Score-type lookup (loaded from the packaged artifact if None).
        rules: Battery rule set (built from ``BATTERY_RULES`` if None).
        registry: Domain registry (loaded from ``config`` if None).
        max_workers: Worker threads; 1 runs units sequentially in order.
        max_failures: Stop processing new units after this many failures;
            the remaining units are SKIPPED.  None runs every unit.
        domains: Domain keys or phenotype keys to run (None → all).
        table_formats: Table renditions to write.
        chart_formats: Chart renditions to write.
        skip_if_exists: Keep existing chart files instead of re-rendering.
        report_path: Optional JSON destination for the batch report.

    Returns:
        BatchReport covering every planned unit.

    Raises:
        ConfigurationError: Unusable lookup, rules, registry or domain names.
    """
    run_start = datetime.now()
    sep = "=" * 70
    output_dir = Path(output_dir)

    print(f"\n{sep}")
    print("REPORT ARTIFACTS — START")
    print(f"  Output directory: {output_dir}")
    print(f"{sep}\n")

    # ------------------------------------------------------------------
    # Run-wide read-only tables
    # ------------------------------------------------------------------
    if lookup is None:
        lookup = load_score_type_lookup()
    if rules is None:
        rules = load_battery_rules()
    if registry is None:
        registry = load_domain_registry()
    domain_configs = select_domains(registry, domains)

    if isinstance(sources, (str, Path)):
        sources = discover_sources(sources)
    print(f"Sources: {', '.join(s.name for s in sources) or '(none)'}")

    # ------------------------------------------------------------------
    # Plan and run units
    # ------------------------------------------------------------------
    units = plan_units(domain_configs, sources)
    pending = [unit for unit in units if unit.status is UnitStatus.PENDING]
    print(f"Units: {len(units)} planned, {len(pending)} with data\n")

    budget = _FailureBudget(max_failures)

    def run_one(unit: ProcessingUnit) -> ProcessingUnit:
        if budget.exhausted():
            unit.skip(f"stopped after {budget.failures} failures")
            return unit
        try:
            process_unit(
                unit, sources, lookup, rules, output_dir,
                table_formats=table_formats,
                chart_formats=chart_formats,
                skip_if_exists=skip_if_exists,
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            # Every planned unit ends in a terminal status.
            logger.exception("%s failed unexpectedly", unit.unit_id)
            if not unit.status.is_terminal:
                unit.fail(f"{type(exc).__name__}: {exc}")
        budget.record(unit)
        return unit

    if max_workers > 1 and len(pending) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            list(pool.map(run_one, pending))
    else:
        for unit in pending:
            run_one(unit)

    report = BatchReport(units)
    if report_path is not None:
        report.to_json(report_path)

    report.print_summary()
    elapsed = (datetime.now() - run_start).total_seconds()
    counts = report.counts()
    logger.info(
        "Run complete in %.1fs: %d written, %d skipped, %d failed",
        elapsed, counts["written"], counts["skipped"], counts["failed"],
    )
    return report


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate domain table and chart artifacts.")
    parser.add_argument("data_dir", type=Path)
    parser.add_argument("output_dir", type=Path)
    parser.add_argument("--domains", nargs="*", default=None)
    parser.add_argument("--workers", type=int, default=MAX_WORKERS)
    parser.add_argument("--max-failures", type=int, default=MAX_FAILURES)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-dir", type=Path, default=None)
    args = parser.parse_args()

    configure_logging(args.log_level, args.log_dir)
    batch = run_report_artifacts(
        args.data_dir,
        args.output_dir,
        max_workers=args.workers,
        max_failures=args.max_failures,
        domains=args.domains,
        report_path=args.output_dir / "batch_report.json",
    )
    raise SystemExit(1 if batch.failed else 0)
