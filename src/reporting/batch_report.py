"""
Batch report: the single record of what a run wrote, skipped and failed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from .units import ProcessingUnit, UnitStatus


@dataclass
class BatchReport:
    units: list[ProcessingUnit] = field(default_factory=list)

    def _with_status(self, status: UnitStatus) -> list[ProcessingUnit]:
        return [unit for unit in self.units if unit.status is status]

    @property
    def written(self) -> list[ProcessingUnit]:
        return self._with_status(UnitStatus.WRITTEN)

    @property
    def skipped(self) -> list[ProcessingUnit]:
        return self._with_status(UnitStatus.SKIPPED)

    @property
    def failed(self) -> list[ProcessingUnit]:
        return self._with_status(UnitStatus.FAILED)

    def counts(self) -> dict[str, int]:
        """Unit counts keyed by ``written``, ``skipped``, ``failed``."""
        return {
            "written": len(self.written),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }

    def reasons(self) -> dict[str, dict[str, str]]:
        """Reason per unit id for skipped and failed units."""
        return {
            "skipped": {unit.unit_id: unit.reason or "" for unit in self.skipped},
            "failed": {unit.unit_id: unit.reason or "" for unit in self.failed},
        }

    def to_frame(self) -> pd.DataFrame:
        """One row per unit: domain, phenotype, informant, status, reason, outputs."""
        rows = [
            {
                "unit_id": unit.unit_id,
                "domain": unit.domain_config.key,
                "phenotype_key": unit.domain_config.phenotype_key,
                "ordinal": unit.domain_config.ordinal,
                "age_variant": unit.age_variant,
                "informant": unit.informant,
                "status": unit.status.value,
                "reason": unit.reason,
                "outputs": ";".join(str(p) for p in unit.outputs),
            }
            for unit in self.units
        ]
        return pd.DataFrame(
            rows,
            columns=[
                "unit_id", "domain", "phenotype_key", "ordinal", "age_variant",
                "informant", "status", "reason", "outputs",
            ],
        )

    def to_dict(self) -> dict:
        return {
            "counts": self.counts(),
            "reasons": self.reasons(),
            "written": {
                unit.unit_id: [str(p) for p in unit.outputs] for unit in self.written
            },
        }

    def to_json(self, path: Path | str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(self.to_dict(), fh, indent=2)
        return path

    def print_summary(self) -> None:
        sep = "=" * 70
        counts = self.counts()
        print(f"\n{sep}")
        print("REPORT ARTIFACTS — BATCH SUMMARY")
        print(sep)
        print(f"  Units:    {len(self.units)}")
        print(f"  Written:  {counts['written']}")
        print(f"  Skipped:  {counts['skipped']}")
        print(f"  Failed:   {counts['failed']}")

        reasons = self.reasons()
        if reasons["skipped"]:
            print("\n  Skipped:")
            for unit_id, reason in reasons["skipped"].items():
                print(f"    {unit_id:<32} {reason}")
        if reasons["failed"]:
            print("\n  Failed:")
            for unit_id, reason in reasons["failed"].items():
                print(f"    {unit_id:<32} {reason}")
        print(sep)
