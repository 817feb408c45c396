"""
Deterministic artifact names and paths.

  stem        {phenotype_key}  or  {phenotype_key}_{age_variant}_{informant}
  table       table_{stem}.{fmt}
  chart       fig_{stem}_{level}.{fmt}
  directory   _02-{ordinal}_{phenotype_key}/
"""

from __future__ import annotations

from pathlib import Path

from config.run_params import SECTION_DIR_TEMPLATE
from src.domains.config import PRIMARY_INFORMANT
from src.domains.registry import DomainConfig


def artifact_stem(domain_config: DomainConfig, informant: str, age_variant: str | None = None) -> str:
    if not domain_config.multi_informant or informant == PRIMARY_INFORMANT:
        return domain_config.phenotype_key
    variant = age_variant or domain_config.age_variant or "child"
    return f"{domain_config.phenotype_key}_{variant}_{informant}"


def section_dir(output_dir: Path | str, domain_config: DomainConfig) -> Path:
    """Directory holding every artifact of the domain's report section."""
    name = SECTION_DIR_TEMPLATE.format(
        ordinal=domain_config.ordinal,
        phenotype_key=domain_config.phenotype_key,
    )
    return Path(output_dir) / name


def table_filename(stem: str, fmt: str) -> str:
    return f"table_{stem}.{fmt}"


def chart_filename(stem: str, level: str, fmt: str) -> str:
    return f"fig_{stem}_{level}.{fmt}"
