"""
src/domains — Domain configuration, data sources and informant resolution.

Module layout
-------------
config.py    — Record schema, domain families, age-variant hints,
               informant tables and instrument patterns
registry.py  — DomainConfig objects built from config/domain_registry.py
sources.py   — SourceHandle, source discovery, record normalization and
               domain filtering
raters.py    — Age-variant inference and informant resolution

Public interface
----------------
    load_domain_registry()
    ordinal_for(registry, phenotype_key)
    select_domains(registry, names)
    discover_sources(data_dir)
    select_domain_records(records, domain_config)
    resolve_informants(domain_config, available_sources, records)
    filter_informant_records(records, informant, age_variant)
"""

from .registry import (
    DomainConfig,
    load_domain_registry,
    ordinal_for,
    select_domains,
)
from .sources import (
    SourceHandle,
    discover_sources,
    load_family_records,
    normalize_records,
    percentile_to_z,
    select_domain_records,
)
from .raters import (
    InformantEntry,
    InformantResolution,
    filter_informant_records,
    infer_age_variant,
    resolve_informants,
)

__all__ = [
    # Registry
    "DomainConfig",
    "load_domain_registry",
    "ordinal_for",
    "select_domains",
    # Sources
    "SourceHandle",
    "discover_sources",
    "load_family_records",
    "normalize_records",
    "percentile_to_z",
    "select_domain_records",
    # Informants
    "InformantEntry",
    "InformantResolution",
    "filter_informant_records",
    "infer_age_variant",
    "resolve_informants",
]
