"""
Domain registry loading: validated, immutable DomainConfig objects built
from config/domain_registry.py.

Ordinals come only from the static table, so the same phenotype key yields
the same ordinal in every process that loads the same configuration.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from config.domain_registry import DOMAIN_ORDER, DOMAIN_REGISTRY
from config.run_params import DATA_SOURCE_FAMILIES
from src.errors import ConfigurationError

from .config import AGE_VARIANTS, DOMAIN_FAMILIES, MULTI_INFORMANT_FAMILIES

logger = logging.getLogger(__name__)

_ORDINAL_RE = re.compile(r"^\d{2}$")

REQUIRED_FIELDS: list[str] = [
    "display_names", "phenotype_key", "ordinal", "data_source",
    "domain_family", "multi_informant",
]


@dataclass(frozen=True)
class DomainConfig:
    """Read-only configuration of one logical report domain."""

    key: str
    display_names: tuple[str, ...]
    phenotype_key: str
    ordinal: str
    data_source: str
    domain_family: str
    multi_informant: bool = False
    age_variant: str | None = None
    scale_allowlist: frozenset[str] | None = None
    plot_title: str = ""


def _build_domain_config(key: str, entry: dict) -> DomainConfig:
    missing = [name for name in REQUIRED_FIELDS if name not in entry]
    if missing:
        raise ConfigurationError(f"domain {key}: missing fields {', '.join(missing)}")

    display_names = tuple(str(name) for name in entry["display_names"] or ())
    if not display_names:
        raise ConfigurationError(f"domain {key}: display_names is empty")

    ordinal = str(entry["ordinal"])
    if not _ORDINAL_RE.match(ordinal) or ordinal == "00":
        raise ConfigurationError(f"domain {key}: ordinal {ordinal!r} is not 01-99")

    if entry["data_source"] not in DATA_SOURCE_FAMILIES:
        raise ConfigurationError(
            f"domain {key}: unknown data_source {entry['data_source']!r}"
        )
    if entry["domain_family"] not in DOMAIN_FAMILIES:
        raise ConfigurationError(
            f"domain {key}: unknown domain_family {entry['domain_family']!r}"
        )

    multi = bool(entry["multi_informant"])
    if multi and entry["domain_family"] not in MULTI_INFORMANT_FAMILIES:
        raise ConfigurationError(
            f"domain {key}: family {entry['domain_family']} has no informant table"
        )

    age_variant = entry.get("age_variant")
    if age_variant is not None and age_variant not in AGE_VARIANTS:
        raise ConfigurationError(f"domain {key}: unknown age_variant {age_variant!r}")

    allowlist = entry.get("scale_allowlist")
    return DomainConfig(
        key=key,
        display_names=display_names,
        phenotype_key=str(entry["phenotype_key"]),
        ordinal=ordinal,
        data_source=entry["data_source"],
        domain_family=entry["domain_family"],
        multi_informant=multi,
        age_variant=age_variant,
        scale_allowlist=frozenset(allowlist) if allowlist is not None else None,
        plot_title=str(entry.get("plot_title") or ""),
    )


def load_domain_registry(
    registry: dict[str, dict] = DOMAIN_REGISTRY,
    order: list[str] = DOMAIN_ORDER,
) -> dict[str, DomainConfig]:
    """
    Validate the static domain table and build DomainConfig objects.

    Args:
        registry: Mapping of domain key → field dict.
        order: Processing order; keys missing from it follow in table order.

    Returns:
        Ordered dict of domain key → DomainConfig.

    Raises:
        ConfigurationError: Malformed entry, unknown key in ``order``, or a
            phenotype key mapped to two different ordinals.
    """
    unknown = [key for key in order if key not in registry]
    if unknown:
        raise ConfigurationError(f"domain order names unknown domains: {', '.join(unknown)}")

    keys = list(order) + [key for key in registry if key not in order]
    configs: dict[str, DomainConfig] = {}
    ordinals: dict[str, str] = {}
    for key in keys:
        domain = _build_domain_config(key, registry[key])
        seen = ordinals.setdefault(domain.phenotype_key, domain.ordinal)
        if seen != domain.ordinal:
            raise ConfigurationError(
                f"phenotype key {domain.phenotype_key!r} maps to ordinals "
                f"{seen} and {domain.ordinal}"
            )
        configs[key] = domain

    logger.info("Loaded %d domains from registry", len(configs))
    return configs


def ordinal_for(registry: dict[str, DomainConfig], phenotype_key: str) -> str:
    """Return the stable two-digit ordinal for ``phenotype_key``."""
    for domain in registry.values():
        if domain.phenotype_key == phenotype_key:
            return domain.ordinal
    raise ConfigurationError(f"unknown phenotype key: {phenotype_key!r}")


def select_domains(
    registry: dict[str, DomainConfig],
    names: list[str] | None = None,
) -> list[DomainConfig]:
    """
    Resolve requested domain names to configs, in registry order.

    Each name may be a domain key (``"emotion_child"``) or a phenotype key
    (``"emotion"``, selecting every variant).  None selects all domains.

    Raises:
        ConfigurationError: A name matches no domain.
    """
    if names is None:
        return list(registry.values())

    wanted = set(names)
    matched = {
        name for name in wanted
        if name in registry or any(d.phenotype_key == name for d in registry.values())
    }
    unknown = sorted(wanted - matched)
    if unknown:
        raise ConfigurationError(f"unknown domain or phenotype key: {', '.join(unknown)}")

    return [
        domain for key, domain in registry.items()
        if key in wanted or domain.phenotype_key in wanted
    ]
