"""
Processing units: one (domain, informant) pair and its state machine.

    PENDING → DATA_LOADED → CLASSIFIED → COMPOSED → WRITTEN
       │           │            │           │
       └───────────┴────────────┴───────────┴──→ FAILED
       └───────────┴────────────┴──→ SKIPPED

WRITTEN, SKIPPED and FAILED are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from src.domains.registry import DomainConfig
from src.errors import InvalidTransitionError


class UnitStatus(Enum):
    PENDING = "pending"
    DATA_LOADED = "data_loaded"
    CLASSIFIED = "classified"
    COMPOSED = "composed"
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({UnitStatus.WRITTEN, UnitStatus.SKIPPED, UnitStatus.FAILED})

ALLOWED_TRANSITIONS: dict[UnitStatus, frozenset[UnitStatus]] = {
    UnitStatus.PENDING: frozenset({UnitStatus.DATA_LOADED, UnitStatus.SKIPPED, UnitStatus.FAILED}),
    UnitStatus.DATA_LOADED: frozenset({UnitStatus.CLASSIFIED, UnitStatus.SKIPPED, UnitStatus.FAILED}),
    UnitStatus.CLASSIFIED: frozenset({UnitStatus.COMPOSED, UnitStatus.SKIPPED, UnitStatus.FAILED}),
    UnitStatus.COMPOSED: frozenset({UnitStatus.WRITTEN, UnitStatus.FAILED}),
    UnitStatus.WRITTEN: frozenset(),
    UnitStatus.SKIPPED: frozenset(),
    UnitStatus.FAILED: frozenset(),
}


@dataclass
class ProcessingUnit:
    """One (domain, informant) pair moving through the artifact pipeline."""

    domain_config: DomainConfig
    informant: str
    age_variant: str | None = None
    status: UnitStatus = UnitStatus.PENDING
    reason: str | None = None
    outputs: list[Path] = field(default_factory=list)
    history: list[UnitStatus] = field(default_factory=lambda: [UnitStatus.PENDING])

    @property
    def unit_id(self) -> str:
        if self.age_variant and self.domain_config.multi_informant:
            return f"{self.domain_config.key}/{self.age_variant}/{self.informant}"
        return f"{self.domain_config.key}/{self.informant}"

    def advance(self, new_status: UnitStatus, reason: str | None = None) -> None:
        """
        Move to ``new_status``.

        Raises:
            InvalidTransitionError: ``new_status`` is not reachable from
                the current status.
        """
        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"{self.unit_id}: cannot move from {self.status.name} to {new_status.name}"
            )
        self.status = new_status
        self.history.append(new_status)
        if reason is not None:
            self.reason = reason

    def skip(self, reason: str) -> None:
        self.advance(UnitStatus.SKIPPED, reason)

    def fail(self, reason: str) -> None:
        self.advance(UnitStatus.FAILED, reason)
