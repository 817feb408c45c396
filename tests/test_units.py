"""
Unit tests for src/reporting/units.py: the ProcessingUnit state machine.
"""

from __future__ import annotations

import pytest

from src.errors import InvalidTransitionError
from src.reporting.units import ALLOWED_TRANSITIONS, TERMINAL_STATES, ProcessingUnit, UnitStatus


def _unit_at(domain, *path):
    unit = ProcessingUnit(domain, "primary")
    for status in path:
        unit.advance(status)
    return unit


class TestTransitions:

    def test_happy_path(self, iq_domain):
        unit = _unit_at(
            iq_domain,
            UnitStatus.DATA_LOADED, UnitStatus.CLASSIFIED, UnitStatus.COMPOSED, UnitStatus.WRITTEN,
        )
        assert unit.status is UnitStatus.WRITTEN
        assert unit.history == [
            UnitStatus.PENDING, UnitStatus.DATA_LOADED, UnitStatus.CLASSIFIED,
            UnitStatus.COMPOSED, UnitStatus.WRITTEN,
        ]
        assert unit.status.is_terminal

    @pytest.mark.parametrize("path", [
        (),
        (UnitStatus.DATA_LOADED,),
        (UnitStatus.DATA_LOADED, UnitStatus.CLASSIFIED),
        (UnitStatus.DATA_LOADED, UnitStatus.CLASSIFIED, UnitStatus.COMPOSED),
    ])
    def test_fail_from_any_non_terminal_state(self, iq_domain, path):
        unit = _unit_at(iq_domain, *path)
        unit.fail("disk full")
        assert unit.status is UnitStatus.FAILED
        assert unit.reason == "disk full"

    def test_skip_before_composition(self, iq_domain):
        unit = _unit_at(iq_domain, UnitStatus.DATA_LOADED)
        unit.skip("no data")
        assert unit.status is UnitStatus.SKIPPED
        assert unit.reason == "no data"

    def test_no_skip_after_composition(self, iq_domain):
        unit = _unit_at(iq_domain, UnitStatus.DATA_LOADED, UnitStatus.CLASSIFIED, UnitStatus.COMPOSED)
        with pytest.raises(InvalidTransitionError, match="COMPOSED"):
            unit.skip("too late")

    def test_no_jumping_ahead(self, iq_domain):
        unit = ProcessingUnit(iq_domain, "primary")
        with pytest.raises(InvalidTransitionError):
            unit.advance(UnitStatus.COMPOSED)
        assert unit.status is UnitStatus.PENDING
        assert unit.history == [UnitStatus.PENDING]

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATES, key=lambda s: s.value))
    def test_terminal_states_are_final(self, terminal):
        assert ALLOWED_TRANSITIONS[terminal] == frozenset()
        assert terminal.is_terminal

    def test_terminal_unit_rejects_moves(self, iq_domain):
        unit = ProcessingUnit(iq_domain, "primary")
        unit.skip("no data")
        with pytest.raises(InvalidTransitionError):
            unit.fail("late failure")
        assert unit.reason == "no data"


class TestUnitId:

    def test_single_informant(self, iq_domain):
        assert ProcessingUnit(iq_domain, "primary").unit_id == "iq/primary"

    def test_multi_informant(self, emotion_child_domain):
        unit = ProcessingUnit(emotion_child_domain, "parent", "child")
        assert unit.unit_id == "emotion_child/child/parent"
