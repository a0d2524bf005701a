# tests/unit/test_types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from waypoint.core.types import Phase


def test_phase_values_match_action_tags():
    assert [p.value for p in Phase] == [
        "moveToGuard",
        "GUARD_LEAVE",
        "GUARD_TRANSITION",
        "GUARD_ENTER",
        "ON_BEFORE_TRANSITION",
        "ON_LEAVE",
        "TRANSITION_TO",
        "ON_ENTER",
        "ON_AFTER_TRANSITION",
    ]


def test_phase_compares_equal_to_string():
    assert Phase.ON_ENTER == "ON_ENTER"
    assert Phase.MOVE_GUARD == "moveToGuard"
    assert str(Phase.GUARD_LEAVE) == "GUARD_LEAVE"


@pytest.mark.parametrize(
    "phase,expected",
    [
        (Phase.MOVE_GUARD, True),
        (Phase.GUARD_LEAVE, True),
        (Phase.GUARD_TRANSITION, True),
        (Phase.GUARD_ENTER, True),
        (Phase.ON_BEFORE_TRANSITION, False),
        (Phase.ON_LEAVE, False),
        (Phase.TRANSITION_TO, False),
        (Phase.ON_ENTER, False),
        (Phase.ON_AFTER_TRANSITION, False),
    ],
)
def test_is_guard(phase, expected):
    assert phase.is_guard is expected
