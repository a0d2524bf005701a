# tests/unit/test_properties.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import itertools

import pytest
from hypothesis import given
from hypothesis import strategies as st

from waypoint.core.states import StateDefinition, TransitionDefinition
from waypoint.core.state_machine import StateMachine
from waypoint.core.types import Phase

IDS = ["S0", "S1", "S2", "S3"]

# -----------------------------------------------------------------------------
# STRATEGIES
# -----------------------------------------------------------------------------

edges_strategy = st.fixed_dictionaries({state_id: st.lists(st.sampled_from(IDS), unique=True) for state_id in IDS})
moves_strategy = st.lists(st.sampled_from(IDS + ["UNKNOWN"]), max_size=20)
verdicts_strategy = st.lists(st.booleans(), min_size=1, max_size=6)
phase_verdicts_strategy = st.lists(st.booleans(), max_size=3)


def make_guard(calls, label, verdict):
    def guard(from_state, to_state, luggage, action, machine):
        calls.append(label)
        return verdict

    return guard


# -----------------------------------------------------------------------------
# PROPERTY TESTS
# -----------------------------------------------------------------------------


@pytest.mark.property
@given(edges=edges_strategy, moves=moves_strategy, verdicts=verdicts_strategy)
def test_move_outcome_matches_state_and_reason(edges, moves, verdicts):
    """A move either lands on the target with no reason, or changes nothing and explains why."""
    answers = itertools.cycle(verdicts)
    table = {
        state_id: StateDefinition(transitions_to=targets, guard_leave=[lambda *args: next(answers)])
        for state_id, targets in edges.items()
    }
    sm = StateMachine(table)

    for target in moves:
        before = sm.current_state
        allowed_edges = sm.next_states()
        moved = sm.move_to(target)
        if moved:
            assert sm.current_state == target
            assert target in allowed_edges
            assert sm.get_last_rejection_reason() == ""
        else:
            assert sm.current_state == before
            assert sm.get_last_rejection_reason() != ""
            assert sm.last_rejection.target == target


@pytest.mark.property
@given(edges=edges_strategy, target=st.sampled_from(IDS + ["UNKNOWN"]))
def test_is_transition_allowed_agrees_with_move_to(edges, target):
    """With deterministic guards the dry run predicts the real move."""
    table = {state_id: StateDefinition(transitions_to=targets) for state_id, targets in edges.items()}
    sm = StateMachine(table, "S0")
    predicted = sm.is_transition_allowed(target)
    reason = sm.get_last_rejection_reason()

    assert sm.current_state == "S0"
    assert sm.move_to(target) is predicted
    assert sm.get_last_rejection_reason() == reason


@pytest.mark.property
@given(
    move=phase_verdicts_strategy,
    leave=phase_verdicts_strategy,
    edge=phase_verdicts_strategy,
    enter=phase_verdicts_strategy,
)
def test_guard_chain_stops_at_first_failure(move, leave, edge, enter):
    """Guards run in phase order and nothing runs after the first falsy one."""
    calls = []
    plan = [
        (Phase.MOVE_GUARD, move),
        (Phase.GUARD_LEAVE, leave),
        (Phase.GUARD_TRANSITION, edge),
        (Phase.GUARD_ENTER, enter),
    ]
    guards = {
        phase: [make_guard(calls, (phase, i), verdict) for i, verdict in enumerate(verdicts)]
        for phase, verdicts in plan
    }
    sm = StateMachine(
        {
            "A": StateDefinition(
                guard_leave=guards[Phase.GUARD_LEAVE],
                transitions_to={"B": TransitionDefinition(guard_transition=guards[Phase.GUARD_TRANSITION])},
            ),
            "B": StateDefinition(guard_enter=guards[Phase.GUARD_ENTER]),
        },
        move_guards=guards[Phase.MOVE_GUARD],
    )

    expected_calls = []
    failure = None
    for phase, verdicts in plan:
        for i, verdict in enumerate(verdicts):
            expected_calls.append((phase, i))
            if not verdict:
                failure = (phase, i)
                break
        if failure:
            break

    moved = sm.move_to("B")

    assert calls == expected_calls
    assert moved is (failure is None)
    if failure is None:
        assert sm.current_state == "B"
    else:
        phase, index = failure
        assert sm.current_state == "A"
        assert sm.get_last_rejection_reason() == f"{phase.value}: ({index}) guard"
