# waypoint/core/guards.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, Optional, Sequence, Tuple

from waypoint.core.callbacks import Callback
from waypoint.core.rejection import Rejection
from waypoint.core.states import EMPTY_STATE, StateDefinition, TransitionDefinition
from waypoint.core.types import Phase, StateID

if TYPE_CHECKING:
    from waypoint.core.state_machine import StateMachine

logger = logging.getLogger(__name__)


class GuardEvaluator:
    """
    Decides whether the machine may move from its current state to a target.

    Structural checks run first (target exists, edge exists), then the guard
    phases in a fixed order: global move guards, the current state's leave
    guards, the edge's guards, the target's enter guards. Evaluation stops at
    the first guard that returns a falsy value; nothing after it runs.
    """

    def evaluate(self, machine: "StateMachine", target: StateID) -> Optional[Rejection]:
        """
        Run the structural checks and the guard chain for ``target``.

        :param machine: The machine whose current state, luggage and global
                        guards are used.
        :param target: The requested target state id.
        :return: None if the transition is allowed, otherwise the Rejection.
        """
        states = machine.get_states()
        current = machine.get_current_state()

        if target not in states:
            return Rejection.invalid_target(current, target)

        source = states.get(current, EMPTY_STATE)
        edge = source.transition(target)
        if edge is None:
            return Rejection.no_transition(current, target)

        luggage = machine.get_luggage()
        for phase, guards in self._chain(machine, source, edge, states[target]):
            logger.debug("%s -> %s: %s (%d guards)", current, target, phase, len(guards))
            failed = _first_failing(guards, current, target, luggage, phase, machine)
            if failed is not None:
                logger.debug("%s -> %s: %s guard %s returned false", current, target, phase, failed.describe())
                return Rejection.by_guard(current, target, phase, failed)
        return None

    @staticmethod
    def _chain(
        machine: "StateMachine",
        source: StateDefinition,
        edge: TransitionDefinition,
        destination: StateDefinition,
    ) -> Iterator[Tuple[Phase, Sequence[Callback]]]:
        """Guard phases in evaluation order."""
        yield Phase.MOVE_GUARD, machine.get_move_to_guard()
        yield Phase.GUARD_LEAVE, source.guard_leave
        yield Phase.GUARD_TRANSITION, edge.guard_transition
        yield Phase.GUARD_ENTER, destination.guard_enter


def _first_failing(
    guards: Sequence[Callback],
    current: StateID,
    target: StateID,
    luggage: object,
    phase: Phase,
    machine: "StateMachine",
) -> Optional[Callback]:
    for guard in guards:
        if not guard.check(current, target, luggage, phase, machine):
            return guard
    return None
