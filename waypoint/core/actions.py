# waypoint/core/actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from waypoint.core.callbacks import Callback
from waypoint.core.states import EMPTY_STATE, EMPTY_TRANSITION
from waypoint.core.types import Phase, StateID

if TYPE_CHECKING:
    from waypoint.core.state_machine import StateMachine

logger = logging.getLogger(__name__)


class TransitionExecutor:
    """
    Runs the side-effecting callbacks of an already permitted transition and
    moves the current-state pointer.

    Order: global before hooks, the source's leave callbacks, the edge's
    callbacks, pointer update, the target's enter callbacks, global after
    hooks. Return values are ignored and every callback runs. Exceptions are
    not caught and leave the pointer wherever the failing step left it.
    """

    def execute(self, machine: "StateMachine", target: StateID) -> None:
        """
        Perform the transition to ``target``. Must only be called after the
        guard evaluator allowed it within the same ``move_to`` call.

        :param machine: The machine being transitioned.
        :param target: The target state id.
        """
        states = machine.get_states()
        origin = machine.get_current_state()
        source = states.get(origin, EMPTY_STATE)
        edge = source.transition(target) or EMPTY_TRANSITION

        _run(machine.get_on_before_transition(), origin, target, Phase.ON_BEFORE_TRANSITION, machine)
        _run(source.on_leave, origin, target, Phase.ON_LEAVE, machine)
        _run(edge.on_transition, origin, target, Phase.TRANSITION_TO, machine)

        machine._set_current_state(target)
        logger.debug("Current state changed %s -> %s", origin, target)

        # Enter callbacks see the new state as "from"; after hooks see the original.
        _run(states.get(target, EMPTY_STATE).on_enter, target, target, Phase.ON_ENTER, machine)
        _run(machine.get_on_after_transition(), origin, target, Phase.ON_AFTER_TRANSITION, machine)


def _run(callbacks: Sequence[Callback], from_state: StateID, to_state: StateID, phase: Phase, machine: "StateMachine") -> None:
    logger.debug("%s -> %s: %s (%d callbacks)", from_state, to_state, phase, len(callbacks))
    for callback in callbacks:
        # Read luggage per call; a callback may replace it wholesale.
        callback.invoke(from_state, to_state, machine.get_luggage(), phase, machine)
