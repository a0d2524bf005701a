# waypoint/core/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Type definitions and enums for the state machine.

Shared by the registry, the guard evaluator and the dispatcher so that
neither has to import the other.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from waypoint.core.state_machine import StateMachine


class Phase(str, Enum):
    """Action tag passed to every guard and callback.

    Members compare equal to their string values, so a callback written as
    ``if action == "ON_ENTER"`` keeps working.
    """

    MOVE_GUARD = "moveToGuard"  # Global guards, run for every transition
    GUARD_LEAVE = "GUARD_LEAVE"  # Guards of the state being left
    GUARD_TRANSITION = "GUARD_TRANSITION"  # Guards of the (source, target) edge
    GUARD_ENTER = "GUARD_ENTER"  # Guards of the state being entered
    ON_BEFORE_TRANSITION = "ON_BEFORE_TRANSITION"
    ON_LEAVE = "ON_LEAVE"
    TRANSITION_TO = "TRANSITION_TO"  # Callbacks of the (source, target) edge
    ON_ENTER = "ON_ENTER"
    ON_AFTER_TRANSITION = "ON_AFTER_TRANSITION"

    @property
    def is_guard(self) -> bool:
        """True for the four guard phases."""
        return self in _GUARD_PHASES

    def __str__(self) -> str:
        return self.value


_GUARD_PHASES = frozenset({Phase.MOVE_GUARD, Phase.GUARD_LEAVE, Phase.GUARD_TRANSITION, Phase.GUARD_ENTER})


class RejectionKind(Enum):
    """Why a transition attempt was refused."""

    INVALID_TARGET = "invalid target state"
    NO_TRANSITION = "no such transition from current state"
    GUARD = "guard rejected"


StateID = str
CallbackKey = Union[int, str]

# (from_state, to_state, luggage, action, machine)
GuardFunction = Callable[[StateID, StateID, Any, Phase, "StateMachine"], Any]
EventFunction = Callable[[StateID, StateID, Any, Phase, "StateMachine"], Any]
