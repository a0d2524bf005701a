"""waypoint: embeddable finite state machine with guarded, ordered transitions.

A machine is described by a declarative state table. Moving to another state
runs a chain of side-effect free guards (global, leave, transition, enter)
and, when all of them pass, the side-effecting callbacks (before, leave,
transition, enter, after) in a fixed order. An opaque "luggage" object is
handed to every guard and callback.

Rejected moves never raise: ``move_to`` returns False and the machine records
which check or guard refused the move.
"""

from waypoint.core import (
    Callback,
    ConfigurationError,
    Phase,
    Rejection,
    RejectionKind,
    StateDefinition,
    StateMachine,
    StateTableBuilder,
    TransitionDefinition,
    ValidationError,
    WaypointError,
)
from waypoint.config import CallbackRegistry, MachineConfig, build_machine, load_machine_config, load_state_table

__version__ = "0.1.0"

__all__ = [
    "Callback",
    "CallbackRegistry",
    "ConfigurationError",
    "MachineConfig",
    "Phase",
    "Rejection",
    "RejectionKind",
    "StateDefinition",
    "StateMachine",
    "StateTableBuilder",
    "TransitionDefinition",
    "ValidationError",
    "WaypointError",
    "build_machine",
    "load_machine_config",
    "load_state_table",
]
