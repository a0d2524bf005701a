"""
Core package: state table model, guard evaluation, callback dispatch and the
StateMachine that ties them together.
"""

from .errors import ConfigurationError, ValidationError, WaypointError
from .types import Phase, RejectionKind
from .callbacks import Callback, as_callbacks, callback_name
from .states import StateDefinition, TransitionDefinition
from .rejection import Rejection
from .validation import Severity, ValidationResult, Validator
from .state_machine import StateMachine
from .builder import StateBuilder, StateTableBuilder

__all__ = [
    # Errors
    "ConfigurationError",
    "ValidationError",
    "WaypointError",
    # Table model
    "Callback",
    "StateDefinition",
    "TransitionDefinition",
    "as_callbacks",
    "callback_name",
    "Phase",
    # Machine
    "StateMachine",
    "Rejection",
    "RejectionKind",
    "StateBuilder",
    "StateTableBuilder",
    # Validation
    "Severity",
    "ValidationResult",
    "Validator",
]
