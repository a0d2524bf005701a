# waypoint/config/loader.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Build state tables and machines from declarative configuration.

A state table can be written as nested mappings, the shape used by hosts that
keep their workflow definitions in YAML or JSON files::

    DRAFT:
      LABEL: Draft
      GUARD_LEAVE: [has_title]
      TRANSITION_TO:
        REVIEW:
          GUARD_TRANSITION: [has_items]
          ON_TRANSITION: [notify_reviewer]
    REVIEW: {}

Callback entries are either callables or string references resolved through a
CallbackRegistry (registered names, or ``package.module:attr`` import paths).
"""

from __future__ import annotations

import importlib
import json
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from waypoint.core.callbacks import Callback, as_callbacks
from waypoint.core.errors import ConfigurationError
from waypoint.core.states import StateDefinition, TransitionDefinition
from waypoint.core.types import StateID

if TYPE_CHECKING:
    from waypoint.core.state_machine import StateMachine

LABEL = "LABEL"
GUARD_ENTER = "GUARD_ENTER"
GUARD_LEAVE = "GUARD_LEAVE"
ON_ENTER = "ON_ENTER"
ON_LEAVE = "ON_LEAVE"
TRANSITION_TO = "TRANSITION_TO"
GUARD_TRANSITION = "GUARD_TRANSITION"
ON_TRANSITION = "ON_TRANSITION"

_STATE_KEYS = {
    LABEL: "label",
    GUARD_ENTER: "guard_enter",
    GUARD_LEAVE: "guard_leave",
    ON_ENTER: "on_enter",
    ON_LEAVE: "on_leave",
    TRANSITION_TO: "transitions_to",
    "TRANSITIONS_TO": "transitions_to",
}
_TRANSITION_KEYS = {
    LABEL: "label",
    GUARD_TRANSITION: "guard_transition",
    ON_TRANSITION: "on_transition",
}
_MACHINE_KEYS = {"states", "initial_state", "move_guards", "on_before_transition", "on_after_transition", "strict"}


class CallbackRegistry:
    """
    Maps names used in configuration files to guard and callback callables.
    """

    def __init__(self, callbacks: Optional[Mapping[str, Callable[..., Any]]] = None) -> None:
        self._callbacks: Dict[str, Callable[..., Any]] = {}
        for name, fn in (callbacks or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: Optional[Callable[..., Any]] = None):
        """
        Register ``fn`` under ``name``. Without ``fn``, returns a decorator.

        :raises ConfigurationError: If ``fn`` is not callable.
        """
        if fn is None:
            def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
                self.register(name, func)
                return func

            return decorator
        if not callable(fn):
            raise ConfigurationError(f"Callback {name!r} is not callable: {fn!r}")
        self._callbacks[name] = fn
        return fn

    def guard(self, name: Optional[str] = None):
        """Decorator registering a guard under ``name`` (default: the function name)."""
        return self._named_decorator(name)

    def event(self, name: Optional[str] = None):
        """Decorator registering an event callback under ``name`` (default: the function name)."""
        return self._named_decorator(name)

    def _named_decorator(self, name: Optional[str]):
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(name or func.__name__, func)
            return func

        return decorator

    def resolve(self, ref: Union[str, Callable[..., Any]]) -> Callable[..., Any]:
        """
        Turn a reference into a callable.

        :param ref: A callable (returned as is), a registered name, or an import
                    path ``package.module:attr`` / ``package.module.attr``.
        :raises ConfigurationError: If the reference cannot be resolved.
        """
        if callable(ref):
            return ref
        if not isinstance(ref, str):
            raise ConfigurationError(f"Callback reference must be a name or a callable, got {ref!r}")
        if ref in self._callbacks:
            return self._callbacks[ref]
        if ":" in ref or "." in ref:
            return _import_callable(ref)
        raise ConfigurationError(f"Unknown callback {ref!r}; registered: {sorted(self._callbacks)}")

    def names(self) -> List[str]:
        return list(self._callbacks)

    def __contains__(self, name: object) -> bool:
        return name in self._callbacks

    def __len__(self) -> int:
        return len(self._callbacks)


def _import_callable(path: str) -> Callable[..., Any]:
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    try:
        target: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            target = getattr(target, attr)
    except (ImportError, AttributeError, ValueError) as e:
        raise ConfigurationError(f"Cannot import callback {path!r}: {e}") from e
    if not callable(target):
        raise ConfigurationError(f"Imported object {path!r} is not callable")
    return target


def _normalize_keys(raw: Mapping, allowed: Mapping[str, str], where: str) -> Dict[str, Any]:
    result = {}
    for key, value in raw.items():
        name = allowed.get(str(key).upper())
        if name is None:
            raise ConfigurationError(f"Unknown key {key!r} in {where}; expected one of {sorted(set(allowed))}")
        result[name] = value
    return result


def _resolve_callbacks(spec: Any, registry: CallbackRegistry) -> Tuple[Callback, ...]:
    """
    Resolve string references in a callback declaration. A string entry keeps
    the reference as its display key.
    """
    if spec is None:
        return ()
    if isinstance(spec, str):
        return (Callback(registry.resolve(spec), key=spec),)
    if isinstance(spec, MappingABC):
        return as_callbacks({key: registry.resolve(fn) for key, fn in spec.items()})
    if callable(spec):
        return as_callbacks(spec)
    result = []
    for position, entry in enumerate(spec):
        if isinstance(entry, str):
            result.append(Callback(registry.resolve(entry), key=entry))
        elif isinstance(entry, Callback):
            result.append(entry if entry.key is not None else entry.with_key(position))
        else:
            result.append(Callback(registry.resolve(entry), key=position))
    return tuple(result)


def _load_transition(source: StateID, target: StateID, raw: Any, registry: CallbackRegistry) -> TransitionDefinition:
    if raw is None:
        return TransitionDefinition()
    if isinstance(raw, TransitionDefinition):
        return raw
    if not isinstance(raw, MappingABC):
        raise ConfigurationError(f"Transition {source!r} -> {target!r} must be a mapping, got {raw!r}")
    fields = _normalize_keys(raw, _TRANSITION_KEYS, f"transition {source!r} -> {target!r}")
    return TransitionDefinition(
        guard_transition=_resolve_callbacks(fields.get("guard_transition"), registry),
        on_transition=_resolve_callbacks(fields.get("on_transition"), registry),
        label=fields.get("label"),
    )


def _load_state(state_id: StateID, raw: Any, registry: CallbackRegistry) -> StateDefinition:
    if raw is None:
        return StateDefinition()
    if isinstance(raw, StateDefinition):
        return raw
    if not isinstance(raw, MappingABC):
        raise ConfigurationError(f"State {state_id!r} must be a mapping, got {raw!r}")
    fields = _normalize_keys(raw, _STATE_KEYS, f"state {state_id!r}")

    transitions = fields.get("transitions_to") or {}
    if isinstance(transitions, str):
        raise ConfigurationError(f"TRANSITION_TO of state {state_id!r} must be a mapping or a list")
    if not isinstance(transitions, MappingABC):
        transitions = {target: None for target in transitions}

    return StateDefinition(
        label=fields.get("label"),
        guard_enter=_resolve_callbacks(fields.get("guard_enter"), registry),
        guard_leave=_resolve_callbacks(fields.get("guard_leave"), registry),
        on_enter=_resolve_callbacks(fields.get("on_enter"), registry),
        on_leave=_resolve_callbacks(fields.get("on_leave"), registry),
        transitions_to={
            str(target): _load_transition(state_id, str(target), edge, registry)
            for target, edge in transitions.items()
        },
    )


def load_state_table(
    raw: Mapping[StateID, Any], registry: Optional[CallbackRegistry] = None
) -> Dict[StateID, StateDefinition]:
    """
    Convert a nested-mapping state table into StateDefinitions, preserving
    declaration order.

    :param raw: Mapping of state id to its nested-mapping definition. Entries
                that already are StateDefinitions are kept.
    :param registry: Resolves string callback references. Without one only
                     callables and import paths are accepted.
    :raises ConfigurationError: On unknown keys or unresolvable references.
    """
    if not isinstance(raw, MappingABC):
        raise ConfigurationError(f"State table must be a mapping, got {type(raw).__name__}")
    registry = registry or CallbackRegistry()
    return {str(state_id): _load_state(str(state_id), cfg, registry) for state_id, cfg in raw.items()}


@dataclass(frozen=True)
class MachineConfig:
    """Everything needed to construct a StateMachine, minus the luggage."""

    states: Mapping[StateID, StateDefinition]
    initial_state: Optional[StateID] = None
    move_guards: Tuple[Callback, ...] = ()
    on_before_transition: Tuple[Callback, ...] = ()
    on_after_transition: Tuple[Callback, ...] = ()
    strict: bool = False


def _load_raw_config(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    suffix = config_path.suffix.lower()
    with config_path.open("r", encoding="utf-8") as stream:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(stream) or {}
        if suffix == ".json":
            return json.load(stream)
        raise ConfigurationError(f"Unsupported config format: {suffix}")


def load_machine_config(
    source: Union[str, Path, Mapping[str, Any]], registry: Optional[CallbackRegistry] = None
) -> MachineConfig:
    """
    Load a machine configuration from a YAML/JSON file or an in-memory mapping.

    Top-level keys: ``states`` (required), ``initial_state``, ``move_guards``,
    ``on_before_transition``, ``on_after_transition``, ``strict``.

    :raises FileNotFoundError: If ``source`` is a path that does not exist.
    :raises ConfigurationError: If the configuration is malformed.
    """
    if isinstance(source, MappingABC):
        raw = dict(source)
    else:
        raw = _load_raw_config(Path(source))
    if not isinstance(raw, MappingABC):
        raise ConfigurationError("Machine configuration must be a mapping at the top level")

    unknown = set(raw) - _MACHINE_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown machine configuration keys: {sorted(unknown)}")
    if "states" not in raw:
        raise ConfigurationError("Machine configuration has no 'states' section")

    registry = registry or CallbackRegistry()
    # YAML reads bare numbers as ints; state ids are always strings.
    initial_state = raw.get("initial_state")
    return MachineConfig(
        states=load_state_table(raw["states"] or {}, registry),
        initial_state=None if initial_state is None else str(initial_state),
        move_guards=_resolve_callbacks(raw.get("move_guards"), registry),
        on_before_transition=_resolve_callbacks(raw.get("on_before_transition"), registry),
        on_after_transition=_resolve_callbacks(raw.get("on_after_transition"), registry),
        strict=bool(raw.get("strict", False)),
    )


def build_machine(config: MachineConfig, luggage: Any = None) -> "StateMachine":
    """
    Construct a StateMachine from a loaded configuration.

    :param config: The configuration returned by ``load_machine_config``.
    :param luggage: Context object handed to every guard and callback.
    """
    from waypoint.core.state_machine import StateMachine

    return StateMachine(
        config.states,
        initial_state=config.initial_state,
        luggage=luggage,
        move_guards=config.move_guards,
        on_before_transition=config.on_before_transition,
        on_after_transition=config.on_after_transition,
        strict=config.strict,
    )
