# waypoint/core/callbacks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import functools
import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Tuple, Union

from waypoint.core.errors import ConfigurationError
from waypoint.core.types import CallbackKey, Phase, StateID

if TYPE_CHECKING:
    from waypoint.core.state_machine import StateMachine


def callback_name(fn: Any) -> str:
    """
    Human readable name of a callable, used in rejection reasons and logs.

    :param fn: Any callable accepted as a guard or callback.
    :return: ``"name"`` for plain functions, ``"Class::method"`` for methods,
             ``"closure"`` for lambdas.
    """
    if isinstance(fn, Callback):
        return fn.display_name
    if isinstance(fn, functools.partial):
        return callback_name(fn.func)
    if inspect.ismethod(fn):
        owner = fn.__self__
        cls = owner if isinstance(owner, type) else type(owner)
        return f"{cls.__name__}::{fn.__func__.__name__}"
    if inspect.isfunction(fn):
        if fn.__name__ == "<lambda>":
            return "closure"
        if "<locals>" in fn.__qualname__:
            return fn.__name__
        return fn.__qualname__.replace(".", "::")
    if inspect.isbuiltin(fn):
        return getattr(fn, "__qualname__", fn.__name__)
    if callable(fn):
        return f"{type(fn).__name__}::__call__"
    return f"callable({type(fn).__name__})"


class Callback:
    """
    Wraps a guard or event callable together with the key it was declared
    under. Every callable handed to the engine is wrapped once, at
    registration time, so the hot path never has to inspect it again.
    """

    __slots__ = ("_fn", "_key", "_name")

    def __init__(self, fn: Callable[..., Any], key: Optional[CallbackKey] = None, name: Optional[str] = None) -> None:
        """
        :param fn: The callable, invoked as ``fn(from_state, to_state, luggage, action, machine)``.
        :param key: Declaration key; the list position or mapping key it came from.
        :param name: Optional display name overriding the derived one.
        :raises ConfigurationError: If ``fn`` is not callable.
        """
        if isinstance(fn, Callback):
            fn = fn.fn
        if not callable(fn):
            raise ConfigurationError(f"Callback {key!r} is not callable: {fn!r}")
        self._fn = fn
        self._key = key
        self._name = name or callback_name(fn)

    @property
    def fn(self) -> Callable[..., Any]:
        """The wrapped callable."""
        return self._fn

    @property
    def key(self) -> Optional[CallbackKey]:
        """The declaration key, or None if the callback was registered on its own."""
        return self._key

    @property
    def display_name(self) -> str:
        return self._name

    def with_key(self, key: CallbackKey) -> "Callback":
        """Return a copy of this callback declared under ``key``."""
        return Callback(self._fn, key=key, name=self._name)

    def describe(self) -> str:
        """``"(<key>) <name>"``, the identity shown in rejection reasons."""
        key = "" if self._key is None else self._key
        return f"({key}) {self._name}"

    def invoke(self, from_state: StateID, to_state: StateID, luggage: Any, action: Phase, machine: "StateMachine") -> Any:
        """
        Call the wrapped callable and return whatever it returns.
        Exceptions are not caught.
        """
        return self._fn(from_state, to_state, luggage, action, machine)

    def check(self, from_state: StateID, to_state: StateID, luggage: Any, action: Phase, machine: "StateMachine") -> bool:
        """Invoke as a guard; the result is coerced with ``bool()``."""
        return bool(self._fn(from_state, to_state, luggage, action, machine))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._fn(*args, **kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Callback):
            return NotImplemented
        return self._fn == other._fn and self._key == other._key

    __hash__ = None

    def __repr__(self) -> str:
        return f"Callback({self.describe()})"


CallbackSpec = Union[None, Callable[..., Any], Callback, Iterable[Any], Mapping]


def as_callbacks(spec: CallbackSpec) -> Tuple[Callback, ...]:
    """
    Normalize a callback declaration into an ordered tuple of Callback objects.

    Accepts None, a single callable, a sequence (keys are the positions) or a
    mapping (keys are the mapping keys). Order is preserved.

    :param spec: The declaration to normalize.
    :raises ConfigurationError: If an entry is not callable.
    """
    if spec is None:
        return ()
    if isinstance(spec, Callback):
        return (spec if spec.key is not None else spec.with_key(0),)
    if isinstance(spec, Mapping):
        items = spec.items()
    elif isinstance(spec, (str, bytes)):
        raise ConfigurationError(f"Callback reference {spec!r} must be resolved before use; see load_state_table()")
    elif callable(spec):
        return (Callback(spec, key=0),)
    else:
        try:
            items = enumerate(spec)
        except TypeError:
            raise ConfigurationError(f"Expected a callable or a collection of callables, got {spec!r}") from None
    result = []
    for key, fn in items:
        if isinstance(fn, Callback):
            result.append(fn if fn.key is not None else fn.with_key(key))
        else:
            result.append(Callback(fn, key=key))
    return tuple(result)
