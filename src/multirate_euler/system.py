# src/multirate_euler/system.py
"""Dynamics provider interface for the multi-rate Euler integrator.

A dynamics provider supplies three operations, all called synchronously by the
integrator with a read-only view of the current state:

- derivative(x, y) -> dy/dx, same shape as y (required),
- event(x, y) -> instantaneous delta applied without advancing x,
- observer(x, y) -> None, a notification hook fired at report boundaries.

Any object with these methods satisfies :class:`System`; there is no base class
to inherit from. :class:`FunctionSystem` adapts plain callables.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeAlias, runtime_checkable

import numpy as np
from numpy.typing import NDArray

FloatArray: TypeAlias = NDArray[np.floating]

DerivativeFunction = Callable[[float, FloatArray], FloatArray]
EventFunction = Callable[[float, FloatArray], FloatArray]
ObserverFunction = Callable[[float, FloatArray], None]


@runtime_checkable
class System(Protocol):
    """Protocol for dynamics providers consumed by :class:`~multirate_euler.Euler`."""

    def derivative(self, x: float, y: FloatArray) -> FloatArray:
        """Return dy/dx at (x, y)."""
        ...

    def event(self, x: float, y: FloatArray) -> FloatArray:
        """Return the instantaneous state delta at (x, y)."""
        ...

    def observer(self, x: float, y: FloatArray) -> None:
        """Receive the state at a report boundary."""
        ...


@dataclass(frozen=True, slots=True)
class FunctionSystem:
    """System built from plain callables.

    Attributes:
        derivative_func: Callable computing dy/dx.
        event_func: Optional callable computing an instantaneous delta. When
            None, the event delta is zero.
        observer_func: Optional report-boundary hook. When None, observation is
            a no-op.
    """

    derivative_func: DerivativeFunction
    event_func: EventFunction | None = None
    observer_func: ObserverFunction | None = None

    def derivative(self, x: float, y: FloatArray) -> FloatArray:
        return self.derivative_func(x, y)

    def event(self, x: float, y: FloatArray) -> FloatArray:
        if self.event_func is None:
            return np.zeros_like(y)
        return self.event_func(x, y)

    def observer(self, x: float, y: FloatArray) -> None:
        if self.observer_func is not None:
            self.observer_func(x, y)


def as_system(
    system: System | DerivativeFunction,
) -> System:
    """Coerce a System or a bare derivative callable into a System.

    Args:
        system: Object satisfying :class:`System`, or a callable f(x, y).

    Raises:
        TypeError: If system is neither.

    Returns:
        A System instance.
    """
    if isinstance(system, System):
        return system
    if callable(system):
        return FunctionSystem(system)
    msg = (
        "system must provide derivative/event/observer methods or be a "
        f"callable f(x, y); got {type(system).__name__}"
    )
    raise TypeError(msg)
