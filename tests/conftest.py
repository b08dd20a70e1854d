"""Global pytest configuration and shared fixtures for multirate_euler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
import pytest

if TYPE_CHECKING:
    from numpy.typing import NDArray

    FloatArray = NDArray[np.floating]


# -----------------------------------------------------------------------------
# Recording dynamics provider
# -----------------------------------------------------------------------------


@dataclass
class RecordingSystem:
    """System with constant slope that records every provider call.

    Attributes:
        slope: Constant dy/dx returned by derivative().
        delta: Constant delta returned by event() (None means zero).
        derivative_calls: x values passed to derivative().
        event_calls: x values passed to event().
        observations: (x, y) pairs passed to observer().
    """

    slope: float = 1.0
    delta: float | None = None
    derivative_calls: list[float] = field(default_factory=list)
    event_calls: list[float] = field(default_factory=list)
    observations: list[tuple[float, FloatArray]] = field(default_factory=list)

    def derivative(self, x: float, y: FloatArray) -> FloatArray:
        self.derivative_calls.append(x)
        return np.full_like(y, self.slope)

    def event(self, x: float, y: FloatArray) -> FloatArray:
        self.event_calls.append(x)
        if self.delta is None:
            return np.zeros_like(y)
        return np.full_like(y, self.delta)

    def observer(self, x: float, y: FloatArray) -> None:
        self.observations.append((x, y))


@pytest.fixture
def recording_system() -> RecordingSystem:
    """Return a fresh RecordingSystem with slope 1 and no events."""
    return RecordingSystem()
