"""multirate_euler: fixed-step multi-rate explicit Euler integrator."""

from __future__ import annotations

from .config import EulerRunConfig
from .core_solver import Euler, EulerOptions, LoopPlan, StepSizes, integrate
from .errors import (
    ConfigurationError,
    IntegrationError,
    MultirateEulerError,
    StateShapeError,
)
from .recorder import RunRecorder, Stats
from .system import FunctionSystem, System

__all__ = [
    "ConfigurationError",
    "Euler",
    "EulerOptions",
    "EulerRunConfig",
    "FunctionSystem",
    "IntegrationError",
    "LoopPlan",
    "MultirateEulerError",
    "RunRecorder",
    "StateShapeError",
    "Stats",
    "StepSizes",
    "System",
    "integrate",
]

__version__ = "0.1.0"
