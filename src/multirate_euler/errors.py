# src/multirate_euler/errors.py
"""Error types and raise helpers for multirate_euler.

This module centralizes:
- explicit error classes with actionable messages, and
- small helpers that build standardized messages for configuration problems.

All configuration errors are raised during pre-flight validation, before the
integrator records or mutates any state.
"""

from __future__ import annotations

from typing import Final

_STEP_ORDER_HINT: Final[str] = (
    "Step sizes are given finest to coarsest as (h_event, h_obs, h_report) "
    "and must satisfy 0 < h_event <= h_obs <= h_report."
)


class MultirateEulerError(Exception):
    """Base exception for multirate_euler errors."""


class IntegrationError(MultirateEulerError, RuntimeError):
    """Raised when an integration run cannot be carried out."""


class ConfigurationError(IntegrationError, ValueError):
    """Raised when the time range or step size configuration is invalid."""


class StateShapeError(MultirateEulerError, ValueError):
    """Raised when a derivative or event delta does not match the state shape."""


def raise_invalid_config(
    *,
    field: str,
    detail: str,
    hint: str | None = None,
) -> None:
    """Raise a standardized ConfigurationError.

    Args:
        field: Name of the offending configuration field.
        detail: Human-readable description of the problem.
        hint: Optional remediation hint appended to the message.

    Raises:
        ConfigurationError: Always.
    """
    parts: list[str] = [f"Invalid integrator configuration for '{field}': {detail}."]
    if hint:
        parts.append(hint)
    raise ConfigurationError(" ".join(parts))


def raise_unordered_step_sizes(step_sizes: tuple[float, float, float]) -> None:
    """Raise a ConfigurationError for a step size triple that is not ordered.

    Args:
        step_sizes: The offending (h_event, h_obs, h_report) triple.

    Raises:
        ConfigurationError: Always.
    """
    raise_invalid_config(
        field="step_size",
        detail=f"got {step_sizes!r}",
        hint=_STEP_ORDER_HINT,
    )


def raise_state_shape_error(*, name: str, expected: tuple[int, ...], got: object) -> None:
    """Raise a standardized StateShapeError.

    Args:
        name: Name of the provider output with the shape issue.
        expected: Expected state shape.
        got: Actual observed shape.

    Raises:
        StateShapeError: Always.
    """
    msg = f"{name} returned shape {got!r}; expected {expected!r} (the state shape)."
    raise StateShapeError(msg)
