# tests/test_config.py
"""Tests for multirate_euler.config."""

from __future__ import annotations

import numpy as np
import pytest
from pydantic import ValidationError

from multirate_euler import Euler, EulerOptions, EulerRunConfig, StepSizes
from multirate_euler.errors import ConfigurationError


def _base_fields() -> dict[str, object]:
    return {"x_end": 1.0, "h_event": 0.1, "h_obs": 0.5, "h_report": 1.0}


def test_run_config_defaults_to_native_types() -> None:
    """Config defaults produce expected StepSizes and EulerOptions."""
    cfg = EulerRunConfig(**_base_fields())

    assert cfg.x0 == pytest.approx(0.0)
    assert cfg.strict is True
    assert cfg.to_step_sizes() == StepSizes(0.1, 0.5, 1.0)

    opts = cfg.to_options()
    assert isinstance(opts, EulerOptions)
    assert opts.strict is True


def test_run_config_round_trips_strict_flag() -> None:
    """strict=False carries over to EulerOptions."""
    cfg = EulerRunConfig(**_base_fields(), strict=False)
    assert cfg.to_options().strict is False


@pytest.mark.parametrize("field", ["h_event", "h_obs", "h_report"])
@pytest.mark.parametrize("value", [0.0, -1.0])
def test_run_config_rejects_non_positive_steps(field: str, value: float) -> None:
    """Step sizes must be strictly positive."""
    fields = _base_fields()
    fields[field] = value
    with pytest.raises(ValidationError):
        EulerRunConfig(**fields)


def test_run_config_requires_x_end() -> None:
    """x_end has no default."""
    fields = _base_fields()
    del fields["x_end"]
    with pytest.raises(ValidationError):
        EulerRunConfig(**fields)


def test_run_config_allows_unknown_fields() -> None:
    """Unknown fields (for example model parameters) are tolerated."""
    cfg = EulerRunConfig(**_base_fields(), decay_rate=0.3)
    assert cfg.h_event == pytest.approx(0.1)


def test_from_config_accepts_mapping() -> None:
    """Euler.from_config validates a plain mapping and runs."""
    solver = Euler.from_config(
        lambda _x, y: -y,
        [1.0],
        {"x0": 0.0, "x_end": 1.0, "h_event": 0.5, "h_obs": 0.5, "h_report": 1.0},
    )
    solver.integrate()

    assert solver.stats.num_eval == 2
    np.testing.assert_allclose(solver.y, [0.25])


def test_from_config_keeps_integrator_ordering_policy() -> None:
    """Ordering violations pass the model but are rejected by the integrator."""
    cfg = EulerRunConfig(x_end=1.0, h_event=1.0, h_obs=0.5, h_report=1.0)
    solver = Euler.from_config(lambda _x, y: y, [1.0], cfg)
    with pytest.raises(ConfigurationError):
        solver.integrate()
