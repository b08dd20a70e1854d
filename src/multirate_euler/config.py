# src/multirate_euler/config.py
"""Configuration model for multirate_euler runs.

This module defines a pydantic-facing configuration object suitable for YAML or
JSON run files and translates it into the native dataclasses consumed by
:class:`multirate_euler.core_solver.Euler`.

Notes:
    - Positivity of step sizes is enforced by the model; ordering of the step
      size triple and the x0/x_end range are left to the integrator so the
      strict/permissive policy applies in one place.
    - Unknown fields are allowed and ignored (`extra="allow"`), so a run file
      may carry model parameters alongside integrator settings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from multirate_euler.core_solver import EulerOptions, StepSizes


class EulerRunConfig(BaseModel):
    """Configuration schema for a multi-rate Euler run.

    Step sizes are ordered finest to coarsest: `h_event` for continuous
    steps, `h_obs` between event updates, `h_report` between observer calls.
    """

    model_config = ConfigDict(extra="allow")

    x0: float = Field(default=0.0, description="Initial value of x")
    x_end: float = Field(description="Final value of x")

    h_event: float = Field(gt=0.0, description="Continuous Euler step size")
    h_obs: float = Field(gt=0.0, description="Interval between event updates")
    h_report: float = Field(gt=0.0, description="Interval between reports")

    strict: bool = Field(
        default=True,
        description="Fail fast on unordered step sizes or x_end < x0",
    )

    def to_step_sizes(self) -> StepSizes:
        """Convert the step size fields to a native StepSizes.

        Returns:
            StepSizes instance.
        """
        return StepSizes(
            h_event=self.h_event,
            h_obs=self.h_obs,
            h_report=self.h_report,
        )

    def to_options(self) -> EulerOptions:
        """Convert to native EulerOptions.

        Returns:
            EulerOptions instance.
        """
        return EulerOptions(strict=self.strict)
