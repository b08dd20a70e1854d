# src/multirate_euler/core_solver.py
"""Multi-rate fixed-step explicit Euler integrator.

The integrator advances a state y(x) from x0 towards x_end using forward Euler
with a fixed step, and interleaves instantaneous event updates with the
continuous dynamics. Three step sizes, ordered finest to coarsest, drive three
nested loops:

    h_event:  continuous Euler steps (the only loop that advances x),
    h_obs:    one instantaneous event update per observation interval,
              applied *before* that interval's burst of Euler steps,
    h_report: observer callback and an output sample per report interval.

Loop counts are computed once per run by ceiling division:

    num_report_steps   = ceil((x_end - x0) / h_report)
    num_obs_per_report = ceil(h_report / h_obs)
    num_event_per_obs  = ceil(h_obs / h_event)

No loop clamps at x_end, so ratios that are not integers make the run step
slightly past x_end. Ratios within a few ulps of an integer are snapped to
that integer first, so binary floating-point noise ((0.1 * 3) / 0.1 is
3.0000000000000004) does not add a spurious iteration.

Validation policy:
    - Non-positive or non-finite step sizes, a step size sequence that is not
      a triple, a non-floating state dtype, and a non-finite time range or
      initial state always raise ConfigurationError.
    - x_end < x0 and an unordered step size triple raise ConfigurationError when
      strict=True (default); with strict=False they emit a RuntimeWarning and
      the run proceeds with the literal loop counts.
    All checks run before any sample is recorded or any state is mutated.

Performance hygiene:
    - The working state, derivative and delta buffers are preallocated.
    - The inner loop uses in-place NumPy ops and np.copyto.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from .errors import (
    ConfigurationError,
    IntegrationError,
    raise_invalid_config,
    raise_state_shape_error,
    raise_unordered_step_sizes,
)
from .recorder import RunRecorder, Stats
from .system import DerivativeFunction, System, as_system

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import DTypeLike

    from .config import EulerRunConfig

logger = logging.getLogger(__name__)


# =============================================================================
# Errors / messages
# =============================================================================

_STEP_SIZE_LEN_ERROR_MSG = "expected 3 step sizes (h_event, h_obs, h_report), got {n}"
_STEP_SIZE_POSITIVE_ERROR_MSG = "step sizes must be finite and > 0, got {value!r}"
_TIME_FINITE_ERROR_MSG = "must be finite, got {value!r}"
_TIME_RANGE_ERROR_MSG = "x_end={x_end!r} is before x0={x0!r}"
_INITIAL_STATE_ERROR_MSG = "initial state must be a numeric array"
_INITIAL_STATE_FINITE_ERROR_MSG = "initial state contains non-finite values"
_DTYPE_ERROR_MSG = "state dtype must be a floating-point dtype, got {dtype}"
_ALREADY_INTEGRATED_ERROR_MSG = (
    "Integrator has already run; construct a new Euler instance to integrate again"
)

_RATIO_SNAP_ULPS = 4


# =============================================================================
# Configuration dataclasses
# =============================================================================


@dataclass(slots=True, frozen=True)
class StepSizes:
    """Step sizes ordered finest to coarsest.

    Attributes:
        h_event: Continuous Euler step size.
        h_obs: Interval between instantaneous event updates.
        h_report: Interval between observer callbacks and output samples.
    """

    h_event: float
    h_obs: float
    h_report: float

    @classmethod
    def from_sequence(cls, values: Sequence[float] | StepSizes) -> StepSizes:
        """
        Build StepSizes from a 3-sequence.

        Args:
            values: (h_event, h_obs, h_report) or an existing StepSizes.

        Raises:
            ConfigurationError: If values does not hold exactly 3 numbers.

        Returns:
            StepSizes instance.
        """
        if isinstance(values, StepSizes):
            return values
        try:
            floats = tuple(float(h) for h in values)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Invalid integrator configuration for 'step_size': {exc}."
            ) from exc
        if len(floats) != 3:
            raise_invalid_config(
                field="step_size",
                detail=_STEP_SIZE_LEN_ERROR_MSG.format(n=len(floats)),
            )
        return cls(*floats)

    def as_tuple(self) -> tuple[float, float, float]:
        """Return (h_event, h_obs, h_report)."""
        return (self.h_event, self.h_obs, self.h_report)

    @property
    def is_ordered(self) -> bool:
        """True if h_event <= h_obs <= h_report."""
        return self.h_event <= self.h_obs <= self.h_report


@dataclass(slots=True, frozen=True)
class EulerOptions:
    """Optional configuration for Euler.

    Attributes:
        strict: If True, x_end < x0 and unordered step sizes raise; otherwise
            they warn and the run proceeds permissively.
        dtype: Floating-point dtype of the working state.
    """

    strict: bool = True
    dtype: DTypeLike = np.float64


@dataclass(slots=True, frozen=True)
class LoopPlan:
    """Resolved loop counts for one run.

    Attributes:
        num_report_steps: Outer (report) iterations.
        num_obs_per_report: Middle (observation/event) iterations per report.
        num_event_per_obs: Inner (Euler) steps per observation.
    """

    num_report_steps: int
    num_obs_per_report: int
    num_event_per_obs: int

    @property
    def total_steps(self) -> int:
        """Total number of Euler steps the plan performs."""
        return self.num_report_steps * self.num_obs_per_report * self.num_event_per_obs

    @property
    def num_samples(self) -> int:
        """Number of output samples the plan records."""
        return self.num_report_steps + 2


def _ceil_ratio(num: float, den: float) -> int:
    """
    Ceiling of num / den, snapping near-integer ratios first.

    Args:
        num: Numerator.
        den: Denominator (non-zero).

    Returns:
        Non-negative loop count.
    """
    ratio = num / den
    nearest = float(np.rint(ratio))
    if abs(ratio - nearest) <= _RATIO_SNAP_ULPS * np.spacing(abs(nearest)):
        return max(0, int(nearest))
    return max(0, int(np.ceil(ratio)))


def _readonly(arr: NDArray[np.floating]) -> NDArray[np.floating]:
    view = arr.view()
    view.flags.writeable = False
    return view


# =============================================================================
# Euler
# =============================================================================


class Euler:
    """Multi-rate explicit Euler integrator with instantaneous events."""

    def __init__(
        self,
        system: System | DerivativeFunction,
        x: float,
        y: Sequence[float] | NDArray[np.floating],
        x_end: float,
        step_size: Sequence[float] | StepSizes,
        *,
        options: EulerOptions | None = None,
    ) -> None:
        """Initialize Euler.

        Args:
            system: Dynamics provider, or a bare derivative callable f(x, y).
            x: Initial value of the independent variable.
            y: Initial state. Copied; scalars become shape (1,).
            x_end: Final value of the independent variable.
            step_size: (h_event, h_obs, h_report), finest to coarsest.
            options: Optional EulerOptions.

        Raises:
            ConfigurationError: If y or step_size cannot be interpreted.
        """
        opts = options or EulerOptions()
        self.system = as_system(system)
        self.strict = bool(opts.strict)
        self.dtype = np.dtype(opts.dtype)

        self.x0 = float(x)
        self.x_end = float(x_end)
        self.step_sizes = StepSizes.from_sequence(step_size)

        try:
            y0 = np.atleast_1d(np.array(y, dtype=self.dtype, copy=True))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(_INITIAL_STATE_ERROR_MSG) from exc
        self.y0 = y0
        self.y0.flags.writeable = False
        self.state_shape: tuple[int, ...] = tuple(y0.shape)

        self.x = self.x0

        # Preallocate buffers
        self._y_curr: NDArray[np.floating] = np.array(y0, copy=True)
        self._y_view: NDArray[np.floating] = _readonly(self._y_curr)
        self._f_n: NDArray[np.floating] = np.zeros_like(self._y_curr)
        self._dy: NDArray[np.floating] = np.zeros_like(self._y_curr)

        self.recorder = RunRecorder(self.state_shape, dtype=self.dtype)
        self._plan: LoopPlan | None = None
        self._integrated = False

    @classmethod
    def from_config(
        cls,
        system: System | DerivativeFunction,
        y: Sequence[float] | NDArray[np.floating],
        config: EulerRunConfig | Mapping[str, Any],
    ) -> Euler:
        """Build an Euler integrator from a validated run configuration.

        Args:
            system: Dynamics provider or bare derivative callable.
            y: Initial state.
            config: EulerRunConfig, or a mapping validated into one.

        Returns:
            Configured Euler instance.
        """
        from .config import EulerRunConfig  # noqa: PLC0415

        cfg = (
            config
            if isinstance(config, EulerRunConfig)
            else EulerRunConfig.model_validate(dict(config))
        )
        return cls(
            system,
            cfg.x0,
            y,
            cfg.x_end,
            cfg.to_step_sizes(),
            options=cfg.to_options(),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def y(self) -> NDArray[np.floating]:
        """Current state (read-only view)."""
        return self._y_view

    @property
    def x_out(self) -> tuple[float, ...]:
        """Recorded output times."""
        return self.recorder.x_out

    @property
    def y_out(self) -> tuple[NDArray[np.floating], ...]:
        """Recorded output states."""
        return self.recorder.y_out

    @property
    def stats(self) -> Stats:
        """Step statistics of the run."""
        return self.recorder.stats

    @property
    def plan(self) -> LoopPlan:
        """Resolved loop counts (validates the configuration on first access)."""
        return self._ensure_plan()

    # ------------------------------------------------------------------
    # Validation / planning
    # ------------------------------------------------------------------

    def _warn_or_raise(self, raiser: Callable[[], None], msg: str) -> None:
        """Raise via raiser when strict, otherwise warn with msg.

        Args:
            raiser: Callable that raises a ConfigurationError.
            msg: Warning message for the permissive path.
        """
        if self.strict:
            raiser()
        logger.warning("%s", msg)
        # Caller of integrate() or plan: _validate, _resolve_plan, _ensure_plan.
        warnings.warn(msg, RuntimeWarning, stacklevel=6)

    def _validate(self) -> None:
        """Pre-flight validation of time range, step sizes and initial state.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        if not np.issubdtype(self.dtype, np.floating):
            raise_invalid_config(
                field="dtype",
                detail=_DTYPE_ERROR_MSG.format(dtype=self.dtype),
            )

        for name, value in (("x0", self.x0), ("x_end", self.x_end)):
            if not np.isfinite(value):
                raise_invalid_config(
                    field=name,
                    detail=_TIME_FINITE_ERROR_MSG.format(value=value),
                )

        steps = self.step_sizes.as_tuple()
        for h in steps:
            if not (np.isfinite(h) and h > 0.0):
                raise_invalid_config(
                    field="step_size",
                    detail=_STEP_SIZE_POSITIVE_ERROR_MSG.format(value=steps),
                )

        if not np.all(np.isfinite(self.y0)):
            raise_invalid_config(field="y0", detail=_INITIAL_STATE_FINITE_ERROR_MSG)

        if self.x_end < self.x0:
            detail = _TIME_RANGE_ERROR_MSG.format(x_end=self.x_end, x0=self.x0)
            self._warn_or_raise(
                lambda: raise_invalid_config(field="x_end", detail=detail),
                f"{detail}; no report steps will be taken",
            )

        if not self.step_sizes.is_ordered:
            self._warn_or_raise(
                lambda: raise_unordered_step_sizes(steps),
                (
                    f"step sizes {steps!r} are not ordered finest to coarsest; "
                    "inverted levels run a single iteration each"
                ),
            )

    def _ensure_plan(self) -> LoopPlan:
        if self._plan is None:
            self._plan = self._resolve_plan()
        return self._plan

    def _resolve_plan(self) -> LoopPlan:
        """Validate the configuration and compute loop counts.

        Returns:
            Resolved LoopPlan.
        """
        self._validate()
        h = self.step_sizes
        return LoopPlan(
            num_report_steps=_ceil_ratio(self.x_end - self.x0, h.h_report),
            num_obs_per_report=_ceil_ratio(h.h_report, h.h_obs),
            num_event_per_obs=_ceil_ratio(h.h_obs, h.h_event),
        )

    # ------------------------------------------------------------------
    # Provider evaluation helper (shape + dtype enforcement)
    # ------------------------------------------------------------------

    def _eval_into(
        self,
        out: NDArray[np.floating],
        func: Callable[[float, NDArray[np.floating]], NDArray[np.floating]],
        name: str,
    ) -> None:
        """Evaluate func(x, y) into out with shape enforcement.

        Args:
            out: Output buffer to write into.
            func: Provider function (derivative or event).
            name: Provider name used in error messages.

        Raises:
            StateShapeError: If func returns an array with an unexpected shape.
        """
        f = np.asarray(func(self.x, self._y_view), dtype=self.dtype)
        if f.shape != self.state_shape:
            # Scalar deltas are accepted for one-element states.
            if f.size == 1 and self._y_curr.size == 1:
                f = f.reshape(self.state_shape)
            else:
                raise_state_shape_error(
                    name=name, expected=self.state_shape, got=f.shape
                )
        np.copyto(out, f)

    # ------------------------------------------------------------------
    # One-step kernels
    # ------------------------------------------------------------------

    def _step(self) -> None:
        """Forward Euler step: y <- y + f(x, y) * h_event, x <- x + h_event."""
        h = self.step_sizes.h_event
        self._eval_into(self._f_n, self.system.derivative, "derivative")
        np.multiply(self._f_n, h, out=self._dy)
        self._y_curr += self._dy
        self.x += h
        self.recorder.count_step()

    def _event_step(self) -> None:
        """Instantaneous update y <- y + event(x, y); x does not advance."""
        self._eval_into(self._dy, self.system.event, "event")
        self._y_curr += self._dy

    def _observe(self) -> None:
        snapshot = np.array(self._y_curr, copy=True)
        snapshot.flags.writeable = False
        self.system.observer(self.x, snapshot)

    # ------------------------------------------------------------------
    # Public run loop
    # ------------------------------------------------------------------

    def integrate(self) -> Stats:
        """Run the multi-rate loop to completion.

        Returns:
            Final step statistics.

        Raises:
            ConfigurationError: If the configuration is invalid (nothing is
                recorded or mutated in that case).
            IntegrationError: If this instance has already been integrated.
        """
        if self._integrated:
            raise IntegrationError(_ALREADY_INTEGRATED_ERROR_MSG)
        plan = self._ensure_plan()
        self._integrated = True

        logger.debug(
            "Integrating x=[%g, %g] with h=%s: %d report x %d obs x %d event steps",
            self.x0,
            self.x_end,
            self.step_sizes.as_tuple(),
            plan.num_report_steps,
            plan.num_obs_per_report,
            plan.num_event_per_obs,
        )

        self.recorder.record(self.x, self._y_curr)
        self._observe()

        for _ in range(plan.num_report_steps):
            for _ in range(plan.num_obs_per_report):
                self._event_step()
                for _ in range(plan.num_event_per_obs):
                    self._step()
            self._observe()
            self.recorder.record(self.x, self._y_curr)

        self.recorder.record(self.x, self._y_curr)

        logger.debug(
            "Integration finished at x=%g after %d steps",
            self.x,
            self.stats.accepted_steps,
        )
        return self.stats


def integrate(
    system: System | DerivativeFunction,
    x: float,
    y: Sequence[float] | NDArray[np.floating],
    x_end: float,
    step_size: Sequence[float] | StepSizes,
    *,
    options: EulerOptions | None = None,
) -> RunRecorder:
    """Construct an Euler integrator, run it, and return its recorder.

    Args:
        system: Dynamics provider or bare derivative callable.
        x: Initial value of the independent variable.
        y: Initial state.
        x_end: Final value of the independent variable.
        step_size: (h_event, h_obs, h_report).
        options: Optional EulerOptions.

    Returns:
        RunRecorder holding the output trace and statistics.
    """
    solver = Euler(system, x, y, x_end, step_size, options=options)
    solver.integrate()
    return solver.recorder
