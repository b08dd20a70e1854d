# src/multirate_euler/recorder.py
"""Output trace and step statistics for an integration run.

The recorder is a lightweight, append-only store of (x, y) samples plus the
run's step counters. It is owned by :class:`multirate_euler.Euler` for the
duration of a run and is read-only from the caller's point of view:

- samples are copied on record and flagged non-writeable,
- accessors return tuples or freshly stacked arrays, never internal lists.

The recorder intentionally does not step anything; it only manages samples,
counters and shape metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from numpy.typing import DTypeLike


# Error / message constants -------------------------------------------------

_SAMPLE_SHAPE_ERROR = "Sample shape {actual} does not match state shape {expected}"
_SAMPLE_INDEX_OOB_ERROR = "Sample index out of bounds: {idx}"
_EMPTY_TRACE_ERROR = "No samples have been recorded yet"


# Typing helpers ------------------------------------------------------------

FloatArray = npt.NDArray[np.floating[Any]]


@dataclass(slots=True)
class Stats:
    """Step counters for a run.

    Attributes:
        num_eval: Number of derivative evaluations.
        accepted_steps: Number of accepted steps.
        rejected_steps: Number of rejected steps (always 0 for fixed-step Euler).
    """

    num_eval: int = 0
    accepted_steps: int = 0
    rejected_steps: int = 0

    def __str__(self) -> str:
        return (
            f"Number of function evaluations: {self.num_eval}\n"
            f"Number of accepted steps: {self.accepted_steps}\n"
            f"Number of rejected steps: {self.rejected_steps}"
        )


class RunRecorder:
    """Append-only (x, y) trace with step statistics."""

    def __init__(self, state_shape: tuple[int, ...], *, dtype: DTypeLike) -> None:
        """
        Initialize RunRecorder.

        Args:
            state_shape: Shape of every recorded state.
            dtype: Floating-point dtype of recorded states.
        """
        self.state_shape = tuple(int(d) for d in state_shape)
        self.dtype = np.dtype(dtype)
        self.stats = Stats()

        self._times: list[float] = []
        self._states: list[FloatArray] = []

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record(self, x: float, y: np.ndarray) -> None:
        """
        Append a copy of (x, y) to the trace.

        Args:
            x: Independent variable value.
            y: State, shape state_shape.

        Raises:
            ValueError: if y has incorrect shape.
        """
        sample = np.array(y, dtype=self.dtype, copy=True)
        if sample.shape != self.state_shape:
            raise ValueError(
                _SAMPLE_SHAPE_ERROR.format(
                    actual=sample.shape, expected=self.state_shape
                )
            )
        sample.flags.writeable = False
        self._times.append(float(x))
        self._states.append(sample)

    def count_step(self) -> None:
        """Account for one accepted step with one derivative evaluation."""
        self.stats.num_eval += 1
        self.stats.accepted_steps += 1

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def n_samples(self) -> int:
        """Number of recorded samples."""
        return len(self._times)

    @property
    def x_out(self) -> tuple[float, ...]:
        """Recorded values of the independent variable, in order."""
        return tuple(self._times)

    @property
    def y_out(self) -> tuple[FloatArray, ...]:
        """Recorded states (read-only arrays), in order."""
        return tuple(self._states)

    def get_sample(self, idx: int) -> tuple[float, FloatArray]:
        """
        Return the (x, y) sample at a given index.

        Args:
            idx: Sample index in [0, n_samples).

        Raises:
            IndexError: if idx is out of bounds.

        Returns:
            Tuple of (x, y).
        """
        if not (0 <= idx < self.n_samples):
            raise IndexError(_SAMPLE_INDEX_OOB_ERROR.format(idx=idx))
        return self._times[idx], self._states[idx]

    def times(self) -> FloatArray:
        """Return recorded times as a 1D array of shape (n_samples,)."""
        return np.asarray(self._times, dtype=float)

    def states(self) -> FloatArray:
        """
        Return recorded states stacked along a new leading axis.

        Raises:
            RuntimeError: if nothing has been recorded.

        Returns:
            Array of shape (n_samples, *state_shape).
        """
        if not self._states:
            raise RuntimeError(_EMPTY_TRACE_ERROR)
        return np.stack(self._states, axis=0)

    def solution(self) -> FloatArray:
        """
        Return the trace as a 2D table with time in the first column.

        States are flattened, so the result has shape (n_samples, 1 + n) with
        n = prod(state_shape).

        Returns:
            Float64 array of shape (n_samples, 1 + n).
        """
        states = self.states().reshape(self.n_samples, -1)
        return np.column_stack(
            (self.times(), np.asarray(states, dtype=np.float64))
        ).astype(np.float64, copy=False)
