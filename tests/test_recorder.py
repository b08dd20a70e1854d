# tests/test_recorder.py
"""Unit tests for multirate_euler.recorder."""

from __future__ import annotations

import numpy as np
import pytest

from multirate_euler.recorder import RunRecorder, Stats


def _make_recorder(shape: tuple[int, ...] = (2,)) -> RunRecorder:
    return RunRecorder(shape, dtype=np.float64)


def test_record_copies_and_freezes_samples() -> None:
    """Recorded states are copies and cannot be written to."""
    rec = _make_recorder()
    y = np.array([1.0, 2.0])
    rec.record(0.0, y)
    y[0] = 99.0

    x0, y0 = rec.get_sample(0)
    assert x0 == 0.0
    np.testing.assert_array_equal(y0, [1.0, 2.0])
    with pytest.raises(ValueError, match="read-only"):
        y0[0] = 5.0


def test_record_rejects_wrong_shape() -> None:
    """Samples must match the configured state shape."""
    rec = _make_recorder((2,))
    with pytest.raises(ValueError, match="does not match state shape"):
        rec.record(0.0, np.zeros(3))


def test_accessors_return_ordered_tuples() -> None:
    """x_out and y_out are tuples in recording order."""
    rec = _make_recorder()
    rec.record(0.0, [0.0, 0.0])
    rec.record(0.5, [1.0, 2.0])

    assert rec.n_samples == 2
    assert rec.x_out == (0.0, 0.5)
    assert isinstance(rec.y_out, tuple)
    np.testing.assert_array_equal(rec.y_out[1], [1.0, 2.0])


def test_get_sample_out_of_bounds() -> None:
    """get_sample raises IndexError outside [0, n_samples)."""
    rec = _make_recorder()
    rec.record(0.0, [0.0, 0.0])
    with pytest.raises(IndexError, match="out of bounds"):
        rec.get_sample(1)
    with pytest.raises(IndexError):
        rec.get_sample(-1)


def test_states_and_solution_tables() -> None:
    """states() stacks samples; solution() puts time in column 0."""
    rec = _make_recorder((2, 1))
    rec.record(0.0, [[1.0], [2.0]])
    rec.record(1.0, [[3.0], [4.0]])

    states = rec.states()
    assert states.shape == (2, 2, 1)

    table = rec.solution()
    assert table.shape == (2, 3)
    assert table.dtype == np.float64
    np.testing.assert_array_equal(table[:, 0], [0.0, 1.0])
    np.testing.assert_array_equal(table[1, 1:], [3.0, 4.0])


def test_states_requires_samples() -> None:
    """states() on an empty recorder raises RuntimeError."""
    with pytest.raises(RuntimeError, match="No samples"):
        _make_recorder().states()


def test_stats_counting_and_summary() -> None:
    """count_step increments evaluations and accepted steps together."""
    rec = _make_recorder()
    rec.count_step()
    rec.count_step()

    assert rec.stats == Stats(num_eval=2, accepted_steps=2, rejected_steps=0)
    text = str(rec.stats)
    assert "Number of function evaluations: 2" in text
    assert "Number of accepted steps: 2" in text
    assert "Number of rejected steps: 0" in text
