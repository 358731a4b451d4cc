# tests/test_solver.py

import math

import pytest

from ephemcore.core.errors import InternalError
from ephemcore.core.time import AstroTime
from ephemcore.search.solver import find_ascent, search


def _t(ut: float) -> AstroTime:
    return AstroTime.from_ut(ut, model="espenak-meeus")


def test_linear_root():
    """A linear function is solved to well within the one-second tolerance."""
    root = 100.123456
    tx = search(lambda t: t.ut - root, _t(100.0), _t(101.0))
    assert tx is not None
    assert tx.ut == pytest.approx(root, abs=1.0 / 86400.0)


def test_reversed_bracket():
    root = 50.5
    tx = search(lambda t: root - t.ut, _t(51.0), _t(50.0))
    assert tx is not None
    assert tx.ut == pytest.approx(root, abs=1.0 / 86400.0)


def test_nonlinear_root():
    tx = search(lambda t: math.sin(t.ut), _t(3.0), _t(3.3), dt_tolerance_seconds=0.01)
    assert tx is not None
    assert tx.ut == pytest.approx(math.pi, abs=0.01 / 86400.0 * 2)


def test_no_sign_change_returns_none():
    assert search(lambda t: t.ut * t.ut + 1.0, _t(-1.0), _t(1.0)) is None


def test_endpoint_roots():
    t1, t2 = _t(0.0), _t(1.0)
    assert search(lambda t: t.ut, t1, t2) is t1
    assert search(lambda t: t.ut - 1.0, t1, t2) is t2


def test_initial_values_save_evaluations():
    calls = []

    def f(t: AstroTime) -> float:
        calls.append(t.ut)
        return t.ut - 0.25

    search(f, _t(0.0), _t(1.0), init_f1=-0.25, init_f2=0.75)
    assert 0.0 not in calls and 1.0 not in calls


def test_iteration_limit_raises():
    """A discontinuous sign change can never meet the time tolerance."""
    with pytest.raises(InternalError):
        search(lambda t: -1.0 if t.ut < 0.3 else 1.0, _t(0.0), _t(1.0),
               dt_tolerance_seconds=1e-9, iter_limit=5)


def test_find_ascent_brackets_crossing():
    # altitude-like function descending then ascending through zero at 0.6
    def f(t: AstroTime) -> float:
        return 10.0 * (t.ut - 0.6) * (t.ut + 0.4)

    t1, t2 = _t(0.0), _t(1.0)
    info = find_ascent(0, f, 30.0, t1, t2, f(t1), f(t2))
    assert info is not None
    assert info.ax < 0.0 <= info.ay
    assert info.tx.ut <= 0.6 <= info.ty.ut


def test_find_ascent_descending_only():
    f = lambda t: 0.5 - t.ut  # noqa: E731
    t1, t2 = _t(0.0), _t(1.0)
    assert find_ascent(0, f, 1.0, t1, t2, f(t1), f(t2)) is None


def test_linear_function_needs_at_most_two_iterations():
    calls = []

    def f(t: AstroTime) -> float:
        calls.append(t.ut)
        return 3.0 * (t.ut - 0.7)

    tx = search(f, _t(0.0), _t(1.0))
    assert tx.ut == pytest.approx(0.7, abs=1e-9)
    # two endpoint evaluations plus at most two interpolations
    assert len(calls) <= 4
