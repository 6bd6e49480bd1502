import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from quadctrl.quadprog import (
    InfeasibleProblemError,
    QuadProgError,
    cholesky_decomposition,
    cholesky_solve,
    seq,
    singleton,
    solve_quadprog,
)


def _spd(rng, n):
    m = rng.normal(size=(n, n))
    return m @ m.T + n * np.eye(n)


def _objective(G, g0, x):
    return 0.5 * x @ G @ x + g0 @ x


def test_seq_includes_both_ends():
    assert seq(2, 5) == {2, 3, 4, 5}
    assert seq(3, 2) == set()


def test_singleton():
    assert singleton(7) == {7}


def test_cholesky_reconstructs_matrix():
    rng = np.random.default_rng(1)
    a = _spd(rng, 4)
    L = cholesky_decomposition(a)
    assert np.allclose(L @ L.T, a)
    assert np.allclose(L, np.tril(L))
    assert np.all(np.diag(L) > 0)


def test_cholesky_rejects_non_positive_definite():
    with pytest.raises(QuadProgError):
        cholesky_decomposition([[1.0, 2.0], [2.0, 1.0]])


def test_cholesky_rejects_non_square():
    with pytest.raises(ValueError):
        cholesky_decomposition(np.ones((2, 3)))


def test_cholesky_solve_solves_system():
    rng = np.random.default_rng(2)
    a = _spd(rng, 5)
    b = rng.normal(size=5)
    x = cholesky_solve(cholesky_decomposition(a), b)
    assert np.allclose(a @ x, b)


def test_unconstrained_minimum():
    rng = np.random.default_rng(3)
    G = _spd(rng, 3)
    g0 = rng.normal(size=3)
    x, value = solve_quadprog(G, g0, np.zeros((3, 0)), [], np.zeros((3, 0)), [])
    assert np.allclose(x, np.linalg.solve(G, -g0))
    assert value == pytest.approx(_objective(G, g0, x))


def test_inputs_are_not_modified():
    rng = np.random.default_rng(4)
    G = _spd(rng, 3)
    G_copy = G.copy()
    solve_quadprog(G, np.ones(3), [], [], [], [])
    assert np.array_equal(G, G_copy)


def test_equality_constraints_match_kkt_solution():
    rng = np.random.default_rng(5)
    n, p = 4, 2
    G = _spd(rng, n)
    g0 = rng.normal(size=n)
    CE = rng.normal(size=(n, p))
    ce0 = rng.normal(size=p)
    x, value = solve_quadprog(G, g0, CE, ce0, np.zeros((n, 0)), [])
    kkt = np.block([[G, -CE], [CE.T, np.zeros((p, p))]])
    expected = np.linalg.solve(kkt, np.concatenate([-g0, -ce0]))[:n]
    assert np.allclose(x, expected, atol=1e-8)
    assert np.allclose(CE.T @ x + ce0, 0.0, atol=1e-9)
    assert value == pytest.approx(_objective(G, g0, x))


def test_inactive_inequality_leaves_unconstrained_solution():
    G = np.eye(2)
    g0 = np.array([-1.0, -1.0])
    CI = np.array([[1.0], [0.0]])
    x, _ = solve_quadprog(G, g0, [], [], CI, [10.0])
    assert np.allclose(x, -g0)


def test_active_inequality():
    x, value = solve_quadprog(np.eye(2), [0.0, 0.0], [], [], [[1.0], [1.0]], [-1.0])
    assert x[0] == pytest.approx(0.5)
    assert x[1] == pytest.approx(0.5)
    assert value == pytest.approx(0.25)


def test_infeasible_problem_raises():
    with pytest.raises(InfeasibleProblemError):
        solve_quadprog([[1.0]], [0.0], [], [], [[1.0, -1.0]], [-1.0, 0.0])


def test_linearly_dependent_equalities_raise():
    CE = np.array([[1.0, 2.0], [0.0, 0.0]])
    with pytest.raises(QuadProgError):
        solve_quadprog(np.eye(2), [0.0, 0.0], CE, [-1.0, -2.0], [], [])


def test_dimension_mismatch_raises():
    with pytest.raises(ValueError):
        solve_quadprog(np.eye(2), [0.0, 0.0], np.ones((3, 1)), [0.0], [], [])
    with pytest.raises(ValueError):
        solve_quadprog(np.eye(2), [0.0, 0.0], [], [], np.ones((2, 1)), [0.0, 1.0])
    with pytest.raises(ValueError):
        solve_quadprog(np.ones((2, 3)), [0.0, 0.0, 0.0], [], [], [], [])


@settings(max_examples=60, deadline=None)
@given(st.lists(st.floats(-3.0, 3.0), min_size=3, max_size=3))
def test_box_constraints_clip_target(target):
    c = np.array(target)
    n = len(c)
    CI = np.hstack([np.eye(n), -np.eye(n)])
    ci0 = np.concatenate([np.zeros(n), np.ones(n)])
    x, value = solve_quadprog(2.0 * np.eye(n), -2.0 * c, [], [], CI, ci0)
    assert np.allclose(x, np.clip(c, 0.0, 1.0), atol=1e-9)
    assert value == pytest.approx(float(x @ x - 2.0 * c @ x), abs=1e-9)


@settings(max_examples=60, deadline=None)
@given(st.integers(0, 10_000))
def test_random_feasible_problem_is_optimal_and_feasible(seed):
    rng = np.random.default_rng(seed)
    n, m = 4, 6
    G = _spd(rng, n)
    g0 = rng.normal(size=n) * 5
    x0 = rng.normal(size=n)
    CI = rng.normal(size=(n, m))
    ci0 = -CI.T @ x0 + rng.uniform(0.0, 1.0, size=m)
    x, value = solve_quadprog(G, g0, [], [], CI, ci0)
    assert np.all(CI.T @ x + ci0 >= -1e-7)
    assert value == pytest.approx(_objective(G, g0, x), abs=1e-7)
    assert value <= _objective(G, g0, x0) + 1e-7