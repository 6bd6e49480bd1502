"""Dense convex quadratic programming with the Goldfarb-Idnani dual method.

The problem solved is::

    minimise    0.5 * x^T G x + g0^T x
    subject to  CE^T x + ce0 == 0
                CI^T x + ci0 >= 0

``G`` must be symmetric positive definite. Constraint matrices hold one
constraint per column, so ``CE`` is ``n x p`` and ``CI`` is ``n x m``.
"""

from __future__ import annotations

import enum
import math

import numpy as np

_EPS = float(np.finfo(float).eps)
_INF = math.inf


class QuadProgError(Exception):
    """Raised when a quadratic program cannot be solved."""


class InfeasibleProblemError(QuadProgError):
    """Raised when the constraints of a quadratic program cannot all be met."""


def seq(start, end):
    """Return the set of indices from ``start`` to ``end``, both included."""
    return set(range(start, end + 1))


def singleton(i):
    """Return the set holding the single index ``i``."""
    return {i}


def cholesky_decomposition(A):
    """Return the lower-triangular ``L`` with ``L @ L.T == A``.

    Raises QuadProgError when ``A`` is not positive definite.
    """
    work = np.array(A, dtype=float)
    if work.ndim != 2 or work.shape[0] != work.shape[1]:
        raise ValueError(f"The matrix is not a squared matrix {work.shape}")
    n = work.shape[0]
    for i in range(n):
        for j in range(i, n):
            total = work[i, j] - work[i, :i] @ work[j, :i]
            if i == j:
                if total <= 0.0:
                    raise QuadProgError(
                        f"Error in cholesky decomposition, sum: {total}"
                    )
                work[i, i] = math.sqrt(total)
            else:
                work[j, i] = total / work[i, i]
    return np.tril(work)


def _forward_elimination(L, b):
    y = np.zeros(len(b))
    for i in range(len(b)):
        y[i] = (b[i] - L[i, :i] @ y[:i]) / L[i, i]
    return y


def _backward_elimination(U, y):
    n = len(y)
    x = np.zeros(n)
    for i in reversed(range(n)):
        x[i] = (y[i] - U[i, i + 1:] @ x[i + 1:]) / U[i, i]
    return x


def cholesky_solve(L, b):
    """Solve ``L @ L.T @ x == b`` for ``x`` given the Cholesky factor ``L``."""
    L = np.asarray(L, dtype=float)
    b = np.asarray(b, dtype=float)
    return _backward_elimination(L.T, _forward_elimination(L, b))


def _distance(a, b):
    a1, b1 = abs(a), abs(b)
    if a1 > b1:
        t = b1 / a1
        return a1 * math.sqrt(1.0 + t * t)
    if b1 > a1:
        t = a1 / b1
        return b1 * math.sqrt(1.0 + t * t)
    return a1 * math.sqrt(2.0)


def _update_r(R, r, d, iq):
    for i in reversed(range(iq)):
        r[i] = (d[i] - R[i, i + 1:iq] @ r[i + 1:iq]) / R[i, i]


def _add_constraint(R, J, d, iq, r_norm):
    """Apply Givens rotations for a new active constraint.

    Returns (accepted, new iq, new R norm); R, J and d are updated in place.
    """
    n = len(d)
    for j in range(n - 1, iq, -1):
        cc, ss = d[j - 1], d[j]
        h = _distance(cc, ss)
        if abs(h) < _EPS:
            continue
        d[j] = 0.0
        ss /= h
        cc /= h
        if cc < 0.0:
            cc, ss = -cc, -ss
            d[j - 1] = -h
        else:
            d[j - 1] = h
        xny = ss / (1.0 + cc)
        t1 = J[:, j - 1].copy()
        t2 = J[:, j].copy()
        J[:, j - 1] = t1 * cc + t2 * ss
        J[:, j] = xny * (t1 + J[:, j - 1]) - t2
    iq += 1
    R[:iq, iq - 1] = d[:iq]
    if abs(d[iq - 1]) <= _EPS * r_norm:
        return False, iq, r_norm
    return True, iq, max(r_norm, abs(d[iq - 1]))


def _delete_constraint(R, J, A, u, p, iq, constraint):
    """Remove ``constraint`` from the active set; returns the new iq."""
    positions = [i for i in range(p, iq) if A[i] == constraint]
    if not positions:
        raise ValueError(
            f"Attempt to delete non existing constraint, constraint: {constraint}"
        )
    qq = positions[0]
    A[qq:iq - 1] = A[qq + 1:iq].copy()
    u[qq:iq - 1] = u[qq + 1:iq].copy()
    R[:, qq:iq - 1] = R[:, qq + 1:iq].copy()
    A[iq - 1] = A[iq]
    u[iq - 1] = u[iq]
    A[iq] = 0
    u[iq] = 0.0
    R[:iq, iq - 1] = 0.0
    iq -= 1
    if iq == 0:
        return iq

    for j in range(qq, iq):
        cc, ss = R[j, j], R[j + 1, j]
        h = _distance(cc, ss)
        if abs(h) < _EPS:
            continue
        cc /= h
        ss /= h
        R[j + 1, j] = 0.0
        if cc < 0.0:
            R[j, j] = -h
            cc, ss = -cc, -ss
        else:
            R[j, j] = h
        xny = ss / (1.0 + cc)
        t1 = R[j, j + 1:iq].copy()
        t2 = R[j + 1, j + 1:iq].copy()
        R[j, j + 1:iq] = t1 * cc + t2 * ss
        R[j + 1, j + 1:iq] = xny * (t1 + R[j, j + 1:iq]) - t2
        t1 = J[:, j].copy()
        t2 = J[:, j + 1].copy()
        J[:, j] = t1 * cc + t2 * ss
        J[:, j + 1] = xny * (J[:, j] + t1) - t2
    return iq


def _constraint_matrix(M, n):
    arr = np.asarray(M, dtype=float)
    if arr.ndim == 2:
        return arr
    if arr.size == 0:
        return np.zeros((n, 0))
    raise ValueError(f"A constraint matrix must be two-dimensional, got shape {arr.shape}")


class _Stage(enum.Enum):
    CHOOSE = enum.auto()
    SELECT = enum.auto()
    STEP = enum.auto()


def solve_quadprog(G, g0, CE, ce0, CI, ci0):
    """Solve the quadratic program and return ``(x, value)``.

    Raises ValueError for inconsistent dimensions, QuadProgError for a matrix
    ``G`` that is not positive definite or linearly dependent equality
    constraints, and InfeasibleProblemError when no feasible point exists.
    The inputs are not modified.
    """
    G = np.array(G, dtype=float)
    if G.ndim != 2:
        raise ValueError(f"The matrix G must be two-dimensional, got shape {G.shape}")
    n = G.shape[1]
    CE = _constraint_matrix(CE, n)
    CI = _constraint_matrix(CI, n)
    g0 = np.asarray(g0, dtype=float).ravel()
    ce0 = np.asarray(ce0, dtype=float).ravel()
    ci0 = np.asarray(ci0, dtype=float).ravel()
    p, m = CE.shape[1], CI.shape[1]

    if G.shape[0] != n:
        raise ValueError(
            f"The matrix G is not a squared matrix ({G.shape[0]} x {G.shape[1]})"
        )
    if len(g0) != n:
        raise ValueError(
            f"The vector g0 is incompatible (incorrect dimension {len(g0)}, expecting {n})"
        )
    if CE.shape[0] != n:
        raise ValueError(
            f"The matrix CE is incompatible (incorrect number of rows {CE.shape[0]} , expecting {n})"
        )
    if len(ce0) != p:
        raise ValueError(
            f"The vector ce0 is incompatible (incorrect dimension {len(ce0)}, expecting {p})"
        )
    if CI.shape[0] != n:
        raise ValueError(
            f"The matrix CI is incompatible (incorrect number of rows {CI.shape[0]} , expecting {n})"
        )
    if len(ci0) != m:
        raise ValueError(
            f"The vector ci0 is incompatible (incorrect dimension {len(ci0)}, expecting {m})"
        )

    size = m + p + 1
    R = np.zeros((n, n))
    r = np.zeros(size)
    u = np.zeros(size)
    u_old = np.zeros(size)
    A = np.zeros(size, dtype=int)
    A_old = np.zeros(size, dtype=int)
    iai = np.zeros(size, dtype=int)
    iaexcl = np.zeros(size, dtype=bool)

    c1 = float(np.diagonal(G).sum())
    L = cholesky_decomposition(G)

    # J starts as the transposed inverse of the Cholesky factor.
    J = np.zeros((n, n))
    c2 = 0.0
    for i, unit in enumerate(np.eye(n)):
        z = _forward_elimination(L, unit)
        J[i] = z
        c2 += z[i]
    r_norm = 1.0

    x = -cholesky_solve(L, g0)
    f_value = 0.5 * float(g0 @ x)

    iq = 0
    for i in range(p):
        normal = CE[:, i].copy()
        d = J.T @ normal
        z = J[:, iq:] @ d[iq:]
        _update_r(R, r, d, iq)
        t2 = 0.0
        if abs(z @ z) > _EPS:
            t2 = (-(normal @ x) - ce0[i]) / (z @ normal)
        x += t2 * z
        u[iq] = t2
        u[:iq] -= t2 * r[:iq]
        f_value += 0.5 * t2 * t2 * float(z @ normal)
        A[i] = -i - 1
        accepted, iq, r_norm = _add_constraint(R, J, d, iq, r_norm)
        if not accepted:
            raise QuadProgError("Constraints are linearly dependent")

    iai[:m] = np.arange(m)

    stage = _Stage.CHOOSE
    s = np.zeros(m)
    x_old = x.copy()
    ss = 0.0
    ip = 0
    normal = np.zeros(n)
    while True:
        if stage is _Stage.CHOOSE:
            iai[A[p:iq]] = -1
            iaexcl[:m] = True
            s = CI.T @ x + ci0
            psi = float(np.minimum(s, 0.0).sum())
            ss = 0.0
            ip = 0
            if abs(psi) <= m * _EPS * c1 * c2 * 100.0:
                return x, f_value
            u_old[:iq] = u[:iq]
            A_old[:iq] = A[:iq]
            x_old = x.copy()
            stage = _Stage.SELECT

        elif stage is _Stage.SELECT:
            candidates = (iai[:m] != -1) & iaexcl[:m] & (s < ss)
            if candidates.any():
                ip = int(np.argmin(np.where(candidates, s, _INF)))
                ss = float(s[ip])
            if ss >= 0.0:
                return x, f_value
            normal = CI[:, ip].copy()
            u[iq] = 0.0
            A[iq] = ip
            stage = _Stage.STEP

        else:
            d = J.T @ normal
            z = J[:, iq:] @ d[iq:]
            _update_r(R, r, d, iq)

            dropped = 0
            t1 = _INF
            for k in range(p, iq):
                if r[k] > 0.0 and u[k] / r[k] < t1:
                    t1 = u[k] / r[k]
                    dropped = int(A[k])
            if abs(z @ z) > _EPS:
                t2 = -s[ip] / (z @ normal)
                if t2 < 0:
                    t2 = _INF
            else:
                t2 = _INF
            t = min(t1, t2)

            if t >= _INF:
                raise InfeasibleProblemError("The quadratic program is infeasible")

            if t2 >= _INF:
                u[:iq] -= t * r[:iq]
                u[iq] += t
                iai[dropped] = dropped
                iq = _delete_constraint(R, J, A, u, p, iq, dropped)
                continue

            x += t * z
            f_value += t * float(z @ normal) * (0.5 * t + u[iq])
            u[:iq] -= t * r[:iq]
            u[iq] += t

            if abs(t - t2) < _EPS:
                accepted, iq, r_norm = _add_constraint(R, J, d, iq, r_norm)
                if not accepted:
                    iaexcl[ip] = False
                    iq = _delete_constraint(R, J, A, u, p, iq, ip)
                    iai[:m] = np.arange(m)
                    A[p:iq] = A_old[p:iq]
                    u[p:iq] = u_old[p:iq]
                    iai[A[p:iq]] = -1
                    x = x_old.copy()
                    stage = _Stage.SELECT
                else:
                    iai[ip] = -1
                    stage = _Stage.CHOOSE
                continue

            iai[dropped] = dropped
            iq = _delete_constraint(R, J, A, u, p, iq, dropped)
            s[ip] = CI[:, ip] @ x + ci0[ip]