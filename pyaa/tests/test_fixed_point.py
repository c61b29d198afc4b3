import pytest
from itertools import product

import numpy as np

from pyaa.solvers import FixedPointSolver
from pyaa.utils.data import make_linear_contraction, make_affine_map


def test_halving_map():
    x0 = np.random.RandomState(0).randn(10)

    def fun(x):
        return 0.5 * x

    raw = FixedPointSolver(max_iter=500, tol=1e-10, memory=0)
    x_raw, res_raw, stop_crit_raw = raw.solve(fun, x0)

    solver = FixedPointSolver(max_iter=500, tol=1e-10, memory=1)
    x_aa, res_aa, stop_crit_aa = solver.solve(fun, x0)

    assert stop_crit_raw < 1e-10
    assert stop_crit_aa < 1e-10
    # warmup, one exact extrapolation, then convergence check
    assert len(res_aa) <= 3
    assert len(res_aa) < len(res_raw)
    np.testing.assert_allclose(x_aa, 0., atol=1e-10)


@pytest.mark.parametrize("variant, backend",
                         product(["type1", "type2"], ["blas", "numba"]))
def test_linear_contraction(variant, backend):
    tol = 1e-8
    A, b, x_star = make_linear_contraction(30, rate=0.95, random_state=0)
    fun = make_affine_map(A, b)
    x0 = np.zeros(30)

    raw = FixedPointSolver(max_iter=2000, tol=tol, memory=0)
    _, res_raw, _ = raw.solve(fun, x0)

    solver = FixedPointSolver(
        max_iter=2000, tol=tol, memory=5, variant=variant, backend=backend)
    x, res_aa, stop_crit = solver.solve(fun, x0)

    assert stop_crit < tol
    assert len(res_aa) < len(res_raw)
    np.testing.assert_allclose(x, x_star, atol=1e-6)


def test_max_iter_and_verbose(capsys):
    A, b, _ = make_linear_contraction(5, rate=0.9, random_state=2)
    solver = FixedPointSolver(max_iter=3, tol=1e-12, memory=0, verbose=1)
    _, res_out, stop_crit = solver.solve(make_affine_map(A, b), np.zeros(5))

    assert len(res_out) == 3
    assert stop_crit == res_out[-1]
    assert "Iteration 3: residual" in capsys.readouterr().out


def test_solve_checks():
    solver = FixedPointSolver()
    with pytest.raises(TypeError, match="callable"):
        solver.solve(np.eye(2), np.zeros(2))
    with pytest.raises(ValueError, match="1d array"):
        solver.solve(lambda x: x, np.zeros((2, 2)))


if __name__ == '__main__':
    pass
