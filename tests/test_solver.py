# tests/test_solver.py
import time

import cvxpy as cp
import numpy as np
import pytest

from dea_efficiency import SolverOptions, run_radial
from dea_efficiency.engine import DMURecord, merge_records, run_dmus
from dea_efficiency.solver import LinearProgram, solve


def _small_program():
    x = cp.Variable(2, nonneg=True)
    return LinearProgram(
        variables={"x": x}, objective=cp.Minimize(cp.sum(x)), constraints=[x >= np.array([1.0, 2.0])]
    )


def test_solve_optimal():
    outcome = solve(_small_program())
    assert outcome.is_optimal
    assert outcome.objective_value == pytest.approx(3.0, abs=1e-6)
    np.testing.assert_allclose(outcome.values["x"], [1.0, 2.0], atol=1e-6)


def test_solve_infeasible_gives_nan():
    x = cp.Variable(1, nonneg=True)
    program = LinearProgram(variables={"x": x}, objective=cp.Minimize(x[0]), constraints=[x <= -1])
    outcome = solve(program)
    assert not outcome.is_optimal
    assert np.isnan(outcome.values["x"]).all()


def test_solver_error_is_a_status(monkeypatch):
    def broken(self, *args, **kwargs):
        raise cp.error.SolverError("fallo simulado")

    monkeypatch.setattr(cp.Problem, "solve", broken)
    outcome = solve(_small_program())
    assert outcome.status == "solver_error"
    assert np.isnan(outcome.objective_value)


def test_timeout_reports_time_limit(monkeypatch, caplog):
    def slow(self, *args, **kwargs):
        time.sleep(0.5)

    monkeypatch.setattr(cp.Problem, "solve", slow)
    res = run_radial(
        [[1.0], [2.0]], [[1.0], [1.0]], slack=False, options=SolverOptions(timeout=0.05)
    )
    assert not res.is_optimal
    assert [w.status for w in res.warnings] == ["time_limit", "time_limit"]
    assert [w.dmu for w in res.warnings] == [0, 1]
    assert np.isnan(res.efficiency()).all()
    assert "Tiempo agotado" in caplog.text


def test_options_from_env(monkeypatch):
    monkeypatch.setenv("DEA_SOLVER", "CLARABEL")
    monkeypatch.setenv("DEA_WORKERS", "3")
    monkeypatch.setenv("DEA_TIMEOUT", "2.5")
    opts = SolverOptions.from_env(workers=2)
    assert opts.solver == "CLARABEL"
    assert opts.workers == 2
    assert opts.timeout == 2.5
    assert "abstol" not in opts.solve_kwargs()


def test_default_kwargs_use_ecos_tolerances():
    kwargs = SolverOptions().solve_kwargs()
    assert kwargs["solver"] == "ECOS"
    assert kwargs["abstol"] == pytest.approx(1e-9)


def test_run_dmus_keeps_order():
    def task(i):
        time.sleep(0.01 * (5 - i))
        return DMURecord(index=i, objective=float(i), lambdas=np.zeros(5), status="optimal")

    records = run_dmus(task, 5, SolverOptions(workers=3))
    assert [r.index for r in records] == list(range(5))


def test_merge_records_cleans_and_warns():
    records = [
        DMURecord(index=0, objective=1.0, lambdas=np.array([1.0, 1e-12, -1e-10]), status="optimal"),
        DMURecord(index=1, objective=np.nan, lambdas=np.full(3, np.nan), status="infeasible"),
    ]
    merged = merge_records(records, 3)
    assert merged.peers.toarray()[0].tolist() == [1.0, 0.0, 0.0]
    assert merged.peers[0].nnz == 1
    assert len(merged.warnings) == 1
    assert merged.warnings[0].dmu == 1
    assert merged.warnings[0].stage == "main"


def test_timeout_returns_before_solver_finishes(monkeypatch):
    def slow(self, *args, **kwargs):
        time.sleep(1.0)

    monkeypatch.setattr(cp.Problem, "solve", slow)
    start = time.perf_counter()
    outcome = solve(_small_program(), SolverOptions(timeout=0.05))
    assert outcome.status == "time_limit"
    assert time.perf_counter() - start < 0.9
    assert np.isnan(outcome.values["x"]).all()
