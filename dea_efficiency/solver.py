# dea_efficiency/solver.py

"""
Adaptador del solver: recibe variables, objetivo y restricciones de cvxpy,
resuelve un problema nuevo y devuelve valores primales y estado.

Ningún estado distinto de óptimo lanza excepción: el tiempo agotado se
informa como ``"time_limit"`` y los fallos del solver como ``"solver_error"``.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field

import cvxpy as cp
import numpy as np

from .constants import (
    DEFAULT_ABSTOL,
    DEFAULT_FEASTOL,
    DEFAULT_MAX_ITER,
    DEFAULT_RELTOL,
    DEFAULT_SOLVER,
    DEFAULT_WORKERS,
    ENV_SOLVER,
    ENV_TIMEOUT,
    ENV_WORKERS,
    OPTIMAL_STATUSES,
    STATUS_SOLVER_ERROR,
    STATUS_TIME_LIMIT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverOptions:
    """
    Configuración del solver y del bucle por DMU.

    ``timeout`` (segundos) limita la espera de cada problema, no el trabajo
    del solver: un hilo que agota el plazo no se puede cancelar y sigue
    hasta que el solver termina. ``workers`` no cuenta esos hilos, así que
    un lote con muchos tiempos agotados puede acumularlos; conviene
    combinar ``timeout`` con ``max_iters`` para acotar su duración.
    """
    solver: str = DEFAULT_SOLVER
    abstol: float = DEFAULT_ABSTOL
    reltol: float = DEFAULT_RELTOL
    feastol: float = DEFAULT_FEASTOL
    max_iters: int = DEFAULT_MAX_ITER
    timeout: float | None = None
    workers: int = DEFAULT_WORKERS
    verbose: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "SolverOptions":
        """Lee DEA_SOLVER, DEA_WORKERS y DEA_TIMEOUT; ``overrides`` tiene prioridad."""
        values = {}
        if os.getenv(ENV_SOLVER):
            values["solver"] = os.getenv(ENV_SOLVER)
        if os.getenv(ENV_WORKERS):
            values["workers"] = int(os.getenv(ENV_WORKERS))
        if os.getenv(ENV_TIMEOUT):
            values["timeout"] = float(os.getenv(ENV_TIMEOUT))
        values.update(overrides)
        return cls(**values)

    def solve_kwargs(self) -> dict:
        kwargs = {"solver": self.solver, "verbose": self.verbose}
        if self.solver.upper() == "ECOS":
            kwargs.update(
                abstol=self.abstol,
                reltol=self.reltol,
                feastol=self.feastol,
                max_iters=self.max_iters,
            )
        return kwargs


@dataclass(frozen=True)
class LinearProgram:
    """Problema de una DMU: variables con nombre, objetivo y restricciones."""
    variables: dict
    objective: object
    constraints: list = field(default_factory=list)


@dataclass(frozen=True)
class SolveOutcome:
    values: dict
    objective_value: float
    status: str

    @property
    def is_optimal(self) -> bool:
        return self.status in OPTIMAL_STATUSES


def _extract(variables: dict, available: bool) -> dict:
    values = {}
    for key, var in variables.items():
        if available and var.value is not None:
            values[key] = np.asarray(var.value, dtype=float).reshape(-1)
        else:
            values[key] = np.full(max(var.size, 1), np.nan)
    return values


def _run(problem: cp.Problem, options: SolverOptions) -> str:
    try:
        problem.solve(**options.solve_kwargs())
    except cp.error.SolverError as exc:
        logger.warning("El solver %s falló: %s", options.solver, exc)
        return STATUS_SOLVER_ERROR
    return problem.status


def solve(program: LinearProgram, options: SolverOptions | None = None) -> SolveOutcome:
    """
    Resuelve ``program`` con un ``cp.Problem`` nuevo. Si ``options.timeout``
    está definido, la llamada se ejecuta en un hilo aparte y se abandona al
    agotarse el plazo.
    """
    options = options or SolverOptions()
    problem = cp.Problem(program.objective, program.constraints)

    if options.timeout is None:
        status = _run(problem, options)
    else:
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(_run, problem, options)
        try:
            status = future.result(timeout=options.timeout)
        except FutureTimeout:
            logger.warning("Tiempo agotado (%.3fs) resolviendo el problema", options.timeout)
            status = STATUS_TIME_LIMIT
        finally:
            executor.shutdown(wait=False)

    # Tras un timeout el hilo puede seguir escribiendo valores: no se leen
    available = status not in (STATUS_TIME_LIMIT, STATUS_SOLVER_ERROR)
    values = _extract(program.variables, available)
    objective_value = problem.value if available and problem.value is not None else np.nan
    return SolveOutcome(values=values, objective_value=float(objective_value), status=status)
