# dea_efficiency/revenue.py
import logging
from dataclasses import replace

import cvxpy as cp
import numpy as np

from .decompose import pin_unpriced_targets, revenue_decomposition
from .engine import DMURecord, merge_records, run_dmus
from .options import Disposal, ModelKind, Orientation, RTS, parse_option
from .radial import _radial_core
from .results import DEAResult
from .solver import LinearProgram, SolverOptions, solve
from .utils import as_matrix, check_names, check_prices, load_reference

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# 1. Problema de ingreso máximo de una DMU
# ------------------------------------------------------------------
def build_revenue_program(
    x0: np.ndarray,
    p0: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    rts: RTS,
    disposal_x: Disposal = Disposal.STRONG,
) -> LinearProgram:
    """
    max  p0·y*
    s.a. Xrefᵀλ ≤ x0 (= con disponibilidad débil),  Yrefᵀλ ≥ y*,  λ ≥ 0
    Σλ = 1 si VRS.
    """
    lambdas = cp.Variable(Xref.shape[0], nonneg=True)
    y_eff = cp.Variable(Yref.shape[1])

    x_lhs = Xref.T @ lambdas
    cons = [
        x_lhs == x0 if disposal_x is Disposal.WEAK else x_lhs <= x0,
        Yref.T @ lambdas >= y_eff,
    ]
    if rts is RTS.VRS:
        cons.append(cp.sum(lambdas) == 1)

    return LinearProgram(
        variables={"lambda": lambdas, "Yeff": y_eff}, objective=cp.Maximize(p0 @ y_eff), constraints=cons
    )


def _revenue_core(X, P, Xref, Yref, rts: RTS, disposal_x: Disposal, options: SolverOptions):
    def task(i: int) -> DMURecord:
        outcome = solve(build_revenue_program(X[i], P[i], Xref, Yref, rts, disposal_x), options)
        return DMURecord(
            index=i,
            objective=outcome.objective_value,
            lambdas=outcome.values["lambda"],
            status=outcome.status,
            values={"Yeff": outcome.values["Yeff"]},
        )

    records = run_dmus(task, X.shape[0], options)
    return merge_records(records, Xref.shape[0], keys=("Yeff",))


# ------------------------------------------------------------------
# 2. Función pública: run_revenue
# ------------------------------------------------------------------
def run_revenue(
    X,
    Y,
    P,
    *,
    rts="VRS",
    disposal_x="strong",
    Xref=None,
    Yref=None,
    names: list[str] | None = None,
    options: SolverOptions | None = None,
) -> DEAResult:
    """
    Eficiencia de ingreso = ingreso observado / ingreso máximo, en (0, 1].
    Se descompone en técnica (1/φ del radial output) y asignativa.
    """
    rts = parse_option(RTS, rts, "rts")
    disposal_x = parse_option(Disposal, disposal_x, "disposal_x")

    X = as_matrix(X, "X")
    Y = as_matrix(Y, "Y")
    P = as_matrix(P, "P")
    Xref, Yref = load_reference(X, Y, Xref, Yref)
    check_prices(P, Y, "P", "Y")
    names = check_names(names, X.shape[0])
    options = options or SolverOptions()

    logger.info(
        "Modelo de ingreso: n=%d, m=%d, s=%d, rts=%s, disposal_x=%s",
        X.shape[0], X.shape[1], Y.shape[1], rts.value, disposal_x.value,
    )

    # 1) Ingreso máximo
    merged = _revenue_core(X, P, Xref, Yref, rts, disposal_x, options)
    y_target = pin_unpriced_targets(merged.matrices["Yeff"], P, merged.peers, Yref)

    # 2) Parte técnica: radial output sin holguras
    technical = _radial_core(
        X, Y, Xref, Yref, Orientation.OUTPUT, rts, disposal_x, Disposal.STRONG, options
    )
    tech_warnings = tuple(replace(w, stage="technical") for w in technical.warnings)

    # 3) Descomposición
    revenue, techeff, alloceff = revenue_decomposition(Y, P, y_target, technical.objective)

    return DEAResult(
        kind=ModelKind.REVENUE,
        n=X.shape[0],
        m=X.shape[1],
        s=Y.shape[1],
        eff=revenue,
        lambdas=merged.peers,
        options={"rts": rts, "disposal_x": disposal_x},
        names=names,
        x_target=X.copy(),
        y_target=y_target,
        techeff=techeff,
        alloceff=alloceff,
        warnings=merged.warnings + tech_warnings,
    )
