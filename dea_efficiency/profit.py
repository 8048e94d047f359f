# dea_efficiency/profit.py
import logging
from dataclasses import replace

import cvxpy as cp
import numpy as np

from .decompose import pin_unpriced_targets, profit_decomposition
from .directional import _ddf_core
from .directions import resolve_directions
from .engine import DMURecord, merge_records, run_dmus
from .options import Disposal, ModelKind, RTS
from .results import DEAResult
from .solver import LinearProgram, SolverOptions, solve
from .utils import as_matrix, check_names, check_prices, load_reference

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# 1. Problema de beneficio máximo de una DMU
# ------------------------------------------------------------------
def build_profit_program(w0: np.ndarray, p0: np.ndarray, Xref: np.ndarray, Yref: np.ndarray) -> LinearProgram:
    """
    max  p0·y* − w0·x*
    s.a. Xrefᵀλ ≤ x*,  Yrefᵀλ ≥ y*,  Σλ = 1,  λ ≥ 0
    """
    nref, m = Xref.shape
    s = Yref.shape[1]

    lambdas = cp.Variable(nref, nonneg=True)
    x_eff = cp.Variable(m)
    y_eff = cp.Variable(s)

    cons = [
        Xref.T @ lambdas <= x_eff,
        Yref.T @ lambdas >= y_eff,
        cp.sum(lambdas) == 1,
    ]
    obj = cp.Maximize(p0 @ y_eff - w0 @ x_eff)
    return LinearProgram(
        variables={"lambda": lambdas, "Xeff": x_eff, "Yeff": y_eff}, objective=obj, constraints=cons
    )


def _profit_core(W, P, Xref, Yref, options: SolverOptions):
    def task(i: int) -> DMURecord:
        outcome = solve(build_profit_program(W[i], P[i], Xref, Yref), options)
        return DMURecord(
            index=i,
            objective=outcome.objective_value,
            lambdas=outcome.values["lambda"],
            status=outcome.status,
            values={"Xeff": outcome.values["Xeff"], "Yeff": outcome.values["Yeff"]},
        )

    records = run_dmus(task, W.shape[0], options)
    return merge_records(records, Xref.shape[0], keys=("Xeff", "Yeff"))


# ------------------------------------------------------------------
# 2. Función pública: run_profit
# ------------------------------------------------------------------
def run_profit(
    X,
    Y,
    W,
    P,
    Gx="Monetary",
    Gy="Monetary",
    *,
    Xref=None,
    Yref=None,
    names: list[str] | None = None,
    options: SolverOptions | None = None,
) -> DEAResult:
    """
    Eficiencia de beneficio (siempre VRS).

    Parámetros:
      - X, Y: inputs y outputs (una fila por DMU).
      - W, P: precios de inputs y de outputs, mismas formas que X e Y.
      - Gx, Gy: direcciones para normalizar; por defecto "Monetary".
    La ineficiencia de beneficio se descompone en técnica (β de la DDF con
    las mismas direcciones) y asignativa (el resto). 0 = eficiente.
    """
    X = as_matrix(X, "X")
    Y = as_matrix(Y, "Y")
    W = as_matrix(W, "W")
    P = as_matrix(P, "P")
    Xref, Yref = load_reference(X, Y, Xref, Yref)
    check_prices(W, X, "W", "X")
    check_prices(P, Y, "P", "Y")
    names = check_names(names, X.shape[0])
    options = options or SolverOptions()

    # 1) Direcciones (con precios disponibles)
    Gx, Gy, gx_tag, gy_tag = resolve_directions(Gx, Gy, X, Y, W, P)

    logger.info(
        "Modelo de beneficio: n=%d, m=%d, s=%d, Gx=%s, Gy=%s",
        X.shape[0], X.shape[1], Y.shape[1], gx_tag.value, gy_tag.value,
    )

    # 2) Beneficio máximo y sus objetivos
    merged = _profit_core(W, P, Xref, Yref, options)
    x_target = pin_unpriced_targets(merged.matrices["Xeff"], W, merged.peers, Xref)
    y_target = pin_unpriced_targets(merged.matrices["Yeff"], P, merged.peers, Yref)

    # 3) Parte técnica: DDF VRS sin holguras
    technical = _ddf_core(
        X, Y, Gx, Gy, Xref, Yref, RTS.VRS, Disposal.STRONG, Disposal.STRONG, options
    )
    tech_warnings = tuple(replace(w, stage="technical") for w in technical.warnings)

    # 4) Descomposición
    profit, techeff, alloceff = profit_decomposition(
        X, Y, W, P, x_target, y_target, Gx, Gy, technical.objective
    )

    return DEAResult(
        kind=ModelKind.PROFIT,
        n=X.shape[0],
        m=X.shape[1],
        s=Y.shape[1],
        eff=profit,
        lambdas=merged.peers,
        options={"Gx": gx_tag, "Gy": gy_tag, "rts": RTS.VRS},
        names=names,
        x_target=x_target,
        y_target=y_target,
        techeff=techeff,
        alloceff=alloceff,
        warnings=merged.warnings + tech_warnings,
    )
