# dea_efficiency/radial.py
import logging

import cvxpy as cp
import numpy as np

from .additive import additive_slacks
from .engine import DMURecord, merge_records, peers_matrix, run_dmus
from .exceptions import DEAConfigError
from .options import Disposal, ModelKind, Orientation, RTS, parse_option
from .results import DEAResult
from .solver import LinearProgram, SolverOptions, solve
from .utils import as_matrix, check_disposal, check_names, load_reference

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# 1. Problema radial de una DMU (orientación input/output)
# ------------------------------------------------------------------
def build_radial_program(
    x0: np.ndarray,
    y0: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    orientation: Orientation,
    rts: RTS,
    disposal_x: Disposal = Disposal.STRONG,
    disposal_y: Disposal = Disposal.STRONG,
) -> LinearProgram:
    """
    Input:  min θ  s.a. Xrefᵀλ ≤ θ·x0,  Yrefᵀλ ≥ y0
    Output: max φ  s.a. Xrefᵀλ ≤ x0,    Yrefᵀλ ≥ φ·y0
    Con disponibilidad débil la restricción de ese lado pasa a igualdad.
    """
    lambdas = cp.Variable(Xref.shape[0], nonneg=True)
    eff = cp.Variable()

    if orientation is Orientation.INPUT:
        x_rhs = eff * x0
        y_rhs = y0
        obj = cp.Minimize(eff)
    else:  # output-oriented
        x_rhs = x0
        y_rhs = eff * y0
        obj = cp.Maximize(eff)

    x_lhs = Xref.T @ lambdas
    y_lhs = Yref.T @ lambdas
    cons = [
        x_lhs == x_rhs if disposal_x is Disposal.WEAK else x_lhs <= x_rhs,
        y_lhs == y_rhs if disposal_y is Disposal.WEAK else y_lhs >= y_rhs,
    ]
    if rts is RTS.VRS:
        cons.append(cp.sum(lambdas) == 1)

    return LinearProgram(variables={"eff": eff, "lambda": lambdas}, objective=obj, constraints=cons)


# ------------------------------------------------------------------
# 2. Núcleo: bucle sobre DMUs
# ------------------------------------------------------------------
def _radial_core(
    X: np.ndarray,
    Y: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    orientation: Orientation,
    rts: RTS,
    disposal_x: Disposal,
    disposal_y: Disposal,
    options: SolverOptions,
):
    """Devuelve los registros combinados; ``objective`` contiene θ o φ."""
    def task(i: int) -> DMURecord:
        program = build_radial_program(
            X[i], Y[i], Xref, Yref, orientation, rts, disposal_x, disposal_y
        )
        outcome = solve(program, options)
        return DMURecord(
            index=i,
            objective=float(outcome.values["eff"][0]),
            lambdas=outcome.values["lambda"],
            status=outcome.status,
        )

    records = run_dmus(task, X.shape[0], options)
    return merge_records(records, Xref.shape[0])


def radial_projection(X: np.ndarray, Y: np.ndarray, eff: np.ndarray, orientation: Orientation):
    """Punto proyectado: (θ·x, y) en orientación input o (x, φ·y) en output."""
    if orientation is Orientation.INPUT:
        return X * eff.reshape(-1, 1), Y.copy()
    return X.copy(), Y * eff.reshape(-1, 1)


# ------------------------------------------------------------------
# 3. Función pública: run_radial
# ------------------------------------------------------------------
def run_radial(
    X,
    Y,
    *,
    orientation="input",
    rts="CRS",
    slack: bool = True,
    Xref=None,
    Yref=None,
    disposal_x="strong",
    disposal_y="strong",
    names: list[str] | None = None,
    options: SolverOptions | None = None,
) -> DEAResult:
    """
    Modelo radial (CCR con CRS, BCC con VRS).

    Parámetros:
      - X, Y: matrices n×m y n×s (una fila por DMU).
      - orientation: "input" (θ ≤ 1) u "output" (φ ≥ 1).
      - rts: "CRS" o "VRS".
      - slack: si True, segunda etapa aditiva para obtener las holguras;
        sus λ quedan en ``slack_peers`` y ``peers()`` conserva las de la primera etapa.
      - Xref, Yref: conjunto de referencia (por defecto X, Y).
      - disposal_x, disposal_y: "strong" o "weak".
    Una DMU en la frontera de su conjunto de referencia obtiene 1.
    """
    orientation = parse_option(Orientation, orientation, "orientation")
    rts = parse_option(RTS, rts, "rts")
    disposal_x = parse_option(Disposal, disposal_x, "disposal_x")
    disposal_y = parse_option(Disposal, disposal_y, "disposal_y")
    if orientation is Orientation.GRAPH:
        raise DEAConfigError("El modelo radial sólo admite orientación 'input' u 'output'.")
    check_disposal(orientation, disposal_x, disposal_y)

    X = as_matrix(X, "X")
    Y = as_matrix(Y, "Y")
    Xref, Yref = load_reference(X, Y, Xref, Yref)
    names = check_names(names, X.shape[0])
    options = options or SolverOptions()

    logger.info(
        "Modelo radial: n=%d, m=%d, s=%d, orientación=%s, rts=%s",
        X.shape[0], X.shape[1], Y.shape[1], orientation.value, rts.value,
    )

    # 1) Primera etapa: θ o φ
    merged = _radial_core(X, Y, Xref, Yref, orientation, rts, disposal_x, disposal_y, options)
    eff = merged.objective
    x_proj, y_proj = radial_projection(X, Y, eff, orientation)

    # 2) Segunda etapa: holguras en el punto proyectado
    slack_x = slack_y = None
    x_target, y_target = x_proj, y_proj
    slack_peers = None
    warnings = merged.warnings
    if slack:
        slack_x, slack_y, slack_lambdas, slack_warnings = additive_slacks(
            x_proj, y_proj, Xref, Yref, rts, disposal_x, disposal_y, options
        )
        slack_peers = peers_matrix(slack_lambdas)
        x_target = x_proj - slack_x
        y_target = y_proj + slack_y
        warnings = warnings + slack_warnings

    return DEAResult(
        kind=ModelKind.RADIAL,
        n=X.shape[0],
        m=X.shape[1],
        s=Y.shape[1],
        eff=eff,
        lambdas=merged.peers,
        slack_peers=slack_peers,
        options={
            "orientation": orientation,
            "rts": rts,
            "disposal_x": disposal_x,
            "disposal_y": disposal_y,
        },
        names=names,
        slack_x=slack_x,
        slack_y=slack_y,
        x_target=x_target,
        y_target=y_target,
        warnings=warnings,
    )
