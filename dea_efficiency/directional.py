# dea_efficiency/directional.py
import logging

import cvxpy as cp
import numpy as np

from .additive import additive_slacks
from .directions import resolve_directions
from .engine import DMURecord, merge_records, peers_matrix, run_dmus
from .exceptions import DEAConfigError, DEADataError
from .options import Disposal, ModelKind, Orientation, RTS, parse_option
from .radial import build_radial_program
from .results import DEAResult
from .solver import LinearProgram, SolverOptions, solve
from .utils import as_matrix, check_names, load_reference

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# 1. Función de distancia direccional (DDF)
# ------------------------------------------------------------------
def build_ddf_program(
    x0: np.ndarray,
    y0: np.ndarray,
    gx0: np.ndarray,
    gy0: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    rts: RTS,
    disposal_x: Disposal = Disposal.STRONG,
    disposal_y: Disposal = Disposal.STRONG,
) -> LinearProgram:
    """
    max β  s.a. Xrefᵀλ ≤ x0 − β·Gx0,  Yrefᵀλ ≥ y0 + β·Gy0,  λ ≥ 0
    (igualdades con disponibilidad débil; Σλ = 1 si VRS).
    """
    lambdas = cp.Variable(Xref.shape[0], nonneg=True)
    beta = cp.Variable()

    x_lhs = Xref.T @ lambdas
    y_lhs = Yref.T @ lambdas
    x_rhs = x0 - beta * gx0
    y_rhs = y0 + beta * gy0
    cons = [
        x_lhs == x_rhs if disposal_x is Disposal.WEAK else x_lhs <= x_rhs,
        y_lhs == y_rhs if disposal_y is Disposal.WEAK else y_lhs >= y_rhs,
    ]
    if rts is RTS.VRS:
        cons.append(cp.sum(lambdas) == 1)

    return LinearProgram(
        variables={"beta": beta, "lambda": lambdas}, objective=cp.Maximize(beta), constraints=cons
    )


def _ddf_core(
    X: np.ndarray,
    Y: np.ndarray,
    Gx: np.ndarray,
    Gy: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    rts: RTS,
    disposal_x: Disposal,
    disposal_y: Disposal,
    options: SolverOptions,
):
    def task(i: int) -> DMURecord:
        program = build_ddf_program(
            X[i], Y[i], Gx[i], Gy[i], Xref, Yref, rts, disposal_x, disposal_y
        )
        outcome = solve(program, options)
        return DMURecord(
            index=i,
            objective=float(outcome.values["beta"][0]),
            lambdas=outcome.values["lambda"],
            status=outcome.status,
        )

    records = run_dmus(task, X.shape[0], options)
    return merge_records(records, Xref.shape[0])


def run_ddf(
    X,
    Y,
    Gx="Ones",
    Gy="Ones",
    *,
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
    Función de distancia direccional.
    Gx, Gy: "Zeros", "Ones", "Observed", "Mean" o una matriz/vector propio.
    La eficiencia es β (0 = eficiente, mayor = más ineficiente).
    """
    rts = parse_option(RTS, rts, "rts")
    disposal_x = parse_option(Disposal, disposal_x, "disposal_x")
    disposal_y = parse_option(Disposal, disposal_y, "disposal_y")

    X = as_matrix(X, "X")
    Y = as_matrix(Y, "Y")
    Xref, Yref = load_reference(X, Y, Xref, Yref)
    names = check_names(names, X.shape[0])
    options = options or SolverOptions()

    # 1) Direcciones (sin precios no hay dirección monetaria)
    Gx, Gy, gx_tag, gy_tag = resolve_directions(Gx, Gy, X, Y)

    logger.info(
        "Modelo DDF: n=%d, m=%d, s=%d, Gx=%s, Gy=%s, rts=%s",
        X.shape[0], X.shape[1], Y.shape[1], gx_tag.value, gy_tag.value, rts.value,
    )

    # 2) β por DMU
    merged = _ddf_core(X, Y, Gx, Gy, Xref, Yref, rts, disposal_x, disposal_y, options)
    beta = merged.objective
    x_proj = X - beta.reshape(-1, 1) * Gx
    y_proj = Y + beta.reshape(-1, 1) * Gy

    # 3) Holguras
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
        kind=ModelKind.DDF,
        n=X.shape[0],
        m=X.shape[1],
        s=Y.shape[1],
        eff=beta,
        lambdas=merged.peers,
        slack_peers=slack_peers,
        options={
            "Gx": gx_tag,
            "Gy": gy_tag,
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


# ------------------------------------------------------------------
# 2. Función de distancia generalizada (GDF)
# ------------------------------------------------------------------
def build_gdf_program(
    x0: np.ndarray,
    y0: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    alpha: float,
    rts: RTS,
) -> LinearProgram:
    """
    min δ  s.a. Xrefᵀλ ≤ δ^(1−α)·x0,  Yrefᵀλ ≥ y0·δ^(−α),  λ ≥ 0

    Con datos no negativos es un problema convexo. En los extremos se
    reduce a programas lineales: α = 0 es el radial input (δ = θ) y α = 1
    el radial output, donde la variable es φ = 1/δ.
    """
    if alpha == 0:
        return build_radial_program(x0, y0, Xref, Yref, Orientation.INPUT, rts)
    if alpha == 1:
        return build_radial_program(x0, y0, Xref, Yref, Orientation.OUTPUT, rts)

    lambdas = cp.Variable(Xref.shape[0], nonneg=True)
    delta = cp.Variable()

    cons = [
        Xref.T @ lambdas <= cp.power(delta, 1 - alpha) * x0,
        Yref.T @ lambdas >= cp.power(delta, -alpha) * y0,
    ]
    if rts is RTS.VRS:
        cons.append(cp.sum(lambdas) == 1)

    return LinearProgram(
        variables={"eff": delta, "lambda": lambdas}, objective=cp.Minimize(delta), constraints=cons
    )


def _gdf_core(
    X: np.ndarray,
    Y: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    alpha: float,
    rts: RTS,
    options: SolverOptions,
):
    def task(i: int) -> DMURecord:
        program = build_gdf_program(X[i], Y[i], Xref, Yref, alpha, rts)
        outcome = solve(program, options)
        value = float(outcome.values["eff"][0])
        if alpha == 1:
            value = 1.0 / value if value != 0 else np.nan
        return DMURecord(
            index=i,
            objective=value,
            lambdas=outcome.values["lambda"],
            status=outcome.status,
        )

    records = run_dmus(task, X.shape[0], options)
    return merge_records(records, Xref.shape[0])


def run_gdf(
    X,
    Y,
    alpha: float = 0.5,
    *,
    rts="CRS",
    slack: bool = True,
    Xref=None,
    Yref=None,
    names: list[str] | None = None,
    options: SolverOptions | None = None,
) -> DEAResult:
    """
    Función de distancia generalizada con parámetro ``alpha`` en [0, 1].

    alpha = 0 coincide con el radial input; alpha = 1 con el inverso del
    radial output (1/φ). Con CRS el resultado coincide con el radial input
    para cualquier alpha. δ ≤ 1, con 1 = eficiente.
    """
    try:
        alpha = float(alpha)
    except (TypeError, ValueError) as exc:
        raise DEAConfigError(f"alpha debe ser un número en [0, 1], no {alpha!r}.") from exc
    if not 0 <= alpha <= 1:
        raise DEAConfigError(f"alpha debe estar en [0, 1], no {alpha}.")
    rts = parse_option(RTS, rts, "rts")

    X = as_matrix(X, "X")
    Y = as_matrix(Y, "Y")
    Xref, Yref = load_reference(X, Y, Xref, Yref)
    names = check_names(names, X.shape[0])
    options = options or SolverOptions()
    if (X < 0).any() or (Y < 0).any():
        raise DEADataError("La función de distancia generalizada requiere datos no negativos.")

    logger.info(
        "Modelo GDF: n=%d, m=%d, s=%d, alpha=%s, rts=%s",
        X.shape[0], X.shape[1], Y.shape[1], alpha, rts.value,
    )

    # 1) δ por DMU
    merged = _gdf_core(X, Y, Xref, Yref, alpha, rts, options)
    delta = merged.objective
    with np.errstate(divide="ignore", invalid="ignore"):
        x_proj = X * (delta ** (1 - alpha)).reshape(-1, 1)
        y_proj = Y / (delta ** alpha).reshape(-1, 1)

    # 2) Holguras
    slack_x = slack_y = None
    x_target, y_target = x_proj, y_proj
    slack_peers = None
    warnings = merged.warnings
    if slack:
        slack_x, slack_y, slack_lambdas, slack_warnings = additive_slacks(
            x_proj, y_proj, Xref, Yref, rts, Disposal.STRONG, Disposal.STRONG, options
        )
        slack_peers = peers_matrix(slack_lambdas)
        x_target = x_proj - slack_x
        y_target = y_proj + slack_y
        warnings = warnings + slack_warnings

    return DEAResult(
        kind=ModelKind.GDF,
        n=X.shape[0],
        m=X.shape[1],
        s=Y.shape[1],
        eff=delta,
        lambdas=merged.peers,
        slack_peers=slack_peers,
        options={"alpha": alpha, "rts": rts},
        names=names,
        slack_x=slack_x,
        slack_y=slack_y,
        x_target=x_target,
        y_target=y_target,
        warnings=warnings,
    )
