# dea_efficiency/additive.py

import logging

import cvxpy as cp
import numpy as np

from .engine import DMURecord, SolverWarning, clean_values, merge_records, run_dmus
from .exceptions import DEAConfigError
from .options import AdditiveWeights, Disposal, ModelKind, Orientation, RTS, parse_option
from .results import DEAResult
from .solver import LinearProgram, SolverOptions, solve
from .utils import as_matrix, check_disposal, check_matrix_like, check_names, load_reference
from .weights import additive_weights, bam_bounds

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# 1. Problema de una DMU
# ------------------------------------------------------------------
def build_additive_program(
    x0: np.ndarray,
    y0: np.ndarray,
    wx0: np.ndarray,
    wy0: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    orientation: Orientation,
    rts: RTS,
    bounds: tuple[np.ndarray, np.ndarray] | None = None,
) -> LinearProgram:
    """
    max  Σ wX0·sX + Σ wY0·sY   (términos según orientación)
    s.a. Xrefᵀλ = x0 − sX
         Yrefᵀλ = y0 + sY
         λ, sX, sY ≥ 0;  Σλ = 1 si VRS
    ``bounds`` = (min X, max Y) añade las cotas del modelo BAM con CRS.
    Las holguras con peso cero quedan fijadas a 0.
    """
    nref, m = Xref.shape
    s = Yref.shape[1]

    lambdas = cp.Variable(nref, nonneg=True)
    slack_x = cp.Variable(m, nonneg=True)
    slack_y = cp.Variable(s, nonneg=True)

    if orientation is Orientation.INPUT:
        obj = cp.Maximize(wx0 @ slack_x)
    elif orientation is Orientation.OUTPUT:
        obj = cp.Maximize(wy0 @ slack_y)
    else:
        obj = cp.Maximize(wx0 @ slack_x + wy0 @ slack_y)

    cons = [
        Xref.T @ lambdas == x0 - slack_x,
        Yref.T @ lambdas == y0 + slack_y,
    ]
    if rts is RTS.VRS:
        cons.append(cp.sum(lambdas) == 1)
    elif bounds is not None:
        min_x, max_y = bounds
        cons.append(Xref.T @ lambdas >= min_x)
        cons.append(Yref.T @ lambdas <= max_y)

    zero_x = np.flatnonzero(wx0 == 0)
    zero_y = np.flatnonzero(wy0 == 0)
    if zero_x.size:
        cons.append(slack_x[zero_x] == 0)
    if zero_y.size:
        cons.append(slack_y[zero_y] == 0)

    variables = {"lambda": lambdas, "slackX": slack_x, "slackY": slack_y}
    return LinearProgram(variables=variables, objective=obj, constraints=cons)


# ------------------------------------------------------------------
# 2. Núcleo: bucle sobre DMUs con pesos ya resueltos
# ------------------------------------------------------------------
def _additive_core(
    X: np.ndarray,
    Y: np.ndarray,
    wX: np.ndarray,
    wY: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    orientation: Orientation,
    rts: RTS,
    bounds: tuple[np.ndarray, np.ndarray] | None,
    options: SolverOptions,
):
    def task(i: int) -> DMURecord:
        program = build_additive_program(
            X[i], Y[i], wX[i], wY[i], Xref, Yref, orientation, rts, bounds
        )
        outcome = solve(program, options)
        return DMURecord(
            index=i,
            objective=outcome.objective_value,
            lambdas=outcome.values["lambda"],
            status=outcome.status,
            values={"slackX": outcome.values["slackX"], "slackY": outcome.values["slackY"]},
        )

    records = run_dmus(task, X.shape[0], options)
    merged = merge_records(records, Xref.shape[0], keys=("slackX", "slackY"))
    slack_x = clean_values(merged.matrices["slackX"], nonneg=True)
    slack_y = clean_values(merged.matrices["slackY"], nonneg=True)
    return merged, slack_x, slack_y


def additive_slacks(
    X: np.ndarray,
    Y: np.ndarray,
    Xref: np.ndarray,
    Yref: np.ndarray,
    rts: RTS,
    disposal_x: Disposal,
    disposal_y: Disposal,
    options: SolverOptions,
):
    """
    Holguras máximas (pesos unitarios) para puntos ya proyectados por un
    modelo radial o direccional. Un lado con disponibilidad débil lleva
    pesos cero y por tanto holguras fijadas a 0.

    Las filas cuya proyección no es finita (la primera etapa falló) quedan
    con holguras NaN y no se resuelven. Devuelve también las λ de esta
    etapa (n × nref, NaN en las filas no resueltas).
    """
    slack_x = np.full(X.shape, np.nan)
    slack_y = np.full(Y.shape, np.nan)
    ok = np.flatnonzero(np.isfinite(X).all(axis=1) & np.isfinite(Y).all(axis=1))
    if ok.size == 0:
        return slack_x, slack_y, np.full((X.shape[0], Xref.shape[0]), np.nan), ()

    Xok, Yok = X[ok], Y[ok]
    wX = np.zeros(Xok.shape) if disposal_x is Disposal.WEAK else np.ones(Xok.shape)
    wY = np.zeros(Yok.shape) if disposal_y is Disposal.WEAK else np.ones(Yok.shape)
    merged, sx, sy = _additive_core(
        Xok, Yok, wX, wY, Xref, Yref, Orientation.GRAPH, rts, None, options
    )
    lambdas = np.full((X.shape[0], Xref.shape[0]), np.nan)
    slack_x[ok] = sx
    slack_y[ok] = sy
    lambdas[ok] = merged.peers.toarray()
    warnings = tuple(
        SolverWarning(dmu=int(ok[w.dmu]), status=w.status, stage="slacks") for w in merged.warnings
    )
    return slack_x, slack_y, lambdas, warnings


# ------------------------------------------------------------------
# 3. Función pública: run_additive
# ------------------------------------------------------------------
def run_additive(
    X,
    Y,
    weights=None,
    *,
    orientation="graph",
    rts="VRS",
    wX=None,
    wY=None,
    Xref=None,
    Yref=None,
    disposal_x="strong",
    disposal_y="strong",
    names: list[str] | None = None,
    options: SolverOptions | None = None,
) -> DEAResult:
    """
    Modelo aditivo ponderado.

    Parámetros:
      - X, Y: matrices n×m de inputs y n×s de outputs (una fila por DMU).
      - weights: "Ones", "MIP", "Normalized", "RAM", "BAM" o "Custom".
        Por defecto "Ones", o "Custom" si se pasan ``wX``/``wY``.
      - orientation: "graph", "input" u "output".
      - rts: "CRS" o "VRS".
      - wX, wY: matrices de pesos propias (sólo con "Custom").
      - Xref, Yref: conjunto de referencia (por defecto X, Y).
      - disposal_x, disposal_y: "strong" o "weak".
    La eficiencia es el valor óptimo del objetivo (0 = eficiente).
    """
    orientation = parse_option(Orientation, orientation, "orientation")
    rts = parse_option(RTS, rts, "rts")
    disposal_x = parse_option(Disposal, disposal_x, "disposal_x")
    disposal_y = parse_option(Disposal, disposal_y, "disposal_y")
    check_disposal(orientation, disposal_x, disposal_y, allow_graph_weak=False)

    has_custom = wX is not None or wY is not None
    if weights is None:
        scheme = AdditiveWeights.CUSTOM if has_custom else AdditiveWeights.ONES
    else:
        scheme = parse_option(AdditiveWeights, weights, "weights")

    X = as_matrix(X, "X")
    Y = as_matrix(Y, "Y")
    Xref, Yref = load_reference(X, Y, Xref, Yref)
    names = check_names(names, X.shape[0])
    options = options or SolverOptions()

    # 1) Pesos
    if scheme is AdditiveWeights.CUSTOM:
        if wX is None or wY is None:
            raise DEAConfigError("El esquema 'Custom' requiere las matrices wX y wY.")
        wX = as_matrix(wX, "wX")
        wY = as_matrix(wY, "wY")
    elif has_custom:
        raise DEAConfigError("Sólo se admiten wX/wY con weights='Custom'.")
    else:
        wX, wY = additive_weights(X, Y, scheme, orientation)
    check_matrix_like(wX, X, "wX", "X")
    check_matrix_like(wY, Y, "wY", "Y")

    # 2) Disponibilidad débil: pesos a cero en ese lado
    if disposal_x is Disposal.WEAK:
        wX = np.zeros(X.shape)
    if disposal_y is Disposal.WEAK:
        wY = np.zeros(Y.shape)

    bounds = bam_bounds(X, Y) if scheme is AdditiveWeights.BAM and rts is RTS.CRS else None

    logger.info(
        "Modelo aditivo %s: n=%d, m=%d, s=%d, orientación=%s, rts=%s",
        scheme.value, X.shape[0], X.shape[1], Y.shape[1], orientation.value, rts.value,
    )

    # 3) Bucle sobre DMUs
    merged, slack_x, slack_y = _additive_core(
        X, Y, wX, wY, Xref, Yref, orientation, rts, bounds, options
    )

    return DEAResult(
        kind=ModelKind.ADDITIVE,
        n=X.shape[0],
        m=X.shape[1],
        s=Y.shape[1],
        eff=merged.objective,
        lambdas=merged.peers,
        options={
            "weights": scheme,
            "orientation": orientation,
            "rts": rts,
            "disposal_x": disposal_x,
            "disposal_y": disposal_y,
        },
        names=names,
        slack_x=slack_x,
        slack_y=slack_y,
        x_target=X - slack_x,
        y_target=Y + slack_y,
        warnings=merged.warnings,
    )
