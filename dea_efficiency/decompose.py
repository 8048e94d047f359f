# dea_efficiency/decompose.py

"""
Descomposición de resultados: eficiencia de ingreso y de beneficio en sus
componentes técnico y asignativo, y eficiencia de escala (CCR/BCC).
"""
import logging

import numpy as np

from .constants import EPS
from .exceptions import DEAConfigError
from .options import Disposal, Orientation, RTS, parse_option
from .radial import _radial_core
from .solver import SolverOptions
from .utils import as_matrix, load_reference

logger = logging.getLogger(__name__)


def safe_divide(num, den, label: str) -> np.ndarray:
    """
    División elemento a elemento. Los denominadores con |den| < EPS dan NaN
    y se registra un aviso con el número de casos.
    """
    num = np.asarray(num, dtype=float)
    den = np.asarray(den, dtype=float)
    small = np.abs(den) < EPS
    if small.any():
        logger.warning("%s: %d denominadores casi nulos, resultado NaN", label, int(small.sum()))
    with np.errstate(divide="ignore", invalid="ignore"):
        out = num / np.where(small, 1.0, den)
    return np.where(small, np.nan, out)


def _row_dot(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    return (A * B).sum(axis=1)


def pin_unpriced_targets(
    target: np.ndarray, prices: np.ndarray, peers, ref: np.ndarray
) -> np.ndarray:
    """
    Un componente con precio cero no entra en el objetivo y el solver puede
    devolver cualquier valor factible. Esos componentes se fijan a la
    combinación de referencia λ·ref.
    """
    reference = peers.toarray() @ ref
    return np.where(prices == 0, reference, target)


# ------------------------------------------------------------------
# 1. Ingreso
# ------------------------------------------------------------------
def revenue_decomposition(Y: np.ndarray, P: np.ndarray, Ytarget: np.ndarray, phi: np.ndarray):
    """
    Eficiencia de ingreso = P·y / P·y*, técnica = 1/φ y asignativa = ingreso / técnica.
    Devuelve (ingreso, técnica, asignativa).
    """
    revenue = safe_divide(_row_dot(P, Y), _row_dot(P, Ytarget), "Eficiencia de ingreso")
    technical = safe_divide(np.ones_like(phi), phi, "Eficiencia técnica (1/φ)")
    allocative = safe_divide(revenue, technical, "Eficiencia asignativa de ingreso")
    return revenue, technical, allocative


# ------------------------------------------------------------------
# 2. Beneficio
# ------------------------------------------------------------------
def profit_decomposition(
    X: np.ndarray,
    Y: np.ndarray,
    W: np.ndarray,
    P: np.ndarray,
    Xtarget: np.ndarray,
    Ytarget: np.ndarray,
    Gx: np.ndarray,
    Gy: np.ndarray,
    beta: np.ndarray,
):
    """
    Ineficiencia de beneficio = (beneficio máximo − observado) / (P·Gy + W·Gx).
    La parte técnica es β de la DDF y la asignativa el resto.
    Devuelve (beneficio, técnica, asignativa).
    """
    observed = _row_dot(P, Y) - _row_dot(W, X)
    maximum = _row_dot(P, Ytarget) - _row_dot(W, Xtarget)
    normalization = _row_dot(P, Gy) + _row_dot(W, Gx)

    profit = safe_divide(maximum - observed, normalization, "Ineficiencia de beneficio")
    technical = np.asarray(beta, dtype=float)
    allocative = profit - technical
    return profit, technical, allocative


# ------------------------------------------------------------------
# 3. Eficiencia de escala
# ------------------------------------------------------------------
def scale_efficiency(
    X,
    Y,
    orientation="input",
    Xref=None,
    Yref=None,
    options: SolverOptions | None = None,
) -> np.ndarray:
    """
    Eficiencia de escala a partir de los modelos CCR (CRS) y BCC (VRS):
      - input:  θ_CRS / θ_VRS
      - output: φ_VRS / φ_CRS
    Valores en (0, 1]; 1 indica escala óptima.
    """
    orientation = parse_option(Orientation, orientation, "orientation")
    if orientation is Orientation.GRAPH:
        raise DEAConfigError("La eficiencia de escala sólo admite orientación 'input' u 'output'.")

    X = as_matrix(X, "X")
    Y = as_matrix(Y, "Y")
    Xref, Yref = load_reference(X, Y, Xref, Yref)
    options = options or SolverOptions()

    crs = _radial_core(
        X, Y, Xref, Yref, orientation, RTS.CRS, Disposal.STRONG, Disposal.STRONG, options
    ).objective
    vrs = _radial_core(
        X, Y, Xref, Yref, orientation, RTS.VRS, Disposal.STRONG, Disposal.STRONG, options
    ).objective

    if orientation is Orientation.INPUT:
        return safe_divide(crs, vrs, "Eficiencia de escala")
    return safe_divide(vrs, crs, "Eficiencia de escala")
