# dea_efficiency/weights.py

import logging

import numpy as np

from .exceptions import DEAConfigError
from .options import AdditiveWeights, Orientation

logger = logging.getLogger(__name__)


def _normalization(orientation: Orientation, m: int, s: int) -> int:
    if orientation is Orientation.INPUT:
        return m
    if orientation is Orientation.OUTPUT:
        return s
    return m + s


def _zero_non_finite(w: np.ndarray, label: str) -> np.ndarray:
    """
    Sustituye por 0 los pesos infinitos o NaN (columnas sin rango o sin
    varianza). Esto anula en silencio la holgura de esa columna, por eso se
    deja constancia en el log.
    """
    bad = ~np.isfinite(w)
    if bad.any():
        logger.warning(
            "%d pesos no finitos en %s se fijan a 0 (columnas degeneradas)", int(bad.sum()), label
        )
        w = w.copy()
        w[bad] = 0.0
    return w


def _side_weights(data: np.ndarray, scheme: AdditiveWeights, k: int, upper: bool, label: str) -> np.ndarray:
    # upper=True para outputs: en BAM la distancia se mide hasta el máximo
    with np.errstate(divide="ignore", invalid="ignore"):
        if scheme is AdditiveWeights.ONES:
            return np.ones(data.shape)

        if scheme is AdditiveWeights.MIP:
            if (data <= 0).any():
                raise DEAConfigError(f"Los pesos MIP requieren {label} estrictamente positivos.")
            return 1.0 / data

        if scheme is AdditiveWeights.NORMALIZED:
            std = data.std(axis=0, ddof=1) if data.shape[0] > 1 else np.zeros(data.shape[1])
            w = np.repeat((1.0 / std).reshape(1, -1), data.shape[0], axis=0)
            return _zero_non_finite(w, label)

        if scheme is AdditiveWeights.RAM:
            rango = data.max(axis=0) - data.min(axis=0)
            w = np.repeat((1.0 / (k * rango)).reshape(1, -1), data.shape[0], axis=0)
            return _zero_non_finite(w, label)

        if scheme is AdditiveWeights.BAM:
            if upper:
                w = 1.0 / (k * (data.max(axis=0) - data))
            else:
                w = 1.0 / (k * (data - data.min(axis=0)))
            return _zero_non_finite(w, label)

    raise DEAConfigError(f"Esquema de pesos '{scheme.value}' no soportado para cálculo automático.")


def additive_weights(
    X: np.ndarray,
    Y: np.ndarray,
    scheme: AdditiveWeights,
    orientation: Orientation = Orientation.GRAPH,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Calcula las matrices de pesos (wX, wY) del modelo aditivo ponderado.

    scheme:
      - ONES: todos los pesos valen 1.
      - MIP: 1/x y 1/y (la propia observación normaliza).
      - NORMALIZED: 1/desviación típica muestral de cada columna.
      - RAM: 1/(k·(max−min)) por columna.
      - BAM: 1/(k·(x−min)) para inputs y 1/(k·(max−y)) para outputs.
    k es m, s o m+s según la orientación. En orientación input los pesos
    de outputs son unos (y viceversa).
    """
    m = X.shape[1]
    s = Y.shape[1]
    k = _normalization(orientation, m, s)

    wX = np.ones(X.shape)
    wY = np.ones(Y.shape)
    if orientation in (Orientation.GRAPH, Orientation.INPUT):
        wX = _side_weights(X, scheme, k, upper=False, label="inputs")
    if orientation in (Orientation.GRAPH, Orientation.OUTPUT):
        wY = _side_weights(Y, scheme, k, upper=True, label="outputs")
    return wX, wY


def bam_bounds(X: np.ndarray, Y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Mínimo muestral de cada input y máximo de cada output (BAM con CRS)."""
    return X.min(axis=0), Y.max(axis=0)
