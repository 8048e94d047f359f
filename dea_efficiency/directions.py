# dea_efficiency/directions.py

import numpy as np

from .exceptions import DEAConfigError
from .options import Direction, parse_option
from .utils import as_matrix, check_matrix_like


def direction_matrix(
    direction: Direction,
    data: np.ndarray,
    prices_x: np.ndarray | None = None,
    prices_y: np.ndarray | None = None,
) -> np.ndarray:
    """
    Genera la matriz direccional (n × columnas de ``data``).
    direction:
      - ZEROS: todos 0's
      - ONES: todos 1's
      - OBSERVED: los propios valores observados
      - MEAN: media de cada columna repetida en todas las filas
      - MONETARY: 1/(Σ precios outputs + Σ precios inputs) por fila, replicado
        en todas las columnas; la ineficiencia queda expresada en unidades
        monetarias. Requiere ambos precios.
    """
    n, k = data.shape

    if direction is Direction.ZEROS:
        return np.zeros((n, k))
    if direction is Direction.ONES:
        return np.ones((n, k))
    if direction is Direction.OBSERVED:
        return data.copy()
    if direction is Direction.MEAN:
        return np.repeat(data.mean(axis=0).reshape(1, -1), n, axis=0)
    if direction is Direction.MONETARY:
        if prices_x is None or prices_y is None:
            raise DEAConfigError("La dirección 'Monetary' requiere precios de inputs y de outputs.")
        per_dmu = 1.0 / (prices_y.sum(axis=1) + prices_x.sum(axis=1))
        return np.repeat(per_dmu.reshape(-1, 1), k, axis=1)

    raise DEAConfigError(f"Dirección '{direction.value}' no soportada para cálculo automático.")


def get_custom_direction(values, data: np.ndarray, name: str, data_name: str) -> np.ndarray:
    """
    Valida una dirección proporcionada por el usuario. Un vector con tantas
    posiciones como columnas se replica en todas las filas.
    """
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 1 and arr.shape[0] == data.shape[1]:
        arr = np.repeat(arr.reshape(1, -1), data.shape[0], axis=0)
    arr = as_matrix(arr, name)
    check_matrix_like(arr, data, name, data_name)
    return arr


def resolve_direction(
    value,
    data: np.ndarray,
    name: str,
    data_name: str,
    prices_x: np.ndarray | None = None,
    prices_y: np.ndarray | None = None,
) -> tuple[np.ndarray, Direction]:
    """
    Devuelve (matriz, etiqueta). ``value`` puede ser el nombre de un esquema
    o una matriz/vector propio (etiqueta CUSTOM).
    """
    if isinstance(value, (str, Direction)):
        direction = parse_option(Direction, value, name)
        if direction is Direction.CUSTOM:
            raise DEAConfigError(f"Para '{name}' = 'Custom' pase directamente la matriz de direcciones.")
        return direction_matrix(direction, data, prices_x, prices_y), direction
    return get_custom_direction(value, data, name, data_name), Direction.CUSTOM


def resolve_directions(Gx, Gy, X: np.ndarray, Y: np.ndarray, W=None, P=None):
    """
    Resuelve las direcciones de inputs y outputs de una vez.
    Devuelve (Gx, Gy, etiqueta_x, etiqueta_y).
    """
    gx, tag_x = resolve_direction(Gx, X, "Gx", "X", prices_x=W, prices_y=P)
    gy, tag_y = resolve_direction(Gy, Y, "Gy", "Y", prices_x=W, prices_y=P)
    return gx, gy, tag_x, tag_y
