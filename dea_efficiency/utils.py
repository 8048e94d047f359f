# dea_efficiency/utils.py

import numpy as np
import pandas as pd

from .exceptions import DEAConfigError, DEADataError, DEAShapeError
from .options import Disposal, Orientation


# ---------------------------------------------------------------------------
# Conversión de datos a matrices
# ---------------------------------------------------------------------------

def as_matrix(data, name: str) -> np.ndarray:
    """
    Convierte ``data`` (lista, np.ndarray, pd.Series o pd.DataFrame) en una
    matriz float de dos dimensiones. Un vector se interpreta como una sola
    columna (n × 1).

    Raises
    ------
    DEADataError
        Si hay valores no numéricos o no finitos.
    DEAShapeError
        Si los datos tienen más de dos dimensiones o están vacíos.
    """
    if isinstance(data, (pd.DataFrame, pd.Series)):
        data = data.to_numpy()
    try:
        arr = np.array(data, dtype=float)
    except (TypeError, ValueError) as exc:
        raise DEADataError(f"'{name}' contiene valores no numéricos.") from exc

    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    elif arr.ndim != 2:
        raise DEAShapeError(f"'{name}' debe ser un vector o una matriz, tiene {arr.ndim} dimensiones.")

    if arr.size == 0:
        raise DEAShapeError(f"'{name}' está vacía.")
    if not np.all(np.isfinite(arr)):
        cnt = int((~np.isfinite(arr)).sum())
        raise DEADataError(f"'{name}' tiene {cnt} valores no finitos (NaN o inf).")
    return arr


# ---------------------------------------------------------------------------
# Validaciones de dimensiones
# ---------------------------------------------------------------------------

def check_data_shapes(X: np.ndarray, Y: np.ndarray, Xref: np.ndarray, Yref: np.ndarray):
    """Comprueba la coherencia entre el conjunto evaluado y el de referencia."""
    if X.shape[0] != Y.shape[0]:
        raise DEAShapeError(
            f"Número de observaciones distinto en inputs ({X.shape[0]}) y outputs ({Y.shape[0]})."
        )
    if Xref.shape[0] != Yref.shape[0]:
        raise DEAShapeError(
            f"Número de observaciones distinto en inputs de referencia ({Xref.shape[0]}) "
            f"y outputs de referencia ({Yref.shape[0]})."
        )
    if X.shape[1] != Xref.shape[1]:
        raise DEAShapeError(
            f"Número de inputs distinto en evaluación ({X.shape[1]}) y referencia ({Xref.shape[1]})."
        )
    if Y.shape[1] != Yref.shape[1]:
        raise DEAShapeError(
            f"Número de outputs distinto en evaluación ({Y.shape[1]}) y referencia ({Yref.shape[1]})."
        )


def check_matrix_like(M: np.ndarray, reference: np.ndarray, name: str, reference_name: str):
    """Exige que ``M`` tenga exactamente la misma forma que ``reference``."""
    if M.shape != reference.shape:
        raise DEAShapeError(
            f"La forma de '{name}' {M.shape} debe coincidir con la de '{reference_name}' {reference.shape}."
        )


def check_prices(prices: np.ndarray, data: np.ndarray, name: str, data_name: str):
    if prices.shape[0] != data.shape[0]:
        raise DEAShapeError(
            f"Número de observaciones distinto en '{name}' ({prices.shape[0]}) "
            f"y '{data_name}' ({data.shape[0]})."
        )
    if prices.shape[1] != data.shape[1]:
        raise DEAShapeError(
            f"Número de columnas distinto en '{name}' ({prices.shape[1]}) "
            f"y '{data_name}' ({data.shape[1]})."
        )


def check_disposal(
    orientation: Orientation,
    disposal_x: Disposal,
    disposal_y: Disposal,
    allow_graph_weak: bool = True,
):
    """
    Rechaza combinaciones de orientación y disponibilidad sin sentido económico:
    disponibilidad débil de inputs en orientación input, de outputs en
    orientación output y, si ``allow_graph_weak`` es False, cualquier
    disponibilidad débil en orientación graph.
    """
    if orientation is Orientation.INPUT and disposal_x is Disposal.WEAK:
        raise DEAConfigError("La disponibilidad débil de inputs no es posible en orientación input.")
    if orientation is Orientation.OUTPUT and disposal_y is Disposal.WEAK:
        raise DEAConfigError("La disponibilidad débil de outputs no es posible en orientación output.")
    if (
        not allow_graph_weak
        and orientation is Orientation.GRAPH
        and Disposal.WEAK in (disposal_x, disposal_y)
    ):
        raise DEAConfigError("La disponibilidad débil no es posible en orientación graph.")


def check_names(names, n: int) -> list[str] | None:
    if names is None:
        return None
    names = [str(name) for name in names]
    if len(names) != n:
        raise DEAShapeError(f"La lista de nombres debe tener {n} elementos, tiene {len(names)}.")
    return names


def load_reference(X: np.ndarray, Y: np.ndarray, Xref, Yref) -> tuple[np.ndarray, np.ndarray]:
    """Devuelve (Xref, Yref) validados; por defecto el propio conjunto evaluado."""
    Xref = X if Xref is None else as_matrix(Xref, "Xref")
    Yref = Y if Yref is None else as_matrix(Yref, "Yref")
    check_data_shapes(X, Y, Xref, Yref)
    return Xref, Yref


# ---------------------------------------------------------------------------
# DataFrames
# ---------------------------------------------------------------------------

def validate_dataframe(
    df: pd.DataFrame,
    input_cols: list[str],
    output_cols: list[str],
    allow_zero: bool = True,
    allow_negative: bool = False
):
    """
    Valida que todas las columnas de ``input_cols`` + ``output_cols`` existan y sean
    numéricas.

    - Si ``allow_zero`` es ``False``, se rechazan valores cero.
    - Si ``allow_negative`` es ``False``, se rechazan valores negativos.

    Parameters
    ----------
    df : pd.DataFrame
        El DataFrame a validar.
    input_cols : list[str]
        Lista de nombres de columnas de inputs.
    output_cols : list[str]
        Lista de nombres de columnas de outputs.
    allow_zero : bool, optional (default=True)
        Permitir valores cero.
    allow_negative : bool, optional (default=False)
        Permitir valores negativos.

    Returns
    -------
    bool
        ``True`` si el DataFrame pasa todas las validaciones.

    Raises
    ------
    DEADataError
        Si alguna de las verificaciones falla.
    """
    cols = input_cols + output_cols
    faltantes = set(cols) - set(df.columns)
    if faltantes:
        raise DEADataError(f"Faltan columnas: {sorted(faltantes)}")

    for col in cols:
        if not pd.api.types.is_numeric_dtype(df[col]):
            raise DEADataError(f"Columna '{col}' no es numérica.")

        if df[col].isna().any():
            cnt = int(df[col].isna().sum())
            raise DEADataError(f"Columna '{col}' tiene {cnt} valores nulos.")

        if not allow_zero and (df[col] == 0).any():
            cnt = int((df[col] == 0).sum())
            raise DEADataError(
                f"Columna '{col}' tiene {cnt} ceros; no permitidos."
            )

        if not allow_negative and (df[col] < 0).any():
            cnt = int((df[col] < 0).sum())
            raise DEADataError(
                f"Columna '{col}' tiene {cnt} valores negativos; no permitidos."
            )

    return True


def frame_to_matrices(
    df: pd.DataFrame,
    dmu_column: str,
    input_cols: list[str],
    output_cols: list[str],
) -> tuple[np.ndarray, np.ndarray, list[str]]:
    """
    Extrae (X, Y, nombres) de un DataFrame con una fila por DMU.
    X tiene forma n×m y Y forma n×s.
    """
    if dmu_column not in df.columns:
        raise DEADataError(f"La columna DMU '{dmu_column}' no existe en el DataFrame.")
    validate_dataframe(df, input_cols, output_cols)

    X = df[input_cols].to_numpy(dtype=float)
    Y = df[output_cols].to_numpy(dtype=float)
    names = df[dmu_column].astype(str).tolist()
    return X, Y, names
