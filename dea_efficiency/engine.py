# dea_efficiency/engine.py

"""
Ejecución del bucle por DMU.

Cada tarea construye y resuelve el problema de una DMU y devuelve un
``DMURecord`` pequeño; los registros se combinan al final en
``merge_records``. Las tareas sólo leen los datos compartidos, así que
pueden repartirse en un pool de hilos sin sincronización adicional.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

import numpy as np
from scipy.sparse import csr_matrix

from .constants import OPTIMAL_STATUSES, ZERO_TOLERANCE
from .solver import SolverOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DMURecord:
    index: int
    objective: float
    lambdas: np.ndarray
    status: str
    values: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SolverWarning:
    dmu: int
    status: str
    stage: str = "main"


@dataclass(frozen=True)
class MergedRecords:
    objective: np.ndarray
    peers: csr_matrix
    matrices: dict
    warnings: tuple


def run_dmus(
    task: Callable[[int], DMURecord],
    n: int,
    options: SolverOptions | None = None,
) -> list[DMURecord]:
    """Ejecuta ``task(i)`` para cada DMU y devuelve los registros en orden."""
    options = options or SolverOptions()
    if options.workers <= 1 or n <= 1:
        return [task(i) for i in range(n)]

    with ThreadPoolExecutor(max_workers=options.workers) as executor:
        records = list(executor.map(task, range(n)))
    return records


def clean_values(values: np.ndarray, tol: float = ZERO_TOLERANCE, nonneg: bool = False) -> np.ndarray:
    """
    Limpia el ruido numérico del solver: |v| < tol pasa a cero y, con
    ``nonneg``, los negativos residuales también. Los NaN se conservan.
    """
    arr = np.array(values, dtype=float)
    arr[np.abs(arr) < tol] = 0.0
    if nonneg:
        arr[arr < 0] = 0.0
    return arr


def merge_records(records: list[DMURecord], nref: int, keys: tuple = ()) -> MergedRecords:
    """
    Combina los registros por DMU en vectores y matrices del resultado.
    ``keys`` enumera los valores con nombre a apilar por filas.
    """
    n = len(records)
    objective = np.full(n, np.nan)
    lambdas = np.zeros((n, nref))
    matrices = {key: None for key in keys}
    warnings = []

    for rec in records:
        objective[rec.index] = rec.objective
        lambdas[rec.index, :] = clean_values(rec.lambdas, nonneg=True)
        for key in keys:
            row = np.asarray(rec.values[key], dtype=float)
            if matrices[key] is None:
                matrices[key] = np.zeros((n, row.shape[0]))
            matrices[key][rec.index, :] = row

        if rec.status not in OPTIMAL_STATUSES:
            logger.warning("DMU %d: estado de terminación %s", rec.index, rec.status)
            warnings.append(SolverWarning(dmu=rec.index, status=rec.status))
        else:
            logger.debug("DMU %d: %s", rec.index, rec.status)

    return MergedRecords(
        objective=objective, peers=peers_matrix(lambdas), matrices=matrices, warnings=tuple(warnings)
    )


def peers_matrix(lambdas: np.ndarray) -> csr_matrix:
    """
    Matriz dispersa de pares a partir de las λ por filas. Las filas NaN
    (DMU sin solución) se conservan como NaN.
    """
    result = csr_matrix(clean_values(lambdas, nonneg=True))
    result.eliminate_zeros()
    return result
