# dea_efficiency/results.py

"""
Resultado inmutable común a todas las familias de modelos.

Un único tipo etiquetado por ``kind``: los accesores consultan qué
componentes trae el resultado (holguras, objetivos, descomposición técnica
y asignativa) en lugar de depender de una jerarquía de clases.
"""
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np
import pandas as pd
from scipy.sparse import csr_matrix

from .exceptions import DEAConfigError
from .options import ModelKind


def _readonly(arr):
    if arr is None:
        return None
    arr = np.array(arr, dtype=float)
    arr.setflags(write=False)
    return arr


def _readonly_sparse(matrix):
    if matrix is None:
        return None
    matrix = csr_matrix(matrix, dtype=float, copy=True)
    for arr in (matrix.data, matrix.indices, matrix.indptr):
        arr.setflags(write=False)
    return matrix


def _side(side: str) -> str:
    key = str(side).upper()
    if key not in ("X", "Y"):
        raise DEAConfigError(f"Lado inválido {side!r}: use 'X' (inputs) o 'Y' (outputs).")
    return key


@dataclass(frozen=True, eq=False)
class DEAResult:
    kind: ModelKind
    n: int
    m: int
    s: int
    eff: np.ndarray
    lambdas: csr_matrix
    options: dict = field(default_factory=dict)
    names: list | None = None
    slack_x: np.ndarray | None = None
    slack_y: np.ndarray | None = None
    x_target: np.ndarray | None = None
    y_target: np.ndarray | None = None
    techeff: np.ndarray | None = None
    alloceff: np.ndarray | None = None
    warnings: tuple = ()
    slack_peers: csr_matrix | None = None

    def __post_init__(self):
        for attr in ("lambdas", "slack_peers"):
            object.__setattr__(self, attr, _readonly_sparse(getattr(self, attr)))
        for attr in ("eff", "slack_x", "slack_y", "x_target", "y_target", "techeff", "alloceff"):
            object.__setattr__(self, attr, _readonly(getattr(self, attr)))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))
        if self.names is not None:
            object.__setattr__(self, "names", tuple(self.names))

    # ------------------------------------------------------------------
    # Accesores
    # ------------------------------------------------------------------
    def nobs(self) -> int:
        return self.n

    def ninputs(self) -> int:
        return self.m

    def noutputs(self) -> int:
        return self.s

    @property
    def has_decomposition(self) -> bool:
        return self.techeff is not None and self.alloceff is not None

    @property
    def is_optimal(self) -> bool:
        """True si todas las DMUs terminaron con estado óptimo."""
        return not self.warnings

    def efficiency(self, component: str = "overall") -> np.ndarray:
        """
        Devuelve las eficiencias. ``component`` puede ser "overall",
        "technical" o "allocative"; los dos últimos sólo existen en los
        modelos de beneficio e ingreso.
        """
        key = component.lower()
        if key == "overall":
            return self.eff
        if key not in ("technical", "allocative"):
            raise DEAConfigError(f"Componente de eficiencia desconocido: {component!r}.")
        if not self.has_decomposition:
            raise DEAConfigError(
                f"El modelo {self.kind.value} no tiene descomposición técnica/asignativa."
            )
        return self.techeff if key == "technical" else self.alloceff

    def peers(self) -> csr_matrix:
        return self.lambdas

    def slacks(self, side: str) -> np.ndarray:
        key = _side(side)
        value = self.slack_x if key == "X" else self.slack_y
        if value is None:
            raise DEAConfigError(f"El modelo {self.kind.value} no calculó holguras.")
        return value

    def targets(self, side: str) -> np.ndarray:
        key = _side(side)
        value = self.x_target if key == "X" else self.y_target
        if value is None:
            raise DEAConfigError(f"El modelo {self.kind.value} no calculó objetivos.")
        return value

    def dmu_names(self) -> list[str]:
        if self.names is not None:
            return list(self.names)
        return [str(i + 1) for i in range(self.n)]

    # ------------------------------------------------------------------
    # Exportación tabular
    # ------------------------------------------------------------------
    def to_frame(self) -> pd.DataFrame:
        """Tabla con una fila por DMU: eficiencias, holguras y objetivos disponibles."""
        data = {"efficiency": self.eff}
        if self.has_decomposition:
            data["technical"] = self.techeff
            data["allocative"] = self.alloceff
        for prefix, matrix in (
            ("slackX", self.slack_x),
            ("slackY", self.slack_y),
            ("targetX", self.x_target),
            ("targetY", self.y_target),
        ):
            if matrix is not None:
                for j in range(matrix.shape[1]):
                    data[f"{prefix}{j + 1}"] = matrix[:, j]
        return pd.DataFrame(data, index=pd.Index(self.dmu_names(), name="DMU"))

    def peers_table(self, reference_names: list[str] | None = None) -> pd.DataFrame:
        """Matriz de pares densa con las DMUs evaluadas en filas."""
        dense = self.lambdas.toarray()
        if reference_names is None:
            if dense.shape[1] == self.n:
                reference_names = self.dmu_names()
            else:
                reference_names = [str(t + 1) for t in range(dense.shape[1])]
        return pd.DataFrame(dense, index=pd.Index(self.dmu_names(), name="DMU"), columns=reference_names)
