# dea_efficiency/options.py

"""
Enumeraciones cerradas para las opciones de los modelos.

Las opciones se validan una sola vez en la frontera (las funciones ``run_*``)
con :func:`parse_option`; los constructores de problemas sólo reciben
miembros de estas enumeraciones.
"""
from enum import Enum

from .exceptions import DEAConfigError


class Orientation(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    GRAPH = "graph"


class RTS(str, Enum):
    CRS = "CRS"
    VRS = "VRS"


class Disposal(str, Enum):
    STRONG = "strong"
    WEAK = "weak"


class AdditiveWeights(str, Enum):
    ONES = "Ones"
    MIP = "MIP"
    NORMALIZED = "Normalized"
    RAM = "RAM"
    BAM = "BAM"
    CUSTOM = "Custom"


class Direction(str, Enum):
    ZEROS = "Zeros"
    ONES = "Ones"
    OBSERVED = "Observed"
    MEAN = "Mean"
    MONETARY = "Monetary"
    CUSTOM = "Custom"


class ModelKind(str, Enum):
    RADIAL = "radial"
    ADDITIVE = "additive"
    DDF = "ddf"
    GDF = "gdf"
    PROFIT = "profit"
    REVENUE = "revenue"


def parse_option(enum_cls: type[Enum], value, name: str) -> Enum:
    """
    Convierte ``value`` (miembro o texto, sin distinguir mayúsculas) en un
    miembro de ``enum_cls``. Lanza DEAConfigError si no es válido.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for member in enum_cls:
            if key in (member.value.lower(), member.name.lower()):
                return member
    allowed = ", ".join(member.value for member in enum_cls)
    raise DEAConfigError(f"'{name}' inválido: {value!r}. Valores permitidos: {allowed}.")
