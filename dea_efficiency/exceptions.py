# dea_efficiency/exceptions.py

"""
Jerarquía de errores del paquete. Todas heredan de ``ValueError`` para que el
código que ya captura ``ValueError`` siga funcionando.
"""


class DEAError(ValueError):
    """Error base de los modelos DEA."""


class DEAShapeError(DEAError):
    """Dimensiones incompatibles entre inputs, outputs, referencias, pesos o precios."""


class DEAConfigError(DEAError):
    """Opción desconocida o combinación de opciones sin sentido económico."""


class DEADataError(DEAError):
    """Datos no numéricos, no finitos o columnas inexistentes."""
