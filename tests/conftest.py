# tests/conftest.py
import numpy as np
import pytest


@pytest.fixture
def fls():
    """Datos de Färe, Lovell y Shawtz: 11 DMUs, 2 inputs, 1 output."""
    X = np.array(
        [
            [5, 13], [16, 12], [16, 26], [17, 15], [18, 14], [23, 6],
            [25, 10], [27, 22], [37, 14], [42, 25], [5, 17],
        ],
        dtype=float,
    )
    Y = np.array([12, 14, 25, 26, 8, 9, 27, 30, 31, 26, 12], dtype=float).reshape(-1, 1)
    return X, Y


@pytest.fixture
def zofio_prieto():
    """Ejemplo de Zofío y Prieto: 5 DMUs, 2 inputs, 2 outputs."""
    X = np.array([[5, 3], [2, 4], [4, 2], [4, 8], [7, 9]], dtype=float)
    Y = np.array([[7, 4], [10, 8], [8, 10], [5, 4], [3, 6]], dtype=float)
    return X, Y


@pytest.fixture
def profit_data():
    """Ejemplo de beneficio: 8 DMUs con precios W = P = (2, 1)."""
    X = np.array(
        [[1, 1], [1, 1], [0.75, 1.5], [0.5, 2], [0.5, 2], [2, 2], [2.75, 3.5], [1.375, 1.75]]
    )
    Y = np.array([[1, 11], [5, 3], [5, 5], [2, 9], [4, 5], [4, 2], [3, 3], [4.5, 3.5]])
    W = np.array([[2, 1]] * 8, dtype=float)
    P = np.array([[2, 1]] * 8, dtype=float)
    return X, Y, W, P
