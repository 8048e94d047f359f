# tests/test_validation.py
import numpy as np
import pandas as pd
import pytest

from dea_efficiency import (
    DEAConfigError,
    DEADataError,
    DEAError,
    DEAShapeError,
    Disposal,
    Orientation,
    RTS,
    frame_to_matrices,
    run_radial,
)
from dea_efficiency.options import parse_option
from dea_efficiency.utils import as_matrix, check_data_shapes, check_disposal, validate_dataframe


def test_as_matrix_vector_becomes_column():
    M = as_matrix([1, 2, 3], "Y")
    assert M.shape == (3, 1)
    assert M.dtype == float


def test_as_matrix_accepts_dataframe():
    df = pd.DataFrame({"a": [1, 2], "b": [3, 4]})
    M = as_matrix(df, "X")
    assert M.shape == (2, 2)


@pytest.mark.parametrize("bad", [[["a", 1]], [[1.0, np.nan]], [[np.inf, 1.0]]])
def test_as_matrix_rejects_bad_values(bad):
    with pytest.raises(DEADataError):
        as_matrix(bad, "X")


def test_as_matrix_rejects_3d():
    with pytest.raises(DEAShapeError):
        as_matrix(np.ones((2, 2, 2)), "X")


def test_shape_errors(fls):
    X, Y = fls
    with pytest.raises(DEAShapeError, match="observaciones"):
        run_radial(X, Y[:5])
    with pytest.raises(DEAShapeError, match="inputs"):
        run_radial(X, Y, Xref=X[:, :1], Yref=Y)
    with pytest.raises(DEAShapeError, match="referencia"):
        run_radial(X, Y, Xref=X, Yref=Y[:4])
    with pytest.raises(DEAShapeError):
        run_radial(X, Y, names=["a", "b"])


def test_check_data_shapes_outputs():
    X = np.ones((3, 2))
    Y = np.ones((3, 1))
    with pytest.raises(DEAShapeError, match="outputs"):
        check_data_shapes(X, Y, X, np.ones((3, 2)))


def test_errors_are_value_errors():
    assert issubclass(DEAShapeError, DEAError)
    assert issubclass(DEAConfigError, ValueError)
    assert issubclass(DEADataError, ValueError)


def test_parse_option_is_case_insensitive():
    assert parse_option(RTS, "vrs", "rts") is RTS.VRS
    assert parse_option(Orientation, "Input", "orientation") is Orientation.INPUT
    assert parse_option(Disposal, Disposal.WEAK, "disposal_x") is Disposal.WEAK
    with pytest.raises(DEAConfigError, match="rts"):
        parse_option(RTS, "increasing", "rts")
    with pytest.raises(DEAConfigError):
        parse_option(RTS, 3, "rts")


def test_check_disposal_graph():
    check_disposal(Orientation.GRAPH, Disposal.WEAK, Disposal.STRONG)
    with pytest.raises(DEAConfigError):
        check_disposal(Orientation.GRAPH, Disposal.WEAK, Disposal.STRONG, allow_graph_weak=False)


def test_frame_to_matrices():
    df = pd.DataFrame(
        {
            "DMU": ["A", "B", "C"],
            "trabajo": [2.0, 3.0, 4.0],
            "capital": [1.0, 1.0, 2.0],
            "ventas": [5.0, 4.0, 6.0],
        }
    )
    X, Y, names = frame_to_matrices(df, "DMU", ["trabajo", "capital"], ["ventas"])
    assert X.shape == (3, 2) and Y.shape == (3, 1)
    assert names == ["A", "B", "C"]

    res = run_radial(X, Y, names=names)
    assert list(res.to_frame().index) == ["A", "B", "C"]


def test_validate_dataframe_errors():
    df = pd.DataFrame({"x": [1.0, -2.0], "y": ["a", "b"], "z": [0.0, 1.0]})
    with pytest.raises(DEADataError, match="Faltan"):
        validate_dataframe(df, ["x"], ["w"])
    with pytest.raises(DEADataError, match="no es numérica"):
        validate_dataframe(df, ["x"], ["y"], allow_negative=True)
    with pytest.raises(DEADataError, match="negativos"):
        validate_dataframe(df, ["x"], ["z"])
    with pytest.raises(DEADataError, match="ceros"):
        validate_dataframe(df, ["z"], [], allow_zero=False)
    assert validate_dataframe(df, ["x"], ["z"], allow_negative=True)


def test_frame_to_matrices_missing_dmu_column():
    df = pd.DataFrame({"x": [1.0], "y": [1.0]})
    with pytest.raises(DEADataError):
        frame_to_matrices(df, "DMU", ["x"], ["y"])
