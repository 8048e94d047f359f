# tests/test_results.py
import numpy as np
import pytest
from scipy.sparse import issparse

from dea_efficiency import DEAConfigError, ModelKind, Orientation, run_additive, run_profit, run_radial


@pytest.fixture
def radial_result(fls):
    X, Y = fls
    return run_radial(X, Y, orientation="input", rts="VRS")


def test_accessors(radial_result):
    res = radial_result
    assert res.kind is ModelKind.RADIAL
    assert res.options["orientation"] is Orientation.INPUT
    assert issparse(res.peers())
    assert res.peers().shape == (11, 11)
    assert res.slacks("x").shape == (11, 2)
    assert res.targets("Y").shape == (11, 1)
    assert res.dmu_names() == [str(i) for i in range(1, 12)]


def test_result_is_read_only(radial_result):
    res = radial_result
    with pytest.raises(ValueError):
        res.efficiency()[0] = 0.5
    with pytest.raises(TypeError):
        res.options["rts"] = "CRS"
    with pytest.raises(AttributeError):
        res.eff = np.zeros(11)
    with pytest.raises(ValueError):
        res.peers().data[0] = 42.0
    with pytest.raises(ValueError):
        res.slack_peers.data[0] = 42.0


def test_result_does_not_share_peer_buffers():
    from scipy.sparse import csr_matrix

    from dea_efficiency import DEAResult

    lambdas = csr_matrix(np.eye(2))
    res = DEAResult(kind=ModelKind.RADIAL, n=2, m=1, s=1, eff=np.ones(2), lambdas=lambdas)
    lambdas.data[0] = 42.0
    assert res.peers().toarray()[0, 0] == 1.0


def test_invalid_side_and_component(radial_result):
    with pytest.raises(DEAConfigError):
        radial_result.slacks("Z")
    with pytest.raises(DEAConfigError):
        radial_result.efficiency("scale")


def test_to_frame_columns(radial_result):
    df = radial_result.to_frame()
    assert df.index.name == "DMU"
    assert list(df.columns) == [
        "efficiency", "slackX1", "slackX2", "slackY1", "targetX1", "targetX2", "targetY1",
    ]
    np.testing.assert_allclose(df["efficiency"].to_numpy(), radial_result.efficiency())


def test_to_frame_with_decomposition(profit_data):
    X, Y, W, P = profit_data
    res = run_profit(X, Y, W, P, names=list("ABCDEFGH"))
    df = res.to_frame()
    assert {"efficiency", "technical", "allocative"} <= set(df.columns)
    assert "slackX1" not in df.columns
    assert list(df.index) == list("ABCDEFGH")
    with pytest.raises(DEAConfigError):
        res.slacks("X")


def test_peers_table(fls):
    X, Y = fls
    res = run_additive(X[:3], Y[:3], Xref=X, Yref=Y, names=["a", "b", "c"])
    table = res.peers_table()
    assert table.shape == (3, 11)
    assert list(table.index) == ["a", "b", "c"]
    assert list(table.columns) == [str(t) for t in range(1, 12)]
