# tests/test_economic.py
import numpy as np
import pytest
from numpy.testing import assert_allclose

from dea_efficiency import DEAConfigError, DEAShapeError, Direction, ModelKind, run_profit, run_revenue


# ------------------------------------------------------------------
# Beneficio
# ------------------------------------------------------------------
def test_profit_monetary_decomposition(profit_data):
    X, Y, W, P = profit_data
    res = run_profit(X, Y, W, P)
    assert res.kind is ModelKind.PROFIT
    assert res.options["Gx"] is Direction.MONETARY
    assert res.has_decomposition
    assert_allclose(res.efficiency(), [2, 2, 0, 2, 2, 8, 12, 4], atol=1e-4)
    assert_allclose(res.efficiency("technical"), [0, 0, 0, 0, 0, 6, 12, 3], atol=1e-4)
    assert_allclose(res.efficiency("allocative"), [2, 2, 0, 2, 2, 2, 0, 1], atol=1e-4)


def test_profit_components_add_up(profit_data):
    X, Y, W, P = profit_data
    res = run_profit(X, Y, W, P, "Observed", "Observed")
    assert_allclose(
        res.efficiency("technical") + res.efficiency("allocative"), res.efficiency(), atol=1e-9
    )
    assert (res.efficiency() >= -1e-6).all()


def test_profit_targets_reach_maximum(profit_data):
    X, Y, W, P = profit_data
    res = run_profit(X, Y, W, P)
    max_profit = (P * res.targets("Y")).sum(axis=1) - (W * res.targets("X")).sum(axis=1)
    # El máximo se alcanza en la DMU 3: 2·5 + 5 − (2·0.75 + 1.5) = 12
    assert_allclose(max_profit, 12.0, atol=1e-4)
    assert_allclose(res.peers().toarray().sum(axis=1), 1.0, atol=1e-5)


def test_profit_price_shapes(profit_data):
    X, Y, W, P = profit_data
    with pytest.raises(DEAShapeError):
        run_profit(X, Y, W[:5], P)
    with pytest.raises(DEAShapeError):
        run_profit(X, Y, W, np.ones((8, 3)))


def test_profit_custom_string_rejected(profit_data):
    X, Y, W, P = profit_data
    with pytest.raises(DEAConfigError):
        run_profit(X, Y, W, P, "Custom", "Ones")


# ------------------------------------------------------------------
# Ingreso
# ------------------------------------------------------------------
def test_revenue_decomposition(zofio_prieto):
    X, Y = zofio_prieto
    P = np.array([[3, 2]] * 5, dtype=float)
    res = run_revenue(X, Y, P, rts="VRS")
    assert res.kind is ModelKind.REVENUE
    assert_allclose(res.efficiency(), [0.644444, 1, 1, 0.5, 0.456522], atol=1e-5)
    assert_allclose(res.efficiency("technical"), [0.777778, 1, 1, 0.5, 0.6], atol=1e-5)
    assert_allclose(res.efficiency("allocative"), [0.828571, 1, 1, 1, 0.76087], atol=1e-5)
    assert_allclose(res.targets("X"), X)


def test_revenue_bounds_and_product(zofio_prieto):
    X, Y = zofio_prieto
    P = np.array([[1, 4]] * 5, dtype=float)
    res = run_revenue(X, Y, P, rts="CRS")
    eff = res.efficiency()
    assert ((eff > 0) & (eff <= 1 + 1e-6)).all()
    assert_allclose(res.efficiency("technical") * res.efficiency("allocative"), eff, atol=1e-9)


def test_revenue_weak_input_disposal(zofio_prieto):
    X, Y = zofio_prieto
    P = np.array([[3, 2]] * 5, dtype=float)
    strong = run_revenue(X, Y, P, rts="VRS")
    weak = run_revenue(X, Y, P, rts="VRS", disposal_x="weak")
    assert weak.options["disposal_x"].value == "weak"
    # Menos tecnologías factibles: ingreso máximo menor, eficiencia mayor
    assert (weak.efficiency() >= strong.efficiency() - 1e-6).all()


def test_radial_has_no_decomposition(fls):
    from dea_efficiency import run_radial

    X, Y = fls
    res = run_radial(X, Y)
    assert not res.has_decomposition
    with pytest.raises(DEAConfigError):
        res.efficiency("technical")


# ------------------------------------------------------------------
# Precios nulos y conjuntos de referencia
# ------------------------------------------------------------------
def test_revenue_zero_price_targets_follow_peers(zofio_prieto):
    X, Y = zofio_prieto
    P = np.array([[3, 0]] * 5, dtype=float)
    res = run_revenue(X, Y, P, rts="VRS")
    assert_allclose(res.targets("Y"), res.peers().toarray() @ Y, atol=1e-5)


def test_profit_zero_price_targets_follow_peers(profit_data):
    X, Y, W, P = profit_data
    W = W.copy()
    W[:, 1] = 0.0
    res = run_profit(X, Y, W, P)
    lambdas = res.peers().toarray()
    assert_allclose(res.targets("X")[:, 1], lambdas @ X[:, 1], atol=1e-5)
    assert np.isfinite(res.efficiency()).all()


def test_profit_one_by_one_matches_batch(profit_data):
    X, Y, W, P = profit_data
    batch = run_profit(X, Y, W, P)
    for i in range(X.shape[0]):
        row = slice(i, i + 1)
        single = run_profit(X[row], Y[row], W[row], P[row], Xref=X, Yref=Y)
        assert single.efficiency()[0] == pytest.approx(batch.efficiency()[i], abs=1e-5)
        assert single.efficiency("technical")[0] == pytest.approx(
            batch.efficiency("technical")[i], abs=1e-5
        )
        assert single.peers().shape == (1, X.shape[0])


def test_revenue_one_by_one_matches_batch(zofio_prieto):
    X, Y = zofio_prieto
    P = np.array([[3, 2]] * 5, dtype=float)
    batch = run_revenue(X, Y, P, rts="VRS")
    for i in range(X.shape[0]):
        row = slice(i, i + 1)
        single = run_revenue(X[row], Y[row], P[row], rts="VRS", Xref=X, Yref=Y)
        assert single.efficiency()[0] == pytest.approx(batch.efficiency()[i], abs=1e-5)
        assert single.efficiency("allocative")[0] == pytest.approx(
            batch.efficiency("allocative")[i], abs=1e-5
        )
