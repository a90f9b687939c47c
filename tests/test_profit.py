from __future__ import annotations

import math

import pandas as pd
import pytest

from almondcast.core.climate import aggregate_monthly
from almondcast.core.profit import PROFIT_COLUMNS, almond_profit, compute_profit
from almondcast.core.yield_model import compute_yield
from almondcast.errors import InvalidParameterError


def _yields(anomalies, years=None):
    years = years or list(range(2000, 2000 + len(anomalies)))
    return pd.DataFrame({"year": years, "tmin_mean": 0.0, "precip_sum": 0.0, "yield_anomaly": anomalies})


def test_reference_conversion_is_exact():
    out = compute_profit(_yields([0.0]), baseline_yield_lb_per_acre=2000, baseline_price_usd_per_lb=1.5)
    assert list(out.columns) == PROFIT_COLUMNS
    assert out["actual_yield"].iloc[0] == 1.0
    assert out["profit"].iloc[0] == 3000.0


@pytest.mark.parametrize("delta", [-2.0, -0.25, 0.1, 7.5])
def test_profit_linear_in_anomaly(delta):
    base = compute_profit(_yields([0.3]), 1800.0, 2.2)
    shifted = compute_profit(_yields([0.3 + delta]), 1800.0, 2.2)
    price_per_ton = 2.2 / 0.0005
    assert shifted["profit"].iloc[0] - base["profit"].iloc[0] == pytest.approx(delta * price_per_ton)


def test_negative_actual_yield_not_clamped():
    out = compute_profit(_yields([-5.0]), 2000, 1.0)
    assert out["actual_yield"].iloc[0] == pytest.approx(-4.0)
    assert out["profit"].iloc[0] == pytest.approx(-8000.0)


def test_preserves_rows_and_order():
    y = _yields([0.1, -0.2, 0.3], years=[2005, 2001, 2003])
    out = compute_profit(y, 1000, 2.0)
    assert out["year"].tolist() == [2005, 2001, 2003]
    assert len(out) == 3
    assert "profit" not in y.columns


@pytest.mark.parametrize(
    "yld,price",
    [(0, 1.5), (-10, 1.5), (2000, 0), (2000, -1), (math.nan, 1.5), (2000, math.inf), ("x", 1.5)],
)
def test_invalid_parameters(yld, price):
    with pytest.raises(InvalidParameterError):
        compute_profit(_yields([0.0]), yld, price)


def test_almond_profit_matches_stagewise(climate):
    expected = compute_profit(compute_yield(aggregate_monthly(climate), 2, 1), 2500, 3.0)
    got = almond_profit(climate, tmin_month=2, precip_month=1, baseline_yield_lb_per_acre=2500, baseline_price_usd_per_lb=3.0)
    pd.testing.assert_frame_equal(got, expected)
