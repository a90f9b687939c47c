from __future__ import annotations

import math
from typing import List

import pandas as pd

from almondcast.core.climate import aggregate_monthly
from almondcast.core.yield_model import YIELD_COLUMNS, compute_yield
from almondcast.errors import InvalidParameterError

# 1 lb = 0.0005 short ton
TON_PER_LB = 0.0005
LB_PER_TON = 2000.0

PROFIT_COLUMNS: List[str] = YIELD_COLUMNS + ["actual_yield", "profit"]


def _check_positive(name: str, value: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(v) or v <= 0:
        raise InvalidParameterError(f"{name} must be finite and > 0, got {value!r}")
    return v


def compute_profit(
    yields: pd.DataFrame,
    baseline_yield_lb_per_acre: float,
    baseline_price_usd_per_lb: float,
) -> pd.DataFrame:
    """
    Convert yearly yield anomalies into actual yield (ton/acre) and profit (USD/acre).

    actual_yield = baseline_yield [lb/acre -> ton/acre] + yield_anomaly
    profit = actual_yield * baseline_price [USD/lb -> USD/ton]

    Actual yield is not clamped at zero. Row count and order are preserved.
    """
    baseline_yield_lb_per_acre = _check_positive("baseline_yield_lb_per_acre", baseline_yield_lb_per_acre)
    baseline_price_usd_per_lb = _check_positive("baseline_price_usd_per_lb", baseline_price_usd_per_lb)

    baseline_yield_tn = baseline_yield_lb_per_acre * TON_PER_LB
    baseline_price_tn = baseline_price_usd_per_lb * LB_PER_TON

    out = yields[YIELD_COLUMNS].copy()
    out["actual_yield"] = baseline_yield_tn + out["yield_anomaly"].astype(float)
    out["profit"] = out["actual_yield"] * baseline_price_tn
    return out


def almond_profit(
    climate: pd.DataFrame,
    tmin_month: int,
    precip_month: int,
    baseline_yield_lb_per_acre: float,
    baseline_price_usd_per_lb: float,
) -> pd.DataFrame:
    """Daily climate -> yearly profit in one call (single, non-randomized run)."""
    monthly = aggregate_monthly(climate)
    yields = compute_yield(monthly, tmin_month, precip_month)
    return compute_profit(yields, baseline_yield_lb_per_acre, baseline_price_usd_per_lb)
