from __future__ import annotations

import logging
from typing import List

import numpy as np
import pandas as pd

from almondcast.errors import EmptyInputError, InvalidParameterError, NoOverlapError

logger = logging.getLogger(__name__)

YIELD_COLUMNS: List[str] = ["year", "tmin_mean", "precip_sum", "yield_anomaly"]


def almond_yield_anomaly(tmin, precip):
    """
    Lobell et al. (2006) almond transfer function.

    tmin: mean minimum temperature of the tmin month (degC)
    precip: total precipitation of the precip month (mm)
    Returns the yield anomaly in ton/acre. Works on scalars and arrays.
    """
    return -0.015 * tmin - 0.0046 * tmin ** 2 - 0.07 * precip + 0.0043 * precip ** 2 + 0.28


def _check_month(name: str, month: int) -> int:
    try:
        m = int(month)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be an integer month, got {month!r}")
    if m != month or not (1 <= m <= 12):
        raise InvalidParameterError(f"{name} must be in 1..12, got {month!r}")
    return m


def compute_yield(monthly: pd.DataFrame, tmin_month: int, precip_month: int) -> pd.DataFrame:
    """
    Yearly yield anomaly from monthly climate statistics.

    Takes tmin_mean from `tmin_month` and precip_sum from `precip_month`, keeps only
    years that have both (inner join), and evaluates the transfer function.
    """
    tmin_month = _check_month("tmin_month", tmin_month)
    precip_month = _check_month("precip_month", precip_month)

    tmin_df = monthly.loc[monthly["month"] == tmin_month, ["year", "tmin_mean"]]
    precip_df = monthly.loc[monthly["month"] == precip_month, ["year", "precip_sum"]]

    climate_input = tmin_df.merge(precip_df, on="year", how="inner").sort_values("year").reset_index(drop=True)
    if climate_input.empty:
        raise NoOverlapError(
            f"No year has data for both tmin_month={tmin_month} and precip_month={precip_month}."
        )

    n_dropped = len(set(tmin_df["year"]) ^ set(precip_df["year"]))
    if n_dropped:
        logger.info("Dropped %d years lacking month %d or month %d", n_dropped, tmin_month, precip_month)

    climate_input["yield_anomaly"] = almond_yield_anomaly(
        climate_input["tmin_mean"].to_numpy(dtype=float),
        climate_input["precip_sum"].to_numpy(dtype=float),
    )
    return climate_input[YIELD_COLUMNS]


def summarize_yield(yields: pd.DataFrame) -> pd.DataFrame:
    """One-row summary of the yield anomaly: mean_yield, max_yield, min_yield (ton/acre)."""
    anomaly = yields["yield_anomaly"].to_numpy(dtype=float)
    if anomaly.size == 0:
        raise EmptyInputError("Cannot summarize an empty yield table.")
    return pd.DataFrame(
        [
            {
                "mean_yield": float(np.mean(anomaly)),
                "max_yield": float(np.max(anomaly)),
                "min_yield": float(np.min(anomaly)),
            }
        ]
    )
