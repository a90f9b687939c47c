from __future__ import annotations

import logging
from typing import List

import pandas as pd

from almondcast.io.validators import require_valid_climate

logger = logging.getLogger(__name__)

MONTHLY_COLUMNS: List[str] = ["year", "month", "tmin_mean", "precip_sum"]


def aggregate_monthly(climate: pd.DataFrame) -> pd.DataFrame:
    """
    Reduce a daily climate record to monthly statistics.

    Input columns: day, month, year, tmin_c, precip
    Output columns: year, month, tmin_mean (mean of tmin_c), precip_sum (sum of precip)
    One row per (year, month) present in the input, sorted by (year, month).
    """
    df = require_valid_climate(climate)

    monthly = (
        df.groupby(["year", "month"], as_index=False)
        .agg(tmin_mean=("tmin_c", "mean"), precip_sum=("precip", "sum"))
        .sort_values(["year", "month"])
        .reset_index(drop=True)
    )

    logger.debug("Aggregated %d daily rows into %d monthly rows", len(df), len(monthly))
    return monthly[MONTHLY_COLUMNS]
