from __future__ import annotations

import pandas as pd
import pytest


def make_climate(years, months=(1, 2, 3), days=(1, 2, 3), tmin=None, precip=None) -> pd.DataFrame:
    """Synthetic daily climate table; tmin/precip are callables of (year, month, day)."""
    tmin = tmin or (lambda y, m, d: float(m + d + (y - 2000)))
    precip = precip or (lambda y, m, d: float(d))
    rows = []
    for y in years:
        for m in months:
            for d in days:
                rows.append({"day": d, "month": m, "year": y, "tmin_c": tmin(y, m, d), "precip": precip(y, m, d)})
    return pd.DataFrame(rows)


@pytest.fixture
def climate() -> pd.DataFrame:
    return make_climate(years=range(2000, 2005))
