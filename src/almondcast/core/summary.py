from __future__ import annotations

import logging
from typing import Dict, Hashable, List, Sequence

import pandas as pd

from almondcast.errors import EmptyInputError, UnknownYearError

logger = logging.getLogger(__name__)

YEARLY_COLUMNS: List[str] = ["year", "median_profit", "mean_profit", "min_profit", "max_profit", "n_sims"]
PARAMETER_COLUMNS: List[str] = ["simulation_id", "baseline_yield", "baseline_price", "mean_profit"]


def _require_rows(table: pd.DataFrame) -> None:
    if table is None or table.empty:
        raise EmptyInputError("Simulation table has no rows.")


def yearly_summary(table: pd.DataFrame) -> pd.DataFrame:
    """
    Profit distribution across simulations, per year.

    Output columns: year, median_profit, mean_profit, min_profit, max_profit, n_sims
    """
    _require_rows(table)
    out = (
        table.groupby("year", as_index=False)
        .agg(
            median_profit=("profit", "median"),
            mean_profit=("profit", "mean"),
            min_profit=("profit", "min"),
            max_profit=("profit", "max"),
            n_sims=("simulation_id", "nunique"),
        )
        .sort_values("year")
        .reset_index(drop=True)
    )
    return out[YEARLY_COLUMNS]


def stratify(
    table: pd.DataFrame,
    bucket_assignment: Dict[int, Hashable],
    strict: bool = True,
) -> pd.DataFrame:
    """
    Yearly summary computed separately within each labelled group of years.

    bucket_assignment maps year -> label (e.g. "high", "mid", "low").
    A year present in the table but absent from the mapping raises
    UnknownYearError; with strict=False such years are dropped and logged.
    Output: stratum column followed by the yearly_summary columns.
    """
    _require_rows(table)
    # a null label counts as unassigned
    mapping = {int(y): label for y, label in bucket_assignment.items() if pd.notna(label)}

    years = table["year"].astype(int)
    unknown = sorted(set(years.unique().tolist()) - set(mapping))
    if unknown:
        if strict:
            raise UnknownYearError(unknown)
        logger.warning("Dropping %d years without a stratum: %s", len(unknown), unknown)

    df = table.loc[years.isin(list(mapping))].copy()
    if df.empty:
        raise EmptyInputError("No simulation rows fall into any stratum.")
    df["stratum"] = df["year"].astype(int).map(mapping)

    parts = []
    for label, g in df.groupby("stratum", sort=False):
        ys = yearly_summary(g)
        ys.insert(0, "stratum", label)
        parts.append(ys)

    return pd.concat(parts, ignore_index=True)


def parameter_summary(table: pd.DataFrame) -> pd.DataFrame:
    """Mean profit across years for each simulation, with its drawn parameters."""
    _require_rows(table)
    out = (
        table.groupby("simulation_id", as_index=False)
        .agg(
            baseline_yield=("baseline_yield", "first"),
            baseline_price=("baseline_price", "first"),
            mean_profit=("profit", "mean"),
        )
        .sort_values("simulation_id")
        .reset_index(drop=True)
    )
    return out[PARAMETER_COLUMNS]


def _quantile_name(q: float) -> str:
    pct = round(q * 100, 6)
    if float(pct).is_integer():
        return f"q{int(pct):02d}"
    whole, frac = f"{pct:f}".rstrip("0").split(".")
    return f"q{int(whole):02d}_{frac}"


def profit_quantiles(table: pd.DataFrame, quantiles: Sequence[float] = (0.05, 0.5, 0.95)) -> pd.DataFrame:
    """
    Per-year profit quantile bands across simulations.
    Columns are named q<percent>, e.g. q05, q50, q95; fractional percents
    use an underscore, e.g. 0.125 -> q12_5.
    """
    _require_rows(table)
    # unstack() orders columns by quantile value
    qs = sorted({float(q) for q in quantiles})
    if not qs or any(not (0.0 <= q <= 1.0) for q in qs):
        raise ValueError(f"Quantiles must lie in [0, 1], got {list(quantiles)}")

    names = [_quantile_name(q) for q in qs]
    if len(set(names)) != len(names):
        raise ValueError(f"Quantiles too close to name distinctly: {qs}")

    wide = table.groupby("year")["profit"].quantile(qs).unstack()
    wide.columns = names
    return wide.reset_index().sort_values("year").reset_index(drop=True)
