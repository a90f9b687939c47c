from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd

from almondcast.core.climate import aggregate_monthly
from almondcast.core.profit import PROFIT_COLUMNS, compute_profit
from almondcast.core.yield_model import compute_yield
from almondcast.errors import InvalidParameterError

logger = logging.getLogger(__name__)

SIMULATION_COLUMNS: List[str] = ["simulation_id", "baseline_yield", "baseline_price"] + PROFIT_COLUMNS


@dataclass(frozen=True)
class SensitivityConfig:
    """
    Uniform sweep over the two economic assumptions.
    yield_range in lb/acre, price_range in USD/lb.
    """
    tmin_month: int = 2
    precip_month: int = 1
    n_samples: int = 100
    yield_range: Tuple[float, float] = (500.0, 3000.0)
    price_range: Tuple[float, float] = (1.5, 4.0)
    seed: int = 42
    n_jobs: int = 1


def _check_range(name: str, rng: Tuple[float, float]) -> Tuple[float, float]:
    try:
        lo, hi = (float(x) for x in rng)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a (low, high) pair of numbers, got {rng!r}")
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise InvalidParameterError(f"{name} bounds must be finite, got {rng!r}")
    if lo <= 0 or lo > hi:
        raise InvalidParameterError(f"{name} must satisfy 0 < low <= high, got {rng!r}")
    return lo, hi


def _check_n(name: str, n: int) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer, got {n!r}")
    return int(n)


def _check_seed(seed: int) -> int:
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
        raise InvalidParameterError(f"seed must be a non-negative integer, got {seed!r}")
    return int(seed)


def draw_parameters(
    n_samples: int,
    yield_range: Tuple[float, float],
    price_range: Tuple[float, float],
    seed: int,
) -> pd.DataFrame:
    """
    Draw n_samples independent (baseline_yield, baseline_price) pairs.

    A single seeded generator draws all yields first, then all prices.
    Output columns: simulation_id (1..n), baseline_yield, baseline_price
    """
    n_samples = _check_n("n_samples", n_samples)
    y_lo, y_hi = _check_range("yield_range", yield_range)
    p_lo, p_hi = _check_range("price_range", price_range)
    seed = _check_seed(seed)

    rng = np.random.default_rng(seed)
    yields = rng.uniform(y_lo, y_hi, size=n_samples)
    prices = rng.uniform(p_lo, p_hi, size=n_samples)

    return pd.DataFrame(
        {
            "simulation_id": np.arange(1, n_samples + 1),
            "baseline_yield": yields,
            "baseline_price": prices,
        }
    )


def run_sensitivity(
    climate: pd.DataFrame,
    tmin_month: int,
    precip_month: int,
    n_samples: int,
    yield_range: Tuple[float, float],
    price_range: Tuple[float, float],
    seed: int,
    n_jobs: int = 1,
) -> pd.DataFrame:
    """
    Batch profit simulation over randomly drawn baseline yield/price pairs.

    Climate aggregation and the yield model run once; only the profit model is
    evaluated per draw. Output has n_samples * n_years rows, ordered by
    simulation_id then year. Any failure aborts the whole run.
    """
    n_jobs = _check_n("n_jobs", n_jobs)
    params = draw_parameters(n_samples, yield_range, price_range, seed)

    monthly = aggregate_monthly(climate)
    yields = compute_yield(monthly, tmin_month, precip_month)

    def run_one(row: Tuple[int, float, float]) -> pd.DataFrame:
        sim_id, base_yield, base_price = row
        res = compute_profit(yields, base_yield, base_price)
        res.insert(0, "baseline_price", float(base_price))
        res.insert(0, "baseline_yield", float(base_yield))
        res.insert(0, "simulation_id", int(sim_id))
        return res

    tasks = list(params[["simulation_id", "baseline_yield", "baseline_price"]].itertuples(index=False, name=None))

    if n_jobs == 1 or len(tasks) == 1:
        batches = [run_one(t) for t in tasks]
    else:
        with ThreadPoolExecutor(max_workers=min(n_jobs, len(tasks))) as executor:
            # map() yields in submission order, so draw order is kept
            batches = list(executor.map(run_one, tasks))

    table = pd.concat(batches, ignore_index=True)[SIMULATION_COLUMNS]
    logger.info(
        "Sensitivity run: %d samples x %d years = %d rows (seed=%s)",
        len(tasks), len(yields), len(table), seed,
    )
    return table


def run_sensitivity_from_config(climate: pd.DataFrame, cfg: SensitivityConfig = SensitivityConfig()) -> pd.DataFrame:
    return run_sensitivity(
        climate,
        tmin_month=cfg.tmin_month,
        precip_month=cfg.precip_month,
        n_samples=cfg.n_samples,
        yield_range=cfg.yield_range,
        price_range=cfg.price_range,
        seed=cfg.seed,
        n_jobs=cfg.n_jobs,
    )
