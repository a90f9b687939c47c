from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Tuple

import pandas as pd

from almondcast.core.pipeline import PipelineConfig, run_pipeline
from almondcast.errors import AlmondCastError
from almondcast.scenarios import STRATUM_ORDER, load_strata


def _pair(text: str) -> Tuple[float, float]:
    parts = [x.strip() for x in text.split(",") if x.strip()]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Expected 'low,high', got {text!r}")
    return float(parts[0]), float(parts[1])


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="AlmondCast: almond yield/profit sensitivity from daily climate.")
    p.add_argument("--input", type=str, required=True, help="Daily climate file (.csv or whitespace-delimited .txt)")
    p.add_argument("--tmin-month", type=int, default=2, help="Month whose mean minimum temperature drives the model")
    p.add_argument("--precip-month", type=int, default=1, help="Month whose total precipitation drives the model")
    p.add_argument("--n-samples", type=int, default=100, help="Number of random (yield, price) draws")
    p.add_argument("--yield-range", type=_pair, default=(500.0, 3000.0), help="Baseline yield range lb/acre, 'low,high'")
    p.add_argument("--price-range", type=_pair, default=(1.5, 4.0), help="Baseline price range USD/lb, 'low,high'")
    p.add_argument("--seed", type=int, default=42, help="Random seed")
    p.add_argument("--n-jobs", type=int, default=1, help="Worker threads for the per-draw profit evaluation")
    p.add_argument("--strata", type=str, default=None, help="CSV with columns year,label for stratified summary")
    p.add_argument("--lenient-strata", action="store_true", help="Drop (and log) years missing from --strata instead of failing")
    p.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(levelname)s: %(message)s")

    cfg = PipelineConfig(
        tmin_month=int(args.tmin_month),
        precip_month=int(args.precip_month),
        n_samples=int(args.n_samples),
        yield_range=args.yield_range,
        price_range=args.price_range,
        seed=int(args.seed),
        n_jobs=int(args.n_jobs),
        strict_strata=not args.lenient_strata,
    )

    try:
        strata_map = load_strata(args.strata) if args.strata else None
        res = run_pipeline(Path(args.input), cfg=cfg, bucket_assignment=strata_map)
    except (AlmondCastError, FileNotFoundError, ValueError) as e:
        print(f"AlmondCast failed: {e}", file=sys.stderr)
        return 1

    with pd.option_context("display.width", 120, "display.max_rows", 200):
        print("AlmondCast ✅")
        print(f"Simulation rows: {len(res.simulations)}")
        print(f"Years:           {len(res.yearly)}")
        print(f"Simulations:     {len(res.parameters)}")
        print("\nProfit by year (USD/acre):")
        print(res.yearly.merge(res.quantiles, on="year").to_string(index=False))
        if res.strata is not None:
            order = {k: i for i, k in enumerate(STRATUM_ORDER)}
            strata = res.strata.assign(_rank=res.strata["stratum"].map(lambda v: order.get(v, len(order))))
            strata = strata.sort_values(["_rank", "year"], kind="stable").drop(columns="_rank")
            print("\nProfit by stratum:")
            print(strata.to_string(index=False))
        print("\nMean profit by drawn parameters:")
        print(res.parameters.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
