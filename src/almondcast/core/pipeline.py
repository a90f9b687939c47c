from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Hashable, Optional, Tuple

import pandas as pd

from almondcast.core.sensitivity import SensitivityConfig, run_sensitivity_from_config
from almondcast.core.summary import parameter_summary, profit_quantiles, stratify, yearly_summary
from almondcast.io.reader import load_climate_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    tmin_month: int = 2
    precip_month: int = 1

    n_samples: int = 100
    yield_range: Tuple[float, float] = (500.0, 3000.0)
    price_range: Tuple[float, float] = (1.5, 4.0)
    seed: int = 42
    n_jobs: int = 1

    quantiles: Tuple[float, ...] = (0.05, 0.5, 0.95)
    strict_strata: bool = True

    def sensitivity(self) -> SensitivityConfig:
        return SensitivityConfig(
            tmin_month=self.tmin_month,
            precip_month=self.precip_month,
            n_samples=self.n_samples,
            yield_range=self.yield_range,
            price_range=self.price_range,
            seed=self.seed,
            n_jobs=self.n_jobs,
        )


@dataclass(frozen=True)
class PipelineResult:
    simulations: pd.DataFrame
    yearly: pd.DataFrame
    parameters: pd.DataFrame
    quantiles: pd.DataFrame
    strata: Optional[pd.DataFrame] = None


def run_pipeline(
    climate: pd.DataFrame | str | Path,
    cfg: PipelineConfig = PipelineConfig(),
    bucket_assignment: Optional[Dict[int, Hashable]] = None,
) -> PipelineResult:
    """
    Daily climate -> simulation table -> summaries, all in memory.

    `climate` is either an already-parsed table or a path handed to
    load_climate_file. Stratified summary is computed only when a
    year -> label assignment is given.
    """
    if isinstance(climate, (str, Path)):
        climate = load_climate_file(climate)

    sims = run_sensitivity_from_config(climate, cfg.sensitivity())

    strata = None
    if bucket_assignment is not None:
        strata = stratify(sims, bucket_assignment, strict=cfg.strict_strata)

    result = PipelineResult(
        simulations=sims,
        yearly=yearly_summary(sims),
        parameters=parameter_summary(sims),
        quantiles=profit_quantiles(sims, cfg.quantiles),
        strata=strata,
    )
    logger.info(
        "Pipeline done: %d simulation rows, %d years, %d simulations",
        len(result.simulations), len(result.yearly), len(result.parameters),
    )
    return result
