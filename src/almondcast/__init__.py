"""
Almond yield and profit sensitivity from daily climate (Lobell et al. 2006 transfer function).
"""

from .core.climate import aggregate_monthly  # noqa: F401
from .core.profit import almond_profit, compute_profit  # noqa: F401
from .core.sensitivity import SensitivityConfig, draw_parameters, run_sensitivity  # noqa: F401
from .core.summary import parameter_summary, profit_quantiles, stratify, yearly_summary  # noqa: F401
from .core.yield_model import almond_yield_anomaly, compute_yield, summarize_yield  # noqa: F401
from .errors import (  # noqa: F401
    AlmondCastError,
    ClimateSchemaError,
    EmptyInputError,
    InvalidParameterError,
    NoOverlapError,
    UnknownYearError,
)
