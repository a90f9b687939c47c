"""
Year stratification inputs (dataset-specific year -> label curation).
"""

from .strata import STRATUM_ORDER, load_strata, strata_from_groups  # noqa: F401
