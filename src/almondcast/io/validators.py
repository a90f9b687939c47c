from __future__ import annotations

import logging
from typing import Dict, List

import pandas as pd

from almondcast.errors import ClimateSchemaError, EmptyInputError

logger = logging.getLogger(__name__)

CLIMATE_COLUMNS: List[str] = ["day", "month", "year", "tmin_c", "precip"]

# Accepted spellings -> canonical column
COLUMN_ALIASES: Dict[str, str] = {
    "precip_mm": "precip",
    "tmin": "tmin_c",
}


def normalize_climate(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize a daily climate table:
    - Rename accepted aliases (e.g. precip_mm -> precip).
    - Coerce day/month/year to integers and tmin_c/precip to floats.
    - Drop rows that are null in every canonical column.
    """
    out = df.copy()
    renames = {c: COLUMN_ALIASES[c] for c in out.columns if c in COLUMN_ALIASES and COLUMN_ALIASES[c] not in out.columns}
    if renames:
        out = out.rename(columns=renames)

    present = [c for c in CLIMATE_COLUMNS if c in out.columns]
    out = out.dropna(subset=present, how="all").reset_index(drop=True)

    for c in ("tmin_c", "precip"):
        if c in out.columns:
            out[c] = pd.to_numeric(out[c], errors="coerce").astype(float)
    for c in ("day", "month", "year"):
        if c in out.columns:
            out[c] = pd.to_numeric(out[c], errors="coerce")
            # fractional values stay float so validation can reject them
            if out[c].notna().all() and (out[c] % 1 == 0).all():
                out[c] = out[c].astype(int)

    return out


def validate_climate(df: pd.DataFrame) -> tuple[bool, list]:
    """
    Check a (normalized) daily climate table against the column contract.
    Returns (validation_ok, list_of_errors).
    """
    errors: List[str] = []

    missing = [c for c in CLIMATE_COLUMNS if c not in df.columns]
    for col in missing:
        errors.append(f"Missing column: {col}")
    if missing:
        return False, errors

    na_rows = df[CLIMATE_COLUMNS].isna().any(axis=1)
    if na_rows.any():
        errors.append(f"{int(na_rows.sum())} rows have missing values in required columns.")

    for c in ("day", "month", "year"):
        vals = pd.to_numeric(df[c], errors="coerce").dropna()
        frac = vals % 1 != 0
        if frac.any():
            errors.append(f"Non-integer values in {c}: {sorted(vals[frac].unique().tolist())[:10]}")

    months = df["month"].dropna()
    bad_month = ~months.between(1, 12)
    if bad_month.any():
        errors.append(f"Month values outside 1..12: {sorted(months[bad_month].unique().tolist())[:10]}")

    precip = df["precip"].dropna()
    if (precip < 0).any():
        errors.append(f"{int((precip < 0).sum())} rows have negative precipitation.")

    return len(errors) == 0, errors


def require_valid_climate(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize and validate; raise on any contract violation."""
    if df is None or df.empty:
        raise EmptyInputError("Climate table has no rows.")

    out = normalize_climate(df)
    if out.empty:
        raise EmptyInputError("Climate table has no rows after dropping empty records.")

    ok, errors = validate_climate(out)
    if not ok:
        raise ClimateSchemaError("; ".join(errors))

    logger.debug("Validated climate table: %d rows, years %d-%d", len(out), out["year"].min(), out["year"].max())
    return out
