from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from rapidfuzz import fuzz, process

from almondcast.io.validators import CLIMATE_COLUMNS, require_valid_climate

logger = logging.getLogger(__name__)

SUPPORTED_CSV = (".csv",)
SUPPORTED_WHITESPACE = (".txt", ".dat", ".tsv")

# normalized header -> canonical column
HEADER_ALIASES: Dict[str, str] = {
    "precip_mm": "precip",
    "precipitation": "precip",
    "prcp": "precip",
    "pr": "precip",
    "rain_mm": "precip",
    "tmin": "tmin_c",
    "t2m_min": "tmin_c",
    "tasmin": "tmin_c",
    "min_temp_c": "tmin_c",
    "yr": "year",
    "mon": "month",
    "dom": "day",
}


def _strip_accents(s: str) -> str:
    return "".join(c for c in unicodedata.normalize("NFKD", s) if not unicodedata.combining(c))


def normalize_header(s: object) -> str:
    s = _strip_accents(str(s).strip().lower())
    s = re.sub(r"\s+", "_", s)
    s = re.sub(r"[^a-z0-9_]+", "", s)
    return s.strip("_")


def infer_climate_columns(columns: List[str], score_cutoff: int = 85) -> Dict[str, str]:
    """
    Map raw headers onto the canonical climate columns.

    Exact matches (after normalization and alias lookup) win; canonical columns
    still missing are then fuzzy-matched against the unclaimed headers only.
    Returns {raw_header: canonical_name}.
    """
    mapping: Dict[str, str] = {}
    claimed = set()

    for c in columns:
        n = normalize_header(c)
        canon = n if n in CLIMATE_COLUMNS else HEADER_ALIASES.get(n)
        if canon is not None and canon not in claimed:
            mapping[c] = canon
            claimed.add(canon)

    for canon in CLIMATE_COLUMNS:
        if canon in claimed:
            continue
        free = {c: normalize_header(c) for c in columns if c not in mapping}
        if not free:
            break
        match = process.extractOne(canon, free, scorer=fuzz.WRatio, score_cutoff=score_cutoff)
        if match is None:
            continue
        _, score, raw = match
        logger.info("Matched column %r -> %s (score %.0f)", raw, canon, score)
        mapping[raw] = canon
        claimed.add(canon)

    return mapping


def _read_raw(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in SUPPORTED_CSV:
        return pd.read_csv(path)
    if suffix in SUPPORTED_WHITESPACE:
        # R write.table layout: quoted header, optional leading row names
        return pd.read_csv(path, sep=r"\s+")
    raise ValueError(f"Unsupported file type: {suffix}. Use CSV or whitespace-delimited text.")


def load_climate_file(path: str | Path, score_cutoff: Optional[int] = 85) -> pd.DataFrame:
    """
    Load a daily climate file and return it in the canonical column contract:
    day, month, year, tmin_c, precip. Extra columns (tmax_c, wy, ...) are dropped.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    df_raw = _read_raw(path)
    df_raw = df_raw.dropna(axis=0, how="all").dropna(axis=1, how="all")

    colmap = infer_climate_columns([str(c) for c in df_raw.columns], score_cutoff=100 if score_cutoff is None else score_cutoff)
    df = df_raw.rename(columns={c: colmap[str(c)] for c in df_raw.columns if str(c) in colmap})
    keep = [c for c in CLIMATE_COLUMNS if c in df.columns]

    logger.info("Loaded %s: %d rows, columns %s", path.name, len(df), keep)
    return require_valid_climate(df[keep])
