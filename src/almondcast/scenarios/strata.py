from __future__ import annotations

from pathlib import Path
from typing import Dict, Hashable, Iterable, Mapping, Tuple

import pandas as pd

from almondcast.io.reader import normalize_header

# Conventional ordering for profit strata labels
STRATUM_ORDER: Tuple[str, ...] = ("high", "mid", "low")


def strata_from_groups(groups: Mapping[Hashable, Iterable[int]]) -> Dict[int, Hashable]:
    """
    Invert {label: [years]} into the {year: label} mapping `stratify` expects.
    A year listed under two labels is an error.
    """
    out: Dict[int, Hashable] = {}
    for label, years in groups.items():
        for y in years:
            y = int(y)
            if y in out and out[y] != label:
                raise ValueError(f"Year {y} assigned to both {out[y]!r} and {label!r}")
            out[y] = label
    return out


def load_strata(path: str | Path) -> Dict[int, str]:
    """Read a year -> label assignment from a CSV with columns year, label."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    df = pd.read_csv(path)
    df.columns = [normalize_header(c) for c in df.columns]
    if not {"year", "label"}.issubset(df.columns):
        raise ValueError(f"Strata file must contain columns: year, label (got {list(df.columns)})")

    df = df.dropna(subset=["year", "label"])
    groups: Dict[str, list] = {}
    for _, row in df.iterrows():
        groups.setdefault(str(row["label"]).strip(), []).append(int(row["year"]))
    return strata_from_groups(groups)
