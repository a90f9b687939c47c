from __future__ import annotations

from typing import Iterable, List


class AlmondCastError(ValueError):
    """Base class for bad-input failures raised by the almondcast core."""


class EmptyInputError(AlmondCastError):
    pass


class NoOverlapError(AlmondCastError):
    pass


class InvalidParameterError(AlmondCastError):
    pass


class ClimateSchemaError(AlmondCastError):
    pass


class UnknownYearError(AlmondCastError):
    """Years present in a simulation table but missing from a stratum mapping."""

    def __init__(self, years: Iterable[int]) -> None:
        self.years: List[int] = sorted(int(y) for y in years)
        super().__init__(f"Years without a stratum assignment: {self.years}")
