"""
Year/month rollups of the daily records.

Everything here is a pure function of its input frame: nothing is mutated,
results are rebuilt from scratch on every call.
"""

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from heatmap.config import DATE_COLUMN, MAX_COLUMN, MIN_COLUMN, WINDOW_YEARS, TempField

SUMMARY_COLUMNS = ["year", "month", "max", "min"]


@dataclass(frozen=True, eq=False)
class DayBucket:
    """All days of one (year, month), ascending by date."""

    year: int
    month: int
    days: pd.DataFrame

    @property
    def key(self) -> str:
        return month_key(self.year, self.month)

    def __len__(self):
        return len(self.days)

    def aggregate(self, field) -> float:
        """Max of the daily maxima or min of the daily minima of this month."""
        field = TempField.parse(field)
        if field is TempField.MAX:
            return _nan_reduce(np.nanmax, self.days[MAX_COLUMN])
        return _nan_reduce(np.nanmin, self.days[MIN_COLUMN])


def month_key(year, month) -> str:
    return f"{int(year)}-{int(month)}"


def _nan_reduce(fn, values) -> float:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0 or np.isnan(arr).all():
        return math.nan
    return float(fn(arr))


def extent(values) -> tuple[float, float]:
    """(min, max) ignoring NaN; (nan, nan) when nothing is left."""
    return _nan_reduce(np.nanmin, values), _nan_reduce(np.nanmax, values)


def field_extent(frame: pd.DataFrame, field) -> tuple[float, float]:
    """Extent of the chosen temperature field over records or summaries."""
    field = TempField.parse(field)
    if field.value in frame.columns:
        return extent(frame[field.value])
    return extent(frame[MAX_COLUMN if field is TempField.MAX else MIN_COLUMN])


def full_extent(frame: pd.DataFrame) -> tuple[float, float]:
    """Lowest minimum and highest maximum, over records or summaries."""
    lo, _ = field_extent(frame, TempField.MIN)
    _, hi = field_extent(frame, TempField.MAX)
    return lo, hi


def summarize(records: pd.DataFrame) -> pd.DataFrame:
    """One row per (year, month) with the month's highest max and lowest min.

    Row order follows the grouping, callers must not rely on it.
    """
    if records.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    return (
        records.groupby(["year", "month"], as_index=False, sort=False)
        .agg(**{
            "max": (MAX_COLUMN, "max"),
            "min": (MIN_COLUMN, "min"),
        })
        [SUMMARY_COLUMNS]
    )


def bucket_daily(records: pd.DataFrame) -> list[DayBucket]:
    buckets = []
    for (year, month), days in records.groupby(["year", "month"], sort=False):
        days = days.sort_values(DATE_COLUMN, kind="stable").reset_index(drop=True)
        buckets.append(DayBucket(int(year), int(month), days))
    return buckets


def recent_window(records: pd.DataFrame, years: int = WINDOW_YEARS) -> pd.DataFrame:
    """Records of the ``years`` most recent calendar years, counted back from the latest year."""
    if records.empty:
        return records.copy()
    max_year = int(records["year"].max())
    return records[records["year"] >= max_year - (years - 1)].copy()


def window_years(records: pd.DataFrame) -> list[int]:
    return sorted(int(y) for y in records["year"].unique())
