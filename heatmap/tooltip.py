"""
Hover tooltip content for both heatmaps.

Both charts show the same three fields (``Date``, ``Max``, ``Min``) through
Altair's tooltip channel, so the browser keeps a single tooltip per chart and
moves it with the pointer. This module is the only place those fields are
formatted.
"""

import math
from typing import Optional

import pandas as pd

from heatmap.config import DATE_COLUMN, MAX_COLUMN, MIN_COLUMN

TOOLTIP_FIELDS = ["Date", "Max", "Min"]


def _fmt(value) -> str:
    text = "NaN" if value is None or pd.isna(value) else f"{value:g}"
    return f"{text}°C"


def month_fields(year, month, max_value, min_value) -> dict:
    return {
        "Date": f"{int(year)}-{int(month)}",
        "Max": _fmt(max_value),
        "Min": _fmt(min_value),
    }


def day_fields(day) -> dict:
    return {
        "Date": pd.Timestamp(day[DATE_COLUMN]).strftime("%Y-%m-%d"),
        "Max": _fmt(day[MAX_COLUMN]),
        "Min": _fmt(day[MIN_COLUMN]),
    }


def day_index(fraction: float, day_count: int) -> Optional[int]:
    """Day under the pointer: fraction of the cell width times the day count, floored.

    ``None`` when the index falls outside the cell's days.
    """
    if day_count <= 0:
        return None
    index = math.floor(fraction * day_count)
    if index < 0 or index >= day_count:
        return None
    return index


def day_span(index: int, day_count: int) -> tuple[float, float]:
    """Horizontal extent, in day units, of the strip that ``day_index`` maps to ``index``.

    Cells place day 1 on the left edge and the last day on the right edge; a
    single-day cell is centred on day 1.
    """
    if day_count == 1:
        return 0.5, 1.5
    step = (day_count - 1) / day_count
    return 1 + step * index, 1 + step * (index + 1)
