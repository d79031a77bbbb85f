"""
Heatmap configuration and constants.
"""

import os
from enum import Enum
from pathlib import Path


class TempField(str, Enum):
    MAX = "max"
    MIN = "min"

    @classmethod
    def parse(cls, value) -> "TempField":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown temperature field {value!r}; expected one of "
                f"{[f.value for f in cls]}"
            ) from None


# -----------------------------
# Paths
# -----------------------------
REPO_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = REPO_DIR / "data"
DEFAULT_DATA_PATH = DATA_DIR / "temperature_daily.csv"
DATA_PATH = Path(os.environ.get("TEMPERATURE_CSV", DEFAULT_DATA_PATH))


# -----------------------------
# Input columns
# -----------------------------
DATE_COLUMN = "date"
MAX_COLUMN = "max_temperature"
MIN_COLUMN = "min_temperature"
REQUIRED_COLUMNS = (DATE_COLUMN, MAX_COLUMN, MIN_COLUMN)
DATE_FORMAT = "%Y-%m-%d"

# What the loader does with rows whose date or temperatures fail to parse:
# "drop" them, "raise" InvalidRowsError, or "keep" them as NaN.
INVALID_ROW_POLICIES = ("drop", "raise", "keep")
INVALID_ROW_POLICY = "drop"


# -----------------------------
# Views
# -----------------------------
WINDOW_YEARS = 10
TRANSITION_MS = 500
BAND_PADDING = 0.1
COLOR_SCHEME = "yelloworangered"

LEGEND_WIDTH = 300
LEGEND_HEIGHT = 10
LEGEND_TICKS = 5
LEGEND_STOPS = 101

MINI_LINE_LABELS = {
    TempField.MAX: "Max Temperature",
    TempField.MIN: "Min Temperature",
}
MINI_LINE_COLORS = {
    TempField.MAX: "green",
    TempField.MIN: "blue",
}
MINI_LINE_WIDTH = 1.5

YEARLY_LAYOUT = {
    "width": 900,
    "height": 450,
    "margin": {"top": 50, "right": 30, "bottom": 80, "left": 80},
}

RECENT_LAYOUT = {
    "width": 900,
    "height": 500,
    "margin": {"top": 50, "right": 30, "bottom": 100, "left": 80},
}


def inner_size(layout: dict) -> tuple[int, int]:
    """Plot area of a layout once margins are removed."""
    m = layout["margin"]
    return (
        layout["width"] - m["left"] - m["right"],
        layout["height"] - m["top"] - m["bottom"],
    )
