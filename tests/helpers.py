import pandas as pd

from heatmap.config import REQUIRED_COLUMNS
from heatmap.loader import parse_records


def make_records(rows):
    """Records frame from (date, max, min) tuples, parsed the same way as the CSV."""
    raw = pd.DataFrame(rows, columns=list(REQUIRED_COLUMNS)).astype(str)
    return parse_records(raw, on_invalid="keep")


def make_series(years, months=(1, 2), days=3):
    rows = []
    for y in years:
        for m in months:
            for d in range(1, days + 1):
                hi = 10 + (y - 2000) + m * 2 + d
                rows.append((f"{y:04d}-{m:02d}-{d:02d}", hi, hi - 8 - d))
    return make_records(rows)


