"""
Daily temperature CSV loader.

Reads the source file once, parses the ``date`` column with a fixed
``YYYY-MM-DD`` format and coerces the two temperature columns to floats.
Rows that fail to parse are handled according to the invalid-row policy
(see ``config.INVALID_ROW_POLICY``).
"""

import logging

import pandas as pd

from heatmap.config import (
    DATE_COLUMN,
    DATE_FORMAT,
    INVALID_ROW_POLICIES,
    INVALID_ROW_POLICY,
    MAX_COLUMN,
    MIN_COLUMN,
    REQUIRED_COLUMNS,
)
from heatmap.errors import InvalidRowsError, LoadError

_LOGGER = logging.getLogger(__name__)

# Header is line 1 of the file, first data row is line 2.
_FIRST_DATA_LINE = 2


def read_rows(source) -> pd.DataFrame:
    """Read the raw rows as strings. ``source`` is a path or a file-like object."""
    try:
        raw = pd.read_csv(source, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise LoadError(f"Temperature file not found: {source}") from e
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise LoadError(f"Could not read temperature file {source}: {e}") from e

    raw.columns = [str(c).strip() for c in raw.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise LoadError(
            f"Temperature file is missing column(s) {missing}; got {list(raw.columns)}"
        )
    return raw


def parse_records(raw: pd.DataFrame, on_invalid: str = INVALID_ROW_POLICY) -> pd.DataFrame:
    if on_invalid not in INVALID_ROW_POLICIES:
        raise ValueError(f"on_invalid must be one of {INVALID_ROW_POLICIES}, got {on_invalid!r}")

    records = pd.DataFrame({
        DATE_COLUMN: pd.to_datetime(raw[DATE_COLUMN].str.strip(), format=DATE_FORMAT, errors="coerce"),
        MAX_COLUMN: pd.to_numeric(raw[MAX_COLUMN].str.strip(), errors="coerce"),
        MIN_COLUMN: pd.to_numeric(raw[MIN_COLUMN].str.strip(), errors="coerce"),
    })
    # integer-only columns come back as int64
    records[[MAX_COLUMN, MIN_COLUMN]] = records[[MAX_COLUMN, MIN_COLUMN]].astype(float)

    bad_date = records[DATE_COLUMN].isna()
    bad_temp = records[MAX_COLUMN].isna() | records[MIN_COLUMN].isna()
    bad = bad_date | bad_temp

    if bad.any():
        lines = (records.index[bad.to_numpy()] + _FIRST_DATA_LINE).tolist()
        if on_invalid == "raise":
            raise InvalidRowsError(lines)
        if on_invalid == "drop":
            _LOGGER.warning("Dropping %d malformed row(s), first at line %d", len(lines), lines[0])
            records = records[~bad]
        else:
            if bad_date.any():
                _LOGGER.warning("Dropping %d row(s) with unparseable dates", int(bad_date.sum()))
            if bad_temp.any():
                _LOGGER.warning(
                    "Keeping %d row(s) with non-numeric temperatures as NaN",
                    int((bad_temp & ~bad_date).sum()),
                )
            records = records[~bad_date]

    records = records.reset_index(drop=True)
    records["year"] = records[DATE_COLUMN].dt.year.astype(int)
    records["month"] = records[DATE_COLUMN].dt.month.astype(int)
    return records


def load_records(source, on_invalid: str = INVALID_ROW_POLICY) -> pd.DataFrame:
    """Read and parse the daily temperature file into a records frame.

    Columns: ``date``, ``max_temperature``, ``min_temperature``, ``year``,
    ``month``. Any other column in the file is ignored. The number of data
    rows in the file is kept in ``records.attrs["rows_read"]``.
    """
    raw = read_rows(source)
    records = parse_records(raw, on_invalid=on_invalid)
    records.attrs["rows_read"] = len(raw)
    _LOGGER.info("Loaded %d daily records (%d rows read)", len(records), len(raw))
    return records
