"""
Tests for the year/month rollups.
"""

import math
import random

import pandas as pd
import pytest

from heatmap.aggregate import (
    DayBucket,
    bucket_daily,
    extent,
    field_extent,
    full_extent,
    month_key,
    recent_window,
    summarize,
    window_years,
)
from helpers import make_records, make_series

SCENARIO_ROWS = [
    ("2020-01-15", 10, 2),
    ("2020-01-20", 15, -1),
    ("2020-02-01", 5, -5),
]


def _by_key(summaries):
    return {
        (int(r["year"]), int(r["month"])): (r["max"], r["min"])
        for r in summaries.to_dict("records")
    }


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------

class TestSummarize:
    def test_scenario(self):
        summaries = summarize(make_records(SCENARIO_ROWS))
        assert _by_key(summaries) == {(2020, 1): (15.0, -1.0), (2020, 2): (5.0, -5.0)}

    def test_one_row_per_year_month(self):
        records = make_series(range(2001, 2006), months=(1, 5, 12), days=4)
        summaries = summarize(records)
        assert len(summaries) == 5 * 3
        assert not summaries.duplicated(["year", "month"]).any()

    def test_matches_true_group_extremes(self):
        rng = random.Random(7)
        rows = []
        for _ in range(300):
            y, m, d = rng.randint(2010, 2012), rng.randint(1, 12), rng.randint(1, 28)
            hi = round(rng.uniform(-10, 35), 1)
            rows.append((f"{y}-{m:02d}-{d:02d}", hi, round(hi - rng.uniform(0, 12), 1)))
        records = make_records(rows)

        got = _by_key(summarize(records))
        for (y, m), group in records.groupby(["year", "month"]):
            assert got[(y, m)] == (group["max_temperature"].max(), group["min_temperature"].min())
        assert len(got) == records.groupby(["year", "month"]).ngroups

    def test_columns(self):
        summaries = summarize(make_records(SCENARIO_ROWS))
        assert list(summaries.columns) == ["year", "month", "max", "min"]

    def test_empty(self):
        summaries = summarize(make_records([]))
        assert summaries.empty
        assert list(summaries.columns) == ["year", "month", "max", "min"]

    def test_input_not_modified(self):
        records = make_records(SCENARIO_ROWS)
        before = records.copy()
        summarize(records)
        pd.testing.assert_frame_equal(records, before)


# ---------------------------------------------------------------------------
# bucket_daily
# ---------------------------------------------------------------------------

class TestBucketDaily:
    def setup_method(self):
        rows = [
            ("2019-03-09", 12, 3),
            ("2019-03-01", 10, 1),
            ("2019-04-02", 15, 6),
            ("2019-03-05", 11, 2),
            ("2020-03-02", 9, 0),
        ]
        self.records = make_records(rows)
        self.buckets = bucket_daily(self.records)

    def test_one_bucket_per_year_month(self):
        keys = sorted(b.key for b in self.buckets)
        assert keys == ["2019-3", "2019-4", "2020-3"]

    def test_days_sorted_ascending(self):
        for bucket in self.buckets:
            dates = bucket.days["date"].tolist()
            assert dates == sorted(dates)

    def test_no_days_lost_or_duplicated(self):
        assert sum(len(b) for b in self.buckets) == len(self.records)
        march = next(b for b in self.buckets if b.key == "2019-3")
        assert march.days["date"].dt.day.tolist() == [1, 5, 9]

    def test_days_reindexed(self):
        march = next(b for b in self.buckets if b.key == "2019-3")
        assert march.days.index.tolist() == [0, 1, 2]

    def test_shuffled_input(self):
        records = make_series([2015, 2016], months=(6,), days=20)
        shuffled = records.sample(frac=1.0, random_state=3)
        for bucket in bucket_daily(shuffled):
            assert bucket.days["date"].is_monotonic_increasing
            assert len(bucket) == 20

    def test_aggregate(self):
        march = next(b for b in self.buckets if b.key == "2019-3")
        assert march.aggregate("max") == 12.0
        assert march.aggregate("min") == 1.0

    def test_aggregate_rejects_unknown_field(self):
        with pytest.raises(ValueError):
            self.buckets[0].aggregate("mean")


# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------

class TestRecentWindow:
    def test_keeps_last_ten_years(self):
        records = make_series(range(2000, 2021), months=(1,), days=1)
        windowed = recent_window(records)
        assert window_years(windowed) == list(range(2011, 2021))
        assert len(windowed) == 10

    def test_single_year_dataset(self):
        records = make_series([2015], months=(1, 2, 3))
        assert window_years(recent_window(records)) == [2015]

    def test_gaps_are_not_backfilled(self):
        records = make_series([1990, 2000, 2009, 2015], months=(1,), days=1)
        assert window_years(recent_window(records)) == [2009, 2015]

    def test_custom_length(self):
        records = make_series(range(2000, 2010), months=(1,), days=1)
        assert window_years(recent_window(records, years=3)) == [2007, 2008, 2009]

    def test_empty(self):
        assert recent_window(make_records([])).empty


# ---------------------------------------------------------------------------
# Extents
# ---------------------------------------------------------------------------

class TestExtent:
    def test_ignores_nan(self):
        assert extent([3.0, math.nan, -2.0, 7.5]) == (-2.0, 7.5)

    def test_empty_is_nan(self):
        lo, hi = extent([])
        assert math.isnan(lo) and math.isnan(hi)

    def test_field_extent_on_records_and_summaries(self):
        records = make_records(SCENARIO_ROWS)
        summaries = summarize(records)
        assert field_extent(records, "max") == (5.0, 15.0)
        assert field_extent(records, "min") == (-5.0, 2.0)
        assert field_extent(summaries, "max") == (5.0, 15.0)
        assert field_extent(summaries, "min") == (-5.0, -1.0)

    def test_summary_extent_round_trip(self):
        records = make_series(range(2003, 2009), months=(1, 4, 7, 10), days=5)
        assert full_extent(summarize(records)) == full_extent(records)

    def test_month_key(self):
        assert month_key(2020, 1) == "2020-1"
        assert DayBucket(2020, 12, make_records([])).key == "2020-12"
