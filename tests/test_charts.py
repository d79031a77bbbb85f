"""
Tests for the Altair drawing of the heatmap views.
"""

import pytest

from heatmap import charts
from heatmap.aggregate import bucket_daily, field_extent, recent_window, summarize
from heatmap.config import BAND_PADDING, COLOR_SCHEME, LEGEND_STOPS, LEGEND_TICKS
from heatmap.views import RecentYearsHeatmap, YearlyHeatmap
from helpers import make_series


class TestYearlyChart:
    def setup_method(self):
        self.summaries = summarize(make_series(range(2010, 2013), months=(1, 2, 3), days=2))
        self.view = YearlyHeatmap(self.summaries, "#heatmap", now=0)

    def test_cells_frame(self):
        frame = charts.cells_frame(self.view, now=0)
        assert len(frame) == 9
        row = frame[(frame["year"] == 2011) & (frame["month"] == 2)].iloc[0]
        summary = self.summaries[(self.summaries["year"] == 2011) & (self.summaries["month"] == 2)].iloc[0]
        assert row["value"] == summary["max"]
        assert row["Date"] == "2011-2"
        assert row["Max"] == f"{summary['max']:g}°C"

    def test_cells_frame_mid_transition(self):
        self.view.update_matrix("min", now=1000)
        frame = charts.cells_frame(self.view, now=1250).set_index(["year", "month"])
        summary = self.summaries.set_index(["year", "month"]).loc[(2010, 1)]
        assert summary["min"] < frame.loc[(2010, 1), "value"] < summary["max"]

    def test_cell_encodings(self):
        heat = self.view.chart(now=0).to_dict()["vconcat"][0]
        enc = heat["encoding"]
        assert heat["mark"]["type"] == "rect"
        assert enc["x"]["type"] == "ordinal"
        assert enc["x"]["scale"]["domain"] == [2010, 2011, 2012]
        assert enc["x"]["scale"]["paddingInner"] == BAND_PADDING
        assert enc["y"]["type"] == "ordinal"
        assert enc["y"]["scale"]["domain"] == [1, 2, 3]
        assert "January" in enc["y"]["axis"]["labelExpr"]
        assert [t["field"] for t in enc["tooltip"]] == ["Date", "Max", "Min"]

    def test_cell_color_scale(self):
        color = self.view.chart(now=0).to_dict()["vconcat"][0]["encoding"]["color"]
        assert color["type"] == "quantitative"
        assert color["scale"]["scheme"] == COLOR_SCHEME
        assert color["scale"]["domain"] == list(self.view.color_domain)

    def test_legend_scale(self):
        self.view.update_legend("min", now=0)
        legend = self.view.chart(now=1000).to_dict()["vconcat"][1]
        enc = legend["encoding"]
        assert enc["x"]["scale"]["domain"] == list(field_extent(self.summaries, "min"))
        assert enc["x"]["axis"]["tickCount"] == LEGEND_TICKS
        assert enc["color"]["scale"]["scheme"] == COLOR_SCHEME

    def test_legend_frame_spans_domain(self):
        frame = charts.legend_frame(self.view, now=0)
        lo, hi = self.view.legend_domain
        assert len(frame) == LEGEND_STOPS - 1
        assert frame["start"].iloc[0] == pytest.approx(lo)
        assert frame["end"].iloc[-1] == pytest.approx(hi)

    def test_chart_dict(self):
        chart_dict = self.view.chart(now=0).to_dict()
        assert chart_dict["title"] == self.view.title
        assert chart_dict["resolve"]["scale"]["color"] == "independent"


class TestRecentChart:
    def setup_method(self):
        self.windowed = recent_window(make_series(range(2014, 2017), months=(6, 7), days=4))
        self.view = RecentYearsHeatmap(bucket_daily(self.windowed), self.windowed, "#heatmap2", now=0)

    def test_lines_frame(self):
        frame = charts.lines_frame(self.view)
        # 6 cells, 2 lines each, 4 points per line
        assert len(frame) == 6 * 2 * 4
        assert set(frame["series"]) == {"Max Temperature", "Min Temperature"}
        assert frame.groupby(["year", "month", "series"])["day"].max().eq(4).all()

    def test_strips_match_day_at(self):
        strips = charts.strips_frame(self.view)
        assert len(strips) == 6 * 4
        cell = strips[(strips["year"] == 2015) & (strips["month"] == 7)]
        for _, strip in cell.iterrows():
            fraction = ((strip["start"] + strip["end"]) / 2 - 1) / (4 - 1)
            day = self.view.day_at("2015-7", fraction)
            assert day["date"].strftime("%Y-%m-%d") == strip["Date"]

    def test_facet_grid(self):
        grid = self.view.chart(now=0).to_dict()["vconcat"][0]
        assert grid["facet"]["column"]["field"] == "year"
        assert grid["facet"]["row"]["field"] == "month"
        assert grid["resolve"]["scale"]["x"] == "independent"

    def test_cell_fill_scale(self):
        grid = self.view.chart(now=0).to_dict()["vconcat"][0]
        fill = grid["spec"]["layer"][0]["encoding"]["fill"]
        assert fill["scale"]["scheme"] == COLOR_SCHEME
        assert fill["scale"]["domain"] == list(field_extent(self.windowed, "max"))

    def test_mini_lines_share_vertical_domain(self):
        grid = self.view.chart(now=0).to_dict()["vconcat"][0]
        lines = grid["spec"]["layer"][1]["encoding"]
        assert lines["y"]["scale"]["domain"] == list(self.view.mini_extent)
        assert lines["stroke"]["scale"]["range"] == ["green", "blue"]
