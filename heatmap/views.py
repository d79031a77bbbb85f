"""
View controllers for the two heatmaps.

Each view owns a cell scene and a scale scene. ``update_matrix`` re-binds the
cells to the data for a temperature field and ``update_legend`` moves the
legend to that field's extent; both animate over ``TRANSITION_MS``. Only data
values and domain endpoints live in the scenes. Altair maps them to colors,
positions and axes when the chart is drawn.
"""

import logging
from typing import Optional

import pandas as pd

from heatmap import charts
from heatmap.aggregate import DayBucket, field_extent, full_extent, month_key
from heatmap.config import RECENT_LAYOUT, TRANSITION_MS, YEARLY_LAYOUT, TempField
from heatmap.scene import Scene
from heatmap.tooltip import day_index

_LOGGER = logging.getLogger(__name__)

COLOR = "color"
LEGEND = "legend"


class HeatmapView:
    """Shared plumbing: layout, axes, cell scene and scale domains."""

    title = ""

    def __init__(self, target: str, layout: dict, years, months):
        self.target = target
        self.layout = layout
        self.years = list(years)
        self.months = list(months)
        self.cells = Scene(f"{target}/cells")
        self.scales = Scene(f"{target}/scales")
        self.scales.join([COLOR, LEGEND], key=str)
        self.field: Optional[TempField] = None

    def legend_extent(self, field: TempField) -> tuple[float, float]:
        raise NotImplementedError

    @property
    def color_domain(self) -> tuple[float, float]:
        return self.scales.target(COLOR, "domain")

    @property
    def legend_domain(self) -> tuple[float, float]:
        return self.scales.target(LEGEND, "domain")

    def color_domain_at(self, now: Optional[float] = None) -> tuple[float, float]:
        """Cell color domain as drawn at ``now``."""
        return self.scales.value(COLOR, "domain", now)

    def legend_domain_at(self, now: Optional[float] = None) -> tuple[float, float]:
        return self.scales.value(LEGEND, "domain", now)

    def update_legend(self, field, now: Optional[float] = None) -> None:
        field = TempField.parse(field)
        domain = self.legend_extent(field)
        self.scales.transition(LEGEND, "domain", tuple(domain), now, TRANSITION_MS)

    def values(self) -> dict:
        """Final value of every cell, by key."""
        return {k: self.cells.target(k, "value") for k in self.cells.keys()}

    def in_flight(self, now: Optional[float] = None) -> bool:
        return self.cells.in_flight(now) or self.scales.in_flight(now)

    def settle(self, now: Optional[float] = None) -> None:
        self.cells.settle(now)
        self.scales.settle(now)

    def chart(self, now: Optional[float] = None):
        raise NotImplementedError

    def _log_join(self, join):
        _LOGGER.debug("%s: %d cells entered, %d updated, %d removed",
                      self.target, len(join.enter), len(join.update), len(join.exit))


class YearlyHeatmap(HeatmapView):
    """Year x month grid of monthly extremes over the whole dataset.

    The cell color domain is fixed at construction from the overall lowest
    minimum and highest maximum; only the legend follows the selected field.
    """

    title = "Monthly temperature extremes, all years"

    def __init__(self, summaries: pd.DataFrame, target: str, layout: dict = YEARLY_LAYOUT,
                 now: Optional[float] = None):
        self.summaries = summaries
        years = sorted(int(y) for y in summaries["year"].unique())
        months = sorted(int(m) for m in summaries["month"].unique())
        super().__init__(target, layout, years, months)

        domain = tuple(full_extent(summaries))
        self.scales.set(COLOR, "domain", domain)
        self.scales.set(LEGEND, "domain", domain)
        self.update_matrix(TempField.MAX, now)

    def legend_extent(self, field: TempField) -> tuple[float, float]:
        return field_extent(self.summaries, field)

    def update_matrix(self, field, now: Optional[float] = None):
        field = TempField.parse(field)
        rows = self.summaries.to_dict("records")
        join = self.cells.join(rows, key=lambda r: month_key(r["year"], r["month"]))
        for key in join.enter + join.update:
            datum = self.cells.node(key).datum
            self.cells.transition(key, "value", float(datum[field.value]), now, TRANSITION_MS)

        self.field = field
        self._log_join(join)
        return join

    def chart(self, now: Optional[float] = None):
        return charts.yearly_chart(self, now)


class RecentYearsHeatmap(HeatmapView):
    """Year x month grid of the retained window with a mini line chart per cell.

    Cell colors follow the extent of the selected field over the windowed
    records. Every mini chart shares one vertical domain spanning the lowest
    minimum to the highest maximum, so line shapes compare across cells.
    """

    title = "Daily temperatures, most recent years"

    def __init__(self, buckets: list[DayBucket], records: pd.DataFrame, target: str,
                 layout: dict = RECENT_LAYOUT, now: Optional[float] = None):
        self.buckets = buckets
        self.records = records
        years = sorted({b.year for b in buckets})
        months = sorted({b.month for b in buckets})
        super().__init__(target, layout, years, months)

        self.mini_extent = tuple(full_extent(records))
        self.scales.set(COLOR, "domain", tuple(self.legend_extent(TempField.MAX)))
        self.scales.set(LEGEND, "domain", self.mini_extent)
        self.update_matrix(TempField.MAX, now)

    def legend_extent(self, field: TempField) -> tuple[float, float]:
        return field_extent(self.records, field)

    def update_matrix(self, field, now: Optional[float] = None):
        field = TempField.parse(field)
        self.scales.transition(COLOR, "domain", tuple(self.legend_extent(field)), now, TRANSITION_MS)
        join = self.cells.join(self.buckets, key=lambda b: b.key)
        for key in join.enter + join.update:
            bucket = self.cells.node(key).datum
            self.cells.transition(key, "value", bucket.aggregate(field), now, TRANSITION_MS)

        self.field = field
        self._log_join(join)
        return join

    def day_at(self, key: str, fraction: float):
        """Daily record at ``fraction`` of the cell's width from its left edge, or None."""
        bucket = self.cells.node(key).datum
        index = day_index(fraction, len(bucket))
        if index is None:
            return None
        return bucket.days.iloc[index]

    def chart(self, now: Optional[float] = None):
        return charts.recent_chart(self, now)
