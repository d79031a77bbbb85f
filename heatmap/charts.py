"""
Altair drawing of the heatmap views.

Years and months are ordinal band scales, cell values are colored with the
YlOrRd scheme over the view's color domain, and each chart carries a gradient
legend whose axis spans the legend domain. The view supplies only values and
domains, read at ``now`` so a redraw mid-transition shows the in-between
state.

The legend is a separate gradient bar rather than the color channel's own
legend because the aggregated view keeps its cell color domain fixed while
its legend follows the selected field.
"""

import calendar
import math

import altair as alt
import numpy as np
import pandas as pd

from heatmap.aggregate import DayBucket
from heatmap.config import (
    BAND_PADDING,
    COLOR_SCHEME,
    LEGEND_HEIGHT,
    LEGEND_STOPS,
    LEGEND_TICKS,
    LEGEND_WIDTH,
    MAX_COLUMN,
    MIN_COLUMN,
    MINI_LINE_COLORS,
    MINI_LINE_LABELS,
    MINI_LINE_WIDTH,
    TempField,
    inner_size,
)
from heatmap.tooltip import TOOLTIP_FIELDS, day_fields, day_span, month_fields

alt.data_transformers.disable_max_rows()

MONTH_LABELS = "[" + ", ".join(repr(name) for name in calendar.month_name[1:]) + "][datum.value - 1]"
LINE_COLUMNS = {TempField.MAX: MAX_COLUMN, TempField.MIN: MIN_COLUMN}


def _domain(domain):
    lo, hi = domain
    if lo is None or hi is None or not (math.isfinite(lo) and math.isfinite(hi)):
        return alt.Undefined
    return [lo, hi]


def _band(values):
    return alt.Scale(domain=list(values), paddingInner=BAND_PADDING, paddingOuter=BAND_PADDING)


def _tooltip():
    return [alt.Tooltip(f"{name}:N") for name in TOOLTIP_FIELDS]


# -----------------------------
# Frames
# -----------------------------
def cells_frame(view, now=None) -> pd.DataFrame:
    """One row per cell with its value at ``now``; month cells carry tooltip text."""
    rows = []
    for node in view.cells.snapshot(now):
        datum = node["datum"]
        if isinstance(datum, DayBucket):
            row = {"year": datum.year, "month": datum.month}
        else:
            row = {
                "year": int(datum["year"]),
                "month": int(datum["month"]),
                **month_fields(datum["year"], datum["month"], datum["max"], datum["min"]),
            }
        row["value"] = node["value"]
        rows.append(row)
    return pd.DataFrame(rows, columns=["year", "month", "value", *TOOLTIP_FIELDS])


def lines_frame(view) -> pd.DataFrame:
    """Daily max and min of every cell against the day's position in its month (1..n)."""
    rows = []
    for key in view.cells.keys():
        bucket = view.cells.node(key).datum
        for field, column in LINE_COLUMNS.items():
            for day, temperature in enumerate(bucket.days[column], start=1):
                rows.append({
                    "year": bucket.year,
                    "month": bucket.month,
                    "series": MINI_LINE_LABELS[field],
                    "day": day,
                    "temperature": temperature,
                })
    return pd.DataFrame(rows, columns=["year", "month", "series", "day", "temperature"])


def strips_frame(view) -> pd.DataFrame:
    """One hover strip per day, splitting each cell evenly by its day count."""
    rows = []
    for key in view.cells.keys():
        bucket = view.cells.node(key).datum
        for index, day in enumerate(bucket.days.to_dict("records")):
            start, end = day_span(index, len(bucket))
            rows.append({
                "year": bucket.year,
                "month": bucket.month,
                "start": start,
                "end": end,
                **day_fields(day),
            })
    return pd.DataFrame(rows, columns=["year", "month", "start", "end", *TOOLTIP_FIELDS])


def legend_frame(view, now=None) -> pd.DataFrame:
    domain = _domain(view.legend_domain_at(now))
    if domain is alt.Undefined:
        return pd.DataFrame(columns=["start", "end"])
    edges = np.linspace(domain[0], domain[1], LEGEND_STOPS)
    return pd.DataFrame({"start": edges[:-1], "end": edges[1:]})


# -----------------------------
# Charts
# -----------------------------
def legend_chart(view, now=None):
    domain = _domain(view.legend_domain_at(now))
    return (
        alt.Chart(legend_frame(view, now))
        .mark_rect()
        .encode(
            x=alt.X(
                "start:Q",
                title=None,
                scale=alt.Scale(domain=domain, nice=False, zero=False),
                axis=alt.Axis(tickCount=LEGEND_TICKS, grid=False),
            ),
            x2="end:Q",
            color=alt.Color("start:Q", scale=alt.Scale(scheme=COLOR_SCHEME, domain=domain), legend=None),
        )
        .properties(width=LEGEND_WIDTH, height=LEGEND_HEIGHT)
    )


def _with_legend(view, chart, now):
    return (
        alt.vconcat(chart, legend_chart(view, now), title=view.title)
        .resolve_scale(color="independent")
        .configure_view(strokeWidth=0)
    )


def yearly_chart(view, now=None):
    width, height = inner_size(view.layout)
    heat = (
        alt.Chart(cells_frame(view, now))
        .mark_rect()
        .encode(
            x=alt.X("year:O", title=None, scale=_band(view.years), axis=alt.Axis(labelAngle=-45)),
            y=alt.Y("month:O", title=None, scale=_band(view.months), axis=alt.Axis(labelExpr=MONTH_LABELS)),
            color=alt.Color(
                "value:Q",
                title=None,
                scale=alt.Scale(scheme=COLOR_SCHEME, domain=_domain(view.color_domain_at(now))),
                legend=None,
            ),
            tooltip=_tooltip(),
        )
        .properties(width=width, height=height)
    )
    return _with_legend(view, heat, now)


def recent_chart(view, now=None):
    """Faceted grid, one small chart per (year, month).

    Every cell has its own horizontal scale over its days while all cells
    share the vertical temperature domain.
    """
    width, height = inner_size(view.layout)
    step_x = width / max(len(view.years), 1)
    step_y = height / max(len(view.months), 1)

    data = pd.concat([
        cells_frame(view, now).assign(kind="cell"),
        lines_frame(view).assign(kind="line"),
        strips_frame(view).assign(kind="strip"),
    ], ignore_index=True)

    day_scale = alt.Scale(zero=False, nice=False)
    background = (
        alt.Chart()
        .transform_filter(alt.datum.kind == "cell")
        .mark_rect()
        .encode(fill=alt.Fill(
            "value:Q",
            scale=alt.Scale(scheme=COLOR_SCHEME, domain=_domain(view.color_domain_at(now))),
            legend=None,
        ))
    )
    lines = (
        alt.Chart()
        .transform_filter(alt.datum.kind == "line")
        .mark_line(strokeWidth=MINI_LINE_WIDTH)
        .encode(
            x=alt.X("day:Q", title=None, axis=None, scale=day_scale),
            y=alt.Y(
                "temperature:Q",
                title=None,
                axis=None,
                scale=alt.Scale(domain=_domain(view.mini_extent), zero=False, nice=False),
            ),
            stroke=alt.Stroke(
                "series:N",
                title=None,
                scale=alt.Scale(
                    domain=[MINI_LINE_LABELS[f] for f in TempField],
                    range=[MINI_LINE_COLORS[f] for f in TempField],
                ),
                legend=alt.Legend(orient="bottom", direction="horizontal"),
            ),
        )
    )
    strips = (
        alt.Chart()
        .transform_filter(alt.datum.kind == "strip")
        .mark_rect(opacity=0)
        .encode(
            x=alt.X("start:Q", title=None, axis=None, scale=day_scale),
            x2="end:Q",
            tooltip=_tooltip(),
        )
    )

    grid = (
        alt.layer(background, lines, strips, data=data)
        .properties(width=step_x * (1 - BAND_PADDING), height=step_y * (1 - BAND_PADDING))
        .facet(
            column=alt.Column("year:O", title=None, sort=view.years,
                              header=alt.Header(labelOrient="bottom", labelAngle=-45)),
            row=alt.Row("month:O", title=None, sort=view.months,
                        header=alt.Header(labelOrient="left", labelAngle=0, labelAlign="right",
                                          labelExpr=MONTH_LABELS)),
            spacing={"row": step_y * BAND_PADDING, "column": step_x * BAND_PADDING},
        )
        .resolve_scale(x="independent")
    )
    return _with_legend(view, grid, now)
