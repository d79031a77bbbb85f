import logging
import time

import pandas as pd
import streamlit as st

from heatmap.aggregate import bucket_daily, recent_window, summarize, window_years
from heatmap.config import DATA_PATH, INVALID_ROW_POLICY, TRANSITION_MS, WINDOW_YEARS, TempField
from heatmap.coordinator import ModeCoordinator
from heatmap.errors import HeatmapError
from heatmap.loader import load_records
from heatmap.scene import now_ms
from heatmap.views import RecentYearsHeatmap, YearlyHeatmap

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOGGER = logging.getLogger("heatmap.app")

FRAME_MS = 50


# -----------------------------
# Page config + styling
# -----------------------------
st.set_page_config(
    page_title="Temperature Heatmaps",
    page_icon="🌡️",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown(
    """
    <style>
      .block-container {padding-top: 1.2rem; padding-bottom: 2rem;}
      [data-testid="stSidebar"] {min-width: 300px; max-width: 360px;}
      .muted {color: rgba(0,0,0,0.55); font-size: 0.95rem;}
    </style>
    """,
    unsafe_allow_html=True,
)


# -----------------------------
# Load / build data (cached)
# -----------------------------
@st.cache_data(show_spinner=True)
def load_data(path: str, on_invalid: str = INVALID_ROW_POLICY):
    records = load_records(path, on_invalid=on_invalid)
    rows_read = records.attrs["rows_read"]

    summaries = summarize(records)
    windowed = recent_window(records, WINDOW_YEARS)
    buckets = bucket_daily(windowed)

    meta = {
        "source": path,
        "rows_read": rows_read,
        "rows_dropped": rows_read - len(records),
        "date_min": records["date"].min() if len(records) else None,
        "date_max": records["date"].max() if len(records) else None,
        "window": window_years(windowed),
    }
    return records, summaries, windowed, buckets, meta


def _fail(message: str):
    st.error(message)
    st.stop()


# The file is read once per session; a failed load is not retried.
if "load_error" in st.session_state:
    _fail(st.session_state["load_error"])

try:
    records, summaries, windowed, buckets, meta = load_data(str(DATA_PATH))
except HeatmapError as e:
    _LOGGER.exception("Error loading data")
    st.session_state["load_error"] = f"Could not load temperature data: {e}"
    _fail(st.session_state["load_error"])

if records.empty:
    _fail(f"No usable daily records in `{DATA_PATH}`.")


# -----------------------------
# Views + mode coordination (per session)
# -----------------------------
if st.session_state.get("views_source") != meta["source"]:
    yearly = YearlyHeatmap(summaries, "#heatmap")
    recent = RecentYearsHeatmap(buckets, windowed, "#heatmap2")
    st.session_state["views_source"] = meta["source"]
    st.session_state["coordinator"] = ModeCoordinator([yearly, recent])

coordinator: ModeCoordinator = st.session_state["coordinator"]
yearly, recent = coordinator.views


def _on_temp_type_change():
    coordinator.on_change(st.session_state["tempType"])


# -----------------------------
# Sidebar
# -----------------------------
st.sidebar.markdown("## Temperature Heatmaps")
if meta["date_min"] is not None:
    st.sidebar.markdown(
        f"<div class='muted'>{meta['date_min'].date()} → {meta['date_max'].date()} • "
        f"daily max/min → monthly extremes</div>",
        unsafe_allow_html=True,
    )

with st.sidebar.expander("Data status", expanded=False):
    st.write(f"**Source:** `{meta['source']}`")
    st.write(f"**Rows read:** {meta['rows_read']}")
    st.write(f"**Rows dropped (malformed):** {meta['rows_dropped']}")
    st.write(f"**Daily records:** {len(records)}")
    if meta["window"]:
        st.write(f"**Recent window:** {meta['window'][0]}–{meta['window'][-1]} ({len(meta['window'])} years)")

page = st.sidebar.radio("Navigate", ["Heatmaps", "Download"], index=0)

st.sidebar.radio(
    "Temperature",
    [f.value for f in TempField],
    index=[f.value for f in TempField].index(coordinator.mode.value),
    key="tempType",
    format_func=lambda v: "Max temperature" if v == TempField.MAX.value else "Min temperature",
    on_change=_on_temp_type_change,
)


# -----------------------------
# Pages
# -----------------------------
if page == "Heatmaps":
    st.title("Temperature Heatmaps")
    st.markdown(
        "<div class='muted'>Monthly extremes for every year, and the last "
        f"{WINDOW_YEARS} years day by day. Hover a cell for details.</div>",
        unsafe_allow_html=True,
    )

    slot_yearly = st.empty()
    slot_recent = st.empty()

    def _draw(now=None):
        slot_yearly.altair_chart(yearly.chart(now), use_container_width=False)
        slot_recent.altair_chart(recent.chart(now), use_container_width=False)

    # Play in-flight transitions frame by frame, then draw the settled state.
    deadline = now_ms() + TRANSITION_MS + FRAME_MS
    while coordinator.in_flight() and now_ms() < deadline:
        _draw()
        time.sleep(FRAME_MS / 1000)
    for view in coordinator.views:
        view.settle()
    _draw()

elif page == "Download":
    st.subheader("Download")
    st.markdown("<div class='muted'>Export the aggregated datasets.</div>", unsafe_allow_html=True)

    summary_out = summaries.sort_values(["year", "month"]).reset_index(drop=True)
    st.download_button(
        "Download monthly summary (CSV)",
        data=summary_out.to_csv(index=False).encode("utf-8"),
        file_name="monthly_summary.csv",
        mime="text/csv",
    )

    window_out = windowed.sort_values("date")[["date", "max_temperature", "min_temperature"]].copy()
    window_out["date"] = pd.to_datetime(window_out["date"]).dt.strftime("%Y-%m-%d")
    st.download_button(
        f"Download last {WINDOW_YEARS} years daily (CSV)",
        data=window_out.to_csv(index=False).encode("utf-8"),
        file_name="recent_daily.csv",
        mime="text/csv",
    )
