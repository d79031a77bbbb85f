"""Year/month temperature heatmaps for a daily max/min series."""

from heatmap.config import TempField
from heatmap.errors import HeatmapError, InvalidRowsError, LoadError

__all__ = ["TempField", "HeatmapError", "InvalidRowsError", "LoadError"]
