class HeatmapError(Exception):
    """Base class for everything the heatmap package raises on purpose."""


class LoadError(HeatmapError):
    """The source file could not be read or does not have the expected columns."""


class InvalidRowsError(HeatmapError):
    def __init__(self, rows):
        self.rows = list(rows)
        preview = ", ".join(str(r) for r in self.rows[:10])
        more = "" if len(self.rows) <= 10 else f" (+{len(self.rows) - 10} more)"
        super().__init__(f"{len(self.rows)} malformed row(s) at line(s) {preview}{more}")
