import logging
from typing import Optional

from heatmap.config import TempField

_LOGGER = logging.getLogger(__name__)


class ModeCoordinator:
    """Fans a max/min selection out to every view: matrices first, then legends."""

    def __init__(self, views, mode=TempField.MAX):
        self.views = list(views)
        self.mode = TempField.parse(mode)

    def on_change(self, mode, now: Optional[float] = None) -> TempField:
        mode = TempField.parse(mode)
        _LOGGER.debug("Temperature mode %s -> %s", self.mode.value, mode.value)
        for view in self.views:
            view.update_matrix(mode, now)
        for view in self.views:
            view.update_legend(mode, now)
        self.mode = mode
        return mode

    def in_flight(self, now: Optional[float] = None) -> bool:
        return any(view.in_flight(now) for view in self.views)
