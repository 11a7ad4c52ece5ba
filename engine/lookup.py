# engine/lookup.py
from datetime import date
from typing import Iterable, Tuple

import numpy as np

from engine.schema import PricePoint


class PriceSeries:
    """
    Date-sorted view over one ticker's closes with binary-search lookups.
    Missing data is reported with sentinels (NaN / -1), never by raising.
    """

    def __init__(self, points: Tuple[PricePoint, ...]):
        self.points = points
        self._dates = np.array([p.date for p in points], dtype="datetime64[D]")

    @classmethod
    def from_points(cls, points: Iterable[PricePoint]) -> "PriceSeries":
        """Sorts by date; a repeated date keeps its last occurrence."""
        by_date = {}
        for point in points:
            if point.date is None:
                continue
            by_date[point.date] = point
        return cls(tuple(by_date[d] for d in sorted(by_date)))

    def __len__(self) -> int:
        return len(self.points)

    def close_on_or_before(self, day: date) -> float:
        """Last known close at or before `day`, NaN if the series starts later."""
        idx = int(np.searchsorted(self._dates, np.datetime64(day, "D"), side="right")) - 1
        if idx < 0:
            return float("nan")
        return float(self.points[idx].close)

    def index_on_or_after(self, day: date) -> int:
        """Index of the first trading day at or after `day`, -1 if the series ends earlier."""
        idx = int(np.searchsorted(self._dates, np.datetime64(day, "D"), side="left"))
        return idx if idx < len(self.points) else -1
