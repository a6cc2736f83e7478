"""Month-by-month history of stats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from openingexplorer.date import Month
from openingexplorer.stats import Stats


@dataclass
class HistorySegment:
    month: Month
    stats: Stats

    def to_dict(self) -> dict[str, Any]:
        return {"month": str(self.month), **self.stats.to_dict()}


class HistoryBuilder:
    """Turns running totals per month into per-month differences, filling gaps."""

    def __init__(self, since: Month | None = None, until: Month | None = None) -> None:
        self._segments: list[HistorySegment] = []
        self._last_total = Stats()
        self._last_month = since
        self._until_is_none = until is None

    def record_difference(self, month: Month, total: Stats) -> None:
        if self._last_month is not None:
            last_month = self._last_month
            while last_month < month:
                self._segments.append(HistorySegment(last_month, Stats()))
                last_month = last_month.add_months_saturating(1)
        self._last_month = month.add_months_saturating(1)

        self._segments.append(HistorySegment(month, total - self._last_total))
        self._last_total = total

    def build(self) -> list[HistorySegment]:
        segments = list(self._segments)
        if self._until_is_none and segments:
            # The last month may not be completely indexed yet.
            segments.pop()
        return segments