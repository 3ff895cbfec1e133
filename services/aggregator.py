"""Aggregation logic for assessment usage history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from app.schemas import UsageReading


@dataclass
class UsageSummary:
    """Computed statistics for a sequence of usage readings."""

    reading_count: int = 0
    total_consumption: float = 0.0
    min_consumption: float | None = None
    max_consumption: float | None = None
    mean_consumption: float | None = None


class UsageAggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def total(self, readings: Iterable[UsageReading]) -> float:
        return sum((reading.consumption for reading in readings), 0.0)

    def summarize(self, readings: Iterable[UsageReading]) -> UsageSummary:
        summary = UsageSummary()

        for reading in readings:
            summary.reading_count += 1
            value = reading.consumption
            summary.total_consumption += value

            if summary.min_consumption is None or value < summary.min_consumption:
                summary.min_consumption = value
            if summary.max_consumption is None or value > summary.max_consumption:
                summary.max_consumption = value

        if summary.reading_count:
            summary.mean_consumption = summary.total_consumption / summary.reading_count

        return summary
