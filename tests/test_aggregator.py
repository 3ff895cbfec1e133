"""Unit tests for the usage aggregation logic."""

from __future__ import annotations

from app.schemas import UsageReading
from services.aggregator import UsageAggregator


def _reading(timestamp: int, consumption: float) -> UsageReading:
    """Helper to build deterministic usage readings."""

    return UsageReading(timestamp=timestamp, consumption=consumption)


def test_summarize_empty_iterable_returns_default_summary() -> None:
    aggregator = UsageAggregator()

    summary = aggregator.summarize([])

    assert summary.reading_count == 0
    assert summary.total_consumption == 0.0
    assert summary.min_consumption is None
    assert summary.max_consumption is None
    assert summary.mean_consumption is None


def test_summarize_computes_statistics() -> None:
    aggregator = UsageAggregator()
    readings = [_reading(1, 10.0), _reading(2, 30.0), _reading(3, 20.0)]

    summary = aggregator.summarize(readings)

    assert summary.reading_count == 3
    assert summary.total_consumption == 60.0
    assert summary.min_consumption == 10.0
    assert summary.max_consumption == 30.0
    assert summary.mean_consumption == 20.0


def test_total_handles_negative_and_empty_readings() -> None:
    aggregator = UsageAggregator()

    assert aggregator.total([]) == 0.0
    assert aggregator.total([_reading(1, 5.0), _reading(2, -2.0)]) == 3.0
