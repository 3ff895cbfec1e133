"""Unit tests for the durable assessment table."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from app.schemas import Assessment, UsageReading
from datastore.record_store import AssessmentTable, StoreWriteError


def _sample(assessment_id: str = "a-1", rating: float = 5.0) -> Assessment:
    return Assessment(
        id=assessment_id,
        owner="owner-1",
        address="1 Main St",
        assessment_date=100,
        efficiency_rating=rating,
        recommendations="seal windows",
        cost_savings=200.0,
        created_at=100,
        usage_history=[UsageReading(timestamp=100, consumption=30.0)],
    )


def test_put_and_get_round_trip_returns_deep_copy() -> None:
    table = AssessmentTable(name="assessments")
    original = _sample()

    table.put(original)
    fetched = table.get(original.id)

    assert fetched == original
    assert fetched is not original

    fetched.usage_history.append(UsageReading(timestamp=200, consumption=1.0))
    again = table.get(original.id)
    assert again is not None
    assert len(again.usage_history) == 1


def test_get_returns_none_when_missing() -> None:
    table = AssessmentTable(name="assessments")

    assert table.get("missing-id") is None


def test_put_replaces_whole_record() -> None:
    table = AssessmentTable(name="assessments")
    table.put(_sample(rating=5.0))

    replacement = _sample(rating=9.0).model_copy(update={"usage_history": []})
    table.put(replacement)

    stored = table.get("a-1")
    assert stored is not None
    assert stored.efficiency_rating == 9.0
    assert stored.usage_history == []
    assert len(table) == 1


def test_delete_returns_prior_value_and_is_noop_when_absent() -> None:
    table = AssessmentTable(name="assessments")
    table.put(_sample())

    removed = table.delete("a-1")

    assert removed is not None
    assert removed.id == "a-1"
    assert "a-1" not in table
    assert table.delete("a-1") is None


def test_values_are_in_ascending_key_order() -> None:
    table = AssessmentTable(name="assessments")
    for key in ("c", "a", "b"):
        table.put(_sample(assessment_id=key))

    assert [item.id for item in table.values()] == ["a", "b", "c"]


def test_put_persists_to_disk_and_reloads(tmp_path: Path) -> None:
    path = tmp_path / "assessments.json"
    table = AssessmentTable(name="assessments", persistence_path=path)
    record = _sample()

    table.put(record)

    payload = json.loads(path.read_text())
    assert payload["a-1"]["address"] == "1 Main St"
    assert payload["a-1"]["usage_history"] == [{"timestamp": 100, "consumption": 30.0}]

    reloaded = AssessmentTable(name="assessments", persistence_path=path)
    assert reloaded.get("a-1") == record


def test_delete_is_persisted(tmp_path: Path) -> None:
    path = tmp_path / "assessments.json"
    table = AssessmentTable(name="assessments", persistence_path=path)
    table.put(_sample())

    table.delete("a-1")

    assert AssessmentTable(name="assessments", persistence_path=path).get("a-1") is None


def test_corrupt_file_is_treated_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "assessments.json"
    path.write_text("{not json")

    table = AssessmentTable(name="assessments", persistence_path=path)

    assert table.values() == []


def test_failed_persist_leaves_memory_and_disk_unchanged(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "assessments.json"
    table = AssessmentTable(name="assessments", persistence_path=path)
    original = _sample(rating=5.0)
    table.put(original)
    on_disk = path.read_text()

    def boom(self, text, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "write_text", boom)

    with pytest.raises(StoreWriteError):
        table.put(_sample(rating=9.0))
    with pytest.raises(StoreWriteError):
        table.put(_sample(assessment_id="a-2"))
    with pytest.raises(StoreWriteError):
        table.delete("a-1")

    monkeypatch.undo()
    assert table.get("a-1") == original
    assert table.get("a-2") is None
    assert path.read_text() == on_disk


def test_key_capacity_is_enforced() -> None:
    table = AssessmentTable(name="assessments", max_key_bytes=4)

    with pytest.raises(StoreWriteError, match="limit is 4"):
        table.put(_sample(assessment_id="too-long"))

    assert len(table) == 0


def test_value_capacity_is_enforced() -> None:
    table = AssessmentTable(name="assessments", max_value_bytes=64)

    with pytest.raises(StoreWriteError):
        table.put(_sample())

    assert table.get("a-1") is None


@pytest.mark.parametrize(
    "contents",
    [
        "[]",
        '"just a string"',
        '{"a-1": {"unexpected": 1}}',
        '{"a-1": 42}',
    ],
)
def test_wrong_shape_file_is_treated_as_empty(tmp_path: Path, contents: str) -> None:
    path = tmp_path / "assessments.json"
    path.write_text(contents)

    table = AssessmentTable(name="assessments", persistence_path=path)

    assert table.values() == []
    table.put(_sample())
    assert AssessmentTable(name="assessments", persistence_path=path).get("a-1") == _sample()


def test_partially_valid_file_loads_nothing(tmp_path: Path) -> None:
    path = tmp_path / "assessments.json"
    good = _sample().model_dump(mode="json")
    path.write_text(json.dumps({"a-1": good, "a-2": {"id": "a-2"}}))

    table = AssessmentTable(name="assessments", persistence_path=path)

    assert len(table) == 0


def test_capacity_violation_is_logged(caplog) -> None:
    table = AssessmentTable(name="assessments", max_key_bytes=4)

    with caplog.at_level(logging.ERROR, logger="datastore.record_store"):
        with pytest.raises(StoreWriteError):
            table.put(_sample(assessment_id="too-long"))

    records = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(records) == 1
    assert records[0].assessment_id == "too-long"
    assert "limit is 4" in records[0].reason


def test_failed_replace_removes_staging_file(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "assessments.json"
    table = AssessmentTable(name="assessments", persistence_path=path)

    def refuse(self, target):
        raise OSError("read-only filesystem")

    monkeypatch.setattr(Path, "replace", refuse)

    with pytest.raises(StoreWriteError):
        table.put(_sample())

    monkeypatch.undo()
    assert not (tmp_path / "assessments.json.tmp").exists()
    assert not path.exists()
    assert table.get("a-1") is None
