from __future__ import annotations

import pytest

from datastore.record_store import AssessmentTable
from services.assessments import AssessmentService


class SequentialIds:
    def __init__(self, prefix: str = "assessment") -> None:
        self.prefix = prefix
        self.issued = 0

    def new_id(self) -> str:
        self.issued += 1
        return f"{self.prefix}-{self.issued:03d}"


class StepClock:
    """Logical clock that advances by ``step`` on every read."""

    def __init__(self, start: int = 1_000, step: int = 10) -> None:
        self.current = start
        self.step = step

    def now(self) -> int:
        value = self.current
        self.current += self.step
        return value


class FixedCaller:
    def __init__(self, identity: str = "owner-1") -> None:
        self.identity = identity

    def current(self) -> str:
        return self.identity


@pytest.fixture
def table() -> AssessmentTable:
    return AssessmentTable(name="assessments")


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def caller() -> FixedCaller:
    return FixedCaller()


@pytest.fixture
def service(
    table: AssessmentTable, ids: SequentialIds, clock: StepClock, caller: FixedCaller
) -> AssessmentService:
    return AssessmentService(table=table, ids=ids, clock=clock, caller=caller)
