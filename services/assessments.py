"""CRUD and usage-history operations for energy assessments."""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import List, Optional

from app.schemas import Assessment, AssessmentPayload, AssessmentUpdate, UsageReading
from datastore.record_store import AssessmentTable, StoreWriteError, build_default_table
from models.results import ErrorKind, Result, ServiceError, not_found, validation_error
from services.aggregator import UsageAggregator, UsageSummary
from services.sources import (
    CallerIdentity,
    ClockSource,
    ContextCallerIdentity,
    IdentifierSource,
    MonotonicClock,
    UuidIdentifierSource,
)
from settings import get_settings

logger = logging.getLogger(__name__)

AssessmentResult = Result[Assessment, ServiceError]


def _is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def _field_problems(
    address: Optional[str],
    efficiency_rating: Optional[float],
    cost_savings: Optional[float],
) -> List[str]:
    problems: List[str] = []
    if address is not None and not address.strip():
        problems.append("address must not be empty")
    if efficiency_rating is not None and not _is_positive(efficiency_rating):
        problems.append("efficiency_rating must be a finite number greater than 0")
    if cost_savings is not None and not _is_positive(cost_savings):
        problems.append("cost_savings must be a finite number greater than 0")
    return problems


class AssessmentService:
    """Validates requests and applies them to the assessment table.

    Each public method runs to completion as one unit and returns a
    :class:`~models.results.Result`; a failed call leaves the table unchanged.
    """

    def __init__(
        self,
        table: AssessmentTable,
        ids: IdentifierSource,
        clock: ClockSource,
        caller: CallerIdentity,
        aggregator: Optional[UsageAggregator] = None,
    ) -> None:
        self.table = table
        self.ids = ids
        self.clock = clock
        self.caller = caller
        self.aggregator = aggregator or UsageAggregator()

    def create_assessment(self, payload: AssessmentPayload) -> AssessmentResult:
        problems = _field_problems(
            payload.address, payload.efficiency_rating, payload.cost_savings
        )
        if problems:
            return self._reject("; ".join(problems))

        now = self.clock.now()
        assessment = Assessment(
            id=self.ids.new_id(),
            owner=self.caller.current(),
            address=payload.address,
            assessment_date=now,
            efficiency_rating=payload.efficiency_rating,
            recommendations=payload.recommendations or "",
            cost_savings=payload.cost_savings,
            created_at=now,
            updated_at=None,
            usage_history=[],
        )

        failure = self._write(assessment)
        if failure is not None:
            return failure
        logger.info(
            "Created energy assessment",
            extra={"assessment_id": assessment.id, "owner": assessment.owner},
        )
        return Result.ok(assessment)

    def get_assessment(self, assessment_id: str) -> AssessmentResult:
        if not assessment_id:
            return self._reject("assessment id is required")
        assessment = self.table.get(assessment_id)
        if assessment is None:
            return not_found(assessment_id)
        return Result.ok(assessment)

    def list_assessments(self) -> Result[List[Assessment], ServiceError]:
        return Result.ok(self.table.values())

    def update_assessment(
        self, assessment_id: str, payload: AssessmentUpdate
    ) -> AssessmentResult:
        """Merge the supplied fields onto an existing record and restamp it."""
        if not assessment_id:
            return self._reject("assessment id is required")
        problems = _field_problems(
            payload.address, payload.efficiency_rating, payload.cost_savings
        )
        if problems:
            return self._reject("; ".join(problems), assessment_id)

        existing = self.table.get(assessment_id)
        if existing is None:
            return not_found(assessment_id)

        changes = payload.model_dump(exclude_none=True)
        updated = existing.model_copy(
            update={**changes, "updated_at": self.clock.now()}
        )

        failure = self._write(updated)
        if failure is not None:
            return failure
        logger.info(
            "Updated energy assessment",
            extra={"assessment_id": assessment_id, "reason": ",".join(sorted(changes))},
        )
        return Result.ok(updated)

    def delete_assessment(self, assessment_id: str) -> AssessmentResult:
        if not assessment_id:
            return self._reject("assessment id is required")
        try:
            removed = self.table.delete(assessment_id)
        except StoreWriteError as exc:
            return Result.err(ServiceError(kind=ErrorKind.store_write, message=str(exc)))
        if removed is None:
            return not_found(assessment_id)
        logger.info("Deleted energy assessment", extra={"assessment_id": assessment_id})
        return Result.ok(removed)

    def append_usage(
        self, assessment_id: str, timestamp: int, consumption: float
    ) -> AssessmentResult:
        """Append one reading to the record's usage history and persist it."""
        if not assessment_id:
            return self._reject("assessment id is required")
        if not math.isfinite(consumption):
            return self._reject("consumption must be a finite number", assessment_id)

        assessment = self.table.get(assessment_id)
        if assessment is None:
            return not_found(assessment_id)

        assessment.usage_history.append(
            UsageReading(timestamp=timestamp, consumption=consumption)
        )
        failure = self._write(assessment)
        if failure is not None:
            return failure
        logger.debug(
            "Appended usage reading",
            extra={
                "assessment_id": assessment_id,
                "reading_count": len(assessment.usage_history),
            },
        )
        return Result.ok(assessment)

    def get_usage_history(
        self, assessment_id: str
    ) -> Result[List[UsageReading], ServiceError]:
        found = self.get_assessment(assessment_id)
        if found.is_err:
            return Result.err(found.error)
        return Result.ok(found.value.usage_history)

    def total_consumption(self, assessment_id: str) -> Result[float, ServiceError]:
        history = self.get_usage_history(assessment_id)
        if history.is_err:
            return Result.err(history.error)
        return Result.ok(self.aggregator.total(history.value))

    def usage_summary(self, assessment_id: str) -> Result[UsageSummary, ServiceError]:
        history = self.get_usage_history(assessment_id)
        if history.is_err:
            return Result.err(history.error)
        return Result.ok(self.aggregator.summarize(history.value))

    def high_efficiency_assessments(
        self, threshold: float
    ) -> Result[List[Assessment], ServiceError]:
        """Return every record whose rating is at least ``threshold``."""
        if not _is_positive(threshold):
            return self._reject("threshold must be a finite number greater than 0")

        listed = self.list_assessments()
        if listed.is_err:
            return listed
        matches = [item for item in listed.value if item.efficiency_rating >= threshold]
        logger.debug(
            "High efficiency scan finished",
            extra={"threshold": threshold, "match_count": len(matches)},
        )
        return Result.ok(matches)

    def _write(self, assessment: Assessment) -> Optional[AssessmentResult]:
        try:
            self.table.put(assessment)
        except StoreWriteError as exc:
            return Result.err(ServiceError(kind=ErrorKind.store_write, message=str(exc)))
        return None

    @staticmethod
    def _reject(message: str, assessment_id: Optional[str] = None) -> Result:
        logger.info(
            "Rejected request",
            extra={"assessment_id": assessment_id, "reason": message},
        )
        return validation_error(message)


@lru_cache
def build_default_service() -> AssessmentService:
    """Factory that wires the service with the configured table."""
    settings = get_settings()
    return AssessmentService(
        table=build_default_table(),
        ids=UuidIdentifierSource(),
        clock=MonotonicClock(),
        caller=ContextCallerIdentity(default=settings.default_caller_id),
    )
