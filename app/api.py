"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from app.schemas import (
    Assessment,
    AssessmentPayload,
    AssessmentUpdate,
    TotalConsumptionResponse,
    UsageReading,
    UsageReadingRequest,
    UsageSummaryResponse,
)
from models.results import ErrorKind, ServiceError
from services.assessments import AssessmentService, build_default_service
from services.sources import caller_scope

router = APIRouter()

_STATUS_BY_KIND = {
    ErrorKind.validation: status.HTTP_400_BAD_REQUEST,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.store_write: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_service() -> AssessmentService:
    return build_default_service()


def _raise_for(error: ServiceError) -> NoReturn:
    raise HTTPException(status_code=_STATUS_BY_KIND[error.kind], detail=error.message)


@router.post(
    "/assessments",
    status_code=status.HTTP_201_CREATED,
    response_model=Assessment,
    summary="Create an energy assessment owned by the calling identity.",
)
async def create_assessment(
    payload: AssessmentPayload,
    x_caller_id: Optional[str] = Header(None),
    service: AssessmentService = Depends(get_service),
) -> Assessment:
    with caller_scope(x_caller_id):
        result = service.create_assessment(payload)
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.get(
    "/assessments",
    response_model=List[Assessment],
    summary="List every stored assessment in id order.",
)
async def list_assessments(
    service: AssessmentService = Depends(get_service),
) -> List[Assessment]:
    result = service.list_assessments()
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.get(
    "/assessments/high-efficiency",
    response_model=List[Assessment],
    summary="List assessments whose efficiency rating meets a threshold.",
)
async def high_efficiency_assessments(
    threshold: float = Query(..., description="Minimum efficiency rating, must be > 0."),
    service: AssessmentService = Depends(get_service),
) -> List[Assessment]:
    result = service.high_efficiency_assessments(threshold)
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.get(
    "/assessments/{assessment_id}",
    response_model=Assessment,
    summary="Fetch a single assessment.",
)
async def get_assessment(
    assessment_id: str,
    service: AssessmentService = Depends(get_service),
) -> Assessment:
    result = service.get_assessment(assessment_id)
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.put(
    "/assessments/{assessment_id}",
    response_model=Assessment,
    summary="Merge supplied fields into an existing assessment.",
)
async def update_assessment(
    assessment_id: str,
    payload: AssessmentUpdate,
    service: AssessmentService = Depends(get_service),
) -> Assessment:
    result = service.update_assessment(assessment_id, payload)
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.delete(
    "/assessments/{assessment_id}",
    response_model=Assessment,
    summary="Delete an assessment and return the removed record.",
)
async def delete_assessment(
    assessment_id: str,
    service: AssessmentService = Depends(get_service),
) -> Assessment:
    result = service.delete_assessment(assessment_id)
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.post(
    "/assessments/{assessment_id}/usage",
    response_model=Assessment,
    summary="Append a usage reading to an assessment's history.",
)
async def append_usage(
    assessment_id: str,
    reading: UsageReadingRequest,
    service: AssessmentService = Depends(get_service),
) -> Assessment:
    result = service.append_usage(assessment_id, reading.timestamp, reading.consumption)
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.get(
    "/assessments/{assessment_id}/usage",
    response_model=List[UsageReading],
    summary="Fetch the usage history in append order.",
)
async def get_usage_history(
    assessment_id: str,
    service: AssessmentService = Depends(get_service),
) -> List[UsageReading]:
    result = service.get_usage_history(assessment_id)
    if result.is_err:
        _raise_for(result.error)
    return result.value


@router.get(
    "/assessments/{assessment_id}/usage/total",
    response_model=TotalConsumptionResponse,
    summary="Sum of consumption over the usage history.",
)
async def total_consumption(
    assessment_id: str,
    service: AssessmentService = Depends(get_service),
) -> TotalConsumptionResponse:
    result = service.total_consumption(assessment_id)
    if result.is_err:
        _raise_for(result.error)
    return TotalConsumptionResponse(
        assessment_id=assessment_id, total_consumption=result.value
    )


@router.get(
    "/assessments/{assessment_id}/usage/summary",
    response_model=UsageSummaryResponse,
    summary="Count, total, min, max and mean consumption.",
)
async def usage_summary(
    assessment_id: str,
    service: AssessmentService = Depends(get_service),
) -> UsageSummaryResponse:
    result = service.usage_summary(assessment_id)
    if result.is_err:
        _raise_for(result.error)
    summary = result.value
    return UsageSummaryResponse(
        assessment_id=assessment_id,
        reading_count=summary.reading_count,
        total_consumption=summary.total_consumption,
        min_consumption=summary.min_consumption,
        max_consumption=summary.max_consumption,
        mean_consumption=summary.mean_consumption,
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
