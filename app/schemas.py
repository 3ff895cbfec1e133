"""Pydantic schemas for stored records and the HTTP API layer."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class UsageReading(BaseModel):
    """One consumption data point embedded in an assessment."""

    timestamp: int = Field(..., description="Logical time of the reading.")
    consumption: float


class Assessment(BaseModel):
    """Full record representing one energy efficiency evaluation."""

    id: str
    owner: str
    address: str
    assessment_date: int
    efficiency_rating: float
    recommendations: str = ""
    cost_savings: float
    created_at: int
    updated_at: Optional[int] = None
    usage_history: List[UsageReading] = Field(default_factory=list)


class AssessmentPayload(BaseModel):
    """Fields a caller supplies when creating an assessment."""

    address: str = Field(..., description="Property address, must not be blank.")
    efficiency_rating: float = Field(..., description="Positive efficiency score.")
    recommendations: Optional[str] = None
    cost_savings: float = Field(..., description="Positive projected savings.")


class AssessmentUpdate(BaseModel):
    """Partial payload for updates; omitted or null fields keep their value."""

    address: Optional[str] = None
    efficiency_rating: Optional[float] = None
    recommendations: Optional[str] = None
    cost_savings: Optional[float] = None


class UsageReadingRequest(BaseModel):
    timestamp: int
    consumption: float


class TotalConsumptionResponse(BaseModel):
    assessment_id: str
    total_consumption: float


class UsageSummaryResponse(BaseModel):
    """Aggregate statistics over an assessment's usage history."""

    assessment_id: str
    reading_count: int = Field(..., ge=0)
    total_consumption: float
    min_consumption: Optional[float] = None
    max_consumption: Optional[float] = None
    mean_consumption: Optional[float] = None
