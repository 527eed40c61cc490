"""Ingestion and evaluation read schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class EvalPayload(BaseModel):
    """POST /v1/ingest-eval request body.

    Owner and timestamps are never read from here; the server stamps them.
    """

    interaction_id: str
    prompt: str
    response: str
    score: float | None = Field(default=None, ge=0, le=1)
    latency_ms: int = Field(ge=0)
    flags: list[str] | None = None
    pii_tokens_redacted: int | None = Field(default=None, ge=0)


class EvaluationRecord(BaseModel):
    """Persisted evaluation as returned by the API."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(validation_alias="evaluation_id")
    user_id: str
    interaction_id: str
    prompt: str
    response: str
    score: float | None = None
    latency_ms: int
    flags: list[str] = Field(default_factory=list)
    pii_tokens_redacted: int = 0
    created_at: datetime


class IngestAccepted(BaseModel):
    """201 response."""

    success: bool = True
    evaluation: EvaluationRecord


class IngestSkipped(BaseModel):
    """200 response when sampling dropped the event."""

    message: str = "skipped"


class ErrorResponse(BaseModel):
    """Error body for rejected ingestion calls."""

    error: str


class EvaluationPage(BaseModel):
    """GET /v1/evaluations response."""

    data: list[EvaluationRecord]
    total: int
    limit: int
    offset: int


class MetricsSummary(BaseModel):
    """Dashboard metric cards."""

    total: int
    avg_score: float | None = None
    avg_latency_ms: float | None = None
    success_rate: float | None = None
    total_pii_redactions: int = 0


class DailyMetric(BaseModel):
    """One calendar day of the trend/latency charts."""

    date: date
    count: int
    avg_score: float | None = None
    avg_latency_ms: float | None = None
