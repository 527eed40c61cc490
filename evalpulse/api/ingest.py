"""Evaluation ingestion endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from evalpulse.auth.middleware import API_KEY_HEADER, ApiKeyIdentityProvider, parse_bearer
from evalpulse.config import settings
from evalpulse.database import get_db
from evalpulse.engine.admission import AdmissionController
from evalpulse.engine.outcomes import RejectionKind
from evalpulse.engine.quota import QuotaCounter
from evalpulse.schemas.evaluation import (
    ErrorResponse,
    EvalPayload,
    EvaluationRecord,
    IngestAccepted,
    IngestSkipped,
)
from evalpulse.storage.repositories import SqlConfigStore, SqlEvaluationLog

logger = logging.getLogger(__name__)

router = APIRouter()

REJECTION_RESPONSES: dict[RejectionKind, tuple[int, str]] = {
    RejectionKind.UNAUTHORIZED: (status.HTTP_401_UNAUTHORIZED, "unauthorized"),
    RejectionKind.NO_CONFIG: (status.HTTP_400_BAD_REQUEST, "no config"),
    RejectionKind.QUOTA_EXCEEDED: (status.HTTP_429_TOO_MANY_REQUESTS, "quota exceeded"),
    RejectionKind.PERSISTENCE_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, "persistence error"),
}


def get_admission_controller(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AdmissionController:
    """Controller wired to the request's database session."""
    log = SqlEvaluationLog(db)
    return AdmissionController(
        identity=ApiKeyIdentityProvider(db),
        configs=SqlConfigStore(db),
        quota=QuotaCounter(log, tz=settings.quota_tz),
        writer=log,
    )


AdmissionDep = Annotated[AdmissionController, Depends(get_admission_controller)]


@router.post(
    "/ingest-eval",
    status_code=status.HTTP_201_CREATED,
    response_model=IngestAccepted,
    responses={
        200: {"model": IngestSkipped, "description": "Dropped by sampling"},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def ingest_eval(
    body: EvalPayload,
    controller: AdmissionDep,
    auth_header: str | None = Depends(API_KEY_HEADER),
):
    """
    Admit one evaluation event.
    201 when stored, 200 when sampled away, 4xx/5xx when rejected.
    Not idempotent: repeating a payload stores another record.
    """
    try:
        result = await controller.admit(parse_bearer(auth_header), body)
    except Exception as e:
        logger.exception("Unexpected error during ingestion")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or "Unknown error occurred"},
        )

    if result.is_accepted:
        return IngestAccepted(evaluation=EvaluationRecord.model_validate(result.record))
    if result.is_skipped:
        return JSONResponse(status_code=status.HTTP_200_OK, content=IngestSkipped().model_dump())

    status_code, error = REJECTION_RESPONSES[result.rejection]
    return JSONResponse(status_code=status_code, content={"error": result.message or error})
