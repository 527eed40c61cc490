"""Evaluation browsing and dashboard metrics endpoints."""

from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from evalpulse.auth.middleware import CurrentUserDep
from evalpulse.config import settings
from evalpulse.database import get_db
from evalpulse.engine.metrics import daily_series, summarize
from evalpulse.engine.quota import start_of_day, utcnow
from evalpulse.models import EvalConfig, Evaluation
from evalpulse.schemas.evaluation import (
    DailyMetric,
    EvaluationPage,
    EvaluationRecord,
    MetricsSummary,
)
from evalpulse.storage.repositories import (
    fetch_metric_rows,
    get_config_for_user,
    get_evaluation_by_id,
    list_evaluations,
)
from evalpulse.utils.pii import mask_pii

router = APIRouter()


def _present(ev: Evaluation, config: EvalConfig | None) -> EvaluationRecord:
    """API view of a stored record; prompt and response masked when the config asks."""
    record = EvaluationRecord.model_validate(ev)
    if config and config.obfuscate_pii:
        record = record.model_copy(
            update={"prompt": mask_pii(record.prompt), "response": mask_pii(record.response)}
        )
    return record


@router.get("/evaluations", response_model=EvaluationPage)
async def get_evaluations(
    user: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(default=settings.page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(default=0, ge=0),
):
    """Caller's evaluations, newest first."""
    rows, total = await list_evaluations(db, str(user.user_id), limit, offset)
    config = await get_config_for_user(db, str(user.user_id))
    return EvaluationPage(
        data=[_present(r, config) for r in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationRecord)
async def get_evaluation(
    evaluation_id: str,
    user: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get evaluation by ID (owner-scoped); masks PII when the config asks for it."""
    ev = await get_evaluation_by_id(db, evaluation_id, str(user.user_id))
    if not ev:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Evaluation not found",
        )
    config = await get_config_for_user(db, str(user.user_id))
    return _present(ev, config)


@router.get("/metrics/summary", response_model=MetricsSummary)
async def get_metrics_summary(
    user: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    rows = await fetch_metric_rows(db, str(user.user_id))
    return summarize(rows)


@router.get("/metrics/daily", response_model=list[DailyMetric])
async def get_metrics_daily(
    user: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
    days: int = Query(default=7, ge=1, le=90),
):
    """Per-day count, average score and latency for the trend charts."""
    tz = settings.quota_tz
    today_start = start_of_day(utcnow(), tz)
    since = today_start - timedelta(days=days - 1)
    rows = await fetch_metric_rows(db, str(user.user_id), since=since)
    return daily_series(rows, today_start.date(), days, tz)
