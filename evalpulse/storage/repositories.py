"""Repository functions and collaborators over users, configs, evaluations."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from evalpulse.config import settings
from evalpulse.engine.metrics import MetricRow
from evalpulse.engine.outcomes import PersistenceError
from evalpulse.models import EvalConfig, Evaluation, RunPolicy, User


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SqlConfigStore:
    """Read-only view of eval_configs for the admission path."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, user_id: str) -> EvalConfig | None:
        return await get_config_for_user(self._db, user_id)


class SqlEvaluationLog:
    """Owner-scoped count and append over the evaluations table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def count_records_since(self, user_id: str, since: datetime) -> int:
        result = await self._db.execute(
            select(func.count())
            .select_from(Evaluation)
            .where(Evaluation.user_id == user_id, Evaluation.created_at >= since)
        )
        return result.scalar_one()

    async def append(self, record: Evaluation) -> Evaluation:
        """Assign the id, commit, and reload the row so callers see the stored values."""
        record.evaluation_id = str(uuid4())
        self._db.add(record)
        try:
            await self._db.flush()
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise PersistenceError(str(e.orig) if getattr(e, "orig", None) else str(e)) from e
        # Numeric(3,2) rounds the score on insert
        await self._db.refresh(record)
        return record


async def get_user_by_api_key_hash(db: AsyncSession, api_key_hash: str) -> User | None:
    result = await db.execute(select(User).where(User.api_key_hash == api_key_hash))
    return result.scalar_one_or_none()


async def get_config_for_user(db: AsyncSession, user_id: str) -> EvalConfig | None:
    result = await db.execute(select(EvalConfig).where(EvalConfig.user_id == user_id))
    return result.scalar_one_or_none()


async def update_config(db: AsyncSession, config: EvalConfig, changes: dict) -> EvalConfig:
    """Apply a partial update; the row must already exist."""
    for field, value in changes.items():
        setattr(config, field, value)
    config.updated_at = _now()
    await db.flush()
    return config


async def list_evaluations(
    db: AsyncSession, user_id: str, limit: int, offset: int
) -> tuple[list[Evaluation], int]:
    """Newest first, with the exact total for pagination."""
    total = await db.scalar(
        select(func.count()).select_from(Evaluation).where(Evaluation.user_id == user_id)
    )
    result = await db.execute(
        select(Evaluation)
        .where(Evaluation.user_id == user_id)
        .order_by(Evaluation.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total or 0


async def get_evaluation_by_id(
    db: AsyncSession, evaluation_id: str, user_id: str
) -> Evaluation | None:
    """Get evaluation by ID (owner-scoped)."""
    result = await db.execute(
        select(Evaluation).where(
            Evaluation.evaluation_id == evaluation_id,
            Evaluation.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def fetch_metric_rows(
    db: AsyncSession, user_id: str, since: datetime | None = None
) -> list[MetricRow]:
    query = select(
        Evaluation.created_at,
        Evaluation.score,
        Evaluation.latency_ms,
        Evaluation.pii_tokens_redacted,
    ).where(Evaluation.user_id == user_id)
    if since is not None:
        query = query.where(Evaluation.created_at >= since)
    result = await db.execute(query)
    return [MetricRow(*row) for row in result.all()]


async def provision_user(
    db: AsyncSession, email: str, api_key_hash: str, full_name: str | None = None
) -> User:
    """Create an account and its default eval config together."""
    now = _now()
    user = User(
        user_id=str(uuid4()),
        email=email,
        full_name=full_name,
        api_key_hash=api_key_hash,
        created_at=now,
    )
    db.add(user)
    await db.flush()
    db.add(
        EvalConfig(
            config_id=str(uuid4()),
            user_id=user.user_id,
            run_policy=RunPolicy.ALWAYS.value,
            sample_rate_pct=settings.default_sample_rate_pct,
            obfuscate_pii=False,
            max_eval_per_day=settings.default_max_eval_per_day,
            created_at=now,
            updated_at=now,
        )
    )
    await db.flush()
    return user
