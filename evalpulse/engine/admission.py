"""Admission control for incoming evaluation events."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from evalpulse.engine.outcomes import AdmissionResult, PersistenceError, RejectionKind, SkipReason
from evalpulse.engine.quota import QuotaCounter, utcnow
from evalpulse.engine.sampling import SamplingDecider
from evalpulse.models import EvalConfig, Evaluation, RunPolicy
from evalpulse.schemas.evaluation import EvalPayload

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    async def verify(self, token: str) -> str | None: ...


class ConfigStore(Protocol):
    async def get(self, user_id: str) -> EvalConfig | None: ...


class EvaluationWriter(Protocol):
    async def append(self, record: Evaluation) -> Evaluation: ...


class AdmissionController:
    """
    Decides whether an evaluation event is stored, sampled away or rejected.

    Steps run in a fixed order and stop at the first terminal outcome:
    identity -> policy lookup -> sampling gate -> quota gate -> persistence.
    The quota gate is check-then-write, not atomic: concurrent calls for the
    same user can each see room under the limit and all persist.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        configs: ConfigStore,
        quota: QuotaCounter,
        writer: EvaluationWriter,
        sampler: SamplingDecider | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._identity = identity
        self._configs = configs
        self._quota = quota
        self._writer = writer
        self._sampler = sampler or SamplingDecider()
        self._clock = clock

    async def admit(self, token: str | None, payload: EvalPayload) -> AdmissionResult:
        user_id = await self._identity.verify(token) if token else None
        if not user_id:
            return AdmissionResult.rejected(RejectionKind.UNAUTHORIZED)

        config = await self._configs.get(user_id)
        if config is None:
            logger.warning("No eval config for user %s", user_id)
            return AdmissionResult.rejected(RejectionKind.NO_CONFIG)

        if RunPolicy(config.run_policy) is RunPolicy.SAMPLED:
            if not self._sampler.decide(config.sample_rate_pct):
                logger.info("Evaluation skipped due to sampling (user=%s)", user_id)
                return AdmissionResult.skipped(SkipReason.SAMPLED_OUT)

        count = await self._quota.count_today(user_id)
        if count >= config.max_eval_per_day:
            logger.warning(
                "Daily evaluation limit reached for user %s (%d/%d)",
                user_id,
                count,
                config.max_eval_per_day,
            )
            return AdmissionResult.rejected(RejectionKind.QUOTA_EXCEEDED)

        record = build_record(user_id, payload, self._clock())
        try:
            saved = await self._writer.append(record)
        except PersistenceError as e:
            # No retry here: interaction_id is not an idempotency key
            logger.exception("Error inserting evaluation for user %s", user_id)
            return AdmissionResult.rejected(RejectionKind.PERSISTENCE_ERROR, str(e))

        logger.info("Evaluation ingested successfully: %s", saved.evaluation_id)
        return AdmissionResult.accepted(saved)


def build_record(user_id: str, payload: EvalPayload, created_at: datetime) -> Evaluation:
    """Owner and timestamp come from the server, never from the payload."""
    return Evaluation(
        user_id=user_id,
        interaction_id=payload.interaction_id,
        prompt=payload.prompt,
        response=payload.response,
        score=payload.score,
        latency_ms=payload.latency_ms,
        flags=list(payload.flags or []),
        pii_tokens_redacted=payload.pii_tokens_redacted or 0,
        created_at=created_at,
    )
