"""In-memory collaborators and record builders for the admission path.

Each fake records how often it was called so tests can assert which steps ran.
"""

import random
from datetime import datetime, timezone
from uuid import uuid4

from evalpulse.engine.outcomes import PersistenceError
from evalpulse.engine.sampling import SamplingDecider
from evalpulse.models import EvalConfig, Evaluation

USER_ID = "6f1c2a5e-0000-4000-8000-000000000001"
TOKEN = "sk_test_token"
NOW = datetime(2026, 10, 18, 15, 30, tzinfo=timezone.utc)


class FakeIdentity:
    def __init__(self, tokens: dict[str, str]):
        self.tokens = tokens
        self.calls = 0

    async def verify(self, token: str) -> str | None:
        self.calls += 1
        return self.tokens.get(token)


class FakeConfigStore:
    def __init__(self):
        self.configs: dict[str, EvalConfig] = {}
        self.calls = 0

    async def get(self, user_id: str) -> EvalConfig | None:
        self.calls += 1
        return self.configs.get(user_id)


class FakeEvaluationLog:
    """Count source and writer over a plain list."""

    def __init__(self):
        self.records: list[Evaluation] = []
        self.count_calls = 0
        self.append_calls = 0
        self.fail_with: str | None = None

    async def count_records_since(self, user_id: str, since: datetime) -> int:
        self.count_calls += 1
        return sum(1 for r in self.records if r.user_id == user_id and r.created_at >= since)

    async def append(self, record: Evaluation) -> Evaluation:
        self.append_calls += 1
        if self.fail_with:
            raise PersistenceError(self.fail_with)
        record.evaluation_id = str(uuid4())
        self.records.append(record)
        return record


class SpySampler(SamplingDecider):
    def __init__(self, rng: random.Random | None = None):
        super().__init__(rng)
        self.calls = 0

    def decide(self, sample_rate_pct: int) -> bool:
        self.calls += 1
        return super().decide(sample_rate_pct)


def make_config(
    user_id: str = USER_ID,
    run_policy: str = "always",
    sample_rate_pct: int = 100,
    max_eval_per_day: int = 10000,
    obfuscate_pii: bool = False,
) -> EvalConfig:
    return EvalConfig(
        config_id=str(uuid4()),
        user_id=user_id,
        run_policy=run_policy,
        sample_rate_pct=sample_rate_pct,
        obfuscate_pii=obfuscate_pii,
        max_eval_per_day=max_eval_per_day,
        created_at=NOW,
        updated_at=NOW,
    )


def make_record(user_id: str = USER_ID, created_at: datetime = NOW, **overrides) -> Evaluation:
    fields = {
        "evaluation_id": str(uuid4()),
        "user_id": user_id,
        "interaction_id": "int_prior",
        "prompt": "p",
        "response": "r",
        "score": 0.8,
        "latency_ms": 100,
        "flags": [],
        "pii_tokens_redacted": 0,
        "created_at": created_at,
    }
    fields.update(overrides)
    return Evaluation(**fields)


