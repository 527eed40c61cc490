"""Shared fixtures for the admission path; no database is needed."""

import random
from datetime import timezone

import pytest

from evalpulse.engine.admission import AdmissionController
from evalpulse.engine.quota import QuotaCounter
from evalpulse.schemas.evaluation import EvalPayload
from tests.fakes import (
    NOW,
    TOKEN,
    USER_ID,
    FakeConfigStore,
    FakeEvaluationLog,
    FakeIdentity,
    SpySampler,
    make_config,
)


@pytest.fixture
def payload() -> EvalPayload:
    return EvalPayload(
        interaction_id="int_abc123",
        prompt="What is the capital of France?",
        response="Paris.",
        score=0.9,
        latency_ms=120,
        flags=["high-confidence"],
        pii_tokens_redacted=1,
    )


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity({TOKEN: USER_ID})


@pytest.fixture
def configs() -> FakeConfigStore:
    store = FakeConfigStore()
    store.configs[USER_ID] = make_config()
    return store


@pytest.fixture
def log() -> FakeEvaluationLog:
    return FakeEvaluationLog()


@pytest.fixture
def sampler() -> SpySampler:
    return SpySampler(random.Random(1234))


@pytest.fixture
def controller(identity, configs, log, sampler) -> AdmissionController:
    return AdmissionController(
        identity=identity,
        configs=configs,
        quota=QuotaCounter(log, tz=timezone.utc, clock=lambda: NOW),
        writer=log,
        sampler=sampler,
        clock=lambda: NOW,
    )
