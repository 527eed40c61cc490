"""HTTP contract tests for POST /v1/ingest-eval."""

import pytest
from fastapi.testclient import TestClient

from evalpulse.api.ingest import get_admission_controller
from evalpulse.main import app
from tests.fakes import TOKEN, USER_ID, make_config, make_record

BODY = {
    "interaction_id": "int_abc123",
    "prompt": "Summarize the ticket",
    "response": "Customer wants a refund.",
    "latency_ms": 230,
}
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def client(controller):
    app.dependency_overrides[get_admission_controller] = lambda: controller
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_accepted_returns_201(client):
    resp = client.post("/v1/ingest-eval", json=BODY, headers=AUTH)
    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    ev = data["evaluation"]
    assert ev["id"]
    assert ev["user_id"] == USER_ID
    assert ev["score"] is None
    assert ev["flags"] == []
    assert ev["pii_tokens_redacted"] == 0
    assert ev["created_at"].startswith("2026-10-18")


def test_payload_cannot_choose_owner(client):
    """user_id/created_at in the body are ignored."""
    body = {**BODY, "user_id": "attacker", "created_at": "1999-01-01T00:00:00Z"}
    resp = client.post("/v1/ingest-eval", json=body, headers=AUTH)
    assert resp.status_code == 201
    ev = resp.json()["evaluation"]
    assert ev["user_id"] == USER_ID
    assert not ev["created_at"].startswith("1999")


def test_skipped_returns_200(client, configs):
    configs.configs[USER_ID] = make_config(run_policy="sampled", sample_rate_pct=0)
    resp = client.post("/v1/ingest-eval", json=BODY, headers=AUTH)
    assert resp.status_code == 200
    assert resp.json() == {"message": "skipped"}


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Token abc"}, {"Authorization": "Bearer"}, {"Authorization": "Bearer nope"}],
)
def test_unauthorized_returns_401(client, headers, log):
    resp = client.post("/v1/ingest-eval", json=BODY, headers=headers)
    assert resp.status_code == 401
    assert resp.json() == {"error": "unauthorized"}
    assert log.count_calls == 0
    assert log.append_calls == 0


def test_no_config_returns_400(client, configs):
    configs.configs.clear()
    resp = client.post("/v1/ingest-eval", json=BODY, headers=AUTH)
    assert resp.status_code == 400
    assert resp.json() == {"error": "no config"}


def test_quota_exceeded_returns_429(client, configs, log):
    configs.configs[USER_ID] = make_config(max_eval_per_day=1)
    log.records = [make_record()]
    resp = client.post("/v1/ingest-eval", json=BODY, headers=AUTH)
    assert resp.status_code == 429
    assert resp.json() == {"error": "quota exceeded"}


def test_persistence_error_returns_500_with_message(client, log):
    log.fail_with = "insert failed"
    resp = client.post("/v1/ingest-eval", json=BODY, headers=AUTH)
    assert resp.status_code == 500
    assert resp.json() == {"error": "insert failed"}


def test_unexpected_error_returns_500(client, configs):
    async def broken(user_id):
        raise RuntimeError("config store down")

    configs.get = broken
    resp = client.post("/v1/ingest-eval", json=BODY, headers=AUTH)
    assert resp.status_code == 500
    assert resp.json() == {"error": "config store down"}


@pytest.mark.parametrize(
    "override",
    [{"score": 1.5}, {"score": -0.1}, {"latency_ms": -1}, {"pii_tokens_redacted": -2}],
)
def test_malformed_payload_rejected(client, override):
    resp = client.post("/v1/ingest-eval", json={**BODY, **override}, headers=AUTH)
    assert resp.status_code == 422


def test_end_to_end_sampled_hundred_accepts(client, configs):
    configs.configs[USER_ID] = make_config(run_policy="sampled", sample_rate_pct=100)
    resp = client.post("/v1/ingest-eval", json=BODY, headers=AUTH)
    assert resp.status_code == 201


def test_end_to_end_daily_limit(client, configs):
    configs.configs[USER_ID] = make_config(max_eval_per_day=2)
    codes = [client.post("/v1/ingest-eval", json=BODY, headers=AUTH).status_code for _ in range(3)]
    assert codes == [201, 201, 429]
