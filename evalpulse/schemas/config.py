"""Eval config schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class EvalConfigOut(BaseModel):
    """GET /v1/config response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    run_policy: Literal["always", "sampled"]
    sample_rate_pct: int
    obfuscate_pii: bool
    max_eval_per_day: int
    updated_at: datetime | None = None


class EvalConfigUpdate(BaseModel):
    """PUT /v1/config request - only provided fields change."""

    run_policy: Literal["always", "sampled"] | None = None
    sample_rate_pct: int | None = Field(default=None, ge=0, le=100)
    obfuscate_pii: bool | None = None
    max_eval_per_day: int | None = Field(default=None, gt=0)
