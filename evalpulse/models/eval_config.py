"""Per-user evaluation policy model."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from evalpulse.database import Base


class RunPolicy(str, enum.Enum):
    """How ingestion treats well-formed requests."""

    ALWAYS = "always"
    SAMPLED = "sampled"


class EvalConfig(Base):
    """Evaluation policy - exactly one row per user, created at provisioning."""

    __tablename__ = "eval_configs"

    config_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    run_policy: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RunPolicy.ALWAYS.value
    )  # always|sampled
    sample_rate_pct: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    # Only read by presentation (detail view masking)
    obfuscate_pii: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_eval_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=10000)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("run_policy IN ('always', 'sampled')", name="ck_eval_configs_run_policy"),
        CheckConstraint(
            "sample_rate_pct >= 0 AND sample_rate_pct <= 100",
            name="ck_eval_configs_sample_rate",
        ),
        CheckConstraint("max_eval_per_day > 0", name="ck_eval_configs_max_per_day"),
    )
