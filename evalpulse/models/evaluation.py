"""Evaluation log model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from evalpulse.database import Base


class Evaluation(Base):
    """Evaluation records - append-only, one per accepted ingestion call."""

    __tablename__ = "evaluations"

    evaluation_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    # Caller correlation id - not unique
    interaction_id: Mapped[str] = mapped_column(Text, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    score: Mapped[float | None] = mapped_column(
        Numeric(3, 2, asdecimal=False), nullable=True
    )  # null = not scored
    latency_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    flags: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    pii_tokens_redacted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= 1", name="ck_evaluations_score"),
        CheckConstraint("latency_ms >= 0", name="ck_evaluations_latency"),
        Index("idx_evaluations_user_created", "user_id", text("created_at DESC")),
    )
