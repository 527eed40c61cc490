"""Admission outcomes and error taxonomy."""

import enum
from dataclasses import dataclass

from evalpulse.models import Evaluation


class PersistenceError(Exception):
    """The evaluation log could not store a record."""


class AdmissionOutcome(str, enum.Enum):
    ACCEPTED = "accepted"
    SKIPPED = "skipped"
    REJECTED = "rejected"


class SkipReason(str, enum.Enum):
    SAMPLED_OUT = "sampled_out"


class RejectionKind(str, enum.Enum):
    UNAUTHORIZED = "unauthorized"
    NO_CONFIG = "no_config"
    QUOTA_EXCEEDED = "quota_exceeded"
    PERSISTENCE_ERROR = "persistence_error"


@dataclass(frozen=True)
class AdmissionResult:
    """Terminal state of one ingestion attempt.

    Exactly one of ``record``, ``skip_reason`` or ``rejection`` is set,
    matching ``outcome``. A skip is a successful no-op, not an error.
    """

    outcome: AdmissionOutcome
    record: Evaluation | None = None
    skip_reason: SkipReason | None = None
    rejection: RejectionKind | None = None
    message: str | None = None

    @classmethod
    def accepted(cls, record: Evaluation) -> "AdmissionResult":
        return cls(outcome=AdmissionOutcome.ACCEPTED, record=record)

    @classmethod
    def skipped(cls, reason: SkipReason = SkipReason.SAMPLED_OUT) -> "AdmissionResult":
        return cls(outcome=AdmissionOutcome.SKIPPED, skip_reason=reason)

    @classmethod
    def rejected(cls, kind: RejectionKind, message: str | None = None) -> "AdmissionResult":
        return cls(outcome=AdmissionOutcome.REJECTED, rejection=kind, message=message)

    @property
    def is_accepted(self) -> bool:
        return self.outcome is AdmissionOutcome.ACCEPTED

    @property
    def is_skipped(self) -> bool:
        return self.outcome is AdmissionOutcome.SKIPPED
