"""Dashboard aggregates over a user's evaluation log."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from evalpulse.schemas.evaluation import DailyMetric, MetricsSummary

SUCCESS_SCORE = 0.7


@dataclass(frozen=True)
class MetricRow:
    created_at: datetime
    score: float | None
    latency_ms: int
    pii_tokens_redacted: int = 0


def _mean(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def summarize(rows: Iterable[MetricRow]) -> MetricsSummary:
    """
    Metric cards. Unscored rows count toward total and latency but are left
    out of the score average and success rate.
    """
    rows = list(rows)
    scores = [r.score for r in rows if r.score is not None]
    success_rate = None
    if scores:
        success_rate = 100 * sum(1 for s in scores if s >= SUCCESS_SCORE) / len(scores)
    return MetricsSummary(
        total=len(rows),
        avg_score=_mean(scores),
        avg_latency_ms=_mean([r.latency_ms for r in rows]),
        success_rate=success_rate,
        total_pii_redactions=sum(r.pii_tokens_redacted or 0 for r in rows),
    )


def daily_series(
    rows: Iterable[MetricRow], today: date, days: int, tz: tzinfo
) -> list[DailyMetric]:
    """One bucket per calendar day ending at ``today``, oldest first."""
    dates = [today - timedelta(days=i) for i in range(days - 1, -1, -1)]
    buckets: dict[date, list[MetricRow]] = {d: [] for d in dates}
    for row in rows:
        day = row.created_at.astimezone(tz).date()
        if day in buckets:
            buckets[day].append(row)

    series = []
    for d in dates:
        bucket = buckets[d]
        series.append(
            DailyMetric(
                date=d,
                count=len(bucket),
                avg_score=_mean([r.score for r in bucket if r.score is not None]),
                avg_latency_ms=_mean([r.latency_ms for r in bucket]),
            )
        )
    return series
