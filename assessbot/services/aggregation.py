# assessbot/services/aggregation.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol, Sequence, TypeVar

EXCELLENT_THRESHOLD = 80.0
GOOD_THRESHOLD = 60.0


class Band(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    POOR = "poor"


BAND_MARKERS = {
    Band.EXCELLENT: "🟢",
    Band.GOOD: "🟡",
    Band.POOR: "🔴",
}

BAND_LABELS = {
    Band.EXCELLENT: "Excellent",
    Band.GOOD: "Good",
    Band.POOR: "Poor",
}


def band_for(score: float) -> Band:
    if score >= EXCELLENT_THRESHOLD:
        return Band.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return Band.GOOD
    return Band.POOR


class Scored(Protocol):
    score: float
    submitted_at: datetime


R = TypeVar("R", bound=Scored)


@dataclass(frozen=True, slots=True)
class ResultSummary:
    count: int
    mean: float
    max: float
    min: float
    band_counts: dict[Band, int]


def summarize(scores: Iterable[float]) -> ResultSummary | None:
    """
    Mean/max/min and per-band counts. Returns None ("no data") for no scores.
    """
    values = [float(s) for s in scores]
    if not values:
        return None

    counts = {band: 0 for band in Band}
    for value in values:
        counts[band_for(value)] += 1

    return ResultSummary(
        count=len(values),
        mean=round(sum(values) / len(values), 1),
        max=round(max(values), 1),
        min=round(min(values), 1),
        band_counts=counts,
    )


def summarize_results(results: Iterable[Scored]) -> ResultSummary | None:
    return summarize(r.score for r in results)


# sorted() is stable, so ties keep their input order in both views


def rank_by_score(results: Sequence[R]) -> list[R]:
    return sorted(results, key=lambda r: r.score, reverse=True)


def order_by_submission(results: Sequence[R]) -> list[R]:
    return sorted(results, key=lambda r: r.submitted_at, reverse=True)
