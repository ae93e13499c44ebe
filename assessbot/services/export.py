# assessbot/services/export.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from aiogram import html

from assessbot.database.models import Test
from assessbot.database.repo.results_repo import ResultRow
from assessbot.services.aggregation import BAND_LABELS, BAND_MARKERS, Band, band_for, rank_by_score, summarize_results
from assessbot.utils.dates import TimeProvider

_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9\-_]")


@dataclass(frozen=True, slots=True)
class ResultsReport:
    filename: str
    content: bytes
    caption: str


def safe_title(title: str, limit: int = 30) -> str:
    return _UNSAFE_FILENAME_RE.sub("_", title or "")[:limit] or "test"


def report_filename(title: str, generated_at: datetime, clock: TimeProvider) -> str:
    return f"{safe_title(title)}_{clock.stamp(generated_at)}.txt"


def build_results_report(
    test: Test,
    rows: Sequence[ResultRow],
    *,
    author_name: str | None,
    clock: TimeProvider,
    generated_at: datetime,
) -> ResultsReport | None:
    """
    Plain-text report ranked by score. None when there is nothing to report.
    """
    summary = summarize_results(rows)
    if summary is None:
        return None

    out: list[str] = []
    out.append("=" * 50)
    out.append(" " * 20 + test.title)
    out.append("=" * 50)
    out.append("")

    out.append("TEST INFO")
    out.append("-" * 30)
    out.append(f"Created at: {clock.format(test.created_at)}")
    out.append(f"Questions: {test.question_count}")
    out.append(f"Author: {author_name or 'Unknown'}")
    out.append(f"Participants: {summary.count}")
    out.append("")

    out.append("RESULTS")
    out.append("-" * 30)
    out.append("#   | Full name            | Score  | Correct/Wrong   | Band")
    out.append("-" * 70)
    for position, row in enumerate(rank_by_score(rows), start=1):
        band = band_for(row.score)
        name = f"{row.last_name} {row.first_name}".strip() or "Unknown"
        score = f"{row.score:.1f}%"
        answers = f"{row.correct_count}/{row.wrong_count}"
        out.append(f"{position:>2}  | {name:<20} | {score:<6} | {answers:<15} | {BAND_MARKERS[band]} {BAND_LABELS[band]}")
    out.append("")

    out.append("STATISTICS")
    out.append("-" * 30)
    out.append(f"Mean score: {summary.mean:.1f}%")
    out.append(f"Highest score: {summary.max:.1f}%")
    out.append(f"Lowest score: {summary.min:.1f}%")
    out.append(f"Excellent: {summary.band_counts[Band.EXCELLENT]}")
    out.append(f"Good: {summary.band_counts[Band.GOOD]}")
    out.append(f"Poor: {summary.band_counts[Band.POOR]}")
    out.append("")

    return ResultsReport(
        filename=report_filename(test.title, generated_at, clock),
        content="\n".join(out).encode("utf-8"),
        caption=f"📄 {html.quote(test.title)}\n📅 {clock.format(generated_at)}",
    )
