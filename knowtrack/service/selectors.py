"""Derived views over a cache snapshot.

Every function here is pure: it reads the items it is given and returns new
values, never touching the snapshot itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Sequence, Tuple

from knowtrack.models.paper import Paper

TIMELINE_DAYS = 30
RECENT_LIMIT = 5


@dataclass(frozen=True)
class StatusCounts:
    total: int
    done: int
    pending: int
    done_pct: float
    pending_pct: float


def status_counts(items: Sequence, done_status: str) -> StatusCounts:
    total = len(items)
    done = sum(1 for it in items if it.status == done_status)
    if total == 0:
        return StatusCounts(0, 0, 0, 0.0, 0.0)
    done_pct = round(done * 100 / total, 1)
    return StatusCounts(total, done, total - done, done_pct, round(100 - done_pct, 1))


def tag_set(papers: Iterable[Paper]) -> List[str]:
    seen: Dict[str, None] = {}
    for p in papers:
        for tag in p.tags:
            seen.setdefault(tag, None)
    return list(seen)


def tag_histogram(papers: Iterable[Paper]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for p in papers:
        for tag in p.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return counts


def _activity_ts(paper: Paper) -> datetime:
    if paper.is_read and paper.updated_at is not None:
        return paper.updated_at
    return paper.created_at


def activity_timeline(papers: Iterable[Paper], today: date | None = None, days: int = TIMELINE_DAYS) -> List[Tuple[date, int]]:
    """Per-day counts for the trailing window ending today, oldest day first.

    Read papers count on the day they were last updated, unread ones on the
    day they were added. Days are UTC calendar days; empty days are kept.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    start = today - timedelta(days=days - 1)
    buckets: Dict[date, int] = {start + timedelta(days=i): 0 for i in range(days)}
    for p in papers:
        day = _activity_ts(p).astimezone(timezone.utc).date()
        if day in buckets:
            buckets[day] += 1
    return list(buckets.items())


def _last_touched(item) -> datetime:
    return item.updated_at or item.created_at


def recent_activity(items: Iterable, limit: int = RECENT_LIMIT) -> list:
    return sorted(items, key=_last_touched, reverse=True)[:limit]
