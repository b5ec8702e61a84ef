"""Aggregations over persisted engagement samples."""

from collections import OrderedDict
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..detection.base import EngagementLevel
from .store import Row


@dataclass
class SessionReport:
    """End-of-session summary."""

    total_samples: int
    total_participants: int
    avg_engagement_score: int
    fully_engaged_count: int
    partially_engaged_count: int
    passively_present_count: int
    camera_on_rate: float
    face_detection_rate: float
    total_duration_minutes: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SessionStats:
    """Live statistics over the most recent samples."""

    participant_count: int
    avg_attention: int
    low_engagement_alerts: int


def _score(row: Row) -> float:
    return row.get("attention_score") or 0.0


def _count_level(rows: List[Row], level: EngagementLevel) -> int:
    return sum(1 for row in rows if row.get("engagement_level") == level.value)


def _by_time(rows: Iterable[Row], reverse: bool = False) -> List[Row]:
    return sorted(rows, key=lambda row: row.get("timestamp") or "", reverse=reverse)


def summarize_session(
    rows: Iterable[Row],
    total_participants: Optional[int] = None,
    started_at: Optional[datetime] = None,
    ended_at: Optional[datetime] = None,
) -> Optional[SessionReport]:
    """Build the end-of-session report.

    Args:
        rows: Samples for one session.
        total_participants: Participant count (default: distinct ids in rows).
        started_at: Session start, for the duration.
        ended_at: Session end, for the duration.

    Returns:
        SessionReport, or None when there are no samples.
    """
    rows = list(rows)
    if not rows:
        return None

    if total_participants is None:
        total_participants = len({row.get("participant_id") for row in rows})

    duration = 0
    if started_at is not None and ended_at is not None:
        duration = round((ended_at - started_at).total_seconds() / 60)

    total = len(rows)
    return SessionReport(
        total_samples=total,
        total_participants=total_participants,
        avg_engagement_score=round(sum(_score(row) for row in rows) / total * 100),
        fully_engaged_count=_count_level(rows, EngagementLevel.FULLY_ENGAGED),
        partially_engaged_count=_count_level(rows, EngagementLevel.PARTIALLY_ENGAGED),
        passively_present_count=_count_level(rows, EngagementLevel.PASSIVELY_PRESENT),
        camera_on_rate=sum(1 for row in rows if row.get("camera_on")) / total,
        face_detection_rate=sum(1 for row in rows if row.get("face_detected")) / total,
        total_duration_minutes=duration,
    )


def session_stats(rows: Iterable[Row], window: int = 100) -> SessionStats:
    """Average attention and low-engagement count over the latest samples."""
    rows = list(rows)
    participants = len({row.get("participant_id") for row in rows})
    recent = _by_time(rows, reverse=True)[:window]
    if not recent:
        return SessionStats(participant_count=participants, avg_attention=0, low_engagement_alerts=0)

    avg = sum(_score(row) for row in recent) / len(recent)
    low = _count_level(recent, EngagementLevel.PASSIVELY_PRESENT) + _count_level(
        recent, EngagementLevel.AWAY
    )
    return SessionStats(
        participant_count=participants,
        avg_attention=round(avg * 100),
        low_engagement_alerts=low,
    )


def engagement_timeline(
    rows: Iterable[Row], sample_limit: int = 50, points: int = 20
) -> List[Tuple[str, int]]:
    """Per-minute average attention.

    Args:
        rows: Samples with ISO-8601 timestamps.
        sample_limit: Oldest samples considered.
        points: Most recent minutes returned.

    Returns:
        List of ("H:MM", percent) pairs in local time order.
    """
    grouped: "OrderedDict[str, List[float]]" = OrderedDict()
    for row in _by_time(rows)[:sample_limit]:
        # Keys are local wall-clock minutes; naive stamps are taken as local
        stamp = datetime.fromisoformat(row["timestamp"]).astimezone()
        key = f"{stamp.hour}:{stamp.minute:02d}"
        grouped.setdefault(key, []).append(_score(row))

    timeline = [
        (key, round(sum(scores) / len(scores) * 100)) for key, scores in grouped.items()
    ]
    return timeline[-points:]
