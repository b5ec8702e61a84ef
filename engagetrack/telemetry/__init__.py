"""Telemetry: sample persistence and session reports."""

from .recorder import ConsentState, EngagementSample, SampleRecorder
from .report import SessionReport, SessionStats, engagement_timeline, session_stats, summarize_session
from .store import InMemoryStore, Store

__all__ = [
    "ConsentState",
    "EngagementSample",
    "SampleRecorder",
    "SessionReport",
    "SessionStats",
    "engagement_timeline",
    "session_stats",
    "summarize_session",
    "InMemoryStore",
    "Store",
]
