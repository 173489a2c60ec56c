"""
Progress Schemas
Read views built from a progress record.
"""
from enum import Enum
from typing import Any

from pydantic import Field

from study_progress.models.base import DocumentModel
from study_progress.models.progress import ProgressStats, TopicProgress, WeeklyProgress
from study_progress.models.session import StudySession


class AnalyticsPeriod(str, Enum):
    """Look-back window for analytics"""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


# ==================== RESPONSE SCHEMAS ====================

class PeriodStats(DocumentModel):
    """Statistics recomputed from the sessions inside the period."""
    flashcards_learned: int = 0
    quizzes_taken: int = 0
    total_sessions: int = 0
    total_time: float = 0
    average_score: float = 0


class AnalyticsView(DocumentModel):
    """Period-scoped analytics for one user."""
    period: AnalyticsPeriod = AnalyticsPeriod.WEEK
    total_stats: ProgressStats = Field(default_factory=ProgressStats)
    recent_activity: list[StudySession] = Field(default_factory=list)
    top_topics: list[TopicProgress] = Field(default_factory=list)
    weekly_progress: list[WeeklyProgress] = Field(default_factory=list)
    period_stats: PeriodStats = Field(default_factory=PeriodStats)

    def to_dict(self, **kwargs: Any) -> dict:
        data = super().to_dict(**kwargs)
        data["totalStats"] = self.total_stats.to_dict(include_derived=True)
        data["recentActivity"] = [s.to_dict() for s in self.recent_activity]
        return data


class DashboardSummary(DocumentModel):
    """Lightweight dashboard counters."""
    study_sessions: int = 0
    cards_created: int = 0
    quiz_score: int = Field(
        default=0,
        description="Rounded mean of raw quiz `score` values (not percentages)"
    )
    study_streak: int = 0
