"""
Analytics Projector
Read-only views over a progress record. Never mutates the record it reads.
"""
import math
from datetime import datetime, timedelta
from typing import Optional

from study_progress.config import Settings, get_settings
from study_progress.core.clock import as_utc
from study_progress.core.exceptions import ValidationError
from study_progress.models.progress import TopicProgress
from study_progress.models.record import ProgressRecord
from study_progress.models.session import ActivityType, StudySession
from study_progress.schemas.progress import (
    AnalyticsPeriod,
    AnalyticsView,
    DashboardSummary,
    PeriodStats
)


def resolve_period(period: str | AnalyticsPeriod | None) -> AnalyticsPeriod:
    """Parse a period name; None means a week."""
    if period is None:
        return AnalyticsPeriod.WEEK
    try:
        return AnalyticsPeriod(period)
    except ValueError:
        raise ValidationError(
            f"Invalid analytics period: {period}",
            details={"allowed": [p.value for p in AnalyticsPeriod]}
        ) from None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class AnalyticsProjector:
    """
    Builds period views, top-topic rankings and dashboard counters.

    Limits (recent activity, top topics, weekly buckets) and period
    lengths come from settings.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def period_start(self, period: AnalyticsPeriod, now: datetime) -> datetime:
        days = self.settings.ANALYTICS_PERIOD_DAYS[period.value]
        return as_utc(now) - timedelta(days=days)

    def project(
        self,
        record: Optional[ProgressRecord],
        period: str | AnalyticsPeriod | None,
        now: datetime
    ) -> AnalyticsView:
        """
        Build the analytics view for a period.

        Args:
            record: Progress record, or None when the user has no history
            period: week, month or year
            now: Reference time for the period window

        Returns:
            AnalyticsView (all zeros and empty lists when record is None)
        """
        period = resolve_period(period)
        if record is None:
            return AnalyticsView(period=period)

        start = self.period_start(period, now)
        in_period = [s for s in record.recent_sessions if s.date >= start]
        recent_activity = in_period[:self.settings.ANALYTICS_RECENT_ACTIVITY_LIMIT]

        return AnalyticsView(
            period=period,
            total_stats=record.stats.model_copy(),
            recent_activity=recent_activity,
            top_topics=self.top_topics(record.topics_studied),
            weekly_progress=list(record.weekly_progress[:self.settings.ANALYTICS_WEEKLY_PROGRESS_LIMIT]),
            period_stats=self.period_stats(in_period)
        )

    def top_topics(self, topics: list[TopicProgress]) -> list[TopicProgress]:
        """Topics by flashcards + quizzes, descending; ties keep stored order."""
        ranked = sorted(
            topics,
            key=lambda t: t.flashcards_count + t.quizzes_count,
            reverse=True
        )
        return ranked[:self.settings.ANALYTICS_TOP_TOPICS_LIMIT]

    def period_stats(self, sessions: list[StudySession]) -> PeriodStats:
        """Recompute statistics from a set of sessions."""
        stats = PeriodStats(total_sessions=len(sessions))
        quiz_scores = []

        for session in sessions:
            stats.total_time += session.time_spent or 0
            if session.is_learned:
                stats.flashcards_learned += 1
            elif session.is_quiz:
                stats.quizzes_taken += 1
                quiz_scores.append(session.activity_data.percentage)

        if quiz_scores:
            stats.average_score = sum(quiz_scores) / len(quiz_scores)

        return stats

    def dashboard(
        self,
        record: Optional[ProgressRecord],
        cards_created: int = 0
    ) -> DashboardSummary:
        """
        Dashboard counters.

        quiz_score averages the raw `score` of quiz sessions in the log,
        skipping sessions without one. Unlike every other average it does
        not use `percentage`.
        """
        if record is None:
            return DashboardSummary(cards_created=cards_created)

        scores = [
            s.activity_data.score
            for s in record.recent_sessions
            if s.activity_type == ActivityType.QUIZ and s.activity_data.score is not None
        ]

        return DashboardSummary(
            study_sessions=len(record.recent_sessions),
            cards_created=cards_created,
            quiz_score=round_half_up(sum(scores) / len(scores)) if scores else 0,
            study_streak=record.stats.current_streak
        )
