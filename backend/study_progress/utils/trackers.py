"""
Progress Trackers
Incremental accumulators applied to a progress record for each study session.

Each tracker mutates one part of the record:
- StreakTracker: current/longest consecutive study-day streak
- StatsAccumulator: lifetime counters and running quiz average
- TopicProgressTracker: per-topic counters, looked up by topic name
- WeeklyBucketTracker: per-week counters, capped to the most recent weeks

Averages are running means: the new sample is folded into the previous
average using the updated count, so no sample history is stored.
"""
import logging
from datetime import datetime
from typing import Optional

from study_progress.core.clock import as_utc, same_day, start_of_day
from study_progress.models.progress import ProgressStats, TopicProgress, WeeklyProgress
from study_progress.models.session import ActivityData, ActivityType, StudySession
from study_progress.utils.week_key import week_key

logger = logging.getLogger(__name__)


def running_mean(previous_average: float, count: int, sample: float) -> float:
    """
    Fold one sample into an average.

    Args:
        previous_average: Average over the first count - 1 samples
        count: Number of samples including the new one
        sample: New sample

    Returns:
        Average over all count samples
    """
    if count <= 0:
        return 0
    return (previous_average * (count - 1) + sample) / count


def _is_learned(activity_type: ActivityType, activity_data: ActivityData) -> bool:
    return activity_type == ActivityType.FLASHCARD and bool(getattr(activity_data, "is_learned", False))


def _percentage(activity_data: ActivityData) -> float:
    return getattr(activity_data, "percentage", None) or 0


class StreakTracker:
    """Tracks consecutive calendar days with at least one session"""

    def update(self, stats: ProgressStats, now: datetime) -> None:
        """
        Update the streak for a session happening at `now`.

        Same-day sessions leave the streak alone, the next day extends it
        and any longer gap restarts it at 1. Sessions dated before the last
        study day (clock skew, backdated events) are ignored.
        """
        today = start_of_day(now)

        if stats.last_study_date is None:
            stats.current_streak = 1
            stats.longest_streak = max(stats.longest_streak, 1)
            stats.last_study_date = today
            return

        last_study = start_of_day(stats.last_study_date)
        days_diff = (today - last_study).days

        if days_diff <= 0:
            if days_diff < 0:
                logger.debug(f"Ignoring backdated session for streak: {today.date()} < {last_study.date()}")
            return

        if days_diff == 1:
            stats.current_streak += 1
            stats.longest_streak = max(stats.longest_streak, stats.current_streak)
        else:
            stats.current_streak = 1
            # Records migrated from older documents may have longest < current
            stats.longest_streak = max(stats.longest_streak, stats.current_streak)

        stats.last_study_date = today


class StatsAccumulator:
    """Maintains lifetime counters"""

    def apply(
        self,
        stats: ProgressStats,
        activity_type: ActivityType,
        activity_data: ActivityData,
        time_spent: float
    ) -> None:
        stats.total_study_time += time_spent

        if _is_learned(activity_type, activity_data):
            stats.total_flashcards_learned += 1
        elif activity_type == ActivityType.QUIZ:
            stats.total_quizzes_taken += 1
            stats.average_quiz_score = running_mean(
                stats.average_quiz_score,
                stats.total_quizzes_taken,
                _percentage(activity_data)
            )
        # Chat sessions only contribute study time


class TopicProgressTracker:
    """Maintains per-topic counters"""

    def find(self, topics: list[TopicProgress], topic_name: str) -> Optional[TopicProgress]:
        """Find a topic by exact name."""
        return next((t for t in topics if t.topic == topic_name), None)

    def apply(
        self,
        topics: list[TopicProgress],
        topic_name: Optional[str],
        activity_type: ActivityType,
        activity_data: ActivityData,
        now: datetime
    ) -> Optional[TopicProgress]:
        """
        Apply a session to its topic, creating the topic on first use.

        Returns:
            The updated topic, or None when the session carries no topic
        """
        if not topic_name:
            return None

        topic = self.find(topics, topic_name)
        if topic is None:
            topic = TopicProgress(topic=topic_name, last_studied=now)
            topics.append(topic)

        topic.last_studied = as_utc(now)

        if _is_learned(activity_type, activity_data):
            topic.flashcards_count += 1
        elif activity_type == ActivityType.QUIZ:
            topic.quizzes_count += 1
            topic.average_score = running_mean(
                topic.average_score,
                topic.quizzes_count,
                _percentage(activity_data)
            )

        return topic


class WeeklyBucketTracker:
    """Maintains per-week counters, most recent week first"""

    def __init__(self, limit: int = 12):
        self.limit = limit

    def apply(
        self,
        weekly: list[WeeklyProgress],
        activity_type: ActivityType,
        activity_data: ActivityData,
        time_spent: float,
        sessions_before_insert: list[StudySession],
        now: datetime
    ) -> WeeklyProgress:
        """
        Apply a session to the bucket of the week containing `now`.

        Args:
            weekly: Buckets, newest first (mutated and truncated in place)
            activity_type: Session activity type
            activity_data: Session payload
            time_spent: Minutes
            sessions_before_insert: Session log as it was before this session
                was added; a study day is counted only when none of them
                falls on the same calendar day
            now: Session time

        Returns:
            The updated bucket
        """
        current_week = week_key(now)
        bucket = next((w for w in weekly if w.week == current_week), None)
        if bucket is None:
            bucket = WeeklyProgress(week=current_week)
            weekly.insert(0, bucket)

        studied_today = any(same_day(s.date, now) for s in sessions_before_insert)
        if not studied_today:
            bucket.study_days += 1

        bucket.total_sessions += 1
        bucket.total_time += time_spent

        if _is_learned(activity_type, activity_data):
            bucket.flashcards_learned += 1
        elif activity_type == ActivityType.QUIZ:
            bucket.quizzes_taken += 1
            bucket.average_score = running_mean(
                bucket.average_score,
                bucket.quizzes_taken,
                _percentage(activity_data)
            )

        del weekly[self.limit:]
        return bucket
