"""
Utilities Module
Contains week numbering and the progress accumulators.
"""
from study_progress.utils.week_key import week_key
from study_progress.utils.trackers import (
    StreakTracker,
    StatsAccumulator,
    TopicProgressTracker,
    WeeklyBucketTracker,
    running_mean
)

__all__ = [
    "week_key",
    "StreakTracker", "StatsAccumulator", "TopicProgressTracker", "WeeklyBucketTracker",
    "running_mean"
]
