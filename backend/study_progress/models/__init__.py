"""
Pydantic Models Module
Contains the session event and the counters kept in a progress record.
The record itself lives in study_progress.models.record.
"""
from study_progress.models.session import (
    ActivityType, StudySession,
    FlashcardActivityData, QuizActivityData, ChatActivityData
)
from study_progress.models.progress import ProgressStats, TopicProgress, WeeklyProgress

__all__ = [
    "ActivityType", "StudySession",
    "FlashcardActivityData", "QuizActivityData", "ChatActivityData",
    "ProgressStats", "TopicProgress", "WeeklyProgress"
]
