"""
Progress Models
Defines the aggregate counters kept inside a progress record.
"""
from typing import Any, Optional

from pydantic import Field

from study_progress.core.clock import utc_now
from study_progress.models.base import DocumentModel, UtcDatetime


class ProgressStats(DocumentModel):
    """Lifetime statistics for one user"""
    total_flashcards_learned: int = Field(default=0, ge=0)
    total_quizzes_taken: int = Field(default=0, ge=0)
    average_quiz_score: float = Field(default=0, description="Running mean of quiz percentages")
    total_study_time: float = Field(default=0, ge=0, description="Minutes")
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_study_date: Optional[UtcDatetime] = None

    # Derived on every read from the flashcards container, never stored
    total_flashcards_created: Optional[int] = Field(default=None, exclude=True)

    def to_dict(self, include_derived: bool = False, **kwargs: Any) -> dict:
        """Convert to dictionary; the derived flashcard count only on request"""
        data = super().to_dict(**kwargs)
        if include_derived and self.total_flashcards_created is not None:
            data["totalFlashcardsCreated"] = self.total_flashcards_created
        return data


# Defaults applied to stored stats with missing or null fields
STATS_DEFAULTS: dict[str, Any] = {
    "totalFlashcardsLearned": 0,
    "totalQuizzesTaken": 0,
    "averageQuizScore": 0,
    "totalStudyTime": 0,
    "currentStreak": 0,
    "longestStreak": 0,
}


class TopicProgress(DocumentModel):
    """Aggregate counters for one topic"""
    topic: str
    flashcards_count: int = Field(default=0, ge=0)
    quizzes_count: int = Field(default=0, ge=0)
    average_score: float = 0
    last_studied: UtcDatetime = Field(default_factory=utc_now)


class WeeklyProgress(DocumentModel):
    """Aggregate counters for one calendar week (see utils.week_key)"""
    week: str = Field(..., description="Week key, e.g. 2025-W32")
    study_days: int = Field(default=0, ge=0)
    total_sessions: int = Field(default=0, ge=0)
    total_time: float = Field(default=0, ge=0)
    flashcards_learned: int = Field(default=0, ge=0)
    quizzes_taken: int = Field(default=0, ge=0)
    average_score: float = 0
