"""
Progress Record
Aggregate root holding one user's statistics, topics, session log and weekly buckets.
"""
import logging
from datetime import datetime
from typing import Any, Optional

from pydantic import Field, PrivateAttr

from study_progress.core.clock import utc_now
from study_progress.models.base import DocumentModel, UtcDatetime
from study_progress.models.progress import (
    STATS_DEFAULTS,
    ProgressStats,
    TopicProgress,
    WeeklyProgress
)
from study_progress.models.session import StudySession
from study_progress.utils.trackers import (
    StatsAccumulator,
    StreakTracker,
    TopicProgressTracker,
    WeeklyBucketTracker
)

logger = logging.getLogger(__name__)

RECENT_SESSIONS_LIMIT = 50
WEEKLY_PROGRESS_LIMIT = 12

_LIST_FIELDS = ("topicsStudied", "recentSessions", "weeklyProgress")


class ProgressRecord(DocumentModel):
    """
    Progress record for a single user.

    Created lazily on first access and only ever mutated through
    record_session(). Stored with the user id as both document id
    and partition key.
    """
    user_id: str
    stats: ProgressStats = Field(default_factory=ProgressStats)
    topics_studied: list[TopicProgress] = Field(default_factory=list)
    recent_sessions: list[StudySession] = Field(
        default_factory=list,
        description="Newest first"
    )
    weekly_progress: list[WeeklyProgress] = Field(
        default_factory=list,
        description="Newest first"
    )
    created_at: UtcDatetime = Field(default_factory=utc_now)
    updated_at: UtcDatetime = Field(default_factory=utc_now)

    _etag: Optional[str] = PrivateAttr(default=None)
    _migrated: bool = PrivateAttr(default=False)

    @classmethod
    def new(cls, user_id: str, now: Optional[datetime] = None) -> "ProgressRecord":
        """Create an empty record with zeroed stats."""
        now = now or utc_now()
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # ==================== STORAGE ====================

    @staticmethod
    def normalize(data: dict) -> tuple[dict, bool]:
        """
        Bring a stored document up to the current shape.

        Fills stats fields that are missing or null, and replaces missing
        lists with empty ones. Runs once on load so the trackers can assume
        a fully initialized record.

        Returns:
            (normalized copy, whether anything was filled in)
        """
        doc = dict(data)
        changed = False

        stats = doc.get("stats")
        stats = dict(stats) if isinstance(stats, dict) else {}
        if not isinstance(doc.get("stats"), dict):
            changed = True
        for key, default in STATS_DEFAULTS.items():
            if stats.get(key) is None:
                stats[key] = default
                changed = True
        doc["stats"] = stats

        for key in _LIST_FIELDS:
            if doc.get(key) is None:
                doc[key] = []
                changed = True

        if not doc.get("userId") and doc.get("id"):
            doc["userId"] = doc["id"]
            changed = True

        return doc, changed

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressRecord":
        """Create from a stored document, normalizing older shapes."""
        doc, changed = cls.normalize(data)
        record = cls.model_validate(doc)
        record._etag = data.get("_etag")
        record._migrated = changed
        if changed:
            logger.debug(f"Normalized stored progress record for user={record.user_id}")
        return record

    def to_dict(self, include_derived: bool = False, **kwargs: Any) -> dict:
        """
        Convert to dictionary.

        Args:
            include_derived: Include stats.totalFlashcardsCreated (responses only)
        """
        data = super().to_dict(**kwargs)
        data["stats"] = self.stats.to_dict(include_derived=include_derived)
        data["recentSessions"] = [s.to_dict() for s in self.recent_sessions]
        return data

    def to_document(self) -> dict:
        """Storage document keyed by user id."""
        doc = self.to_dict()
        doc["id"] = self.user_id
        return doc

    def mark_stored(self, document: dict) -> None:
        """Adopt the concurrency token of the document just written."""
        self._etag = document.get("_etag")
        self._migrated = False

    @property
    def etag(self) -> Optional[str]:
        """Concurrency token of the stored document (None if never stored)."""
        return self._etag

    @property
    def migrated(self) -> bool:
        """True when loading filled in missing fields."""
        return self._migrated

    # ==================== AGGREGATION ====================

    def find_topic(self, topic_name: str) -> Optional[TopicProgress]:
        return TopicProgressTracker().find(self.topics_studied, topic_name)

    def record_session(
        self,
        session: StudySession,
        recent_sessions_limit: int = RECENT_SESSIONS_LIMIT,
        weekly_progress_limit: int = WEEKLY_PROGRESS_LIMIT
    ) -> "ProgressRecord":
        """
        Fold a study session into the record.

        Updates lifetime stats, streak, topic (when the session has one) and
        the weekly bucket, then prepends the session to the log. The weekly
        study-day check reads the log as it was before this session.
        """
        now = session.date
        sessions_before_insert = list(self.recent_sessions)

        self.recent_sessions.insert(0, session)
        del self.recent_sessions[recent_sessions_limit:]

        StatsAccumulator().apply(
            self.stats,
            session.activity_type,
            session.activity_data,
            session.time_spent
        )
        StreakTracker().update(self.stats, now)
        if session.topic:
            TopicProgressTracker().apply(
                self.topics_studied,
                session.topic,
                session.activity_type,
                session.activity_data,
                now
            )
        WeeklyBucketTracker(limit=weekly_progress_limit).apply(
            self.weekly_progress,
            session.activity_type,
            session.activity_data,
            session.time_spent,
            sessions_before_insert,
            now
        )

        self.updated_at = now
        return self
