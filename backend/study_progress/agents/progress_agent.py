"""
Progress Agent
Records study sessions against a user's progress record.

Responsibilities:
- Validate incoming session events before anything is loaded
- Create progress records lazily on first access
- Fold sessions into stats, streak, topics and weekly buckets
- Persist with optimistic concurrency, retrying lost races
- Attach the live flashcards-created count to returned records
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from study_progress.agents.base_agent import BaseAgent
from study_progress.config import Settings
from study_progress.core.clock import Clock
from study_progress.core.exceptions import PersistenceError, ValidationError
from study_progress.core.locks import UserLockRegistry
from study_progress.models.record import ProgressRecord
from study_progress.models.session import ActivityType, StudySession
from study_progress.services.cosmos_db_service import CosmosDBService


class ProgressAgent(BaseAgent):
    """
    Progress Agent for recording study activity.

    Read-modify-write of one user's record is serialized by a per-user
    lock; writes from other processes are caught by the etag check and
    the session is re-applied to the fresh record.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        db_service: CosmosDBService | None = None,
        clock: Clock | None = None,
        locks: UserLockRegistry | None = None
    ):
        super().__init__(settings=settings, db_service=db_service, clock=clock)
        self.locks = locks or UserLockRegistry()

    @property
    def name(self) -> str:
        return "progress"

    @property
    def description(self) -> str:
        return "Records study sessions and tracks streaks, topic and weekly progress"

    def build_session(
        self,
        activity_type: str | ActivityType,
        activity_data: Optional[dict],
        time_spent: Optional[float],
        now: datetime
    ) -> StudySession:
        """
        Validate a session event.

        Raises:
            ValidationError: Unknown activity type or malformed payload
        """
        allowed = [t.value for t in ActivityType]
        if activity_type not in allowed:
            raise ValidationError(
                "Invalid activity type",
                details={"activity_type": activity_type, "allowed": allowed}
            )

        try:
            return StudySession(
                activity_type=activity_type,
                activity_data=activity_data or {},
                time_spent=time_spent if time_spent is not None else 0,
                date=now
            )
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {ActivityType(activity_type).value} session",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e

    async def save_progress(self, record: ProgressRecord) -> ProgressRecord:
        """Create or replace the stored record (etag-guarded)."""
        document = record.to_document()
        if record.etag is None:
            stored = await self.db_service.create_progress(document)
        else:
            stored = await self.db_service.replace_progress(document, record.etag)
        record.mark_stored(stored)
        return record

    async def get_or_init_progress(self, user_id: str) -> ProgressRecord:
        """
        Get a user's progress record, creating an empty one if needed.

        Counters are never changed here; older documents with missing
        stats fields are normalized and written back once.
        """
        self.log_start({"user_id": user_id})

        async with self.locks.get(user_id):
            record = await self.load_progress(user_id)

            if record is None:
                record = ProgressRecord.new(user_id, self.clock())
                try:
                    await self.save_progress(record)
                    self.logger.info(f"Created new progress record for user={user_id}")
                except PersistenceError as e:
                    if not e.conflict:
                        raise
                    # Created concurrently by another process
                    record = await self.load_progress(user_id)
                    if record is None:
                        raise
            elif record.migrated:
                try:
                    await self.save_progress(record)
                except PersistenceError as e:
                    if not e.conflict:
                        raise
                    self.log_debug("Normalized record changed concurrently, reloading", {"user_id": user_id})
                    record = await self.load_progress(user_id) or record

        record.stats.total_flashcards_created = await self.count_flashcards(user_id)
        self.log_complete({"user_id": user_id})
        return record

    async def record_session(
        self,
        user_id: str,
        activity_type: str | ActivityType,
        activity_data: Optional[dict[str, Any]] = None,
        time_spent: Optional[float] = 0
    ) -> ProgressRecord:
        """
        Record a completed study session.

        Args:
            user_id: Owner of the progress record
            activity_type: flashcard, quiz or chat
            activity_data: Payload for the activity type
            time_spent: Minutes spent (defaults to 0)

        Returns:
            The updated record, with stats.total_flashcards_created filled in

        Raises:
            ValidationError: Invalid input; nothing was loaded or changed
            PersistenceError: The record could not be saved; nothing was changed
        """
        session = self.build_session(activity_type, activity_data, time_spent, self.clock())
        self.log_start({
            "user_id": user_id,
            "activity_type": session.activity_type.value,
        })

        cards_created = await self.count_flashcards(user_id)
        max_attempts = max(1, self.settings.PROGRESS_SAVE_MAX_ATTEMPTS)

        async with self.locks.get(user_id):
            for attempt in range(1, max_attempts + 1):
                record = await self.load_progress(user_id)
                if record is None:
                    record = ProgressRecord.new(user_id, session.date)

                record.record_session(
                    session,
                    recent_sessions_limit=self.settings.RECENT_SESSIONS_LIMIT,
                    weekly_progress_limit=self.settings.WEEKLY_PROGRESS_LIMIT
                )

                try:
                    await self.save_progress(record)
                    break
                except PersistenceError as e:
                    if not e.conflict or attempt == max_attempts:
                        self.log_error(e, {"user_id": user_id, "attempt": attempt})
                        raise
                    self.log_debug("Concurrent update, re-applying session", {
                        "user_id": user_id,
                        "attempt": attempt
                    })

        record.stats.total_flashcards_created = cards_created
        self.log_complete({
            "user_id": user_id,
            "streak": record.stats.current_streak,
            "sessions": len(record.recent_sessions)
        })
        return record


# Singleton instance
progress_agent = ProgressAgent()
