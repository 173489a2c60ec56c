"""
Study Session Models
Defines the session event submitted for aggregation and its per-type payloads.
"""
from enum import Enum
from typing import Any, Optional, Union

from pydantic import ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from study_progress.core.clock import utc_now
from study_progress.models.base import DocumentModel, UtcDatetime


class ActivityType(str, Enum):
    """Type of study activity"""
    FLASHCARD = "flashcard"
    QUIZ = "quiz"
    CHAT = "chat"


class FlashcardActivityData(DocumentModel):
    """Payload of a flashcard review"""
    flashcard_id: Optional[str] = None
    is_learned: bool = False
    topic: Optional[str] = None


class QuizActivityData(DocumentModel):
    """Payload of a quiz attempt"""
    quiz_id: Optional[str] = None
    score: Optional[float] = Field(
        default=None,
        description="Raw score (correct answers); only the dashboard reads it"
    )
    total_questions: Optional[int] = Field(default=None, ge=0)
    percentage: float = Field(
        default=0,
        ge=0,
        le=100,
        description="Score as a percentage; a missing value counts as 0"
    )
    topic: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _missing_percentage_is_zero(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("percentage") is None:
            data = {**data, "percentage": 0}
        return data


class ChatActivityData(DocumentModel):
    """Payload of a chat interaction"""
    topic: Optional[str] = None
    content: Optional[str] = None


ActivityData = Union[FlashcardActivityData, QuizActivityData, ChatActivityData]

ACTIVITY_DATA_MODELS: dict[ActivityType, type[DocumentModel]] = {
    ActivityType.FLASHCARD: FlashcardActivityData,
    ActivityType.QUIZ: QuizActivityData,
    ActivityType.CHAT: ChatActivityData,
}


class StudySession(DocumentModel):
    """One completed unit of study activity. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    activity_type: ActivityType
    activity_data: ActivityData
    time_spent: float = Field(default=0, ge=0, description="Minutes")
    date: UtcDatetime = Field(default_factory=utc_now)

    @model_validator(mode="before")
    @classmethod
    def _parse_activity_data(cls, data: Any) -> Any:
        """Parse activity_data with the payload model matching activity_type."""
        if not isinstance(data, dict):
            return data

        raw_type = data.get("activity_type", data.get("activityType"))
        try:
            activity_type = ActivityType(raw_type)
        except ValueError:
            # Leave it to field validation to report the bad type
            return data

        key = "activity_data" if "activity_data" in data else "activityData"
        payload = data.get(key)
        if payload is None:
            payload = {}
        model = ACTIVITY_DATA_MODELS[activity_type]
        if not isinstance(payload, model):
            try:
                payload = model.model_validate(payload)
            except PydanticValidationError as e:
                raise ValueError(f"Invalid {activity_type.value} activity data: {e}") from e
        return {**data, key: payload}

    @property
    def topic(self) -> Optional[str]:
        return self.activity_data.topic

    @property
    def is_learned(self) -> bool:
        return self.activity_type == ActivityType.FLASHCARD and self.activity_data.is_learned

    @property
    def is_quiz(self) -> bool:
        return self.activity_type == ActivityType.QUIZ

    def to_dict(self, **kwargs: Any) -> dict:
        """Convert to dictionary for storage (unset payload fields omitted)"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True, **kwargs)
