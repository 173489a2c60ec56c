"""
Base model for stored documents.
Field names are snake_case in Python and camelCase in the document store.
"""
from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from study_progress.core.clock import as_utc


# Datetimes are always handled as aware UTC values
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class DocumentModel(BaseModel):
    """Model stored as a camelCase JSON document"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )

    def to_dict(self, **kwargs: Any) -> dict:
        """Convert to dictionary for storage"""
        return self.model_dump(by_alias=True, mode="json", **kwargs)

    @classmethod
    def from_dict(cls, data: dict):
        """Create from dictionary"""
        return cls.model_validate(data)
