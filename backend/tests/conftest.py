"""
Pytest configuration and fixtures for tests.
"""
import copy
import itertools
import pytest
from unittest.mock import AsyncMock
from datetime import datetime, timedelta, timezone

from study_progress.config import Settings
from study_progress.core.exceptions import PersistenceError


class FakeClock:
    """Deterministic clock; call it to get the current time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def test_settings():
    """Settings for tests (no .env file)."""
    return Settings(
        _env_file=None,
        COSMOS_DB_ENDPOINT="https://test.documents.azure.com",
        COSMOS_DB_KEY="test-cosmos-key",
        COSMOS_DB_DATABASE_NAME="test_db"
    )


@pytest.fixture
def base_time():
    """Wednesday, 12 March 2025, 10:00 UTC."""
    return datetime(2025, 3, 12, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(base_time):
    return FakeClock(base_time)


@pytest.fixture
def progress_store():
    """Stored progress documents by user id."""
    return {}


@pytest.fixture
def mock_cosmos_service(progress_store):
    """
    Mock Cosmos DB service backed by progress_store.

    create/replace behave like Cosmos: each write gets a new _etag and a
    replace with a stale etag fails with a conflict.
    """
    service = AsyncMock()
    etags = itertools.count(1)

    def get_progress(user_id):
        document = progress_store.get(user_id)
        return copy.deepcopy(document) if document else None

    def create_progress(document):
        if document["id"] in progress_store:
            raise PersistenceError("Item already exists in progress", conflict=True)
        stored = {**copy.deepcopy(document), "partitionKey": document["id"], "_etag": f"etag-{next(etags)}"}
        progress_store[document["id"]] = stored
        return copy.deepcopy(stored)

    def replace_progress(document, etag=None):
        current = progress_store.get(document["id"])
        if current is None:
            raise PersistenceError("Failed to replace item in progress")
        if etag and current["_etag"] != etag:
            raise PersistenceError("Item in progress was modified concurrently", conflict=True)
        stored = {**copy.deepcopy(document), "partitionKey": document["id"], "_etag": f"etag-{next(etags)}"}
        progress_store[document["id"]] = stored
        return copy.deepcopy(stored)

    service.get_progress.side_effect = get_progress
    service.create_progress.side_effect = create_progress
    service.replace_progress.side_effect = replace_progress
    service.count_flashcards_for_user.return_value = 0
    return service


@pytest.fixture
def legacy_progress_document():
    """Progress document written before weekly buckets and some stats existed."""
    return {
        "id": "legacy_user",
        "userId": "legacy_user",
        "partitionKey": "legacy_user",
        "_etag": "etag-legacy",
        "stats": {
            "totalFlashcardsLearned": 4,
            "totalQuizzesTaken": 2,
            "averageQuizScore": 75,
            "currentStreak": None,
            "lastStudyDate": "2025-03-11T00:00:00.000Z"
        },
        "topicsStudied": [
            {
                "topic": "chemistry",
                "flashcardsCount": 4,
                "quizzesCount": 2,
                "averageScore": 75,
                "lastStudied": "2025-03-11T18:30:00.000Z",
                "_id": "66a0c0ffee"
            }
        ],
        "recentSessions": [
            {
                "activityType": "quiz",
                "activityData": {"quizId": "q1", "score": 6, "totalQuestions": 8, "percentage": 75},
                "timeSpent": 12,
                "date": "2025-03-11T18:30:00.000Z",
                "_id": "66a0c0ffef"
            }
        ],
        "createdAt": "2025-03-01T09:00:00.000Z",
        "updatedAt": "2025-03-11T18:30:00.000Z"
    }
