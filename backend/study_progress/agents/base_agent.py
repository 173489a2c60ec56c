"""
Base Agent
Abstract base class for the progress engine's agents.
Provides common interface, logging, and service access.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from study_progress.config import Settings, get_settings
from study_progress.core.clock import Clock, utc_now
from study_progress.core.exceptions import PersistenceError
from study_progress.models.record import ProgressRecord
from study_progress.services.cosmos_db_service import CosmosDBService, cosmos_db_service


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Each agent should:
    - Handle one concern of the progress engine
    - Reach the document store only through db_service
    - Read the time only through clock
    - Log its operations for debugging
    """

    def __init__(
        self,
        settings: Settings | None = None,
        db_service: CosmosDBService | None = None,
        clock: Clock | None = None
    ):
        """
        Initialize base agent with services.

        Args:
            settings: Application settings (uses singleton if not provided)
            db_service: Cosmos DB service (uses singleton if not provided)
            clock: Callable returning the current time (defaults to UTC now)
        """
        self.settings = settings or get_settings()
        self.db_service = db_service or cosmos_db_service
        self.clock = clock or utc_now

        # Setup logging for this agent
        self.logger = logging.getLogger(f"agent.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent name for logging and identification"""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Agent description for documentation"""
        pass

    async def load_progress(self, user_id: str) -> Optional[ProgressRecord]:
        """
        Load a user's progress record.

        Returns:
            The normalized record, or None if the user has none yet

        Raises:
            PersistenceError: Store failure or a stored document that cannot be parsed
        """
        document = await self.db_service.get_progress(user_id)
        if document is None:
            return None
        try:
            return ProgressRecord.from_dict(document)
        except PydanticValidationError as e:
            self.log_error(e, {"user_id": user_id})
            raise PersistenceError(
                "Stored progress record is malformed",
                details={"user_id": user_id}
            ) from e

    async def count_flashcards(self, user_id: str) -> int:
        """Live count of flashcards the user has created."""
        return await self.db_service.count_flashcards_for_user(user_id)

    def log_start(self, context: dict | None = None) -> None:
        """Log agent starting to process"""
        msg = f"[{self.name}] Starting processing"
        if context:
            msg += f" - Context: {context}"
        self.logger.info(msg)

    def log_complete(self, result: Any = None) -> None:
        """Log agent completed processing"""
        msg = f"[{self.name}] Processing complete"
        if result:
            msg += f" - Result: {result}"
        self.logger.info(msg)

    def log_error(self, error: Exception, context: dict | None = None) -> None:
        """Log agent error"""
        msg = f"[{self.name}] Error: {str(error)}"
        if context:
            msg += f" - Context: {context}"
        self.logger.error(msg, exc_info=True)

    def log_debug(self, message: str, data: Any = None) -> None:
        """Log debug information"""
        msg = f"[{self.name}] {message}"
        if data:
            msg += f" - Data: {data}"
        self.logger.debug(msg)
