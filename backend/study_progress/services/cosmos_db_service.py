"""
Azure Cosmos DB Service
Provides persistence for progress records and read access to flashcard sets.
All containers use the user id as partition key for efficient queries.

Every SDK failure (HTTP errors, timeouts, connection problems) is surfaced
as PersistenceError. Lost optimistic-concurrency races are flagged with
`conflict=True` so callers can reload and retry.
"""
import logging
from typing import Optional

from azure.core import MatchConditions
from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient, exceptions

from study_progress.config import Settings, get_settings
from study_progress.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class CosmosDBService:
    """Service for Azure Cosmos DB operations"""

    def __init__(self, settings: Settings | None = None, client: CosmosClient | None = None):
        self.settings = settings or get_settings()
        self._client = client
        self.database_name = self.settings.COSMOS_DB_DATABASE_NAME
        self.database = None
        self.containers = {}
        self.timeout = self.settings.COSMOS_DB_TIMEOUT_SECONDS

        # Container names from settings
        self.container_names = {
            "progress": self.settings.COSMOS_DB_PROGRESS_CONTAINER,
            "flashcards": self.settings.COSMOS_DB_FLASHCARDS_CONTAINER
        }

    @property
    def client(self) -> CosmosClient:
        """Cosmos client, created on first use."""
        if self._client is None:
            if not self.settings.COSMOS_DB_ENDPOINT or not self.settings.COSMOS_DB_KEY:
                raise PersistenceError("Cosmos DB endpoint and key must be configured")
            self._client = CosmosClient(
                url=self.settings.COSMOS_DB_ENDPOINT,
                credential=self.settings.COSMOS_DB_KEY
            )
        return self._client

    def _get_container(self, container_key: str):
        """Get a container by key."""
        if container_key not in self.containers:
            # Lazy initialization
            container_name = self.container_names.get(container_key)
            if not container_name:
                raise ValueError(f"Unknown container key: {container_key}")
            if not self.database:
                self.database = self.client.get_database_client(self.database_name)
            self.containers[container_key] = self.database.get_container_client(container_name)
        return self.containers[container_key]

    # ==================== GENERIC CRUD OPERATIONS ====================

    async def create_item(
        self,
        container_key: str,
        item: dict,
        partition_key: str
    ) -> dict:
        """Create a new item in a container."""
        try:
            container = self._get_container(container_key)
            item["partitionKey"] = partition_key
            result = container.create_item(body=item, timeout=self.timeout)
            logger.debug(f"Created item in {container_key}: {item.get('id')}")
            return result
        except exceptions.CosmosResourceExistsError as e:
            logger.warning(f"Item already exists in {container_key}: {item.get('id')}")
            raise PersistenceError(
                f"Item already exists in {container_key}",
                conflict=True,
                details={"id": item.get("id")}
            ) from e
        except AzureError as e:
            logger.error(f"Create item error in {container_key}: {e}")
            raise PersistenceError(f"Failed to create item in {container_key}", details={"error": str(e)}) from e

    async def get_item(
        self,
        container_key: str,
        item_id: str,
        partition_key: str
    ) -> Optional[dict]:
        """Get an item by ID and partition key."""
        try:
            container = self._get_container(container_key)
            return container.read_item(item=item_id, partition_key=partition_key, timeout=self.timeout)
        except exceptions.CosmosResourceNotFoundError:
            return None
        except AzureError as e:
            logger.error(f"Get item error in {container_key}: {e}")
            raise PersistenceError(f"Failed to read item from {container_key}", details={"error": str(e)}) from e

    async def replace_item(
        self,
        container_key: str,
        item: dict,
        partition_key: str,
        etag: Optional[str] = None
    ) -> dict:
        """
        Replace an existing item.

        When etag is given the write only succeeds if the stored item is
        unchanged since it was read.
        """
        try:
            container = self._get_container(container_key)
            item["partitionKey"] = partition_key
            kwargs = {"timeout": self.timeout}
            if etag:
                kwargs["etag"] = etag
                kwargs["match_condition"] = MatchConditions.IfNotModified
            result = container.replace_item(item=item["id"], body=item, **kwargs)
            logger.debug(f"Replaced item in {container_key}: {item['id']}")
            return result
        except exceptions.CosmosAccessConditionFailedError as e:
            logger.warning(f"Concurrent update detected in {container_key}: {item.get('id')}")
            raise PersistenceError(
                f"Item in {container_key} was modified concurrently",
                conflict=True,
                details={"id": item.get("id")}
            ) from e
        except AzureError as e:
            logger.error(f"Replace item error in {container_key}: {e}")
            raise PersistenceError(f"Failed to replace item in {container_key}", details={"error": str(e)}) from e

    async def query_items(
        self,
        container_key: str,
        query: str,
        parameters: Optional[list] = None,
        partition_key: Optional[str] = None
    ) -> list:
        """Query items using SQL."""
        try:
            container = self._get_container(container_key)
            items = list(container.query_items(
                query=query,
                parameters=parameters or [],
                partition_key=partition_key,
                enable_cross_partition_query=partition_key is None,
                timeout=self.timeout
            ))
            return items
        except AzureError as e:
            logger.error(f"Query error in {container_key}: {e}")
            raise PersistenceError(f"Query failed in {container_key}", details={"error": str(e)}) from e

    # ==================== PROGRESS ====================

    async def get_progress(self, user_id: str) -> Optional[dict]:
        """Get the stored progress document for a user."""
        return await self.get_item("progress", user_id, user_id)

    async def create_progress(self, document: dict) -> dict:
        """Store a new progress document. Fails with a conflict if one exists."""
        return await self.create_item("progress", document, document["id"])

    async def replace_progress(self, document: dict, etag: Optional[str] = None) -> dict:
        """Overwrite a progress document, guarded by its etag."""
        return await self.replace_item("progress", document, document["id"], etag)

    # ==================== FLASHCARDS ====================

    async def count_flashcards_for_user(self, user_id: str) -> int:
        """Count the cards across all flashcard sets owned by a user."""
        query = """
            SELECT VALUE SUM(IS_ARRAY(c.flashcards) ? ARRAY_LENGTH(c.flashcards) : 0)
            FROM c
            WHERE c.userId = @user_id
        """
        parameters = [{"name": "@user_id", "value": user_id}]
        result = await self.query_items("flashcards", query, parameters, user_id)
        return int(result[0]) if result and result[0] else 0


# Singleton instance
cosmos_db_service = CosmosDBService()
