"""
Base repository class providing common CRUD operations.

All entity-specific repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from ghscore.data.database import get_database_manager
from ghscore.data.models.base import BaseDocument
from ghscore.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Subclasses must define the collection name and model class. Tenant
    scoping is expressed in the queries the subclasses build.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""
        pass

    def __init__(self) -> None:
        """Initialize repository with database connection."""
        self._db_manager = get_database_manager()

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_collection(self) -> Collection:
        return self._db_manager.get_collection(self.collection_name)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        """Convert list of MongoDB documents to Pydantic models."""
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to MongoDB document."""
        return model.model_dump_mongo()

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> Optional[ObjectId]:
        """Convert string to ObjectId if needed; invalid ids map to None."""
        if isinstance(id_value, ObjectId):
            return id_value
        if isinstance(id_value, str) and ObjectId.is_valid(id_value):
            return ObjectId(id_value)
        return None

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def create(self, model: T) -> T:
        """Create a new document."""
        collection = self._get_collection()
        now = datetime.utcnow()
        model.created_at = now
        model.updated_at = now
        document = self._to_document(model)

        result: InsertOneResult = collection.insert_one(document)
        model.id = result.inserted_id
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    def get_by_id(self, id_value: str | ObjectId) -> Optional[T]:
        """Get a document by its ID."""
        object_id = self._to_object_id(id_value)
        if object_id is None:
            return None
        document = self._get_collection().find_one({"_id": object_id})
        return self._to_model(document)

    def find(
        self,
        query: dict[str, Any],
        skip: int = 0,
        limit: int = 0,
        sort_by: Optional[str] = None,
        sort_order: int = -1,
        sort: Optional[list[tuple[str, int]]] = None,
    ) -> list[T]:
        """
        Find documents matching a query; limit 0 means no limit.

        ``sort`` takes a compound key list and overrides sort_by/sort_order.
        """
        cursor = self._get_collection().find(query)
        cursor = cursor.sort(sort or [(sort_by or "created_at", sort_order)])
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return self._to_models(list(cursor))

    def find_one(self, query: dict[str, Any]) -> Optional[T]:
        """Find a single document matching a query."""
        document = self._get_collection().find_one(query)
        return self._to_model(document)

    def update(self, id_value: str | ObjectId, update_data: dict[str, Any]) -> Optional[T]:
        """
        Update a document by ID.

        ``None`` values in update_data are written as nulls so that fields
        can be cleared. Returns the updated model, or None when no
        document matched.
        """
        object_id = self._to_object_id(id_value)
        if object_id is None:
            return None
        update_data["updated_at"] = datetime.utcnow()

        result: UpdateResult = self._get_collection().update_one(
            {"_id": object_id},
            {"$set": update_data},
        )

        if result.matched_count > 0:
            logger.debug(f"Updated {self.collection_name} document: {id_value}")
            return self.get_by_id(object_id)
        return None

    def delete(self, id_value: str | ObjectId) -> bool:
        """Delete a document by ID."""
        object_id = self._to_object_id(id_value)
        if object_id is None:
            return False
        result: DeleteResult = self._get_collection().delete_one({"_id": object_id})
        if result.deleted_count > 0:
            logger.debug(f"Deleted {self.collection_name} document: {id_value}")
            return True
        return False

    def count(self, query: Optional[dict[str, Any]] = None) -> int:
        """Count documents matching a query."""
        return self._get_collection().count_documents(query or {})

    def exists(self, query: dict[str, Any]) -> bool:
        """Check if any document matches the query."""
        return self._get_collection().count_documents(query, limit=1) > 0

    # -------------------------------------------------------------------------
    # Bulk Operations
    # -------------------------------------------------------------------------

    def delete_many(self, query: dict[str, Any]) -> int:
        """Delete every document matching a query."""
        result = self._get_collection().delete_many(query)
        logger.debug(f"Deleted {result.deleted_count} {self.collection_name} documents")
        return result.deleted_count


class TenantRepository(BaseRepository[T]):
    """Repository whose documents are owned by a tenant."""

    def get_for_tenant(self, tenant_id: str, id_value: str | ObjectId) -> Optional[T]:
        """Get a document by ID, only if it belongs to the tenant."""
        object_id = self._to_object_id(id_value)
        if object_id is None:
            return None
        return self.find_one({"_id": object_id, "tenant_id": tenant_id})

    def list_for_tenant(
        self,
        tenant_id: str,
        filters: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> list[T]:
        query = {"tenant_id": tenant_id, **(filters or {})}
        return self.find(query, **kwargs)
