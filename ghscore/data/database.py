"""
Database connection manager for GH Score.

Provides MongoDB connection management through a shared PyMongo client.
"""

from typing import Any, Optional
from urllib.parse import quote_plus

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from ghscore.utils.config import get_settings
from ghscore.utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages MongoDB database connections.

    Implements singleton pattern for connection reuse. A pre-built client
    can be injected with use_client(), which is how tests run against
    mongomock.
    """

    _instance: Optional["DatabaseManager"] = None
    _client: Optional[MongoClient] = None

    def __new__(cls) -> "DatabaseManager":
        """Ensure singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize database manager with settings."""
        if hasattr(self, "_initialized") and self._initialized:
            return

        self._settings = get_settings()
        self._db_name = self._settings.database.name
        self._uri = self._build_uri()
        self._initialized = True

    def _build_uri(self) -> str:
        """
        Build MongoDB connection URI from settings.

        Credentials are URL-encoded so special characters survive.
        """
        db_settings = self._settings.database

        host = db_settings.host.strip()
        if not host or any(c in host for c in [";", "&", "|", "$", "`"]):
            raise ValueError(f"Invalid database host: {host}")

        auth = ""
        if db_settings.username and db_settings.password:
            encoded_user = quote_plus(db_settings.username)
            encoded_pass = quote_plus(db_settings.password)
            auth = f"{encoded_user}:{encoded_pass}@"

        return f"mongodb://{auth}{host}:{db_settings.port}"

    # -------------------------------------------------------------------------
    # Client
    # -------------------------------------------------------------------------

    def use_client(self, client: Any, db_name: Optional[str] = None) -> None:
        """Install an externally created client (e.g. mongomock)."""
        self._client = client
        if db_name:
            self._db_name = db_name

    def get_client(self) -> MongoClient:
        """Get or create the MongoDB client."""
        if self._client is None:
            logger.info("Creating MongoDB client")
            timeout = self._settings.database.server_selection_timeout_ms
            try:
                self._client = MongoClient(
                    self._uri,
                    serverSelectionTimeoutMS=timeout,
                    connectTimeoutMS=timeout,
                    maxPoolSize=50,
                    minPoolSize=5,
                )
            except Exception as e:
                self._client = None
                logger.error(f"Failed to create client: {e}")
                raise
        return self._client

    def get_database(self) -> Database:
        """Get database instance."""
        return self.get_client()[self._db_name]

    def get_collection(self, collection_name: str) -> Any:
        """Get a collection by name."""
        return self.get_database()[collection_name]

    def check_connection(self) -> bool:
        """Check if the connection is healthy."""
        try:
            self.get_client().admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Connection check failed: {e}")
            self._client = None
            return False

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the client connection."""
        if self._client:
            logger.info("Closing MongoDB client")
            self._client.close()
            self._client = None

    # -------------------------------------------------------------------------
    # Index Management
    # -------------------------------------------------------------------------

    def ensure_indexes(self) -> None:
        """Create indexes for all collections."""
        logger.info("Ensuring database indexes")

        vacancies = self.get_collection("vacancies")
        vacancies.create_index(
            [("tenant_id", ASCENDING), ("requisition_code", ASCENDING)], unique=True
        )
        vacancies.create_index([("tenant_id", ASCENDING), ("state", ASCENDING)])
        vacancies.create_index("site_id")
        vacancies.create_index([("opened_at", DESCENDING)])

        candidates = self.get_collection("candidates")
        candidates.create_index([("tenant_id", ASCENDING), ("vacancy_id", ASCENDING)])
        candidates.create_index("stage")
        candidates.create_index("created_at")

        applications = self.get_collection("applications")
        applications.create_index("tracking_token", unique=True)
        applications.create_index("candidate_id")
        applications.create_index([("tenant_id", ASCENDING), ("vacancy_id", ASCENDING)])

        notifications = self.get_collection("notifications")
        notifications.create_index(
            [("tenant_id", ASCENDING), ("read", ASCENDING), ("created_at", DESCENDING)]
        )

        sites = self.get_collection("sites")
        sites.create_index([("tenant_id", ASCENDING), ("company_id", ASCENDING)])

        companies = self.get_collection("companies")
        companies.create_index("tenant_id")

        users = self.get_collection("users")
        users.create_index("email", unique=True)

        sessions = self.get_collection("sessions")
        sessions.create_index("token", unique=True)
        sessions.create_index("expires_at")

        logger.info("Database indexes created successfully")


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager
