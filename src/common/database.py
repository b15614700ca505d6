"""
MongoDB database utilities for Job Copilot.

Provides connection management and index creation
for users, jobs, resumes, applications and per-user analytics.
"""

from typing import Dict, List, Optional, Tuple
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import OperationFailure
import logging

logger = logging.getLogger(__name__)

# Collection names
USERS = "users"
JOBS = "jobs"
RESUMES = "resumes"
APPLICATIONS = "applications"
USER_ANALYTICS = "user_analytics"

IndexSpec = Tuple[str, list, dict]

INDEXES: Dict[str, List[IndexSpec]] = {
    USERS: [
        # One account per email; also closes the register race
        ("email_unique", [("email", ASCENDING)], {"unique": True}),
        ("role", [("role", ASCENDING)], {}),
    ],
    JOBS: [
        ("active_posted", [("isActive", ASCENDING), ("postedDate", DESCENDING)], {}),
        ("source_source_id", [("source", ASCENDING), ("sourceId", ASCENDING)], {}),
    ],
    RESUMES: [
        ("user_updated", [("user", ASCENDING), ("updatedAt", DESCENDING)], {}),
    ],
    APPLICATIONS: [
        # One application per (user, job)
        ("user_job_unique", [("user", ASCENDING), ("job", ASCENDING)], {"unique": True}),
        ("user_applied", [("user", ASCENDING), ("appliedDate", DESCENDING)], {}),
    ],
    USER_ANALYTICS: [
        ("user_unique", [("user", ASCENDING)], {"unique": True}),
    ],
}


def ensure_indexes(db: Database) -> None:
    """
    Create all required indexes.

    Called once at startup. Unique indexes are what enforce the
    one-account-per-email and one-application-per-job invariants.
    """
    logger.info("Creating indexes...")

    for collection_name, specs in INDEXES.items():
        for name, keys, options in specs:
            try:
                db[collection_name].create_index(keys, name=name, **options)
                logger.info(f"✓ Created index: {collection_name}.{name}")
            except OperationFailure as e:
                logger.warning(f"Index {collection_name}.{name} may already exist: {e}")

    logger.info("✓ All indexes created")


class DatabaseClient:
    """
    MongoDB client for Job Copilot.

    Manages the process-wide connection.
    """

    _instance: Optional['DatabaseClient'] = None
    _client: Optional[MongoClient] = None
    _db: Optional[Database] = None

    def __new__(cls, *args, **kwargs):
        """Singleton pattern - only one database client instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def connect(self, uri: str, db_name: str) -> None:
        """
        Connect to MongoDB.

        Raises:
            ValueError: If uri is empty
        """
        if not uri:
            raise ValueError("MONGODB_URI not configured")

        self._client = MongoClient(uri)
        self._db = self._client[db_name]
        logger.info(f"Connected to MongoDB: {self._db.name}")

    def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("Disconnected from MongoDB")

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    @property
    def db(self) -> Database:
        """Get the database instance."""
        if self._db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._db
