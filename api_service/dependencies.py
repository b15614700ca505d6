"""
Shared FastAPI dependencies.

Routes receive the pymongo Database through get_db so tests can swap in
an in-memory database with app.dependency_overrides.
"""

from pymongo.database import Database

from src.common.database import DatabaseClient

from .config import settings


def get_db() -> Database:
    """Database handle from the process-wide client, connecting on first use."""
    client = DatabaseClient()
    if not client.is_connected:
        client.connect(settings.mongodb_uri, settings.mongo_db_name)
    return client.db
