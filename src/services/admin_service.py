"""
Admin Service

Platform-wide listings and user removal for administrators. Deleting a
user leaves their resumes, applications and analytics in place.
"""

import logging
from typing import Any, Dict, List

from pymongo import DESCENDING
from pymongo.database import Database

from src.common.database import APPLICATIONS, JOBS, RESUMES, USERS
from src.common.error_handling import NotFoundError
from src.common.utils import maybe_object_id

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


class AdminService:
    """Read-everything operations; callers must already be admin-gated."""

    def __init__(self, db: Database):
        self.db = db
        self.users = db[USERS]
        self.resumes = db[RESUMES]
        self.applications = db[APPLICATIONS]
        self.jobs = db[JOBS]

    def list_users(self) -> List[Dict[str, Any]]:
        return list(self.users.find({}, {"password": 0}).sort("date", DESCENDING))

    def list_resumes(self) -> List[Dict[str, Any]]:
        return list(self.resumes.find().sort("createdAt", DESCENDING))

    def list_applications(self) -> List[Dict[str, Any]]:
        return list(self.applications.find().sort("appliedDate", DESCENDING))

    def list_jobs(self) -> List[Dict[str, Any]]:
        return list(self.jobs.find().sort("createdAt", DESCENDING))

    def delete_user(self, user_id: str) -> None:
        """
        Raises:
            NotFoundError: Unknown or malformed user id
        """
        oid = maybe_object_id(user_id)
        if oid is None:
            raise NotFoundError(USER_NOT_FOUND)
        result = self.users.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(USER_NOT_FOUND)
        logger.info(f"Admin removed user {oid}")
