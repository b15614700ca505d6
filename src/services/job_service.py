"""
Job Service

Shared job catalog: public filtered listing with pagination, CRUD for
authenticated users, external import with (source, sourceId)
de-duplication, and a placeholder external search.

Architecture:
    - Only active jobs are listed
    - Jobs are not owned; any authenticated user may edit or delete one
    - Applying to a job is delegated to ApplicationService

Usage:
    service = JobService(db)
    page = service.search(JobQuery(search="python", page=2, limit=10))
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from src.common.database import JOBS
from src.common.error_handling import DuplicateRecordError, NotFoundError
from src.common.types import JOB_SOURCES
from src.common.utils import case_insensitive_pattern, parse_object_id, utcnow

logger = logging.getLogger(__name__)

JOB_NOT_FOUND = "Job not found"

# Fields a PUT may set; falsy values are ignored
UPDATABLE_FIELDS = (
    "title", "company", "location", "description", "requirements", "skills",
    "salary", "jobType", "industry", "experienceLevel", "educationLevel",
    "applicationUrl", "expiryDate",
)

# Stand-in for a third-party job board
EXTERNAL_JOBS: List[Dict[str, str]] = [
    {
        "id": "ext-1",
        "title": "Software Engineer",
        "company": "Tech Company",
        "location": "Remote",
        "description": "Job description here...",
        "url": "https://example.com/job/1",
        "source": "External API",
    },
    {
        "id": "ext-2",
        "title": "Product Manager",
        "company": "Product Company",
        "location": "New York, NY",
        "description": "Job description here...",
        "url": "https://example.com/job/2",
        "source": "External API",
    },
]


@dataclass
class JobQuery:
    """Filters and pagination for the public job listing."""
    search: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    page: int = 1
    limit: int = 20

    def to_filter(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {"isActive": True}
        if self.search:
            pattern = case_insensitive_pattern(self.search)
            query["$or"] = [
                {"title": pattern},
                {"company": pattern},
                {"description": pattern},
            ]
        if self.location:
            query["location"] = case_insensitive_pattern(self.location)
        if self.job_type:
            query["jobType"] = self.job_type
        if self.experience_level:
            query["experienceLevel"] = self.experience_level
        return query


def build_job(data: Dict[str, Any]) -> Dict[str, Any]:
    """New job document with schema defaults applied."""
    now = utcnow()
    job = {
        "title": data["title"],
        "company": data["company"],
        "location": data.get("location"),
        "description": data["description"],
        "requirements": data["requirements"],
        "skills": data.get("skills") or [],
        "salary": data.get("salary"),
        "jobType": data.get("jobType") or "Full-time",
        "industry": data.get("industry"),
        "experienceLevel": data.get("experienceLevel") or "Mid-level",
        "educationLevel": data.get("educationLevel") or "Bachelor",
        "applicationUrl": data.get("applicationUrl"),
        "source": data.get("source") or "Manual",
        "postedDate": data.get("postedDate") or now,
        "expiryDate": data.get("expiryDate"),
        "isActive": True,
        "createdAt": now,
        "updatedAt": now,
    }
    if data.get("sourceId"):
        job["sourceId"] = data["sourceId"]
    return {key: value for key, value in job.items() if value is not None}


class JobService:
    """
    Job catalog operations.

    Collections used:
        - jobs: indexed on (isActive, postedDate) and (source, sourceId)
    """

    def __init__(self, db: Database):
        self.db = db
        self.jobs = db[JOBS]

    def search(self, query: JobQuery) -> Dict[str, Any]:
        """
        Filtered, paginated listing of active jobs, newest first.

        Returns:
            {"jobs": [...], "pagination": {total, page, limit, pages}}
        """
        mongo_filter = query.to_filter()
        skip = (query.page - 1) * query.limit

        jobs = list(
            self.jobs.find(mongo_filter)
            .sort("postedDate", DESCENDING)
            .skip(skip)
            .limit(query.limit)
        )
        total = self.jobs.count_documents(mongo_filter)

        return {
            "jobs": jobs,
            "pagination": {
                "total": total,
                "page": query.page,
                "limit": query.limit,
                "pages": math.ceil(total / query.limit),
            },
        }

    def get(self, job_id: str) -> Dict[str, Any]:
        oid = parse_object_id(job_id, JOB_NOT_FOUND)
        job = self.jobs.find_one({"_id": oid})
        if not job:
            raise NotFoundError(JOB_NOT_FOUND)
        return job

    def list_active(self, limit: int) -> List[Dict[str, Any]]:
        """Active jobs for matching, capped at limit."""
        return list(self.jobs.find({"isActive": True}).limit(limit))

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        job = build_job(data)
        result = self.jobs.insert_one(job)
        job["_id"] = result.inserted_id
        logger.info(f"Created job {result.inserted_id}: {job['title']} @ {job['company']}")
        return job

    def update(self, job_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Set the provided truthy fields (and isActive when given)."""
        oid = parse_object_id(job_id, JOB_NOT_FOUND)

        updates = {field: data[field] for field in UPDATABLE_FIELDS if data.get(field)}
        if data.get("isActive") is not None:
            updates["isActive"] = data["isActive"]
        updates["updatedAt"] = utcnow()

        job = self.jobs.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if not job:
            raise NotFoundError(JOB_NOT_FOUND)
        return job

    def delete(self, job_id: str) -> None:
        oid = parse_object_id(job_id, JOB_NOT_FOUND)
        result = self.jobs.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(JOB_NOT_FOUND)
        logger.info(f"Deleted job {oid}")

    def external_search(
        self,
        query: Optional[str] = None,
        location: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict[str, str]]:
        """
        Placeholder for a third-party job board search.

        Always returns the same mock listings; query and location are
        accepted for interface compatibility only.
        """
        logger.debug(f"External search (mock): query={query!r} location={location!r}")
        return [dict(job) for job in EXTERNAL_JOBS[:limit]]

    def import_external(
        self,
        external_id: str,
        source: str,
        job_data: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Import an external listing once per (source, sourceId).

        Unknown sources are stored as "Other". Runs as a single upsert so
        concurrent imports of the same listing cannot both insert.

        Raises:
            DuplicateRecordError: If the listing was imported before
        """
        stored_source = source if source in JOB_SOURCES else "Other"
        job = build_job({
            "title": job_data["title"],
            "company": job_data["company"],
            "location": job_data.get("location"),
            "description": job_data["description"],
            "requirements": job_data.get("requirements") or "Not specified",
            "applicationUrl": job_data.get("url"),
            "source": stored_source,
            "sourceId": external_id,
        })

        key = {"source": stored_source, "sourceId": external_id}
        on_insert = {field: value for field, value in job.items() if field not in key}
        result = self.jobs.update_one(key, {"$setOnInsert": on_insert}, upsert=True)
        if result.upserted_id is None:
            raise DuplicateRecordError("Job already imported")

        job["_id"] = result.upserted_id
        logger.info(f"Imported job {external_id} from {stored_source}")
        return job
