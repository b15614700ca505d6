"""
Application Service

Tracks a user's job applications. One application per (user, job) is
enforced by a unique compound index; a losing concurrent insert surfaces
as DuplicateRecordError.

Usage:
    service = ApplicationService(db)
    application = service.create(user_id, job_id, resume_id)
    service.update(str(application["_id"]), user_id, status="Interview")
    service.stats(user_id)  # {"total": 1, "interview": 1, ...}
"""

from typing import Any, Dict, Iterable, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from src.common.database import APPLICATIONS, JOBS, RESUMES
from src.common.error_handling import DuplicateRecordError, NotFoundError, OwnershipError
from src.common.logger import get_logger
from src.common.types import APPLICATION_STATUSES
from src.common.utils import parse_object_id, utcnow
from src.services.resume_service import owner_key


APPLICATION_NOT_FOUND = "Application not found"
ALREADY_APPLIED = "You have already applied for this job"

# Populated fields for list and detail views
LIST_JOB_FIELDS = ("title", "company", "location")
LIST_RESUME_FIELDS = ("template", "personalInfo.name")
DETAIL_JOB_FIELDS = ("title", "company", "location", "description", "requirements", "skills")
DETAIL_RESUME_FIELDS = ("template", "personalInfo", "workExperience", "education", "skills")


def _projection(fields: Iterable[str]) -> Dict[str, int]:
    return {field: 1 for field in fields}


class ApplicationService:
    """
    Application operations scoped to the requesting user.

    Collections used:
        - applications: unique index on (user, job)
        - jobs, resumes: read for existence checks and population
    """

    def __init__(self, db: Database):
        self.db = db
        self.applications = db[APPLICATIONS]
        self.jobs = db[JOBS]
        self.resumes = db[RESUMES]

    # ===== Population =====

    def _populate(
        self,
        applications: List[Dict[str, Any]],
        job_fields: Iterable[str],
        resume_fields: Iterable[str],
    ) -> List[Dict[str, Any]]:
        """
        Replace job/resume ids with projected documents.

        References to deleted documents become None.
        """
        job_ids = {app["job"] for app in applications if app.get("job") is not None}
        resume_ids = {app["resume"] for app in applications if app.get("resume") is not None}

        jobs = {
            job["_id"]: job
            for job in self.jobs.find({"_id": {"$in": list(job_ids)}}, _projection(job_fields))
        } if job_ids else {}
        resumes = {
            resume["_id"]: resume
            for resume in self.resumes.find({"_id": {"$in": list(resume_ids)}}, _projection(resume_fields))
        } if resume_ids else {}

        populated = []
        for app in applications:
            app = dict(app)
            app["job"] = jobs.get(app.get("job"))
            if app.get("resume") is not None:
                app["resume"] = resumes.get(app["resume"])
            populated.append(app)
        return populated

    # ===== Queries =====

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """User's applications, newest first, with job and resume summaries."""
        applications = list(
            self.applications.find({"user": owner_key(user_id)}).sort("appliedDate", DESCENDING)
        )
        return self._populate(applications, LIST_JOB_FIELDS, LIST_RESUME_FIELDS)

    def get_owned(self, application_id: str, user_id: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: Missing application or malformed id
            OwnershipError: Application belongs to someone else
        """
        oid = parse_object_id(application_id, APPLICATION_NOT_FOUND)
        application = self.applications.find_one({"_id": oid})
        if not application:
            raise NotFoundError(APPLICATION_NOT_FOUND)
        if str(application.get("user")) != str(user_id):
            raise OwnershipError("User not authorized")
        return application

    def get_detail(self, application_id: str, user_id: str) -> Dict[str, Any]:
        application = self.get_owned(application_id, user_id)
        return self._populate([application], DETAIL_JOB_FIELDS, DETAIL_RESUME_FIELDS)[0]

    def find_for_user(
        self,
        user_id: str,
        since: Optional[Any] = None,
    ) -> List[Dict[str, Any]]:
        """Raw applications, optionally limited to appliedDate >= since."""
        query: Dict[str, Any] = {"user": owner_key(user_id)}
        if since is not None:
            query["appliedDate"] = {"$gte": since}
        return list(self.applications.find(query))

    def stats(self, user_id: str) -> Dict[str, int]:
        """
        Counts per status plus total.

        Returns:
            {"total", "applied", "viewed", "interview", "offer",
             "rejected", "withdrawn"}, missing statuses as 0
        """
        pipeline = [
            {"$match": {"user": owner_key(user_id)}},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
        ]
        stats = {"total": 0}
        stats.update({status.lower(): 0 for status in APPLICATION_STATUSES})
        for row in self.applications.aggregate(pipeline):
            status = str(row["_id"]).lower()
            if status in stats:
                stats[status] = row["count"]
            stats["total"] += row["count"]
        return stats

    # ===== Mutations =====

    def _require_job(self, job_id: str) -> Dict[str, Any]:
        oid = parse_object_id(job_id, "Job not found")
        job = self.jobs.find_one({"_id": oid}, {"_id": 1})
        if not job:
            raise NotFoundError("Job not found")
        return job

    def _require_own_resume(self, resume_id: str, user_id: str) -> Dict[str, Any]:
        oid = parse_object_id(resume_id, "Resume not found")
        resume = self.resumes.find_one({"_id": oid}, {"user": 1})
        if not resume:
            raise NotFoundError("Resume not found")
        if str(resume.get("user")) != str(user_id):
            raise OwnershipError("Not authorized to use this resume")
        return resume

    def create(
        self,
        user_id: str,
        job_id: str,
        resume_id: Optional[str] = None,
        cover_letter: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Apply to a job.

        Raises:
            NotFoundError: Job or resume missing
            OwnershipError: Resume belongs to someone else
            DuplicateRecordError: Already applied to this job
        """
        job = self._require_job(job_id)
        resume = self._require_own_resume(resume_id, user_id) if resume_id else None

        now = utcnow()
        application: Dict[str, Any] = {
            "user": owner_key(user_id),
            "job": job["_id"],
            "status": "Applied",
            "appliedDate": now,
            "lastUpdated": now,
        }
        if resume is not None:
            application["resume"] = resume["_id"]
        if cover_letter is not None:
            application["coverLetter"] = cover_letter
        if notes is not None:
            application["notes"] = notes

        try:
            result = self.applications.insert_one(application)
        except DuplicateKeyError:
            raise DuplicateRecordError(ALREADY_APPLIED)

        application["_id"] = result.inserted_id
        get_logger(__name__, user_id=user_id, step="apply").info(f"Applied to job {job['_id']}")
        return application

    def update(
        self,
        application_id: str,
        user_id: str,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Set status and/or notes; lastUpdated is always stamped."""
        application = self.get_owned(application_id, user_id)

        updates: Dict[str, Any] = {"lastUpdated": utcnow()}
        if status:
            updates["status"] = status
        if notes:
            updates["notes"] = notes

        return self.applications.find_one_and_update(
            {"_id": application["_id"]},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, application_id: str, user_id: str) -> None:
        application = self.get_owned(application_id, user_id)
        self.applications.delete_one({"_id": application["_id"]})

    def find_with_jobs(self, user_id: str) -> List[Dict[str, Any]]:
        """Applications populated with the job and resume fields insights need."""
        applications = self.find_for_user(user_id)
        return self._populate(
            applications,
            ("title", "company", "skills", "industry"),
            ("skills",),
        )
