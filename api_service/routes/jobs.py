"""
Job API Routes.

Public listing and detail, authenticated CRUD, applying, external import
and the legacy application aliases:
- GET /api/jobs - Filtered, paginated active jobs
- GET /api/jobs/{job_id}
- POST/PUT/DELETE /api/jobs[/{job_id}]
- POST /api/jobs/apply/{job_id}
- GET /api/jobs/applications/me
- PUT /api/jobs/applications/{application_id}
- GET /api/jobs/external/search
- POST /api/jobs/import
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from src.common.utils import serialize_document
from src.services.application_service import ApplicationService
from src.services.job_service import JobQuery, JobService

from ..auth import AuthenticatedUser, verify_token
from ..dependencies import get_db
from ..models import (
    ApplicationUpdateRequest,
    ApplyToJobRequest,
    ImportJobRequest,
    JobCreateRequest,
    JobUpdateRequest,
)


router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def get_job_service(db: Database = Depends(get_db)) -> JobService:
    return JobService(db)


def get_application_service(db: Database = Depends(get_db)) -> ApplicationService:
    return ApplicationService(db)


@router.get("")
async def list_jobs(
    search: Optional[str] = None,
    location: Optional[str] = None,
    jobType: Optional[str] = None,
    experienceLevel: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    service: JobService = Depends(get_job_service),
) -> Dict[str, Any]:
    query = JobQuery(
        search=search,
        location=location,
        job_type=jobType,
        experience_level=experienceLevel,
        page=page,
        limit=limit,
    )
    return serialize_document(service.search(query))


# Fixed paths are registered before /{job_id}

@router.get("/applications/me")
async def list_my_applications(
    user: AuthenticatedUser = Depends(verify_token),
    applications: ApplicationService = Depends(get_application_service),
) -> List[Dict[str, Any]]:
    return serialize_document(applications.list_for_user(user.id))


@router.put("/applications/{application_id}")
async def update_my_application(
    application_id: str,
    request: ApplicationUpdateRequest,
    user: AuthenticatedUser = Depends(verify_token),
    applications: ApplicationService = Depends(get_application_service),
) -> Dict[str, Any]:
    application = applications.update(application_id, user.id, status=request.status, notes=request.notes)
    return serialize_document(application)


@router.get("/external/search")
async def search_external_jobs(
    query: Optional[str] = None,
    location: Optional[str] = None,
    user: AuthenticatedUser = Depends(verify_token),
    service: JobService = Depends(get_job_service),
) -> List[Dict[str, Any]]:
    return service.external_search(query, location)


@router.post("/import")
async def import_job(
    request: ImportJobRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: JobService = Depends(get_job_service),
) -> Dict[str, Any]:
    job = service.import_external(
        request.externalId,
        request.source or "Other",
        request.jobData.model_dump(),
    )
    return serialize_document(job)


@router.post("/apply/{job_id}")
async def apply_to_job(
    job_id: str,
    request: ApplyToJobRequest,
    user: AuthenticatedUser = Depends(verify_token),
    applications: ApplicationService = Depends(get_application_service),
) -> Dict[str, Any]:
    application = applications.create(
        user.id,
        job_id,
        resume_id=request.resumeId,
        cover_letter=request.coverLetter,
        notes=request.notes,
    )
    return serialize_document(application)


@router.get("/{job_id}")
async def get_job(
    job_id: str,
    service: JobService = Depends(get_job_service),
) -> Dict[str, Any]:
    return serialize_document(service.get(job_id))


@router.post("")
async def create_job(
    request: JobCreateRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: JobService = Depends(get_job_service),
) -> Dict[str, Any]:
    return serialize_document(service.create(request.model_dump(exclude_none=True)))


@router.put("/{job_id}")
async def update_job(
    job_id: str,
    request: JobUpdateRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: JobService = Depends(get_job_service),
) -> Dict[str, Any]:
    return serialize_document(service.update(job_id, request.model_dump(exclude_none=True)))


@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    user: AuthenticatedUser = Depends(verify_token),
    service: JobService = Depends(get_job_service),
) -> Dict[str, str]:
    service.delete(job_id)
    return {"msg": "Job removed"}
