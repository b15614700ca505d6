"""
Application API Routes.

- GET /api/applications - Own applications, newest first
- GET /api/applications/stats/me - Counts per status
- GET /api/applications/{application_id} - One application, populated
- POST /api/applications
- PUT /api/applications/{application_id} - Status and notes
- DELETE /api/applications/{application_id}
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from src.common.utils import serialize_document
from src.services.application_service import ApplicationService

from ..auth import AuthenticatedUser, verify_token
from ..dependencies import get_db
from ..models import ApplicationCreateRequest, ApplicationUpdateRequest


router = APIRouter(prefix="/api/applications", tags=["applications"])


def get_application_service(db: Database = Depends(get_db)) -> ApplicationService:
    return ApplicationService(db)


@router.get("")
async def list_applications(
    user: AuthenticatedUser = Depends(verify_token),
    service: ApplicationService = Depends(get_application_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.list_for_user(user.id))


@router.get("/stats/me")
async def application_stats(
    user: AuthenticatedUser = Depends(verify_token),
    service: ApplicationService = Depends(get_application_service),
) -> Dict[str, int]:
    return service.stats(user.id)


@router.get("/{application_id}")
async def get_application(
    application_id: str,
    user: AuthenticatedUser = Depends(verify_token),
    service: ApplicationService = Depends(get_application_service),
) -> Dict[str, Any]:
    return serialize_document(service.get_detail(application_id, user.id))


@router.post("")
async def create_application(
    request: ApplicationCreateRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: ApplicationService = Depends(get_application_service),
) -> Dict[str, Any]:
    application = service.create(
        user.id,
        request.job,
        resume_id=request.resume,
        cover_letter=request.coverLetter,
        notes=request.notes,
    )
    return serialize_document(application)


@router.put("/{application_id}")
async def update_application(
    application_id: str,
    request: ApplicationUpdateRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: ApplicationService = Depends(get_application_service),
) -> Dict[str, Any]:
    application = service.update(application_id, user.id, status=request.status, notes=request.notes)
    return serialize_document(application)


@router.delete("/{application_id}")
async def delete_application(
    application_id: str,
    user: AuthenticatedUser = Depends(verify_token),
    service: ApplicationService = Depends(get_application_service),
) -> Dict[str, str]:
    service.delete(application_id, user.id)
    return {"msg": "Application removed"}
