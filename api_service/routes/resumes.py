"""
Resume API Routes.

Ownership-scoped resume CRUD plus merging of optimization output:
- GET /api/resumes
- GET /api/resumes/{resume_id}
- POST /api/resumes
- PUT /api/resumes/{resume_id}
- DELETE /api/resumes/{resume_id}
- POST /api/resumes/apply-optimization/{resume_id}
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from src.common.error_handling import BadRequestError
from src.common.utils import serialize_document
from src.services.resume_service import ResumeService

from ..auth import AuthenticatedUser, verify_token
from ..dependencies import get_db
from ..models import ApplyOptimizationRequest, ResumeCreateRequest, ResumeUpdateRequest


router = APIRouter(prefix="/api/resumes", tags=["resumes"])


def get_resume_service(db: Database = Depends(get_db)) -> ResumeService:
    return ResumeService(db)


@router.get("")
async def list_resumes(
    user: AuthenticatedUser = Depends(verify_token),
    service: ResumeService = Depends(get_resume_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.list_for_user(user.id))


@router.get("/{resume_id}")
async def get_resume(
    resume_id: str,
    user: AuthenticatedUser = Depends(verify_token),
    service: ResumeService = Depends(get_resume_service),
) -> Dict[str, Any]:
    return serialize_document(service.get_owned(resume_id, user.id))


@router.post("")
async def create_resume(
    request: ResumeCreateRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: ResumeService = Depends(get_resume_service),
) -> Dict[str, Any]:
    return serialize_document(service.create(user.id, request.to_document()))


@router.put("/{resume_id}")
async def update_resume(
    resume_id: str,
    request: ResumeUpdateRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: ResumeService = Depends(get_resume_service),
) -> Dict[str, Any]:
    return serialize_document(service.update(resume_id, user.id, request.to_document()))


@router.delete("/{resume_id}")
async def delete_resume(
    resume_id: str,
    user: AuthenticatedUser = Depends(verify_token),
    service: ResumeService = Depends(get_resume_service),
) -> Dict[str, str]:
    service.delete(resume_id, user.id)
    return {"msg": "Resume removed"}


@router.post("/apply-optimization/{resume_id}")
async def apply_optimization(
    resume_id: str,
    request: ApplyOptimizationRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: ResumeService = Depends(get_resume_service),
) -> Dict[str, Any]:
    """Merge a previous optimize-resume result into the stored resume."""
    if not request.optimizationData:
        raise BadRequestError("Optimization data is required")
    resume = service.apply_optimization(resume_id, user.id, request.optimizationData)
    return serialize_document(resume)
