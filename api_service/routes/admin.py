"""
Admin API Routes.

- POST /api/admin/login - Admin-only login, shorter token lifetime
- GET /api/admin/users | resumes | applications | jobs
- DELETE /api/admin/users/{user_id} - Removes the account only
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from src.common.utils import serialize_document
from src.services.admin_service import AdminService
from src.services.auth_service import AuthService

from ..auth import AuthenticatedUser, verify_admin_token
from ..dependencies import get_db
from ..models import LoginRequest
from .auth import get_auth_service


router = APIRouter(prefix="/api/admin", tags=["admin"])


def get_admin_service(db: Database = Depends(get_db)) -> AdminService:
    return AdminService(db)


@router.post("/login")
async def admin_login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, str]:
    return {"token": service.admin_login(request.email, request.password)}


@router.get("/users")
async def list_users(
    admin: AuthenticatedUser = Depends(verify_admin_token),
    service: AdminService = Depends(get_admin_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.list_users())


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: AuthenticatedUser = Depends(verify_admin_token),
    service: AdminService = Depends(get_admin_service),
) -> Dict[str, str]:
    service.delete_user(user_id)
    return {"msg": "User removed"}


@router.get("/resumes")
async def list_resumes(
    admin: AuthenticatedUser = Depends(verify_admin_token),
    service: AdminService = Depends(get_admin_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.list_resumes())


@router.get("/applications")
async def list_applications(
    admin: AuthenticatedUser = Depends(verify_admin_token),
    service: AdminService = Depends(get_admin_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.list_applications())


@router.get("/jobs")
async def list_jobs(
    admin: AuthenticatedUser = Depends(verify_admin_token),
    service: AdminService = Depends(get_admin_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.list_jobs())
