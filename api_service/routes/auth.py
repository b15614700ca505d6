"""
Account API Routes.

- POST /api/users - Register (returns a token)
- POST /api/auth/register - Register, older validation wording
- POST /api/auth - Log in
- GET /api/auth - Current user's profile
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pymongo.database import Database

from src.common.utils import serialize_document
from src.services.auth_service import AuthService

from ..auth import AuthenticatedUser, verify_token
from ..config import settings
from ..dependencies import get_db
from ..models import AuthRegisterRequest, LoginRequest, RegisterRequest


users_router = APIRouter(prefix="/api/users", tags=["auth"])
router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_auth_service(db: Database = Depends(get_db)) -> AuthService:
    return AuthService(
        db,
        jwt_secret=settings.jwt_secret,
        user_token_ttl=settings.user_token_ttl,
        admin_token_ttl=settings.admin_token_ttl,
    )


@users_router.post("")
async def register_user(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, str]:
    token = service.register(request.name, request.email, request.password)
    return {"token": token}


@router.post("/register")
async def register(
    request: AuthRegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, str]:
    token = service.register(request.name, request.email, request.password)
    return {"token": token}


@router.post("")
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, str]:
    token = service.login(request.email, request.password)
    return {"token": token}


@router.get("")
async def get_current_user(
    user: AuthenticatedUser = Depends(verify_token),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    return serialize_document(service.get_profile(user.id))
