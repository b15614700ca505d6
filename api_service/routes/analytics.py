"""
Analytics API Routes.

Dashboard counters, weekly/monthly rollups, the suggestions inbox, AI
insight generation and tracking endpoints. All routes require a token.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from src.common.logger import get_logger
from src.common.utils import serialize_document
from src.services.analytics_service import AnalyticsService

from ..auth import AuthenticatedUser, verify_token
from ..dependencies import get_db
from ..models import TrackApplicationResponseRequest, TrackJobMatchRequest


router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def get_analytics_service(db: Database = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


@router.get("/dashboard")
async def dashboard(
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    return serialize_document(service.dashboard(user.id))


@router.get("/applications/summary")
async def application_summary(
    period: Optional[str] = None,
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.summaries(user.id, period))


@router.post("/update-weekly-summary")
async def update_weekly_summary(
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    return serialize_document(service.update_summary(user.id, "weekly"))


@router.post("/update-monthly-summary")
async def update_monthly_summary(
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    return serialize_document(service.update_summary(user.id, "monthly"))


@router.get("/suggestions")
async def unread_suggestions(
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.unread_suggestions(user.id))


@router.put("/suggestions/{suggestion_id}")
async def mark_suggestion_read(
    suggestion_id: str,
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.mark_suggestion_read(user.id, suggestion_id))


@router.post("/generate-insights")
async def generate_insights(
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    return await service.generate_insights(user.id)


@router.post("/track-resume-view/{resume_id}")
async def track_resume_view(
    resume_id: str,
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, int]:
    get_logger(__name__, user_id=user.id, step="track_resume_view").debug(f"Resume {resume_id} viewed")
    return {"resumeViews": service.track_resume_view(user.id)}


@router.post("/track-job-match")
async def track_job_match(
    request: TrackJobMatchRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    records = service.track_job_match(user.id, request.jobId, request.matchPercentage)
    return serialize_document(records)


@router.post("/track-application-response")
async def track_application_response(
    request: TrackApplicationResponseRequest,
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    records = service.track_application_response(
        user.id, request.applicationId, request.status, request.responseTime
    )
    return serialize_document(records)


@router.get("/response-time")
async def response_times(
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.response_times(user.id))


@router.get("/job-match-data")
async def job_match_data(
    user: AuthenticatedUser = Depends(verify_token),
    service: AnalyticsService = Depends(get_analytics_service),
) -> List[Dict[str, Any]]:
    return serialize_document(service.job_matches(user.id))
