"""
Matching API Routes.

- POST /api/matching/resume-to-jobs - Rank active jobs for one resume
- POST /api/matching/job-to-resumes - Rank the user's resumes for one job
- POST /api/matching/optimize-resume - Targeted changes for one job
- POST /api/matching/analyze-portfolio - Review portfolio images
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pymongo.database import Database

from src.common.error_handling import BadRequestError
from src.services.matching_service import MatchingService

from ..auth import AuthenticatedUser, verify_token
from ..dependencies import get_db
from ..models import (
    AnalyzePortfolioRequest,
    JobToResumesRequest,
    OptimizeResumeRequest,
    ResumeToJobsRequest,
)


router = APIRouter(prefix="/api/matching", tags=["matching"])


def get_matching_service(
    user: AuthenticatedUser = Depends(verify_token),
    db: Database = Depends(get_db),
) -> MatchingService:
    return MatchingService(db, user.id)


@router.post("/resume-to-jobs")
async def resume_to_jobs(
    request: ResumeToJobsRequest,
    service: MatchingService = Depends(get_matching_service),
) -> Dict[str, Any]:
    matches = await service.resume_to_jobs(request.resumeId, limit=request.limit)
    return {"matches": matches}


@router.post("/job-to-resumes")
async def job_to_resumes(
    request: JobToResumesRequest,
    service: MatchingService = Depends(get_matching_service),
) -> Dict[str, Any]:
    return {"matches": await service.job_to_resumes(request.jobId)}


@router.post("/optimize-resume")
async def optimize_resume(
    request: OptimizeResumeRequest,
    service: MatchingService = Depends(get_matching_service),
) -> Dict[str, Any]:
    return await service.optimize_resume(request.resumeId, request.jobId)


@router.post("/analyze-portfolio")
async def analyze_portfolio(
    request: AnalyzePortfolioRequest,
    service: MatchingService = Depends(get_matching_service),
) -> Dict[str, Any]:
    if not request.portfolioUrls:
        raise BadRequestError("Portfolio URLs are required")
    return await service.analyze_portfolio(request.portfolioUrls, job_id=request.jobId)
