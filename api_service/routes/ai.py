"""
AI Writing API Routes.

- POST /api/ai/optimize-experience - Rewrite a work experience description
- POST /api/ai/suggest-skills - Skill suggestions for a job title
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from src.common.error_handling import BadRequestError
from src.services.ai_service import AIService

from ..auth import AuthenticatedUser, verify_token
from ..models import OptimizeExperienceRequest, SuggestSkillsRequest


router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/optimize-experience")
async def optimize_experience(
    request: OptimizeExperienceRequest,
    user: AuthenticatedUser = Depends(verify_token),
) -> Dict[str, Any]:
    if not request.description:
        raise BadRequestError("Description is required")

    content = await AIService(user_id=user.id).optimize_experience(
        request.description,
        job_title=request.jobTitle,
        company_name=request.companyName,
        industry=request.jobIndustry,
    )
    return {"optimizedContent": content}


@router.post("/suggest-skills")
async def suggest_skills(
    request: SuggestSkillsRequest,
    user: AuthenticatedUser = Depends(verify_token),
) -> Dict[str, Any]:
    if not request.jobTitle:
        raise BadRequestError("Job title is required")

    skills = await AIService(user_id=user.id).suggest_skills(
        request.jobTitle,
        resume_content=request.resumeContent,
        industry=request.industry,
    )
    return {"suggestedSkills": skills}
