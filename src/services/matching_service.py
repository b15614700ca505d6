"""
Matching Service

AI-assisted matching between resumes and jobs, targeted resume
optimization, and portfolio image review.

Every provider response is validated against a pydantic model inside the
provider attempt, so a malformed answer from the primary provider moves
the call on to the secondary one instead of reaching the client.

Usage:
    service = MatchingService(db, user_id)
    matches = await service.resume_to_jobs(resume_id, limit=5)
    optimization = await service.optimize_resume(resume_id, job_id)
"""

import asyncio
import base64
from typing import Any, Collection, Dict, List, Optional, Union

import requests
from pydantic import BaseModel, Field
from pymongo.database import Database

from src.common.config import Config
from src.common.error_handling import MalformedProviderResponse, ProviderUnavailableError
from src.common.json_utils import parse_json_array, parse_json_object, to_plain
from src.common.logger import get_logger
from src.common.unified_llm import UnifiedLLM
from src.common.utils import maybe_object_id
from src.prompts.matching_prompts import (
    MATCHING_SYSTEM_PROMPT,
    OPTIMIZATION_SYSTEM_PROMPT,
    PORTFOLIO_SYSTEM_PROMPT,
    build_job_content,
    build_job_to_resumes_prompt,
    build_optimize_resume_prompt,
    build_portfolio_prompt,
    build_resume_content,
    build_resume_to_jobs_prompt,
)
from src.services.job_service import JobService
from src.services.resume_service import ResumeService

# Active jobs considered per resume-to-jobs request
MAX_CANDIDATE_JOBS = 100

PORTFOLIO_ANALYSIS_FAILED = "Portfolio analysis failed"


# ===== Provider response shapes =====

class JobMatch(BaseModel):
    jobId: str
    matchScore: float = Field(ge=0, le=100)
    reasons: List[str] = Field(default_factory=list)
    missingSkills: List[str] = Field(default_factory=list)


class ResumeMatch(BaseModel):
    resumeId: str
    matchScore: float = Field(ge=0, le=100)
    reasons: List[str] = Field(default_factory=list)
    missingSkills: List[str] = Field(default_factory=list)


class SectionOverride(BaseModel):
    """Rewrite for one workExperience/education entry, by position."""
    index: int
    description: str


class ResumeOptimization(BaseModel):
    summary: str = ""
    skills: List[str] = Field(default_factory=list)
    experience: List[Union[SectionOverride, str]] = Field(default_factory=list)
    education: List[Union[SectionOverride, str]] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    generalTips: List[str] = Field(default_factory=list)


def select_matches(
    matches: List[BaseModel],
    id_field: str,
    candidate_ids: Collection[str],
    limit: Optional[int] = None,
) -> List[BaseModel]:
    """
    Keep matches that reference a candidate, in provider order, up to limit.

    Raises:
        MalformedProviderResponse: If the provider returned matches but
            none of them name a candidate
    """
    known = [match for match in matches if getattr(match, id_field) in candidate_ids]
    if matches and not known:
        raise MalformedProviderResponse(f"No {id_field} in the response is a candidate")
    return known[:limit] if limit is not None else known


def _non_empty_text(content: str) -> str:
    if not content:
        raise ValueError("Provider returned empty analysis")
    return content


def fetch_image(url: str, timeout: float) -> Dict[str, str]:
    """
    Download one image as base64.

    Returns:
        {"mime_type", "data"}

    Raises:
        requests.RequestException: On network errors or non-2xx status
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    mime_type = response.headers.get("content-type", "image/png").split(";")[0].strip()
    return {
        "mime_type": mime_type,
        "data": base64.b64encode(response.content).decode("ascii"),
    }


class MatchingService:
    """
    Matching operations for one requesting user.

    Collections used:
        - resumes: via ResumeService (ownership enforced)
        - jobs: via JobService
    """

    def __init__(self, db: Database, user_id: str):
        self.db = db
        self.user_id = user_id
        self.resumes = ResumeService(db)
        self.jobs = JobService(db)
        self.log = get_logger(__name__, user_id=user_id, step="matching")

    def _llm(self, step_name: str) -> UnifiedLLM:
        return UnifiedLLM(step_name=step_name, user_id=self.user_id)

    async def resume_to_jobs(self, resume_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Rank active jobs against one of the user's resumes.

        Returns:
            Validated matches naming active jobs, at most limit; empty
            when there are no active jobs

        Raises:
            NotFoundError / OwnershipError: Resume checks
            ProviderUnavailableError: If both providers fail
        """
        resume = self.resumes.get_owned(resume_id, self.user_id)
        jobs = self.jobs.list_active(MAX_CANDIDATE_JOBS)
        if not jobs:
            return []

        job_ids = {str(j["_id"]) for j in jobs}
        prompt = build_resume_to_jobs_prompt(build_resume_content(resume), jobs, limit)
        result = await self._llm("match_resume_to_jobs").invoke(
            prompt,
            system=MATCHING_SYSTEM_PROMPT,
            parser=lambda text: select_matches(
                parse_json_array(text, JobMatch), "jobId", job_ids, limit
            ),
        )
        self.log.info(f"Matched resume {resume_id} against {len(jobs)} jobs via {result.backend}")
        return to_plain(result.parsed)

    async def job_to_resumes(self, job_id: str) -> List[Dict[str, Any]]:
        """Rank the user's resumes against one job; empty when they have none."""
        job = self.jobs.get(job_id)
        resumes = self.resumes.find_for_user(self.user_id)
        if not resumes:
            return []

        resume_ids = {str(r["_id"]) for r in resumes}
        prompt = build_job_to_resumes_prompt(build_job_content(job), resumes)
        result = await self._llm("match_job_to_resumes").invoke(
            prompt,
            system=MATCHING_SYSTEM_PROMPT,
            parser=lambda text: select_matches(
                parse_json_array(text, ResumeMatch), "resumeId", resume_ids
            ),
        )
        return to_plain(result.parsed)

    async def optimize_resume(self, resume_id: str, job_id: str) -> Dict[str, Any]:
        resume = self.resumes.get_owned(resume_id, self.user_id)
        job = self.jobs.get(job_id)

        prompt = build_optimize_resume_prompt(build_resume_content(resume), build_job_content(job))
        result = await self._llm("optimize_resume").invoke(
            prompt,
            system=OPTIMIZATION_SYSTEM_PROMPT,
            parser=lambda text: parse_json_object(text, ResumeOptimization),
        )
        return result.parsed.model_dump()

    async def _fetch_images(self, urls: List[str]) -> List[Dict[str, str]]:
        """Download images in the default executor; failures are skipped."""
        loop = asyncio.get_running_loop()
        images = []
        for url in urls:
            try:
                image = await loop.run_in_executor(
                    None, fetch_image, url, Config.PORTFOLIO_FETCH_TIMEOUT
                )
            except requests.RequestException as e:
                self.log.warning(f"Skipping portfolio image {url}: {e}")
                continue
            images.append(image)
        return images

    async def analyze_portfolio(
        self,
        portfolio_urls: List[str],
        job_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Review portfolio images, optionally against a job.

        Only the first PORTFOLIO_MAX_IMAGES URLs are attempted; portfolioCount
        reports how many were attempted. An unknown job id is ignored.

        Raises:
            ProviderUnavailableError: "Portfolio analysis failed"
        """
        urls = portfolio_urls[:Config.PORTFOLIO_MAX_IMAGES]

        job_content = None
        job_oid = maybe_object_id(job_id) if job_id else None
        if job_oid is not None:
            job = self.jobs.jobs.find_one({"_id": job_oid})
            if job:
                job_content = build_job_content(job, include_levels=False)

        images = await self._fetch_images(urls)
        self.log.info(f"Fetched {len(images)}/{len(urls)} portfolio images")

        try:
            result = await self._llm("analyze_portfolio").invoke(
                build_portfolio_prompt(images, job_content),
                system=PORTFOLIO_SYSTEM_PROMPT,
                parser=_non_empty_text,
            )
        except ProviderUnavailableError:
            raise ProviderUnavailableError(PORTFOLIO_ANALYSIS_FAILED)

        return {"analysis": result.content, "portfolioCount": len(urls)}
