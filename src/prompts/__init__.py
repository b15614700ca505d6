"""
Prompt templates for the AI-backed routes.

Each module provides system prompts plus builders that interpolate
resume, job and application data into user prompts:
- resume_prompts: experience rewriting and skill suggestions
- matching_prompts: resume/job matching, resume optimization, portfolio review
- insight_prompts: application-history insights
"""

from src.prompts.resume_prompts import (
    OPTIMIZE_EXPERIENCE_SYSTEM_PROMPT,
    SUGGEST_SKILLS_SYSTEM_PROMPT,
    build_optimize_experience_prompt,
    build_suggest_skills_prompt,
)
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
from src.prompts.insight_prompts import INSIGHTS_SYSTEM_PROMPT, build_insights_prompt

__all__ = [
    "OPTIMIZE_EXPERIENCE_SYSTEM_PROMPT",
    "SUGGEST_SKILLS_SYSTEM_PROMPT",
    "build_optimize_experience_prompt",
    "build_suggest_skills_prompt",
    "MATCHING_SYSTEM_PROMPT",
    "OPTIMIZATION_SYSTEM_PROMPT",
    "PORTFOLIO_SYSTEM_PROMPT",
    "build_job_content",
    "build_job_to_resumes_prompt",
    "build_optimize_resume_prompt",
    "build_portfolio_prompt",
    "build_resume_content",
    "build_resume_to_jobs_prompt",
    "INSIGHTS_SYSTEM_PROMPT",
    "build_insights_prompt",
]
