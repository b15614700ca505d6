"""
AI Service

Resume-writing helpers backed by the provider chain: rewriting a work
experience description and suggesting skills for a job title.
"""

from typing import List, Optional

from src.common.logger import get_logger
from src.common.skill_parser import parse_skill_list
from src.common.unified_llm import UnifiedLLM
from src.prompts.resume_prompts import (
    OPTIMIZE_EXPERIENCE_SYSTEM_PROMPT,
    SUGGEST_SKILLS_SYSTEM_PROMPT,
    build_optimize_experience_prompt,
    build_suggest_skills_prompt,
)


def _non_empty_text(content: str) -> str:
    if not content:
        raise ValueError("Provider returned empty content")
    return content


class AIService:
    """Stateless; user_id is only carried into log lines."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id
        self.log = get_logger(__name__, user_id=user_id, step="ai")

    async def optimize_experience(
        self,
        description: str,
        job_title: Optional[str] = None,
        company_name: Optional[str] = None,
        industry: Optional[str] = None,
    ) -> str:
        """
        Rewrite a work-experience description.

        Raises:
            ProviderUnavailableError: If both providers fail
        """
        llm = UnifiedLLM(step_name="optimize_experience", user_id=self.user_id)
        result = await llm.invoke(
            build_optimize_experience_prompt(description, job_title, company_name, industry),
            system=OPTIMIZE_EXPERIENCE_SYSTEM_PROMPT,
            parser=_non_empty_text,
        )
        return result.content

    async def suggest_skills(
        self,
        job_title: str,
        resume_content: Optional[str] = None,
        industry: Optional[str] = None,
    ) -> List[str]:
        """
        Suggest skills for a job title.

        A response that yields no list items falls through to the next
        provider.

        Raises:
            ProviderUnavailableError: If both providers fail
        """
        llm = UnifiedLLM(step_name="suggest_skills", user_id=self.user_id)
        result = await llm.invoke(
            build_suggest_skills_prompt(job_title, resume_content, industry),
            system=SUGGEST_SKILLS_SYSTEM_PROMPT,
            parser=parse_skill_list,
        )
        self.log.info(f"Suggested {len(result.parsed)} skills for '{job_title}' via {result.backend}")
        return result.parsed
