"""
Prompts for application-history insights.

The provider is asked for a JSON array of {content, category}; when it
cannot deliver, the analytics service falls back to DEFAULT_INSIGHTS.
"""

import json
from typing import Any, Dict, List

from src.common.types import Insight, SUGGESTION_CATEGORIES


INSIGHTS_SYSTEM_PROMPT = (
    "You are a career advisor AI that analyzes job application data and provides actionable insights."
)

DEFAULT_INSIGHTS: List[Insight] = [
    {
        "content": "Consider adding more technical skills to your resume to improve match rates.",
        "category": "Skills",
    },
    {
        "content": "Your application success rate is higher for mid-level positions. Consider focusing on these roles.",
        "category": "JobCategory",
    },
    {
        "content": "Customize your resume for each application to highlight relevant experience.",
        "category": "ResumeOptimization",
    },
]


def build_insights_prompt(application_data: List[Dict[str, Any]]) -> str:
    """
    Build the insights prompt from summarized applications.

    Args:
        application_data: One dict per application with jobTitle, company,
            status, jobSkills, resumeSkills and industry
    """
    return f"""Based on the following job application data, provide 3 actionable insights to improve job application success rate:
{json.dumps(application_data, default=str)}

Format each insight as a JSON object with the following structure:
{{
  "content": "The specific suggestion or insight",
  "category": "One of: {', '.join(SUGGESTION_CATEGORIES)}"
}}

Return only a valid JSON array of these objects."""
