"""
Prompts for resume writing helpers.

- Experience optimization: rewrites one work-experience description
- Skill suggestions: asks for a numbered list the skill parser can read
"""

from typing import Optional


OPTIMIZE_EXPERIENCE_SYSTEM_PROMPT = (
    "You are an expert resume writer who specializes in creating impactful, "
    "ATS-friendly work experience descriptions."
)

SUGGEST_SKILLS_SYSTEM_PROMPT = (
    "You are an expert in job requirements and skills for various industries. "
    "Provide relevant skills for job seekers."
)


def build_optimize_experience_prompt(
    description: str,
    job_title: Optional[str] = None,
    company_name: Optional[str] = None,
    industry: Optional[str] = None,
) -> str:
    """Build the user prompt for rewriting a work-experience description."""
    return (
        "Optimize the following work experience description for a resume. "
        "Make it ATS-friendly, use strong action verbs, quantify achievements where possible, "
        "and keep it concise but impactful. "
        f"Ensure it's relevant for a {job_title or 'professional'} position at "
        f"{company_name or 'the company'} in the {industry or 'technology'} industry.\n\n"
        f"Original description: {description}"
    )


def build_suggest_skills_prompt(
    job_title: str,
    resume_content: Optional[str] = None,
    industry: Optional[str] = None,
) -> str:
    """Build the user prompt for skill suggestions."""
    prompt = (
        f'Based on the job title "{job_title}" in the {industry or "technology"} industry, '
        "suggest 10-15 relevant technical and soft skills that would make a resume stand out "
        "to recruiters and pass ATS systems.\n"
        "Return the skills as a numbered list, one skill per line, with no headings or commentary."
    )
    if resume_content:
        prompt += f"\nHere's the current resume content to consider: {resume_content}"
    return prompt
