"""
Prompts for resume/job matching, resume optimization and portfolio review.

Resumes and jobs are flattened to plain text before interpolation. The
JSON-producing prompts spell out the exact shape the response parsers
validate against.
"""

import json
from typing import Any, Dict, List, Optional


MATCHING_SYSTEM_PROMPT = (
    "You are an expert job matcher that analyzes resumes and job descriptions "
    "to find the best matches. Respond with JSON only."
)

OPTIMIZATION_SYSTEM_PROMPT = (
    "You are an expert resume optimizer that helps job seekers tailor their resumes "
    "to specific job descriptions. Respond with JSON only."
)

PORTFOLIO_SYSTEM_PROMPT = (
    "You are a senior design and portfolio reviewer who gives specific, constructive feedback."
)

_JSON_ONLY = "Return only valid JSON, with no commentary before or after it."


def build_resume_content(resume: Dict[str, Any]) -> str:
    """
    Serialize a resume document to the plain-text form used in prompts.

    Example output:
        Name: Ada Lovelace
        Email: ada@example.com

        Work Experience:
        - Engineer at Analytical Co, London
          Description: Built things

        Education:
        - BSc in Mathematics from University of London

        Skills:
        - Python (Expert)
    """
    personal = resume.get("personalInfo") or {}
    lines = [f"Name: {personal.get('name', '')}", f"Email: {personal.get('email', '')}"]
    if personal.get("summary"):
        lines.append(f"Summary: {personal['summary']}")

    lines.append("")
    lines.append("Work Experience:")
    for exp in resume.get("workExperience") or []:
        header = f"- {exp.get('position', '')} at {exp.get('company', '')}"
        if exp.get("location"):
            header += f", {exp['location']}"
        lines.append(header)
        if exp.get("description"):
            lines.append(f"  Description: {exp['description']}")
        achievements = exp.get("achievements") or []
        if achievements:
            lines.append("  Achievements:")
            lines.extend(f"  - {achievement}" for achievement in achievements)

    lines.append("")
    lines.append("Education:")
    for edu in resume.get("education") or []:
        entry = (
            f"- {edu.get('degree', '')} in {edu.get('fieldOfStudy') or 'N/A'} "
            f"from {edu.get('institution', '')}"
        )
        if edu.get("location"):
            entry += f", {edu['location']}"
        lines.append(entry)

    lines.append("")
    lines.append("Skills:")
    for skill in resume.get("skills") or []:
        lines.append(f"- {skill.get('name', '')} ({skill.get('level', 'Intermediate')})")

    return "\n".join(lines) + "\n"


def build_job_content(job: Dict[str, Any], include_levels: bool = True) -> str:
    """Serialize a job document to the plain-text block used in prompts."""
    lines = [
        f"Title: {job.get('title', '')}",
        f"Company: {job.get('company', '')}",
        f"Description: {job.get('description', '')}",
        f"Requirements: {job.get('requirements', '')}",
        f"Skills: {', '.join(job.get('skills') or [])}",
        f"Industry: {job.get('industry') or ''}",
    ]
    if include_levels:
        lines.append(f"Experience Level: {job.get('experienceLevel') or ''}")
        lines.append(f"Education Level: {job.get('educationLevel') or ''}")
    return "\n".join(lines)


def build_resume_to_jobs_prompt(
    resume_content: str, jobs: List[Dict[str, Any]], limit: int
) -> str:
    """Prompt asking which of the given jobs best fit one resume."""
    jobs_content = [
        {
            "id": str(job["_id"]),
            "title": job.get("title", ""),
            "company": job.get("company", ""),
            "description": job.get("description", ""),
            "requirements": job.get("requirements", ""),
            "skills": ", ".join(job.get("skills") or []),
        }
        for job in jobs
    ]
    return f"""I have a resume and a list of jobs. Please analyze the resume and match it with the most suitable jobs.
Return a JSON array of objects with the following properties:
- jobId: the ID of the job, copied exactly from the list
- matchScore: a number between 0 and 100 indicating how well the resume matches the job
- reasons: an array of strings explaining why the resume matches or doesn't match the job
- missingSkills: an array of strings listing skills mentioned in the job that are missing from the resume

Only include the top {limit} matches with the highest match scores.
{_JSON_ONLY}

Resume:
{resume_content}

Jobs:
{json.dumps(jobs_content)}"""


def build_job_to_resumes_prompt(job_content: str, resumes: List[Dict[str, Any]]) -> str:
    """Prompt ranking a user's resumes against one job."""
    resumes_content = [
        {"id": str(resume["_id"]), "content": build_resume_content(resume)}
        for resume in resumes
    ]
    return f"""I have a job description and a list of resumes. Please analyze the job and match it with the most suitable resumes.
Return a JSON array of objects with the following properties:
- resumeId: the ID of the resume, copied exactly from the list
- matchScore: a number between 0 and 100 indicating how well the job matches the resume
- reasons: an array of strings explaining why the job matches or doesn't match the resume
- missingSkills: an array of strings listing skills mentioned in the job that are missing from the resume
{_JSON_ONLY}

Job:
{job_content}

Resumes:
{json.dumps(resumes_content)}"""


def build_optimize_resume_prompt(resume_content: str, job_content: str) -> str:
    """Prompt asking for targeted resume changes for one job."""
    return f"""I have a resume and a job description. Please optimize the resume to better match the job requirements.
Return a JSON object with the following properties:
- summary: a string with an optimized professional summary
- skills: an array of strings with recommended skills to highlight
- experience: an array of recommended improvements to work experience; use {{"index": n, "description": "..."}} to rewrite the n-th entry (0-based), or a plain string for general advice
- education: an array of recommended improvements to the education section, in the same form as experience
- keywords: an array of strings with important keywords from the job description to include
- generalTips: an array of strings with general tips for improving the resume
{_JSON_ONLY}

Resume:
{resume_content}

Job Description:
{job_content}"""


def build_portfolio_prompt(
    images: List[Dict[str, str]], job_content: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Build multimodal content blocks for portfolio analysis.

    Args:
        images: Dicts with "mime_type" and base64 "data"
        job_content: Optional job block to evaluate the portfolio against

    Returns:
        LangChain content blocks: one text block followed by image blocks
    """
    text = "Analyze the following portfolio images and provide feedback."
    if job_content:
        text += (
            " Also evaluate how well they match the following job description:\n"
            + job_content
        )

    blocks: List[Dict[str, Any]] = [{"type": "text", "text": text}]
    for image in images:
        blocks.append({
            "type": "image_url",
            "image_url": {"url": f"data:{image['mime_type']};base64,{image['data']}"},
        })
    return blocks
