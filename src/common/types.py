"""
Canonical Types and Enumerations for Job Copilot

Enumerated field values shared by the request models, services and
aggregations, plus TypedDict shapes for the embedded analytics records.
Stored documents keep the camelCase field names the client expects.
"""

from datetime import datetime
from typing import List, Literal, TypedDict, get_args


# ===== Enumerations =====

JobType = Literal["Full-time", "Part-time", "Contract", "Freelance", "Internship"]
ExperienceLevel = Literal["Entry-level", "Mid-level", "Senior", "Executive"]
EducationLevel = Literal["High School", "Associate", "Bachelor", "Master", "Doctorate", "None"]
JobSource = Literal["LinkedIn", "Indeed", "Manual", "Other"]
SkillLevel = Literal["Beginner", "Intermediate", "Advanced", "Expert"]
SuggestionCategory = Literal["Skills", "JobCategory", "ResumeOptimization", "ApplicationStrategy"]

JOB_SOURCES: List[str] = list(get_args(JobSource))
SUGGESTION_CATEGORIES: List[str] = list(get_args(SuggestionCategory))

APPLICATION_STATUSES: List[str] = ["Applied", "Viewed", "Interview", "Offer", "Rejected", "Withdrawn"]
# Statuses an employer response can move an application into
RESPONSE_STATUSES: List[str] = ["Viewed", "Interview", "Offer", "Rejected"]

# Weekly and monthly summary lists keep only the newest entries
MAX_PERIOD_SUMMARIES = 12


# ===== Embedded analytics records =====

class ApplicationStats(TypedDict):
    """Counters recomputed from live applications on every dashboard read."""
    totalApplications: int
    pending: int                       # Applied + Viewed
    interviews: int
    offers: int
    rejections: int
    withdrawn: int


class JobMatchRecord(TypedDict):
    """One tracked match percentage between the user and a job."""
    _id: object
    job: object                        # ObjectId when the id parses
    matchPercentage: float
    date: datetime


class ResponseTimeRecord(TypedDict):
    """How long an employer took to respond to an application."""
    _id: object
    application: object
    responseTime: float
    status: str
    date: datetime


class Suggestion(TypedDict):
    """Inbox entry produced by insight generation."""
    _id: object
    content: str
    category: str
    isRead: bool
    date: datetime


class Insight(TypedDict):
    """Generated suggestion before it is stored in the inbox."""
    content: str
    category: str


def empty_application_stats() -> ApplicationStats:
    return {
        "totalApplications": 0,
        "pending": 0,
        "interviews": 0,
        "offers": 0,
        "rejections": 0,
        "withdrawn": 0,
    }
