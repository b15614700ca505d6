"""
Service layer for the Job Copilot API.

Each service wraps one resource's queries and updates. Services take a
pymongo Database and return raw documents; routes serialize them.
"""

from src.services.admin_service import AdminService
from src.services.ai_service import AIService
from src.services.analytics_service import AnalyticsService
from src.services.application_service import ApplicationService
from src.services.auth_service import AuthService
from src.services.job_service import JobQuery, JobService
from src.services.matching_service import MatchingService
from src.services.resume_service import ResumeService

__all__ = [
    "AdminService",
    "AIService",
    "AnalyticsService",
    "ApplicationService",
    "AuthService",
    "JobQuery",
    "JobService",
    "MatchingService",
    "ResumeService",
]
