"""
HTTP client for the Job Copilot API.

Each JobCopilotClient owns its configuration and its requests.Session, so
two clients (say, a user session and an admin session) never share a
token or base URL.

Usage:
    client = JobCopilotClient(ClientConfig(base_url="http://localhost:5001"))
    token = client.register("Ada", "ada@example.com", "secret1")
    client.config.token = token
    resumes = client.list_resumes()
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-auth-token"
DEFAULT_TIMEOUT = 30


@dataclass
class ClientConfig:
    """Connection settings for one client instance."""

    base_url: str = "http://localhost:5001"
    timeout: float = DEFAULT_TIMEOUT
    token: Optional[str] = None
    admin_token: Optional[str] = None


class ApiError(Exception):
    """Non-2xx response, or the server could not be reached."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


def error_message(payload: Any, fallback: str) -> str:
    """First human-readable message from an error body."""
    if isinstance(payload, dict):
        if payload.get("msg"):
            return str(payload["msg"])
        errors = payload.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return str(errors[0].get("msg", fallback))
    if isinstance(payload, str) and payload:
        return payload
    return fallback


class JobCopilotClient:
    """Typed wrapper over every API route group."""

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ClientConfig()
        self.session = session or requests.Session()

    # ===== Transport =====

    def _headers(self, admin: bool) -> Dict[str, str]:
        token = self.config.admin_token if admin else self.config.token
        headers = {"Content-Type": "application/json"}
        if token:
            headers[TOKEN_HEADER] = token
        return headers

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        admin: bool = False,
    ) -> Any:
        """
        Send one request and decode the JSON response.

        Raises:
            ApiError: On a non-2xx status, timeout or connection failure
        """
        url = f"{self.config.base_url.rstrip('/')}{path}"
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(admin),
                timeout=self.config.timeout,
            )
        except requests.exceptions.Timeout:
            raise ApiError(504, "Server timeout")
        except requests.exceptions.ConnectionError:
            raise ApiError(503, "Server unavailable")

        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        if not response.ok:
            message = error_message(payload, response.reason or "Request failed")
            logger.debug(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiError(response.status_code, message, payload)
        return payload

    # ===== Auth =====

    def register(self, name: str, email: str, password: str) -> str:
        data = self.request("POST", "/api/users", json={"name": name, "email": email, "password": password})
        return data["token"]

    def login(self, email: str, password: str) -> str:
        data = self.request("POST", "/api/auth", json={"email": email, "password": password})
        return data["token"]

    def get_profile(self) -> Dict[str, Any]:
        return self.request("GET", "/api/auth")

    def admin_login(self, email: str, password: str) -> str:
        data = self.request("POST", "/api/admin/login", json={"email": email, "password": password})
        return data["token"]

    # ===== Resumes =====

    def list_resumes(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/resumes")

    def get_resume(self, resume_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/api/resumes/{resume_id}")

    def create_resume(self, resume: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", "/api/resumes", json=resume)

    def update_resume(self, resume_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PUT", f"/api/resumes/{resume_id}", json=changes)

    def delete_resume(self, resume_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/api/resumes/{resume_id}")

    def apply_optimization(self, resume_id: str, optimization: Dict[str, Any]) -> Dict[str, Any]:
        return self.request(
            "POST",
            f"/api/resumes/apply-optimization/{resume_id}",
            json={"optimizationData": optimization},
        )

    # ===== Jobs =====

    def search_jobs(self, **filters: Any) -> Dict[str, Any]:
        """Filters: search, location, jobType, experienceLevel, page, limit."""
        params = {key: value for key, value in filters.items() if value is not None}
        return self.request("GET", "/api/jobs", params=params)

    def get_job(self, job_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/api/jobs/{job_id}")

    def create_job(self, job: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", "/api/jobs", json=job)

    def update_job(self, job_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PUT", f"/api/jobs/{job_id}", json=changes)

    def delete_job(self, job_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/api/jobs/{job_id}")

    def apply_to_job(
        self,
        job_id: str,
        resume_id: Optional[str] = None,
        cover_letter: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = {"resumeId": resume_id, "coverLetter": cover_letter, "notes": notes}
        return self.request("POST", f"/api/jobs/apply/{job_id}", json=body)

    def search_external_jobs(self, query: Optional[str] = None, location: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {key: value for key, value in {"query": query, "location": location}.items() if value}
        return self.request("GET", "/api/jobs/external/search", params=params)

    def import_job(self, external_id: str, source: str, job_data: Dict[str, Any]) -> Dict[str, Any]:
        body = {"externalId": external_id, "source": source, "jobData": job_data}
        return self.request("POST", "/api/jobs/import", json=body)

    # ===== Applications =====

    def list_applications(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/applications")

    def get_application(self, application_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/api/applications/{application_id}")

    def create_application(
        self,
        job_id: str,
        resume_id: str,
        cover_letter: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = {"job": job_id, "resume": resume_id, "coverLetter": cover_letter, "notes": notes}
        return self.request("POST", "/api/applications", json=body)

    def update_application(
        self,
        application_id: str,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.request(
            "PUT", f"/api/applications/{application_id}", json={"status": status, "notes": notes}
        )

    def delete_application(self, application_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/api/applications/{application_id}")

    def application_stats(self) -> Dict[str, int]:
        return self.request("GET", "/api/applications/stats/me")

    # ===== Analytics =====

    def dashboard(self) -> Dict[str, Any]:
        return self.request("GET", "/api/analytics/dashboard")

    def summaries(self, period: str = "weekly") -> List[Dict[str, Any]]:
        return self.request("GET", "/api/analytics/applications/summary", params={"period": period})

    def update_summary(self, period: str = "weekly") -> Dict[str, Any]:
        return self.request("POST", f"/api/analytics/update-{period}-summary")

    def suggestions(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/analytics/suggestions")

    def mark_suggestion_read(self, suggestion_id: str) -> List[Dict[str, Any]]:
        return self.request("PUT", f"/api/analytics/suggestions/{suggestion_id}")

    def generate_insights(self) -> List[Dict[str, Any]]:
        return self.request("POST", "/api/analytics/generate-insights")

    def track_resume_view(self, resume_id: str) -> Dict[str, int]:
        return self.request("POST", f"/api/analytics/track-resume-view/{resume_id}")

    def track_job_match(self, job_id: str, match_percentage: float) -> List[Dict[str, Any]]:
        body = {"jobId": job_id, "matchPercentage": match_percentage}
        return self.request("POST", "/api/analytics/track-job-match", json=body)

    def track_application_response(
        self, application_id: str, status: str, response_time: float
    ) -> List[Dict[str, Any]]:
        body = {"applicationId": application_id, "status": status, "responseTime": response_time}
        return self.request("POST", "/api/analytics/track-application-response", json=body)

    def response_times(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/analytics/response-time")

    def job_match_data(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/analytics/job-match-data")

    # ===== AI and matching =====

    def optimize_experience(self, description: str, **context: Any) -> str:
        """context: jobTitle, companyName, jobIndustry."""
        data = self.request("POST", "/api/ai/optimize-experience", json={"description": description, **context})
        return data["optimizedContent"]

    def suggest_skills(self, job_title: str, resume_content: Optional[str] = None, industry: Optional[str] = None) -> List[str]:
        body = {"jobTitle": job_title, "resumeContent": resume_content, "industry": industry}
        return self.request("POST", "/api/ai/suggest-skills", json=body)["suggestedSkills"]

    def match_resume_to_jobs(self, resume_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        body = {"resumeId": resume_id, "limit": limit}
        return self.request("POST", "/api/matching/resume-to-jobs", json=body)["matches"]

    def match_job_to_resumes(self, job_id: str) -> List[Dict[str, Any]]:
        return self.request("POST", "/api/matching/job-to-resumes", json={"jobId": job_id})["matches"]

    def optimize_resume(self, resume_id: str, job_id: str) -> Dict[str, Any]:
        return self.request("POST", "/api/matching/optimize-resume", json={"resumeId": resume_id, "jobId": job_id})

    def analyze_portfolio(self, portfolio_urls: List[str], job_id: Optional[str] = None) -> Dict[str, Any]:
        body = {"portfolioUrls": portfolio_urls, "jobId": job_id}
        return self.request("POST", "/api/matching/analyze-portfolio", json=body)

    # ===== Admin =====

    def admin_users(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/admin/users", admin=True)

    def admin_resumes(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/admin/resumes", admin=True)

    def admin_applications(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/admin/applications", admin=True)

    def admin_jobs(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/api/admin/jobs", admin=True)

    def admin_delete_user(self, user_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/api/admin/users/{user_id}", admin=True)
