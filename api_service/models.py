"""
Request models for the Job Copilot API.

Field names match the JSON the client sends (camelCase). Validators raise
ValueError with the exact message returned to the client; the app's
validation handler turns them into {"errors": [{"msg", "param"}]}.
"""

import math
from typing import Any, ClassVar, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.common.types import (
    APPLICATION_STATUSES,
    RESPONSE_STATUSES,
    EducationLevel,
    ExperienceLevel,
    JobType,
    SkillLevel,
)


# === Validation helpers ===

def require_text(value: Any, message: str) -> str:
    """Non-empty string, else ValueError(message)."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(message)
    return value


def require_email(value: Any, message: str) -> str:
    """Syntactically valid email, lowercased; deliverability is not checked."""
    if not isinstance(value, str):
        raise ValueError(message)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(message)
    return value.strip().lower()


def require_number(value: Any, message: str) -> float:
    """Finite number or numeric string."""
    if isinstance(value, bool) or value is None:
        raise ValueError(message)
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            raise ValueError(message)
    if not math.isfinite(number):
        raise ValueError(message)
    return number


# === Auth ===

class RegisterRequest(BaseModel):
    """Body for POST /api/users."""

    NAME_MESSAGE: ClassVar[str] = "Name is required"
    EMAIL_MESSAGE: ClassVar[str] = "Please include a valid email"
    PASSWORD_MESSAGE: ClassVar[str] = "Please enter a password with 6 or more characters"

    name: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return require_text(v, cls.NAME_MESSAGE)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_address(cls, v: Any) -> str:
        return require_email(v, cls.EMAIL_MESSAGE)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        if not isinstance(v, str) or len(v) < 6:
            raise ValueError(cls.PASSWORD_MESSAGE)
        return v


class AuthRegisterRequest(RegisterRequest):
    """Body for POST /api/auth/register; same rules, older wording."""

    EMAIL_MESSAGE: ClassVar[str] = "Please include valid email"
    PASSWORD_MESSAGE: ClassVar[str] = "Please enter password with 6+ characters"


class LoginRequest(BaseModel):
    """Body for POST /api/auth and POST /api/admin/login."""

    email: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_address(cls, v: Any) -> str:
        return require_email(v, "Please include a valid email")

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("Password is required")
        return v


# === Resumes ===

class PersonalInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    phone: Optional[str] = None
    address: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None
    summary: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return require_text(v, "Name is required")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_address(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("Email is required")
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("Email is required")
        return v


class WorkExperienceEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    company: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    current: bool = False
    description: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)
    optimizedDescription: Optional[str] = None


class EducationEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    institution: Optional[str] = None
    degree: Optional[str] = None
    fieldOfStudy: Optional[str] = None
    location: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    current: bool = False
    description: Optional[str] = None


class SkillEntry(BaseModel):
    name: str
    level: SkillLevel = "Intermediate"


class ResumeCreateRequest(BaseModel):
    template: Optional[str] = Field(default=None, validate_default=True)
    personalInfo: PersonalInfo = Field(default_factory=dict, validate_default=True)
    workExperience: List[WorkExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[SkillEntry] = Field(default_factory=list)
    suggestedSkills: List[str] = Field(default_factory=list)

    @field_validator("template", mode="before")
    @classmethod
    def validate_template(cls, v: Any) -> str:
        return require_text(v, "Template is required")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ResumeUpdateRequest(BaseModel):
    """Top-level sections to replace; omitted or empty sections are kept."""

    template: Optional[str] = None
    personalInfo: Optional[Dict[str, Any]] = None
    workExperience: Optional[List[WorkExperienceEntry]] = None
    education: Optional[List[EducationEntry]] = None
    skills: Optional[List[SkillEntry]] = None
    suggestedSkills: Optional[List[str]] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ApplyOptimizationRequest(BaseModel):
    optimizationData: Optional[Dict[str, Any]] = None


# === Jobs ===


class JobCreateRequest(BaseModel):
    title: Optional[str] = Field(default=None, validate_default=True)
    company: Optional[str] = Field(default=None, validate_default=True)
    description: Optional[str] = Field(default=None, validate_default=True)
    requirements: Optional[str] = Field(default=None, validate_default=True)
    location: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    salary: Optional[str] = None
    jobType: Optional[JobType] = None
    industry: Optional[str] = None
    experienceLevel: Optional[ExperienceLevel] = None
    educationLevel: Optional[EducationLevel] = None
    applicationUrl: Optional[str] = None
    expiryDate: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        return require_text(v, "Title is required")

    @field_validator("company", mode="before")
    @classmethod
    def validate_company(cls, v: Any) -> str:
        return require_text(v, "Company is required")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> str:
        return require_text(v, "Description is required")

    @field_validator("requirements", mode="before")
    @classmethod
    def validate_requirements(cls, v: Any) -> str:
        return require_text(v, "Requirements are required")


class JobUpdateRequest(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    skills: Optional[List[str]] = None
    salary: Optional[str] = None
    jobType: Optional[JobType] = None
    industry: Optional[str] = None
    experienceLevel: Optional[ExperienceLevel] = None
    educationLevel: Optional[EducationLevel] = None
    applicationUrl: Optional[str] = None
    expiryDate: Optional[str] = None
    isActive: Optional[bool] = None


class ApplyToJobRequest(BaseModel):
    resumeId: Optional[str] = None
    coverLetter: Optional[str] = None
    notes: Optional[str] = None


class ExternalJobData(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(default=None, validate_default=True)
    company: Optional[str] = Field(default=None, validate_default=True)
    description: Optional[str] = Field(default=None, validate_default=True)
    location: Optional[str] = None
    requirements: Optional[str] = None
    url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        return require_text(v, "Title is required")

    @field_validator("company", mode="before")
    @classmethod
    def validate_company(cls, v: Any) -> str:
        return require_text(v, "Company is required")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> str:
        return require_text(v, "Description is required")


class ImportJobRequest(BaseModel):
    externalId: Optional[str] = Field(default=None, validate_default=True)
    source: Optional[str] = None
    jobData: ExternalJobData = Field(default_factory=dict, validate_default=True)

    @field_validator("externalId", mode="before")
    @classmethod
    def validate_external_id(cls, v: Any) -> str:
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        return require_text(v, "External ID is required")


# === Applications ===

class ApplicationCreateRequest(BaseModel):
    job: Optional[str] = Field(default=None, validate_default=True)
    resume: Optional[str] = Field(default=None, validate_default=True)
    coverLetter: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("job", mode="before")
    @classmethod
    def validate_job(cls, v: Any) -> str:
        return require_text(v, "Job is required")

    @field_validator("resume", mode="before")
    @classmethod
    def validate_resume(cls, v: Any) -> str:
        return require_text(v, "Resume is required")


class ApplicationUpdateRequest(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        if v not in APPLICATION_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(APPLICATION_STATUSES)}")
        return v


# === Analytics ===

class TrackJobMatchRequest(BaseModel):
    jobId: Optional[str] = Field(default=None, validate_default=True)
    matchPercentage: Optional[float] = Field(default=None, validate_default=True)

    @field_validator("jobId", mode="before")
    @classmethod
    def validate_job_id(cls, v: Any) -> str:
        return require_text(v, "Job ID is required")

    @field_validator("matchPercentage", mode="before")
    @classmethod
    def validate_match_percentage(cls, v: Any) -> float:
        return require_number(v, "Match percentage is required")


class TrackApplicationResponseRequest(BaseModel):
    applicationId: Optional[str] = Field(default=None, validate_default=True)
    status: Optional[str] = Field(default=None, validate_default=True)
    responseTime: Optional[float] = Field(default=None, validate_default=True)

    @field_validator("applicationId", mode="before")
    @classmethod
    def validate_application_id(cls, v: Any) -> str:
        return require_text(v, "Application ID is required")

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> str:
        if v not in RESPONSE_STATUSES:
            raise ValueError("Status is required")
        return v

    @field_validator("responseTime", mode="before")
    @classmethod
    def validate_response_time(cls, v: Any) -> float:
        return require_number(v, "Response time is required")


# === AI ===

class OptimizeExperienceRequest(BaseModel):
    description: Optional[str] = None
    jobTitle: Optional[str] = None
    companyName: Optional[str] = None
    jobIndustry: Optional[str] = None


class SuggestSkillsRequest(BaseModel):
    jobTitle: Optional[str] = None
    resumeContent: Optional[str] = None
    industry: Optional[str] = None


# === Matching ===

class ResumeToJobsRequest(BaseModel):
    resumeId: Optional[str] = None
    limit: int = Field(default=10, ge=1, le=100)


class JobToResumesRequest(BaseModel):
    jobId: Optional[str] = None


class OptimizeResumeRequest(BaseModel):
    resumeId: Optional[str] = None
    jobId: Optional[str] = None


class AnalyzePortfolioRequest(BaseModel):
    portfolioUrls: Optional[List[str]] = None
    jobId: Optional[str] = None
