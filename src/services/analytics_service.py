"""
Analytics Service

Per-user analytics document: dashboard counters recomputed from live
applications, weekly/monthly rollups, a suggestions inbox fed by AI
insight generation, and tracked resume views, job matches and employer
response times.

Architecture:
    - At most one document per user (unique index on user)
    - Documents are created lazily; every write is a single upsert whose
      $setOnInsert fills in the defaults the write itself does not touch
    - Rollup lists are capped server-side with $push/$slice

Usage:
    service = AnalyticsService(db)
    analytics = service.dashboard(user_id)
    summary = service.update_summary(user_id, "weekly")
    insights = await service.generate_insights(user_id)
"""

import calendar
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from pydantic import BaseModel, Field
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from src.common.database import USER_ANALYTICS
from src.common.error_handling import BadRequestError, NotFoundError, ProviderUnavailableError
from src.common.json_utils import parse_json_array, to_plain
from src.common.logger import get_logger
from src.common.types import (
    ApplicationStats,
    JobMatchRecord,
    MAX_PERIOD_SUMMARIES,
    ResponseTimeRecord,
    Suggestion,
    SuggestionCategory,
    empty_application_stats,
)
from src.common.unified_llm import UnifiedLLM
from src.common.utils import maybe_object_id, utcnow
from src.prompts.insight_prompts import DEFAULT_INSIGHTS, INSIGHTS_SYSTEM_PROMPT, build_insights_prompt
from src.services.application_service import ApplicationService
from src.services.resume_service import owner_key


ANALYTICS_NOT_FOUND = "Analytics data not found"
SUGGESTION_NOT_FOUND = "Suggestion not found"
NO_APPLICATIONS = "No applications found to generate insights"

PERIOD_FIELDS = {
    "weekly": ("weeklySummaries", "week"),
    "monthly": ("monthlySummaries", "month"),
}


class GeneratedInsight(BaseModel):
    """One insight as the provider must return it."""
    content: str = Field(min_length=1)
    category: SuggestionCategory


def new_analytics(user_id: str, now: datetime) -> Dict[str, Any]:
    """Default analytics document for a user."""
    return {
        "user": owner_key(user_id),
        "resumeViews": 0,
        "jobMatchData": [],
        "applicationStats": empty_application_stats(),
        "responseTimeData": [],
        "suggestions": [],
        "weeklySummaries": [],
        "monthlySummaries": [],
        "createdAt": now,
        "updatedAt": now,
    }


def compute_application_stats(statuses: Iterable[str]) -> ApplicationStats:
    """Dashboard counters; pending covers Applied and Viewed."""
    stats = empty_application_stats()
    for status in statuses:
        stats["totalApplications"] += 1
        if status in ("Applied", "Viewed"):
            stats["pending"] += 1
        elif status == "Interview":
            stats["interviews"] += 1
        elif status == "Offer":
            stats["offers"] += 1
        elif status == "Rejected":
            stats["rejections"] += 1
        elif status == "Withdrawn":
            stats["withdrawn"] += 1
    return stats


def one_month_before(moment: datetime) -> datetime:
    """Same day and time one calendar month earlier, clamped to month end."""
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: str, now: datetime) -> datetime:
    if period == "monthly":
        return one_month_before(now)
    return now - timedelta(days=7)


def average_match_rate(job_matches: List[Dict[str, Any]], since: datetime) -> float:
    """Mean matchPercentage of matches dated at or after since, 0 if none."""
    recent = [
        float(match.get("matchPercentage") or 0)
        for match in job_matches
        if match.get("date") is not None and match["date"] >= since
    ]
    if not recent:
        return 0
    return sum(recent) / len(recent)


def summarize_period(
    period: str,
    now: datetime,
    statuses: List[str],
    job_matches: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """Build one weekly or monthly rollup entry."""
    _, date_field = PERIOD_FIELDS[period]
    since = period_start(period, now)
    return {
        date_field: now,
        "applicationsSubmitted": len(statuses),
        "interviews": statuses.count("Interview"),
        "offers": statuses.count("Offer"),
        "rejections": statuses.count("Rejected"),
        "averageMatchRate": average_match_rate(job_matches, since),
    }


def summarize_applications(applications: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Reduce populated applications to the fields the insights prompt uses."""
    data = []
    for app in applications:
        job = app.get("job") or {}
        resume = app.get("resume") or {}
        data.append({
            "jobTitle": job.get("title"),
            "company": job.get("company"),
            "status": app.get("status"),
            "jobSkills": job.get("skills") or [],
            "resumeSkills": resume.get("skills") or [],
            "industry": job.get("industry"),
        })
    return data


class AnalyticsService:
    """
    Analytics operations for the requesting user.

    Collections used:
        - user_analytics: unique index on user
        - applications: read through ApplicationService
    """

    def __init__(self, db: Database):
        self.db = db
        self.analytics = db[USER_ANALYTICS]
        self.applications = ApplicationService(db)

    # ===== Storage helpers =====

    def _upsert(
        self,
        user_id: str,
        update: Dict[str, Any],
        touched: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """
        Apply update to the user's document, creating it if needed.

        Args:
            update: Update operators; updatedAt is always $set
            touched: Top-level fields the update writes, kept out of
                $setOnInsert so the operators do not conflict

        Returns:
            The document after the update
        """
        now = utcnow()
        excluded = set(touched) | {"user", "updatedAt"}
        defaults = {
            field: value
            for field, value in new_analytics(user_id, now).items()
            if field not in excluded
        }

        operators = dict(update)
        operators["$set"] = dict(operators.get("$set") or {}, updatedAt=now)
        operators["$setOnInsert"] = defaults

        key = {"user": owner_key(user_id)}
        try:
            return self.analytics.find_one_and_update(
                key, operators, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # Concurrent first write for this user; the document exists now
            get_logger(__name__, user_id=user_id, step="analytics").info("Upsert raced; retrying as update")
            return self.analytics.find_one_and_update(
                key, operators, return_document=ReturnDocument.AFTER
            )

    def _require(self, user_id: str) -> Dict[str, Any]:
        analytics = self.analytics.find_one({"user": owner_key(user_id)})
        if not analytics:
            raise NotFoundError(ANALYTICS_NOT_FOUND)
        return analytics

    def get_or_create(self, user_id: str) -> Dict[str, Any]:
        return self._upsert(user_id, {})

    # ===== Dashboard and rollups =====

    def dashboard(self, user_id: str) -> Dict[str, Any]:
        """Recompute applicationStats from live applications and persist them."""
        statuses = [app.get("status") for app in self.applications.find_for_user(user_id)]
        stats = compute_application_stats(statuses)
        return self._upsert(user_id, {"$set": {"applicationStats": stats}}, touched=["applicationStats"])

    def summaries(self, user_id: str, period: Optional[str]) -> List[Dict[str, Any]]:
        """
        Stored rollups, newest first.

        Any period other than "monthly" reads the weekly list.
        """
        analytics = self._require(user_id)
        field, date_field = PERIOD_FIELDS["monthly" if period == "monthly" else "weekly"]
        entries = list(analytics.get(field) or [])
        entries.sort(key=lambda entry: entry.get(date_field) or datetime.min, reverse=True)
        return entries

    def update_summary(self, user_id: str, period: str) -> Dict[str, Any]:
        """
        Compute a rollup over the trailing window and append it.

        Args:
            period: "weekly" (7 days) or "monthly" (1 calendar month)

        Returns:
            The new summary entry
        """
        field, _ = PERIOD_FIELDS[period]
        now = utcnow()
        since = period_start(period, now)

        statuses = [app.get("status") for app in self.applications.find_for_user(user_id, since=since)]
        existing = self.analytics.find_one({"user": owner_key(user_id)}, {"jobMatchData": 1}) or {}
        summary = summarize_period(period, now, statuses, existing.get("jobMatchData") or [])

        self._upsert(
            user_id,
            {"$push": {field: {"$each": [summary], "$slice": -MAX_PERIOD_SUMMARIES}}},
            touched=[field],
        )
        get_logger(__name__, user_id=user_id, step=f"{period}_summary").info(
            f"Stored summary: {summary['applicationsSubmitted']} applications"
        )
        return summary

    # ===== Suggestions =====

    def unread_suggestions(self, user_id: str) -> List[Dict[str, Any]]:
        analytics = self._require(user_id)
        return [s for s in analytics.get("suggestions") or [] if not s.get("isRead")]

    def mark_suggestion_read(self, user_id: str, suggestion_id: str) -> List[Dict[str, Any]]:
        """
        Mark one suggestion read and return the whole inbox.

        Raises:
            NotFoundError: No analytics document, or no such suggestion
        """
        self._require(user_id)
        oid = maybe_object_id(suggestion_id)
        if oid is None:
            raise NotFoundError(SUGGESTION_NOT_FOUND)

        analytics = self.analytics.find_one_and_update(
            {"user": owner_key(user_id), "suggestions._id": oid},
            {"$set": {"suggestions.$.isRead": True, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if not analytics:
            raise NotFoundError(SUGGESTION_NOT_FOUND)
        return analytics.get("suggestions") or []

    async def generate_insights(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Ask the provider chain for insights on the user's applications.

        When both providers fail or return malformed output, the three
        default insights are used instead. Either way the insights are
        appended to the suggestions inbox as unread.

        Raises:
            BadRequestError: If the user has no applications
        """
        applications = self.applications.find_with_jobs(user_id)
        if not applications:
            raise BadRequestError(NO_APPLICATIONS)

        prompt = build_insights_prompt(summarize_applications(applications))
        llm = UnifiedLLM(step_name="generate_insights", user_id=user_id)
        try:
            result = await llm.invoke(
                prompt,
                system=INSIGHTS_SYSTEM_PROMPT,
                parser=lambda text: parse_json_array(text, GeneratedInsight),
            )
            insights = to_plain(result.parsed)
        except ProviderUnavailableError:
            get_logger(__name__, user_id=user_id, step="generate_insights").warning(
                "Insight generation failed; using default insights"
            )
            insights = [dict(insight) for insight in DEFAULT_INSIGHTS]

        now = utcnow()
        suggestions: List[Suggestion] = [
            {
                "_id": ObjectId(),
                "content": insight["content"],
                "category": insight["category"],
                "isRead": False,
                "date": now,
            }
            for insight in insights
        ]
        self._upsert(user_id, {"$push": {"suggestions": {"$each": suggestions}}}, touched=["suggestions"])
        return insights

    # ===== Tracking =====

    def track_resume_view(self, user_id: str) -> int:
        analytics = self._upsert(user_id, {"$inc": {"resumeViews": 1}}, touched=["resumeViews"])
        return analytics["resumeViews"]

    def track_job_match(self, user_id: str, job_id: str, match_percentage: float) -> List[Dict[str, Any]]:
        """Append a job match record and return the full series."""
        record: JobMatchRecord = {
            "_id": ObjectId(),
            "job": maybe_object_id(job_id) or job_id,
            "matchPercentage": match_percentage,
            "date": utcnow(),
        }
        analytics = self._upsert(user_id, {"$push": {"jobMatchData": record}}, touched=["jobMatchData"])
        return analytics["jobMatchData"]

    def track_application_response(
        self,
        user_id: str,
        application_id: str,
        status: str,
        response_time: float,
    ) -> List[Dict[str, Any]]:
        """Append an employer response record and return the full series."""
        record: ResponseTimeRecord = {
            "_id": ObjectId(),
            "application": maybe_object_id(application_id) or application_id,
            "status": status,
            "responseTime": response_time,
            "date": utcnow(),
        }
        analytics = self._upsert(user_id, {"$push": {"responseTimeData": record}}, touched=["responseTimeData"])
        return analytics["responseTimeData"]

    def response_times(self, user_id: str) -> List[Dict[str, Any]]:
        return self._require(user_id).get("responseTimeData") or []

    def job_matches(self, user_id: str) -> List[Dict[str, Any]]:
        return self._require(user_id).get("jobMatchData") or []
