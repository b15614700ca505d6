"""
Unit tests for src/services/analytics_service.py

Covers the pure rollup helpers and the lazily created per-user document.
"""

from datetime import datetime, timedelta

import pytest
from bson import ObjectId

from src.common.error_handling import BadRequestError, NotFoundError
from src.common.types import MAX_PERIOD_SUMMARIES
from src.prompts.insight_prompts import DEFAULT_INSIGHTS
from src.services.analytics_service import (
    AnalyticsService,
    average_match_rate,
    compute_application_stats,
    one_month_before,
    summarize_period,
)
from src.services.application_service import ApplicationService
from src.services.job_service import JobService


@pytest.fixture
def service(db):
    return AnalyticsService(db)


@pytest.fixture
def owner():
    return str(ObjectId())


def apply_to_new_job(db, owner, status="Applied"):
    job = JobService(db).create({"title": "Analyst", "company": "Globex", "description": "D", "requirements": "R"})
    applications = ApplicationService(db)
    application = applications.create(owner, str(job["_id"]))
    if status != "Applied":
        applications.update(str(application["_id"]), owner, status=status)
    return application


# ===== TESTS: pure helpers =====

class TestHelpers:

    def test_pending_covers_applied_and_viewed(self):
        stats = compute_application_stats(["Applied", "Viewed", "Interview", "Offer", "Rejected", "Withdrawn"])
        assert stats == {
            "totalApplications": 6,
            "pending": 2,
            "interviews": 1,
            "offers": 1,
            "rejections": 1,
            "withdrawn": 1,
        }

    @pytest.mark.parametrize(
        "moment, expected",
        [
            (datetime(2024, 5, 15, 9, 30), datetime(2024, 4, 15, 9, 30)),
            (datetime(2024, 3, 31), datetime(2024, 2, 29)),
            (datetime(2023, 3, 31), datetime(2023, 2, 28)),
            (datetime(2024, 1, 10), datetime(2023, 12, 10)),
        ],
    )
    def test_one_month_before(self, moment, expected):
        assert one_month_before(moment) == expected

    def test_average_match_rate_window(self):
        now = datetime(2024, 6, 1)
        matches = [
            {"matchPercentage": 80, "date": now - timedelta(days=1)},
            {"matchPercentage": 60, "date": now - timedelta(days=3)},
            {"matchPercentage": 10, "date": now - timedelta(days=30)},
        ]
        assert average_match_rate(matches, now - timedelta(days=7)) == 70
        assert average_match_rate([], now) == 0

    def test_summarize_period_uses_period_date_field(self):
        now = datetime(2024, 6, 1)
        weekly = summarize_period("weekly", now, ["Applied", "Interview", "Offer"], [])
        monthly = summarize_period("monthly", now, [], [])

        assert weekly["week"] == now
        assert weekly["applicationsSubmitted"] == 3
        assert weekly["interviews"] == 1
        assert weekly["offers"] == 1
        assert weekly["averageMatchRate"] == 0
        assert monthly["month"] == now


# ===== TESTS: AnalyticsService =====

class TestDashboard:

    def test_creates_document_on_first_read(self, service, db, owner):
        analytics = service.dashboard(owner)

        assert analytics["resumeViews"] == 0
        assert analytics["applicationStats"]["totalApplications"] == 0
        assert db.user_analytics.count_documents({}) == 1

    def test_recomputes_stats_from_applications(self, service, db, owner):
        apply_to_new_job(db, owner)
        apply_to_new_job(db, owner, status="Interview")

        stats = service.dashboard(owner)["applicationStats"]

        assert stats["totalApplications"] == 2
        assert stats["pending"] == 1
        assert stats["interviews"] == 1

    def test_reads_before_any_write_are_not_found(self, service, owner):
        with pytest.raises(NotFoundError, match="Analytics data not found"):
            service.summaries(owner, "weekly")
        with pytest.raises(NotFoundError):
            service.response_times(owner)


class TestSummaries:

    def test_update_appends_and_evicts_oldest(self, service, owner, mocker):
        start = datetime(2024, 1, 1)
        ticks = iter(range(1000))
        mocker.patch(
            "src.services.analytics_service.utcnow",
            side_effect=lambda: start + timedelta(hours=next(ticks)),
        )
        stored = [service.update_summary(owner, "weekly") for _ in range(MAX_PERIOD_SUMMARIES + 2)]

        weeks = [entry["week"] for entry in service.summaries(owner, "weekly")]

        assert len(weeks) == MAX_PERIOD_SUMMARIES
        assert weeks[0] == stored[-1]["week"]
        assert stored[0]["week"] not in weeks
        assert stored[1]["week"] not in weeks
        assert weeks[-1] == stored[2]["week"]
        assert service.summaries(owner, "monthly") == []

    def test_unknown_period_reads_weekly(self, service, owner):
        service.update_summary(owner, "weekly")
        assert len(service.summaries(owner, "yearly")) == 1

    def test_summary_counts_recent_applications(self, service, db, owner):
        apply_to_new_job(db, owner, status="Offer")
        service.track_job_match(owner, str(ObjectId()), 90)

        summary = service.update_summary(owner, "monthly")

        assert summary["applicationsSubmitted"] == 1
        assert summary["offers"] == 1
        assert summary["averageMatchRate"] == 90


class TestSuggestions:

    @pytest.mark.asyncio
    async def test_generate_insights_requires_applications(self, service, owner):
        with pytest.raises(BadRequestError, match="No applications found to generate insights"):
            await service.generate_insights(owner)

    @pytest.mark.asyncio
    async def test_generate_insights_from_provider(self, service, db, owner, llm_responses):
        apply_to_new_job(db, owner)
        llm_responses('[{"content": "Apply to more senior roles", "category": "ApplicationStrategy"}]')

        insights = await service.generate_insights(owner)

        assert insights == [{"content": "Apply to more senior roles", "category": "ApplicationStrategy"}]
        [suggestion] = service.unread_suggestions(owner)
        assert suggestion["isRead"] is False
        assert isinstance(suggestion["_id"], ObjectId)

    @pytest.mark.asyncio
    async def test_generate_insights_falls_back_to_defaults(self, service, db, owner, llm_responses):
        apply_to_new_job(db, owner)
        llm_responses("no json here", '[{"content": "x", "category": "Unknown"}]')

        insights = await service.generate_insights(owner)

        assert insights == [dict(insight) for insight in DEFAULT_INSIGHTS]
        assert len(service.unread_suggestions(owner)) == 3

    @pytest.mark.asyncio
    async def test_mark_read_hides_from_unread(self, service, db, owner, llm_responses):
        apply_to_new_job(db, owner)
        llm_responses(RuntimeError("down"), RuntimeError("down"))
        await service.generate_insights(owner)
        first = service.unread_suggestions(owner)[0]

        inbox = service.mark_suggestion_read(owner, str(first["_id"]))

        assert len(inbox) == 3
        assert [s["isRead"] for s in inbox if s["_id"] == first["_id"]] == [True]
        assert len(service.unread_suggestions(owner)) == 2

    def test_mark_unknown_suggestion(self, service, owner):
        service.get_or_create(owner)
        with pytest.raises(NotFoundError, match="Suggestion not found"):
            service.mark_suggestion_read(owner, str(ObjectId()))
        with pytest.raises(NotFoundError, match="Suggestion not found"):
            service.mark_suggestion_read(owner, "bad-id")


class TestTracking:

    def test_resume_views_increment(self, service, owner):
        assert service.track_resume_view(owner) == 1
        assert service.track_resume_view(owner) == 2

    def test_job_match_series(self, service, owner):
        job_id = str(ObjectId())
        service.track_job_match(owner, job_id, 75)
        series = service.track_job_match(owner, job_id, 85)

        assert [record["matchPercentage"] for record in series] == [75, 85]
        assert series[0]["job"] == ObjectId(job_id)
        assert service.job_matches(owner) == series

    def test_application_response_series(self, service, owner):
        series = service.track_application_response(owner, str(ObjectId()), "Interview", 4)

        assert series[0]["status"] == "Interview"
        assert series[0]["responseTime"] == 4
        assert service.response_times(owner) == series

    def test_one_document_per_user(self, service, db, owner):
        service.track_resume_view(owner)
        service.update_summary(owner, "weekly")
        service.dashboard(owner)

        assert db.user_analytics.count_documents({}) == 1
