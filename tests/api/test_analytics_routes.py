"""API tests for /api/analytics."""

from fastapi.testclient import TestClient

from src.common.types import MAX_PERIOD_SUMMARIES


def test_dashboard_creates_analytics(client: TestClient, auth_headers, job_id):
    client.post(f"/api/jobs/apply/{job_id}", json={}, headers=auth_headers)

    response = client.get("/api/analytics/dashboard", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["applicationStats"]["totalApplications"] == 1
    assert body["applicationStats"]["pending"] == 1
    assert body["resumeViews"] == 0


def test_reads_before_any_analytics_are_404(client: TestClient, auth_headers):
    for path in ("/api/analytics/applications/summary", "/api/analytics/suggestions",
                 "/api/analytics/response-time", "/api/analytics/job-match-data"):
        response = client.get(path, headers=auth_headers)
        assert response.status_code == 404, path
        assert response.json() == {"msg": "Analytics data not found"}


def test_weekly_and_monthly_summaries(client: TestClient, auth_headers):
    for _ in range(MAX_PERIOD_SUMMARIES + 1):
        weekly = client.post("/api/analytics/update-weekly-summary", headers=auth_headers)
    monthly = client.post("/api/analytics/update-monthly-summary", headers=auth_headers)

    assert "week" in weekly.json()
    assert "month" in monthly.json()

    weeks = client.get("/api/analytics/applications/summary", params={"period": "weekly"}, headers=auth_headers)
    months = client.get("/api/analytics/applications/summary", params={"period": "monthly"}, headers=auth_headers)
    assert len(weeks.json()) == MAX_PERIOD_SUMMARIES
    assert len(months.json()) == 1


def test_tracking_endpoints(client: TestClient, auth_headers, job_id, resume_id):
    views = client.post(f"/api/analytics/track-resume-view/{resume_id}", headers=auth_headers)
    assert views.json() == {"resumeViews": 1}

    matches = client.post(
        "/api/analytics/track-job-match",
        json={"jobId": job_id, "matchPercentage": "82.5"},
        headers=auth_headers,
    )
    assert matches.json()[0]["matchPercentage"] == 82.5
    assert matches.json()[0]["job"] == job_id

    responses = client.post(
        "/api/analytics/track-application-response",
        json={"applicationId": "5f0000000000000000000000", "status": "Offer", "responseTime": 3},
        headers=auth_headers,
    )
    assert responses.json()[0]["status"] == "Offer"

    assert len(client.get("/api/analytics/job-match-data", headers=auth_headers).json()) == 1
    assert len(client.get("/api/analytics/response-time", headers=auth_headers).json()) == 1


def test_tracking_validation(client: TestClient, auth_headers):
    match = client.post("/api/analytics/track-job-match", json={"matchPercentage": "lots"}, headers=auth_headers)
    assert match.json()["errors"] == [
        {"msg": "Job ID is required", "param": "jobId"},
        {"msg": "Match percentage is required", "param": "matchPercentage"},
    ]

    response = client.post(
        "/api/analytics/track-application-response",
        json={"applicationId": "a1", "status": "Applied", "responseTime": 2},
        headers=auth_headers,
    )
    assert response.json()["errors"] == [{"msg": "Status is required", "param": "status"}]


def test_non_finite_numbers_rejected(client: TestClient, auth_headers):
    for value in ("NaN", "1e999"):
        match = client.post(
            "/api/analytics/track-job-match",
            json={"jobId": "abc", "matchPercentage": value},
            headers=auth_headers,
        )
        assert match.status_code == 400, value
        assert match.json()["errors"] == [{"msg": "Match percentage is required", "param": "matchPercentage"}]

    response = client.post(
        "/api/analytics/track-application-response",
        json={"applicationId": "a1", "status": "Offer", "responseTime": "Infinity"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["errors"] == [{"msg": "Response time is required", "param": "responseTime"}]

    weekly = client.post("/api/analytics/update-weekly-summary", headers=auth_headers)
    assert weekly.json()["averageMatchRate"] == 0


class TestInsights:

    def test_requires_applications(self, client: TestClient, auth_headers):
        response = client.post("/api/analytics/generate-insights", headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"msg": "No applications found to generate insights"}

    def test_default_insights_when_providers_fail(self, client: TestClient, auth_headers, job_id, llm_responses):
        client.post(f"/api/jobs/apply/{job_id}", json={}, headers=auth_headers)
        llm_responses(RuntimeError("down"), RuntimeError("down"))

        response = client.post("/api/analytics/generate-insights", headers=auth_headers)

        assert response.status_code == 200
        assert [insight["category"] for insight in response.json()] == [
            "Skills", "JobCategory", "ResumeOptimization",
        ]

    def test_insights_feed_the_suggestion_inbox(self, client: TestClient, auth_headers, job_id, llm_responses):
        client.post(f"/api/jobs/apply/{job_id}", json={}, headers=auth_headers)
        llm_responses('[{"content": "Follow up after a week", "category": "ApplicationStrategy"}]')
        client.post("/api/analytics/generate-insights", headers=auth_headers)

        [suggestion] = client.get("/api/analytics/suggestions", headers=auth_headers).json()
        assert suggestion["content"] == "Follow up after a week"
        assert suggestion["isRead"] is False

        inbox = client.put(f"/api/analytics/suggestions/{suggestion['_id']}", headers=auth_headers).json()
        assert inbox[0]["isRead"] is True
        assert client.get("/api/analytics/suggestions", headers=auth_headers).json() == []

    def test_unknown_suggestion(self, client: TestClient, auth_headers):
        client.get("/api/analytics/dashboard", headers=auth_headers)

        response = client.put("/api/analytics/suggestions/5f0000000000000000000000", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"msg": "Suggestion not found"}
