"""Unit tests for src/services/job_service.py"""

import re
from datetime import datetime, timedelta

import pytest

from src.common.error_handling import DuplicateRecordError, NotFoundError
from src.services.job_service import JobQuery, JobService, build_job


@pytest.fixture
def service(db):
    return JobService(db)


def make_job(service, **overrides):
    data = {"title": "Engineer", "company": "Acme", "description": "Build things", "requirements": "Python"}
    data.update(overrides)
    return service.create(data)


def test_build_job_applies_defaults():
    job = build_job({"title": "T", "company": "C", "description": "D", "requirements": "R"})

    assert job["jobType"] == "Full-time"
    assert job["experienceLevel"] == "Mid-level"
    assert job["educationLevel"] == "Bachelor"
    assert job["source"] == "Manual"
    assert job["isActive"] is True
    assert job["skills"] == []
    assert "location" not in job


def test_query_filter_escapes_search_text():
    query = JobQuery(search="C++ (senior)", job_type="Contract")
    mongo_filter = query.to_filter()

    assert mongo_filter["isActive"] is True
    assert mongo_filter["jobType"] == "Contract"
    assert mongo_filter["$or"][0]["title"] == {"$regex": re.escape("C++ (senior)"), "$options": "i"}


def test_search_paginates_newest_first(service):
    now = datetime(2024, 6, 1)
    for day in range(5):
        make_job(service, title=f"Job {day}", postedDate=now - timedelta(days=day))

    page = service.search(JobQuery(page=2, limit=2))

    assert [job["title"] for job in page["jobs"]] == ["Job 2", "Job 3"]
    assert page["pagination"] == {"total": 5, "page": 2, "limit": 2, "pages": 3}


def test_search_matches_company_case_insensitively(service):
    make_job(service, company="Initech")
    make_job(service, company="Globex")

    result = service.search(JobQuery(search="initech"))

    assert [job["company"] for job in result["jobs"]] == ["Initech"]


def test_inactive_jobs_hidden_from_search(service):
    job = make_job(service)
    service.update(str(job["_id"]), {"isActive": False})

    assert service.search(JobQuery())["pagination"]["total"] == 0


def test_update_and_delete_unknown_job(service):
    with pytest.raises(NotFoundError, match="Job not found"):
        service.update("5f0000000000000000000000", {"title": "X"})
    with pytest.raises(NotFoundError, match="Job not found"):
        service.delete("nope")


def test_external_search_is_mocked(service):
    listings = service.external_search("python", "Berlin")
    assert listings
    assert all(listing["source"] == "External API" for listing in listings)


def test_import_once_per_source(service):
    data = {"title": "Remote Dev", "company": "Far Away", "description": "Anywhere", "url": "https://jobs.example/1"}

    job = service.import_external("ext-1", "Indeed", data)

    assert job["source"] == "Indeed"
    assert job["sourceId"] == "ext-1"
    assert job["requirements"] == "Not specified"
    assert job["applicationUrl"] == "https://jobs.example/1"

    with pytest.raises(DuplicateRecordError, match="Job already imported"):
        service.import_external("ext-1", "Indeed", data)


def test_import_unknown_source_stored_as_other(service):
    job = service.import_external("ext-2", "Monster", {"title": "T", "company": "C", "description": "D"})
    assert job["source"] == "Other"
