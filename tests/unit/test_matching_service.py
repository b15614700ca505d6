"""
Unit tests for src/services/matching_service.py and src/services/ai_service.py

Provider calls are replaced through the llm_responses fixture; portfolio
downloads through a patched fetch_image.
"""

import json

import pytest
import requests
from bson import ObjectId

from src.common.error_handling import NotFoundError, OwnershipError, ProviderUnavailableError
from src.services.ai_service import AIService
from src.services.job_service import JobService
from src.services.matching_service import MatchingService, fetch_image
from src.services.resume_service import ResumeService


@pytest.fixture
def owner():
    return str(ObjectId())


@pytest.fixture
def service(db, owner):
    return MatchingService(db, owner)


@pytest.fixture
def resume(db, owner):
    return ResumeService(db).create(owner, {
        "template": "modern",
        "personalInfo": {"name": "Ada", "email": "ada@example.com"},
        "workExperience": [{"company": "A", "position": "Dev", "description": "APIs"}],
        "skills": [{"name": "Python", "level": "Expert"}],
    })


@pytest.fixture
def job(db):
    return JobService(db).create({
        "title": "Platform Engineer",
        "company": "Acme",
        "description": "Kubernetes",
        "requirements": "Go",
        "skills": ["Go", "Kubernetes"],
    })


class TestResumeToJobs:

    @pytest.mark.asyncio
    async def test_returns_validated_matches(self, service, resume, job, llm_responses):
        reply = json.dumps([{"jobId": str(job["_id"]), "matchScore": 72, "reasons": ["APIs"], "missingSkills": ["Go"]}])
        primary, _ = llm_responses(f"```json\n{reply}\n```")

        matches = await service.resume_to_jobs(str(resume["_id"]), limit=3)

        assert matches == [{"jobId": str(job["_id"]), "matchScore": 72, "reasons": ["APIs"], "missingSkills": ["Go"]}]
        prompt = primary.return_value.ainvoke.call_args.args[0][-1].content
        assert "top 3 matches" in prompt
        assert str(job["_id"]) in prompt

    @pytest.mark.asyncio
    async def test_no_active_jobs_skips_provider(self, service, resume, llm_responses):
        primary, _ = llm_responses("[]")

        assert await service.resume_to_jobs(str(resume["_id"])) == []
        primary.assert_not_called()

    @pytest.mark.asyncio
    async def test_out_of_range_score_falls_back(self, service, resume, job, llm_responses):
        bad = json.dumps([{"jobId": str(job["_id"]), "matchScore": 140}])
        good = json.dumps([{"jobId": str(job["_id"]), "matchScore": 40}])
        llm_responses(bad, good)

        matches = await service.resume_to_jobs(str(resume["_id"]))

        assert matches[0]["matchScore"] == 40

    @pytest.mark.asyncio
    async def test_unknown_jobs_dropped_and_limit_applied(self, service, db, resume, job, llm_responses):
        second = JobService(db).create({
            "title": "SRE", "company": "Hooli", "description": "Pager", "requirements": "Linux",
        })
        llm_responses(json.dumps([
            {"jobId": "invented-1", "matchScore": 99},
            {"jobId": str(job["_id"]), "matchScore": 80},
            {"jobId": str(second["_id"]), "matchScore": 60},
            {"jobId": "invented-2", "matchScore": 50},
        ]))

        matches = await service.resume_to_jobs(str(resume["_id"]), limit=1)

        assert [m["jobId"] for m in matches] == [str(job["_id"])]

    @pytest.mark.asyncio
    async def test_only_unknown_jobs_falls_back(self, service, resume, job, llm_responses):
        invented = json.dumps([{"jobId": "invented-1", "matchScore": 90}])
        real = json.dumps([{"jobId": str(job["_id"]), "matchScore": 45}])
        _, secondary = llm_responses(invented, real)

        matches = await service.resume_to_jobs(str(resume["_id"]))

        assert matches == [{"jobId": str(job["_id"]), "matchScore": 45, "reasons": [], "missingSkills": []}]
        secondary.assert_called_once()

    @pytest.mark.asyncio
    async def test_other_users_resume(self, db, resume, job):
        with pytest.raises(OwnershipError):
            await MatchingService(db, str(ObjectId())).resume_to_jobs(str(resume["_id"]))


class TestJobToResumes:

    @pytest.mark.asyncio
    async def test_ranks_own_resumes(self, service, resume, job, llm_responses):
        llm_responses(json.dumps([{"resumeId": str(resume["_id"]), "matchScore": 55}]))

        matches = await service.job_to_resumes(str(job["_id"]))

        assert matches[0]["resumeId"] == str(resume["_id"])
        assert matches[0]["reasons"] == []

    @pytest.mark.asyncio
    async def test_other_resume_ids_are_dropped(self, service, db, resume, job, llm_responses):
        stranger = ResumeService(db).create(str(ObjectId()), {
            "template": "classic",
            "personalInfo": {"name": "Eve", "email": "eve@example.com"},
        })
        llm_responses(json.dumps([
            {"resumeId": str(stranger["_id"]), "matchScore": 95},
            {"resumeId": str(resume["_id"]), "matchScore": 70},
        ]))

        matches = await service.job_to_resumes(str(job["_id"]))

        assert [m["resumeId"] for m in matches] == [str(resume["_id"])]

    @pytest.mark.asyncio
    async def test_only_unknown_resumes_is_provider_failure(self, service, resume, job, llm_responses):
        invented = json.dumps([{"resumeId": "invented", "matchScore": 70}])
        llm_responses(invented, invented)

        with pytest.raises(ProviderUnavailableError, match="Both AI services failed"):
            await service.job_to_resumes(str(job["_id"]))

    @pytest.mark.asyncio
    async def test_user_without_resumes(self, service, job, llm_responses):
        primary, _ = llm_responses("[]")
        assert await service.job_to_resumes(str(job["_id"])) == []
        primary.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_job(self, service):
        with pytest.raises(NotFoundError, match="Job not found"):
            await service.job_to_resumes(str(ObjectId()))


class TestOptimizeResume:

    @pytest.mark.asyncio
    async def test_accepts_strings_and_indexed_rewrites(self, service, resume, job, llm_responses):
        llm_responses(json.dumps({
            "summary": "Platform-minded engineer",
            "skills": ["Go"],
            "experience": ["Quantify impact", {"index": 0, "description": "Built Go APIs"}],
            "keywords": ["Kubernetes"],
        }))

        optimization = await service.optimize_resume(str(resume["_id"]), str(job["_id"]))

        assert optimization["summary"] == "Platform-minded engineer"
        assert optimization["experience"] == ["Quantify impact", {"index": 0, "description": "Built Go APIs"}]
        assert optimization["education"] == []
        assert optimization["generalTips"] == []

    @pytest.mark.asyncio
    async def test_both_providers_malformed(self, service, resume, job, llm_responses):
        llm_responses("Sure! Here is my advice.", "[]")

        with pytest.raises(ProviderUnavailableError):
            await service.optimize_resume(str(resume["_id"]), str(job["_id"]))


class TestAnalyzePortfolio:

    @pytest.mark.asyncio
    async def test_sends_images_and_job_context(self, service, job, llm_responses, mocker):
        primary, _ = llm_responses("Strong visual hierarchy.")
        mocker.patch(
            "src.services.matching_service.fetch_image",
            return_value={"mime_type": "image/png", "data": "aGVsbG8="},
        )

        result = await service.analyze_portfolio(["https://img.example/1.png"], job_id=str(job["_id"]))

        assert result == {"analysis": "Strong visual hierarchy.", "portfolioCount": 1}
        blocks = primary.return_value.ainvoke.call_args.args[0][-1].content
        assert "Platform Engineer" in blocks[0]["text"]
        assert blocks[1]["image_url"]["url"] == "data:image/png;base64,aGVsbG8="

    @pytest.mark.asyncio
    async def test_unreachable_images_are_skipped(self, service, llm_responses, mocker):
        primary, _ = llm_responses("Only one image was reviewable.")
        mocker.patch(
            "src.services.matching_service.fetch_image",
            side_effect=[requests.ConnectionError("down"), {"mime_type": "image/jpeg", "data": "eA=="}],
        )

        result = await service.analyze_portfolio(["https://a/1.png", "https://a/2.jpg"], job_id="not-an-id")

        assert result["portfolioCount"] == 2
        blocks = primary.return_value.ainvoke.call_args.args[0][-1].content
        assert len(blocks) == 2

    @pytest.mark.asyncio
    async def test_attempts_at_most_ten_images(self, service, llm_responses, mocker):
        llm_responses("ok")
        fetch = mocker.patch(
            "src.services.matching_service.fetch_image",
            return_value={"mime_type": "image/png", "data": "eA=="},
        )

        result = await service.analyze_portfolio([f"https://a/{i}.png" for i in range(12)])

        assert result["portfolioCount"] == 10
        assert fetch.call_count == 10

    @pytest.mark.asyncio
    async def test_provider_failure_message(self, service, llm_responses, mocker):
        llm_responses(RuntimeError("down"), RuntimeError("down"))
        mocker.patch("src.services.matching_service.fetch_image", return_value={"mime_type": "image/png", "data": ""})

        with pytest.raises(ProviderUnavailableError, match="Portfolio analysis failed"):
            await service.analyze_portfolio(["https://a/1.png"])


def test_fetch_image_encodes_body(mocker):
    response = mocker.Mock(content=b"hello", headers={"content-type": "image/webp; charset=binary"})
    get = mocker.patch("src.services.matching_service.requests.get", return_value=response)

    image = fetch_image("https://a/1.webp", timeout=5)

    assert image == {"mime_type": "image/webp", "data": "aGVsbG8="}
    get.assert_called_once_with("https://a/1.webp", timeout=5)
    response.raise_for_status.assert_called_once()


class TestAIService:

    @pytest.mark.asyncio
    async def test_optimize_experience_returns_text(self, llm_responses):
        primary, _ = llm_responses("Led a team of five engineers.")

        content = await AIService().optimize_experience("Managed people", job_title="Lead", industry="Retail")

        assert content == "Led a team of five engineers."
        prompt = primary.return_value.ainvoke.call_args.args[0][-1].content
        assert "Managed people" in prompt

    @pytest.mark.asyncio
    async def test_suggest_skills_parses_list(self, llm_responses):
        llm_responses("1. Python\n2. SQL\n3. Communication")

        skills = await AIService().suggest_skills("Data Analyst")

        assert skills == ["Python", "SQL", "Communication"]

    @pytest.mark.asyncio
    async def test_suggest_skills_unparseable_falls_back(self, llm_responses):
        llm_responses("You should learn things", "- Excel")

        assert await AIService().suggest_skills("Accountant") == ["Excel"]
