"""Unit tests for src/services/resume_service.py"""

import pytest
from bson import ObjectId

from src.common.error_handling import NotFoundError, OwnershipError
from src.services.resume_service import ResumeService, merge_optimization


@pytest.fixture
def service(db):
    return ResumeService(db)


@pytest.fixture
def owner():
    return str(ObjectId())


def sample_resume():
    return {
        "personalInfo": {"name": "Ada", "summary": "Old summary"},
        "workExperience": [
            {"company": "A", "description": "first"},
            {"company": "B", "description": "second"},
        ],
        "education": [{"institution": "Uni", "description": "maths"}],
        "skills": [{"name": "Python", "level": "Advanced"}],
        "suggestedSkills": ["Docker"],
        "jobKeywords": ["old"],
    }


# ===== TESTS: merge_optimization =====

class TestMergeOptimization:

    def test_summary_replaces_personal_summary(self):
        updates = merge_optimization(sample_resume(), {"summary": "New summary"})
        assert updates == {"personalInfo.summary": "New summary"}

    def test_skills_union_skips_existing_names_case_insensitively(self):
        updates = merge_optimization(sample_resume(), {"skills": ["python", "Kubernetes", "Docker", "Kubernetes"]})
        assert updates["suggestedSkills"] == ["Docker", "Kubernetes"]

    def test_section_overrides_apply_only_to_existing_indexes(self):
        optimization = {
            "experience": [
                {"index": 1, "description": "rewritten second"},
                {"index": 5, "description": "ignored"},
                "free-text advice is ignored",
            ],
            "education": [{"index": 0, "description": "rewritten maths"}],
        }

        updates = merge_optimization(sample_resume(), optimization)

        assert updates == {
            "workExperience.1.optimizedDescription": "rewritten second",
            "education.0.description": "rewritten maths",
        }

    def test_keywords_replace_only_when_non_empty(self):
        assert merge_optimization(sample_resume(), {"keywords": []}) == {}
        assert merge_optimization(sample_resume(), {"keywords": ["api"]}) == {"jobKeywords": ["api"]}

    def test_empty_optimization_changes_nothing(self):
        assert merge_optimization(sample_resume(), {}) == {}


# ===== TESTS: ResumeService =====

class TestResumeService:

    def test_create_defaults_list_sections(self, service, owner):
        resume = service.create(owner, {"template": "modern", "personalInfo": {"name": "Ada"}})

        assert resume["user"] == ObjectId(owner)
        assert resume["workExperience"] == []
        assert resume["suggestedSkills"] == []
        assert resume["createdAt"] == resume["updatedAt"]

    def test_get_owned_checks_owner(self, service, owner):
        resume = service.create(owner, {"template": "modern"})

        with pytest.raises(OwnershipError, match="User not authorized"):
            service.get_owned(str(resume["_id"]), str(ObjectId()))

    def test_malformed_id_is_not_found(self, service, owner):
        with pytest.raises(NotFoundError, match="Resume not found"):
            service.get_owned("definitely-not-an-id", owner)

    def test_update_keeps_empty_sections(self, service, owner):
        resume = service.create(owner, {"template": "modern", "skills": [{"name": "Python"}]})

        updated = service.update(str(resume["_id"]), owner, {"template": "classic", "skills": []})

        assert updated["template"] == "classic"
        assert updated["skills"] == [{"name": "Python"}]
        assert updated["updatedAt"] >= resume["updatedAt"]

    def test_apply_optimization_persists_merge(self, service, owner):
        data = dict(sample_resume(), template="modern")
        resume = service.create(owner, data)

        updated = service.apply_optimization(
            str(resume["_id"]), owner, {"summary": "Sharper", "experience": [{"index": 0, "description": "better"}]}
        )

        assert updated["personalInfo"]["summary"] == "Sharper"
        assert updated["workExperience"][0]["optimizedDescription"] == "better"
        assert updated["workExperience"][0]["description"] == "first"

    def test_list_for_user_only_returns_own(self, service, owner):
        service.create(owner, {"template": "modern"})
        service.create(str(ObjectId()), {"template": "modern"})

        assert len(service.list_for_user(owner)) == 1
