"""API tests for /api/resumes."""

from fastapi.testclient import TestClient


def test_create_and_list(client: TestClient, auth_headers, create_resume):
    created = create_resume(auth_headers)

    assert created["template"] == "modern"
    assert created["skills"] == [{"name": "Python", "level": "Advanced"}]
    assert created["createdAt"].endswith("Z")

    listed = client.get("/api/resumes", headers=auth_headers).json()
    assert [resume["_id"] for resume in listed] == [created["_id"]]


def test_skill_level_defaults_to_intermediate(client: TestClient, auth_headers, create_resume):
    created = create_resume(auth_headers, skills=[{"name": "SQL"}])
    assert created["skills"] == [{"name": "SQL", "level": "Intermediate"}]


def test_create_validation(client: TestClient, auth_headers):
    response = client.post("/api/resumes", json={"personalInfo": {"email": "nope"}}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"msg": "Template is required", "param": "template"},
        {"msg": "Name is required", "param": "personalInfo.name"},
        {"msg": "Email is required", "param": "personalInfo.email"},
    ]


def test_missing_personal_info_is_reported(client: TestClient, auth_headers):
    response = client.post("/api/resumes", json={"template": "modern"}, headers=auth_headers)

    assert response.status_code == 400
    params = [error["param"] for error in response.json()["errors"]]
    assert params == ["personalInfo.name", "personalInfo.email"]


def test_other_users_resume_is_unauthorized(client: TestClient, auth_headers, other_headers, resume_id):
    for method in ("get", "delete"):
        response = getattr(client, method)(f"/api/resumes/{resume_id}", headers=other_headers)
        assert response.status_code == 401
        assert response.json() == {"msg": "User not authorized"}

    response = client.put(f"/api/resumes/{resume_id}", json={"template": "x"}, headers=other_headers)
    assert response.status_code == 401


def test_unknown_and_malformed_ids(client: TestClient, auth_headers):
    for resume_id in ("5f0000000000000000000000", "not-an-object-id"):
        response = client.get(f"/api/resumes/{resume_id}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"msg": "Resume not found"}


def test_update_replaces_sections(client: TestClient, auth_headers, resume_id):
    response = client.put(
        f"/api/resumes/{resume_id}",
        json={"template": "classic", "skills": [{"name": "Go", "level": "Beginner"}]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["template"] == "classic"
    assert body["skills"] == [{"name": "Go", "level": "Beginner"}]
    assert body["workExperience"][0]["company"] == "Analytical Engines"


def test_delete(client: TestClient, auth_headers, resume_id):
    response = client.delete(f"/api/resumes/{resume_id}", headers=auth_headers)

    assert response.json() == {"msg": "Resume removed"}
    assert client.get(f"/api/resumes/{resume_id}", headers=auth_headers).status_code == 404


class TestApplyOptimization:

    def test_requires_data(self, client: TestClient, auth_headers, resume_id):
        response = client.post(f"/api/resumes/apply-optimization/{resume_id}", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"msg": "Optimization data is required"}

    def test_merges_into_resume(self, client: TestClient, auth_headers, resume_id):
        optimization = {
            "summary": "Engineer focused on reliable APIs",
            "skills": ["python", "FastAPI"],
            "experience": [{"index": 0, "description": "Designed the first programs"}],
            "keywords": ["APIs", "reliability"],
        }

        response = client.post(
            f"/api/resumes/apply-optimization/{resume_id}",
            json={"optimizationData": optimization},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["personalInfo"]["summary"] == "Engineer focused on reliable APIs"
        assert body["suggestedSkills"] == ["FastAPI"]
        assert body["workExperience"][0]["optimizedDescription"] == "Designed the first programs"
        assert body["jobKeywords"] == ["APIs", "reliability"]
