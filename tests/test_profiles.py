"""Candidate profile upsert, lookup, search and deletion."""

import uuid

from app.api.v1 import profiles as profiles_module


def test_upsert_creates_then_updates_only_supplied_fields(client, candidate):
    created = client.post(
        "/api/profiles",
        json={
            "headline": "  Backend dev ",
            "summary": "Ten years of Python",
            "skills": "Python, SQL,,",
            "experience": [{"title": "Dev", "company": "Initech", "startDate": "2019-01-01"}],
            "contact": {"linkedin": "https://www.linkedin.com/in/jane-doe", "github": ""},
        },
        headers=candidate["headers"],
    )

    assert created.status_code == 201
    profile = created.json()
    assert profile["candidateId"] == candidate["user"]["id"]
    assert profile["candidate"]["email"] == "jane@example.com"
    assert profile["headline"] == "Backend dev"
    assert profile["skills"] == ["python", "sql"]
    assert profile["experience"][0]["startDate"] == "2019-01-01"
    assert profile["contact"]["linkedin"] == "https://www.linkedin.com/in/jane-doe"
    assert profile["contact"]["github"] is None
    assert profile["isVisible"] is True

    updated = client.post("/api/profiles", json={"headline": "Staff engineer"}, headers=candidate["headers"])

    assert updated.status_code == 200
    body = updated.json()
    assert body["id"] == profile["id"]
    assert body["headline"] == "Staff engineer"
    assert body["summary"] == "Ten years of Python"
    assert body["skills"] == ["python", "sql"]
    assert len(body["experience"]) == 1


def test_upsert_validation(client, candidate):
    cases = [
        {"contact": {"linkedin": "https://example.com/jane"}},
        {"contact": {"github": "github.com/jane"}},
        {"resumeUrl": "not a url"},
        {"headline": "x" * 151},
        {"experience": [{"title": "Dev"}]},
        {"isVisible": None},
    ]
    for payload in cases:
        response = client.post("/api/profiles", json=payload, headers=candidate["headers"])
        assert response.status_code == 400, payload
        assert response.json()["message"] == "Validation Error"


def test_upsert_is_candidate_only(client, employer):
    response = client.post("/api/profiles", json={"headline": "Hiring"}, headers=employer["headers"])
    assert response.status_code == 403


def test_get_my_profile(client, candidate):
    missing = client.get("/api/profiles/me", headers=candidate["headers"])
    assert missing.status_code == 404
    assert missing.json() == {"message": "Profile not found for this candidate."}

    client.post("/api/profiles", json={"headline": "Dev"}, headers=candidate["headers"])
    found = client.get("/api/profiles/me", headers=candidate["headers"])
    assert found.status_code == 200
    assert found.json()["headline"] == "Dev"


def test_employer_searches_visible_profiles(client, employer, candidate, other_candidate):
    client.post(
        "/api/profiles",
        json={"headline": "Frontend dev", "skills": "react,css", "summary": "Design systems"},
        headers=candidate["headers"],
    )
    client.post(
        "/api/profiles",
        json={"headline": "Data engineer", "skills": "python,sql", "isVisible": False},
        headers=other_candidate["headers"],
    )

    def headlines(**params):
        response = client.get("/api/profiles", params=params, headers=employer["headers"])
        assert response.status_code == 200
        return [profile["headline"] for profile in response.json()["profiles"]]

    assert headlines() == ["Frontend dev"]
    assert headlines(skills="React") == ["Frontend dev"]
    assert headlines(skills="react,python") == []
    assert headlines(keyword="design") == ["Frontend dev"]
    assert headlines(keyword="data") == []

    # Hidden again, then visible
    client.post("/api/profiles", json={"isVisible": True}, headers=other_candidate["headers"])
    assert sorted(headlines()) == ["Data engineer", "Frontend dev"]


def test_profile_search_is_employer_only(client, candidate):
    response = client.get("/api/profiles", headers=candidate["headers"])
    assert response.status_code == 403


def test_get_profile_by_user(client, employer, candidate):
    client.post("/api/profiles", json={"headline": "Dev"}, headers=candidate["headers"])
    user_id = candidate["user"]["id"]

    visible = client.get(f"/api/profiles/user/{user_id}", headers=employer["headers"])
    assert visible.status_code == 200
    assert visible.json()["candidate"]["name"] == "Jane Doe"

    client.post("/api/profiles", json={"isVisible": False}, headers=candidate["headers"])
    hidden = client.get(f"/api/profiles/user/{user_id}", headers=employer["headers"])
    assert hidden.status_code == 404
    assert hidden.json() == {"message": "Profile not found or not visible."}

    assert client.get(f"/api/profiles/user/{uuid.uuid4()}", headers=employer["headers"]).status_code == 404
    assert client.get("/api/profiles/user/abc", headers=employer["headers"]).status_code == 404
    assert client.get(f"/api/profiles/user/{user_id}").status_code == 401


def test_delete_profile(client, candidate):
    client.post("/api/profiles", json={"headline": "Dev"}, headers=candidate["headers"])

    first = client.delete("/api/profiles", headers=candidate["headers"])
    second = client.delete("/api/profiles", headers=candidate["headers"])

    assert first.status_code == 200
    assert first.json() == {"message": "Profile deleted successfully."}
    assert second.status_code == 404
    assert second.json() == {"message": "Profile not found to delete."}
    assert client.get("/api/profiles/me", headers=candidate["headers"]).status_code == 404


def test_profile_search_matches_non_ascii_skills(client, employer, candidate):
    client.post(
        "/api/profiles",
        json={"headline": "Pâtissier", "skills": "Crème brûlée, Café"},
        headers=candidate["headers"],
    )

    def headlines(**params):
        response = client.get("/api/profiles", params=params, headers=employer["headers"])
        assert response.status_code == 200
        return [profile["headline"] for profile in response.json()["profiles"]]

    assert headlines(skills="crème brûlée") == ["Pâtissier"]
    assert headlines(skills="CAFÉ") == ["Pâtissier"]
    assert headlines(skills="cafe") == []


def test_upsert_that_loses_the_create_race_updates(client, candidate, monkeypatch):
    client.post(
        "/api/profiles",
        json={"headline": "Dev", "summary": "Python"},
        headers=candidate["headers"],
    )

    # The first lookup misses the row a concurrent request just inserted
    real_load = profiles_module._load_profile
    calls = []

    async def stale_first_load(db, *criteria):
        calls.append(criteria)
        if len(calls) == 1:
            return None
        return await real_load(db, *criteria)

    monkeypatch.setattr(profiles_module, "_load_profile", stale_first_load)

    response = client.post("/api/profiles", json={"headline": "Staff engineer"}, headers=candidate["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["headline"] == "Staff engineer"
    assert body["summary"] == "Python"
    assert body["candidateId"] == candidate["user"]["id"]

    me = client.get("/api/profiles/me", headers=candidate["headers"])
    assert me.json()["headline"] == "Staff engineer"
