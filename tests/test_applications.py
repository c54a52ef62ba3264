"""Application lifecycle: apply, review, status changes, notes and withdrawal."""

import uuid


def apply(client, who, job, **body):
    return client.post(f"/api/applications/job/{job['id']}", json=body or None, headers=who["headers"])


def job_counter(client, job):
    return client.get(f"/api/jobs/{job['id']}").json()["applicationsCount"]


def test_apply_then_withdraw_keeps_counter_in_step(client, candidate, create_job):
    job = create_job()

    applied = apply(client, candidate, job, coverLetter="  Hire me  ")

    assert applied.status_code == 201
    application = applied.json()
    assert application["status"] == "Applied"
    assert application["coverLetter"] == "Hire me"
    assert application["employerId"] == job["employerId"]
    assert application["profileSnapshot"]["name"] == "Jane Doe"
    assert application["profileSnapshot"]["email"] == "jane@example.com"
    assert job_counter(client, job) == 1

    withdrawn = client.delete(f"/api/applications/{application['id']}/withdraw", headers=candidate["headers"])

    assert withdrawn.status_code == 200
    assert withdrawn.json()["message"] == "Application withdrawn successfully."
    assert withdrawn.json()["application"]["status"] == "Withdrawn"
    assert job_counter(client, job) == 0

    again = client.delete(f"/api/applications/{application['id']}/withdraw", headers=candidate["headers"])
    assert again.status_code == 400
    assert again.json() == {"message": "Application already withdrawn."}
    assert job_counter(client, job) == 0


def test_counter_tracks_applies_minus_withdrawals(client, register, create_job):
    job = create_job()
    candidates = [register("candidate", email=f"c{i}@example.com") for i in range(4)]
    applications = [apply(client, c, job).json() for c in candidates]

    for c, application in zip(candidates[:3], applications[:3]):
        client.delete(f"/api/applications/{application['id']}/withdraw", headers=c["headers"])

    assert job_counter(client, job) == 1


def test_apply_without_body(client, candidate, create_job):
    job = create_job()

    response = client.post(f"/api/applications/job/{job['id']}", headers=candidate["headers"])

    assert response.status_code == 201
    assert response.json()["coverLetter"] is None


def test_duplicate_application_is_rejected(client, candidate, create_job):
    job = create_job()
    apply(client, candidate, job)

    duplicate = apply(client, candidate, job)

    assert duplicate.status_code == 400
    assert duplicate.json() == {"message": "You have already applied for this job."}
    assert job_counter(client, job) == 1


def test_apply_to_missing_or_inactive_job(client, employer, candidate, create_job):
    job = create_job()
    client.delete(f"/api/jobs/{job['id']}", headers=employer["headers"])

    inactive = apply(client, candidate, job)
    missing = apply(client, candidate, {"id": str(uuid.uuid4())})

    assert inactive.status_code == 404
    assert inactive.json() == {"message": "Job not found or no longer active."}
    assert missing.status_code == 404


def test_apply_is_candidate_only(client, employer, create_job):
    job = create_job()
    assert apply(client, employer, job).status_code == 403


def test_cover_letter_length_limit(client, candidate, create_job):
    job = create_job()
    response = apply(client, candidate, job, coverLetter="x" * 5001)
    assert response.status_code == 400


def test_profile_snapshot_is_frozen_at_apply_time(client, employer, candidate, create_job):
    client.post(
        "/api/profiles",
        json={"headline": "Junior dev", "skills": "python", "resumeUrl": "https://cv.example.com/jane.pdf"},
        headers=candidate["headers"],
    )
    job = create_job()
    application = apply(client, candidate, job).json()

    assert application["profileSnapshot"] == {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "skills": ["python"],
        "headline": "Junior dev",
        "resumeUrl": "https://cv.example.com/jane.pdf",
    }

    client.post("/api/profiles", json={"headline": "Senior dev"}, headers=candidate["headers"])
    detail = client.get(f"/api/applications/{application['id']}", headers=employer["headers"]).json()
    assert detail["profileSnapshot"]["headline"] == "Junior dev"


def test_employer_lists_applications_for_owned_job(client, employer, other_employer, candidate, other_candidate, create_job):
    job = create_job(title="Backend")
    apply(client, candidate, job)
    apply(client, other_candidate, job)

    response = client.get(f"/api/applications/job/{job['id']}", headers=employer["headers"])

    assert response.status_code == 200
    applications = response.json()
    assert len(applications) == 2
    assert {a["candidate"]["email"] for a in applications} == {"jane@example.com", "john@example.com"}
    assert applications[0]["job"]["title"] == "Backend"

    forbidden = client.get(f"/api/applications/job/{job['id']}", headers=other_employer["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json() == {"message": "Not authorized to view applications for this job."}
    assert client.get(f"/api/applications/job/{uuid.uuid4()}", headers=employer["headers"]).status_code == 404


def test_candidate_lists_own_applications(client, candidate, other_candidate, create_job):
    first = create_job(title="First")
    second = create_job(title="Second")
    apply(client, candidate, first)
    apply(client, candidate, second)
    apply(client, other_candidate, first)

    response = client.get("/api/applications/candidate/me", headers=candidate["headers"])

    assert response.status_code == 200
    assert sorted(a["job"]["title"] for a in response.json()) == ["First", "Second"]


def test_application_detail_access(client, employer, other_employer, candidate, other_candidate, create_job):
    job = create_job()
    application = apply(client, candidate, job).json()
    url = f"/api/applications/{application['id']}"

    as_candidate = client.get(url, headers=candidate["headers"])
    as_owner = client.get(url, headers=employer["headers"])

    assert as_candidate.status_code == 200
    assert as_candidate.json()["employer"]["id"] == employer["user"]["id"]
    assert as_candidate.json()["employer"]["companyName"] == "Acme Inc"
    assert as_candidate.json()["job"]["companyName"] == "Acme Inc"
    assert as_owner.status_code == 200
    assert as_owner.json()["candidate"]["name"] == "Jane Doe"
    assert client.get(url, headers=other_employer["headers"]).status_code == 403
    assert client.get(url, headers=other_candidate["headers"]).status_code == 403
    assert client.get(f"/api/applications/{uuid.uuid4()}", headers=employer["headers"]).status_code == 404
    assert client.get("/api/applications/garbage", headers=employer["headers"]).status_code == 404


def test_status_updates(client, employer, other_employer, candidate, create_job):
    job = create_job()
    application = apply(client, candidate, job).json()
    url = f"/api/applications/{application['id']}/status"

    offered = client.put(url, json={"status": "Offered"}, headers=employer["headers"])
    # Any employer status may follow any other
    back = client.put(url, json={"status": "Viewed"}, headers=employer["headers"])
    invalid = client.put(url, json={"status": "Hired"}, headers=employer["headers"])
    missing = client.put(url, json={}, headers=employer["headers"])
    withdraw_attempt = client.put(url, json={"status": "Withdrawn"}, headers=employer["headers"])
    not_owner = client.put(url, json={"status": "Rejected"}, headers=other_employer["headers"])
    as_candidate = client.put(url, json={"status": "Offered"}, headers=candidate["headers"])

    assert offered.status_code == 200
    assert offered.json()["status"] == "Offered"
    assert back.json()["status"] == "Viewed"
    assert invalid.status_code == 400
    assert invalid.json() == {"message": "Invalid application status provided."}
    assert missing.status_code == 400
    assert withdraw_attempt.status_code == 400
    assert withdraw_attempt.json() == {"message": "Only the candidate can withdraw an application."}
    assert not_owner.status_code == 403
    assert as_candidate.status_code == 403


def test_withdrawn_application_is_terminal(client, employer, candidate, create_job):
    job = create_job()
    application = apply(client, candidate, job).json()
    client.delete(f"/api/applications/{application['id']}/withdraw", headers=candidate["headers"])

    response = client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "Shortlisted"},
        headers=employer["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Cannot change the status of a withdrawn application."}


def test_withdraw_requires_the_applicant(client, candidate, other_candidate, create_job):
    job = create_job()
    application = apply(client, candidate, job).json()

    response = client.delete(f"/api/applications/{application['id']}/withdraw", headers=other_candidate["headers"])

    assert response.status_code == 403
    assert job_counter(client, job) == 1


def test_employer_cannot_withdraw(client, employer, candidate, create_job):
    job = create_job()
    application = apply(client, candidate, job).json()

    response = client.delete(f"/api/applications/{application['id']}/withdraw", headers=employer["headers"])

    assert response.status_code == 403
    assert job_counter(client, job) == 1
    detail = client.get(f"/api/applications/{application['id']}", headers=candidate["headers"])
    assert detail.json()["status"] == "Applied"


def test_employer_notes(client, employer, other_employer, candidate, create_job):
    job = create_job()
    application = apply(client, candidate, job).json()
    url = f"/api/applications/{application['id']}/notes"

    first = client.post(url, json={"note": "Strong CV"}, headers=employer["headers"])
    second = client.post(url, json={"note": "Call next week"}, headers=employer["headers"])
    empty = client.post(url, json={"note": "   "}, headers=employer["headers"])
    not_owner = client.post(url, json={"note": "Mine"}, headers=other_employer["headers"])

    assert first.status_code == 200
    notes = second.json()["notes"]
    assert [n["note"] for n in notes] == ["Strong CV", "Call next week"]
    assert notes[0]["byUser"] == employer["user"]["id"]
    assert notes[0]["date"]
    assert empty.status_code == 400
    assert not_owner.status_code == 403
