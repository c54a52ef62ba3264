"""Employer and platform analytics."""


def test_job_postings_analytics_empty(client, employer):
    response = client.get("/api/analytics/employer/jobs", headers=employer["headers"])

    assert response.status_code == 200
    assert response.json() == {
        "totalJobsPosted": 0,
        "totalViews": 0,
        "totalApplications": 0,
        "averageViewsPerJob": 0,
        "averageApplicationsPerJob": 0,
        "jobsAnalytics": [],
    }


def test_job_postings_analytics_totals_and_rounding(client, employer, other_employer, candidate, create_job):
    first = create_job(title="First")
    second = create_job(title="Second")
    third = create_job(title="Third")
    create_job(owner=other_employer, title="Not mine")

    for _ in range(2):
        client.put(f"/api/jobs/{first['id']}/view")
    client.put(f"/api/jobs/{second['id']}/view")
    client.post(f"/api/applications/job/{first['id']}", headers=candidate["headers"])
    # Inactive jobs still count
    client.delete(f"/api/jobs/{third['id']}", headers=employer["headers"])

    body = client.get("/api/analytics/employer/jobs", headers=employer["headers"]).json()

    assert body["totalJobsPosted"] == 3
    assert body["totalViews"] == 3
    assert body["totalApplications"] == 1
    assert body["averageViewsPerJob"] == 1
    assert body["averageApplicationsPerJob"] == 0.33
    by_title = {job["title"]: job for job in body["jobsAnalytics"]}
    assert set(by_title) == {"First", "Second", "Third"}
    assert by_title["First"]["views"] == 2
    assert by_title["First"]["applicationsCount"] == 1
    assert by_title["Third"]["isActive"] is False


def test_application_status_analytics(client, employer, register, create_job):
    job = create_job()
    candidates = [register("candidate", email=f"c{i}@example.com") for i in range(3)]
    applications = [
        client.post(f"/api/applications/job/{job['id']}", headers=c["headers"]).json()
        for c in candidates
    ]
    client.put(
        f"/api/applications/{applications[0]['id']}/status",
        json={"status": "Shortlisted"},
        headers=employer["headers"],
    )
    client.delete(f"/api/applications/{applications[1]['id']}/withdraw", headers=candidates[1]["headers"])

    body = client.get("/api/analytics/employer/applications", headers=employer["headers"]).json()

    assert body["totalApplicationsReceived"] == 3
    assert body["statusCounts"] == {
        "Applied": 1,
        "Viewed": 0,
        "Shortlisted": 1,
        "Interviewing": 0,
        "Offered": 0,
        "Rejected": 0,
        "Withdrawn": 1,
    }


def test_application_status_analytics_empty(client, employer):
    body = client.get("/api/analytics/employer/applications", headers=employer["headers"]).json()

    assert body["totalApplicationsReceived"] == 0
    assert set(body["statusCounts"].values()) == {0}
    assert len(body["statusCounts"]) == 7


def test_platform_analytics(client, employer, other_employer, candidate, other_candidate, create_job):
    popular = create_job(title="Popular")
    quiet = create_job(owner=other_employer, title="Quiet")
    create_job(title="Nobody")
    for who in (candidate, other_candidate):
        client.post(f"/api/applications/job/{popular['id']}", headers=who["headers"])
    client.post(f"/api/applications/job/{quiet['id']}", headers=candidate["headers"])

    body = client.get("/api/analytics/platform", headers=employer["headers"]).json()

    assert body["totalUsers"] == 4
    assert body["totalCandidates"] == 2
    assert body["totalEmployers"] == 2
    assert body["totalJobs"] == 3
    assert body["totalActiveJobs"] == 3
    assert body["totalApplications"] == 3
    assert body["averageApplicationsPerJob"] == 1
    assert [(j["title"], j["company"], j["applications"]) for j in body["topJobsByApplication"]] == [
        ("Popular", "Acme Inc", 2),
        ("Quiet", "Globex Corp", 1),
    ]


def test_analytics_are_employer_only(client, candidate):
    for path in ("/api/analytics/employer/jobs", "/api/analytics/employer/applications", "/api/analytics/platform"):
        assert client.get(path, headers=candidate["headers"]).status_code == 403
    assert client.get("/api/analytics/platform").status_code == 401
