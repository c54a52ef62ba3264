#!/usr/bin/env python3
"""
Seed Test Data
==============
Populates a running API with sample candidates, employers and jobs.

Usage:
    python scripts/seed_test_data.py [--api-base http://localhost:5000/api]

Users that already exist are logged in instead of registered, so the script
can be re-run against the same database.
"""

import argparse
import sys
from datetime import datetime, timedelta

import httpx

PASSWORD = "password123"

USERS = [
    {"name": "John Candidate", "email": "john@candidate.com", "role": "candidate"},
    {"name": "Jane Candidate", "email": "jane@candidate.com", "role": "candidate"},
    {"name": "Tech Corp", "email": "hr@techcorp.com", "role": "employer", "companyName": "Tech Corp"},
    {"name": "StartupXYZ", "email": "jobs@startupxyz.com", "role": "employer", "companyName": "StartupXYZ"},
]


def _deadline(days: int) -> str:
    return (datetime.utcnow() + timedelta(days=days)).isoformat()


JOBS = [
    {
        "title": "Senior Frontend Developer",
        "description": "We are looking for an experienced frontend developer to join our team.",
        "location": "Bengaluru, IN",
        "requirements": ["React", "JavaScript", "CSS", "HTML"],
        "skills": ["react", "javascript", "css", "html"],
        "salaryMin": 80000,
        "salaryMax": 120000,
        "jobType": "Full-time",
        "applicationDeadline": _deadline(30),
    },
    {
        "title": "Backend Developer",
        "description": "Join our backend team to build scalable APIs and services.",
        "location": "Pune, IN",
        "requirements": ["Python", "PostgreSQL", "FastAPI", "REST APIs"],
        "skills": ["python", "postgresql", "fastapi", "api"],
        "salaryMin": 75000,
        "salaryMax": 110000,
        "jobType": "Full-time",
        "applicationDeadline": _deadline(25),
    },
    {
        "title": "Full Stack Developer",
        "description": "Work on both frontend and backend technologies in a fast-paced startup environment.",
        "location": "Remote",
        "requirements": ["React", "Python", "PostgreSQL", "JavaScript"],
        "skills": ["react", "python", "postgresql", "javascript"],
        "salaryMin": 70000,
        "salaryMax": 100000,
        "jobType": "Full-time",
        "applicationDeadline": _deadline(20),
    },
]


def _message(response: httpx.Response) -> str:
    try:
        return response.json().get("message", response.text)
    except ValueError:
        return response.text


def register_or_login(client: httpx.Client, user: dict):
    """Return the auth payload for ``user``, registering it when needed."""
    response = client.post("/auth/register", json={**user, "password": PASSWORD})
    if response.status_code == 201:
        print(f"✓ Created user: {user['name']} ({user['role']})")
        return response.json()

    if response.status_code == 400 and _message(response) == "User already exists":
        login = client.post("/auth/login", json={"email": user["email"], "password": PASSWORD})
        if login.status_code == 200:
            print(f"• User exists, logged in: {user['name']}")
            return login.json()

    print(f"✗ Failed to create user {user['name']}: {_message(response)}")
    return None


def main():
    parser = argparse.ArgumentParser(description="Seed the job portal API with sample data")
    parser.add_argument("--api-base", default="http://localhost:5000/api")
    args = parser.parse_args()

    try:
        with httpx.Client(base_url=args.api_base, timeout=10.0) as client:
            print("Creating test users...")
            accounts = [register_or_login(client, user) for user in USERS]
            employers = [a for a in accounts if a and a["user"]["role"] == "employer"]

            if not employers:
                print("\n✗ No employer accounts available, skipping jobs")
                return 1

            print("\nCreating test jobs...")
            for i, job in enumerate(JOBS):
                # Rotate between employers
                employer = employers[i % len(employers)]
                response = client.post(
                    "/jobs",
                    json=job,
                    headers={"Authorization": f"Bearer {employer['token']}"},
                )
                if response.status_code == 201:
                    print(f"✓ Created job: {job['title']}")
                else:
                    print(f"✗ Failed to create job {job['title']}: {_message(response)}")
    except httpx.HTTPError as e:
        print(f"\n❌ Could not reach the API at {args.api_base}: {e}")
        return 2

    print("\n✅ Test data creation completed!")
    print("\nYou can now test the application with these credentials:")
    for user in USERS:
        print(f"- {user['email']} / {PASSWORD} ({user['role']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
