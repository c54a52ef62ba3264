"""Common constants."""

# Query-string sort keys -> Job column names
JOB_SORT_FIELDS = {
    "postedDate": "posted_date",
    "title": "title",
    "location": "location",
    "salaryMin": "salary_min",
    "salaryMax": "salary_max",
    "views": "views",
    "applicationsCount": "applications_count",
    "createdAt": "created_at",
}
DEFAULT_JOB_SORT = "-postedDate"

# Query-string sort keys -> Profile column names
PROFILE_SORT_FIELDS = {
    "updatedAt": "updated_at",
    "createdAt": "created_at",
    "headline": "headline",
}
DEFAULT_PROFILE_SORT = "-updatedAt"

# Employer job listing filter values
EMPLOYER_JOB_FILTERS = ["active", "inactive", "all"]

# Platform analytics ranking size
TOP_JOBS_LIMIT = 5

# Popular searches used for the trending external jobs feed
TRENDING_QUERIES = [
    "software engineer",
    "data scientist",
    "product manager",
    "frontend developer",
    "backend developer",
    "full stack developer",
]

# JSearch employment type -> Job.job_type
EXTERNAL_EMPLOYMENT_TYPES = {
    "FULLTIME": "Full-time",
    "PARTTIME": "Part-time",
    "CONTRACTOR": "Contract",
    "INTERN": "Internship",
}
