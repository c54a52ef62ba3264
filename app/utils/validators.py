"""Validators."""

import re

URL_PATTERN = re.compile(r'^(ftp|http|https)://[^ "]+$')
LINKEDIN_PATTERN = re.compile(r'^(https|http)://(www\.)?linkedin\.com/in/[a-zA-Z0-9_-]+/?$')
GITHUB_PATTERN = re.compile(r'^(https|http)://(www\.)?github\.com/[a-zA-Z0-9_-]+/?$')


def validate_url(url: str) -> bool:
    """Validate URL format (ftp, http or https, no spaces or quotes)."""
    return bool(URL_PATTERN.match(url))


def validate_linkedin_url(url: str) -> bool:
    """Validate a LinkedIn profile URL (linkedin.com/in/<slug>)."""
    return bool(LINKEDIN_PATTERN.match(url))


def validate_github_url(url: str) -> bool:
    """Validate a GitHub profile URL (github.com/<user>)."""
    return bool(GITHUB_PATTERN.match(url))

