"""
External Jobs Service
Searches third-party job APIs (JSearch via RapidAPI) behind the shared cache.
"""

import json
import random
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import Settings, settings
from app.core.cache import CacheManager, cache_manager
from app.models.job import JobType
from app.utils.constants import EXTERNAL_EMPLOYMENT_TYPES, TRENDING_QUERIES
from app.utils.helpers import to_naive_utc

logger = structlog.get_logger(__name__)


class ExternalJobsError(Exception):
    """The upstream provider failed or returned something unusable."""


class ProviderNotConfiguredError(ExternalJobsError):
    """No API key is configured for the provider."""


def format_location(raw: Dict[str, Any]) -> str:
    """'City, State' when both are known, else the country, else 'Remote'."""
    city, state = raw.get("job_city"), raw.get("job_state")
    if city and state:
        return f"{city}, {state}"
    return raw.get("job_country") or "Remote"


def map_employment_type(value: Optional[str]) -> str:
    """Map a JSearch employment type onto a JobType value (Full-time by default)."""
    return EXTERNAL_EMPLOYMENT_TYPES.get((value or "").upper(), JobType.FULL_TIME.value)


def transform_job(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Map one JSearch result onto the external job shape returned by the API."""
    return {
        "id": raw.get("job_id"),
        "title": raw.get("job_title"),
        "company": raw.get("employer_name"),
        "location": format_location(raw),
        "description": raw.get("job_description"),
        "employment_type": raw.get("job_employment_type"),
        "posted_date": raw.get("job_posted_at_datetime_utc"),
        "apply_link": raw.get("job_apply_link"),
        "salary_min": raw.get("job_min_salary"),
        "salary_max": raw.get("job_max_salary"),
        "salary_currency": raw.get("job_salary_currency"),
        "requirements": raw.get("job_required_skills") or [],
        "benefits": raw.get("job_benefits") or [],
        "is_remote": raw.get("job_is_remote"),
        "source": "jsearch",
        "external_id": raw.get("job_id"),
        "logo_url": raw.get("employer_logo"),
        "company_type": raw.get("employer_company_type"),
    }


def parse_posted_date(value: Optional[str]) -> datetime:
    """Parse the vendor's ISO timestamp into naive UTC; now when absent or invalid."""
    if value:
        try:
            return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            logger.debug("external_posted_date_invalid", value=value)
    return datetime.utcnow()


class ExternalJobsService:
    """
    JSearch client with caching:
    - Search and trending results cached for ``CACHE_EXTERNAL_JOBS_TTL``
    - Concurrent misses on one key share a single upstream call
    - Transport errors retried with exponential backoff
    """

    def __init__(
        self,
        settings: Settings,
        cache: CacheManager,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.cache = cache
        self._transport = transport

    @property
    def jsearch_configured(self) -> bool:
        return bool(self.settings.RAPIDAPI_KEY)

    @property
    def adzuna_configured(self) -> bool:
        return bool(self.settings.ADZUNA_APP_ID and self.settings.ADZUNA_APP_KEY)

    def _headers(self) -> Dict[str, str]:
        return {
            "X-RapidAPI-Key": self.settings.RAPIDAPI_KEY,
            "X-RapidAPI-Host": self.settings.JSEARCH_API_HOST,
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(self, params: Dict[str, Any], timeout: float) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self.settings.JSEARCH_API_URL,
            timeout=timeout,
            transport=self._transport,
        ) as client:
            response = await client.get("/search", params=params, headers=self._headers())
            response.raise_for_status()
            return response.json()

    async def _search_raw(self, params: Dict[str, Any], timeout: Optional[float] = None) -> List[Dict]:
        """Call JSearch ``/search`` and return its ``data`` list."""
        if not self.jsearch_configured:
            raise ProviderNotConfiguredError("External job search service not configured")

        try:
            payload = await self._get(params, timeout or self.settings.EXTERNAL_JOBS_TIMEOUT)
        except httpx.HTTPStatusError as e:
            logger.error("jsearch_http_error", status_code=e.response.status_code)
            raise ExternalJobsError(f"JSearch returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("jsearch_request_failed", error=str(e))
            raise ExternalJobsError("JSearch request failed") from e
        except ValueError as e:
            logger.error("jsearch_invalid_json", error=str(e))
            raise ExternalJobsError("JSearch returned invalid JSON") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        return data if isinstance(data, list) else []

    @staticmethod
    def _cache_key(prefix: str, params: Dict[str, Any]) -> str:
        return f"external_jobs:{prefix}:{json.dumps(params, sort_keys=True, default=str)}"

    async def search(
        self,
        query: str = "",
        location: str = "",
        employment_types: str = "FULLTIME",
        page: int = 1,
        num_pages: int = 1,
        date_posted: str = "all",
        remote_jobs_only: bool = False,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Search JSearch.

        Returns:
            (result, cached) where result is ``{jobs, total, page, provider}``
        """
        key_params = {
            "query": query,
            "location": location,
            "employment_types": employment_types,
            "page": page,
            "num_pages": num_pages,
            "date_posted": date_posted,
            "remote_jobs_only": remote_jobs_only,
        }

        async def fetch() -> Dict[str, Any]:
            search_query = query or "software developer"
            if location:
                search_query = f"{search_query} in {location}"

            raw_jobs = await self._search_raw({
                "query": search_query,
                "page": page,
                "num_pages": num_pages,
                "date_posted": date_posted,
                "remote_jobs_only": str(remote_jobs_only).lower(),
                "employment_types": employment_types,
            })
            logger.info("external_jobs_fetched", provider="jsearch", count=len(raw_jobs))
            return {
                "jobs": [transform_job(job) for job in raw_jobs],
                "total": len(raw_jobs),
                "page": page,
                "provider": "jsearch",
            }

        return await self.cache.get_or_set(
            self._cache_key("search", key_params),
            fetch,
            ttl=self.settings.CACHE_EXTERNAL_JOBS_TTL,
        )

    async def trending(
        self, location: str = "", category: str = "technology", limit: int = 10
    ) -> Tuple[List[Dict[str, Any]], bool]:
        """Recent postings for a random popular role, at most ``limit`` of them."""

        async def fetch() -> List[Dict[str, Any]]:
            trending_query = random.choice(TRENDING_QUERIES)
            if location:
                trending_query = f"{trending_query} in {location}"

            raw_jobs = await self._search_raw({
                "query": trending_query,
                "page": 1,
                "num_pages": 1,
                "date_posted": "week",
            })
            return [transform_job(job) for job in raw_jobs[:limit]]

        return await self.cache.get_or_set(
            self._cache_key("trending", {"location": location, "category": category, "limit": limit}),
            fetch,
            ttl=self.settings.CACHE_EXTERNAL_JOBS_TTL,
        )

    async def fetch_for_sync(self, query: str, max_jobs: int) -> List[Dict[str, Any]]:
        """Fetch up to ``max_jobs`` raw postings from the past week (uncached)."""
        raw_jobs = await self._search_raw({
            "query": query,
            "page": 1,
            "num_pages": max(1, -(-max_jobs // 10)),
            "date_posted": "week",
        })
        return raw_jobs[:max_jobs]

    async def providers_status(self) -> Dict[str, Any]:
        """Configuration and reachability of each provider plus cache stats."""
        providers = []

        if self.jsearch_configured:
            try:
                await self._get(
                    {"query": "test", "page": 1, "num_pages": 1},
                    self.settings.EXTERNAL_JOBS_STATUS_TIMEOUT,
                )
                providers.append({"name": "JSearch", "status": "active", "configured": True})
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("jsearch_status_check_failed", error=str(e))
                providers.append({"name": "JSearch", "status": "error", "configured": True})
        else:
            providers.append({"name": "JSearch", "status": "not_configured", "configured": False})

        if self.adzuna_configured:
            providers.append({"name": "Adzuna", "status": "configured", "configured": True})
        else:
            providers.append({"name": "Adzuna", "status": "not_configured", "configured": False})

        cache_stats = self.cache.get_stats()
        return {
            "providers": providers,
            "cache_size": cache_stats["size"],
            "cache_capacity": cache_stats.get("capacity"),
            "cache_enabled": cache_stats["enabled"],
            "cache_backend": cache_stats["backend"],
        }


# Shared instance; endpoints receive it through get_external_jobs_service
external_jobs_service = ExternalJobsService(settings, cache_manager)


def get_external_jobs_service() -> ExternalJobsService:
    """Dependency returning the shared external jobs service."""
    return external_jobs_service
