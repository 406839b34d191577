"""Async platform API client using httpx.

This module provides the session object threaded through every branch sync
call: it owns the HTTP connection pools, authentication header, request
concurrency limit and retry policy, and is shared by all concurrent tasks.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from pydantic import ValidationError

from project_branch_sync import __version__
from project_branch_sync.config import RequestConfig, Settings, get_settings
from project_branch_sync.logging import get_logger
from project_branch_sync.schemas import (
    Project,
    ProjectsPage,
    Target,
    TargetFilters,
    TargetsPage,
)

from .exceptions import (
    PlatformAPIError,
    PlatformAuthenticationError,
    PlatformNotFoundError,
    PlatformRateLimitError,
)

logger = get_logger(__name__)

USER_AGENT = f"project-branch-sync/{__version__}"

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class PlatformClient:
    """Async client for the security platform's v1 and REST APIs.

    Usage:
        async with PlatformClient() as client:
            page = await client.list_targets(org_id, TargetFilters(origin="github"))
            for target in page.targets:
                print(target.display_name)
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str | None = None,
        rest_api_url: str | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the platform client.

        Args:
            token: Platform API token. If not provided, uses SNYK_TOKEN from settings.
            api_url: Base URL of the v1 API (defaults to settings.snyk_api)
            rest_api_url: Base URL of the REST API (defaults to settings.snyk_rest_api)
            settings: Settings instance (defaults to get_settings())
            transport: Optional httpx transport (used by tests)

        Raises:
            PlatformAuthenticationError: If no token is available.
        """
        self._settings = settings or get_settings()
        self._token = token or self._settings.snyk_token
        if not self._token:
            raise PlatformAuthenticationError(
                "Platform token required. Set SNYK_TOKEN environment variable."
            )
        self._api_url = (api_url or self._settings.snyk_api).rstrip("/")
        self._rest_api_url = (rest_api_url or self._settings.snyk_rest_api).rstrip("/")
        self._request_config: RequestConfig = self._settings.request
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._semaphore = asyncio.Semaphore(self._request_config.max_concurrent_requests)

    @property
    def _http(self) -> httpx.AsyncClient:
        """Get or create the shared httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "Authorization": f"token {self._token}",
                    "User-Agent": USER_AGENT,
                    "Accept": "application/json",
                },
                timeout=self._request_config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> PlatformClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Targets
    # -------------------------------------------------------------------------
    async def list_targets(self, org_id: str, filters: TargetFilters) -> TargetsPage:
        """List every target of an organization matching the filters.

        Follows `links.next` until the listing is exhausted.

        Args:
            org_id: Public organization id
            filters: Page size, origin and empty-target filters

        Returns:
            TargetsPage with all targets across pages
        """
        query: dict[str, Any] = {
            "version": self._settings.snyk_rest_version,
            "limit": filters.limit,
            "excludeEmpty": str(filters.exclude_empty).lower(),
        }
        if filters.origin:
            query["origin"] = filters.origin

        params: dict[str, Any] | None = query
        url = f"{self._rest_api_url}/orgs/{org_id}/targets"
        targets: list[Target] = []

        while url:
            body = await self._request_json("GET", url, params=params)
            for item in body.get("data", []):
                try:
                    targets.append(Target.model_validate(item))
                except ValidationError as e:
                    # Skip targets that don't validate (shouldn't happen normally)
                    logger.warning("Skipping malformed target {}: {}", item.get("id"), e)
            url = self._next_page_url(body)
            # The next link already carries every query parameter
            params = None

        logger.debug("Listed {} targets for org {}", len(targets), org_id)
        return TargetsPage(targets=targets)

    def _next_page_url(self, body: dict[str, Any]) -> str:
        """Resolve the REST `links.next` pointer to an absolute URL ("" when done)."""
        next_link = (body.get("links") or {}).get("next")
        if not next_link:
            return ""
        if next_link.startswith("http"):
            return str(next_link)
        # Relative links are rooted at the API host and may or may not repeat /rest
        if next_link.startswith("/rest/"):
            next_link = next_link[len("/rest") :]
        return f"{self._rest_api_url}{next_link}"

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------
    async def list_projects(self, org_id: str, target_id: str | None = None) -> ProjectsPage:
        """List projects of an organization, optionally only those of one target.

        Args:
            org_id: Public organization id
            target_id: Restrict the listing to this target

        Returns:
            ProjectsPage with the org reference and its projects
        """
        payload: dict[str, Any] = {}
        if target_id:
            payload["filters"] = {"targetId": target_id}

        body = await self._request_json(
            "POST", f"{self._api_url}/org/{org_id}/projects", json=payload
        )
        return ProjectsPage.model_validate(body)

    async def update_project(self, org_id: str, project_id: str, *, branch: str) -> Project:
        """Change the branch a project tracks.

        Args:
            org_id: Public organization id
            project_id: Project public id
            branch: New branch name

        Returns:
            The updated project as returned by the API

        Raises:
            PlatformAPIError: If the update is rejected
        """
        body = await self._request_json(
            "PUT",
            f"{self._api_url}/org/{org_id}/project/{project_id}",
            json={"branch": branch},
        )
        return Project.model_validate(body)

    # -------------------------------------------------------------------------
    # Feature flags
    # -------------------------------------------------------------------------
    async def get_feature_flag(self, flag_name: str, org_id: str) -> bool:
        """Check whether a feature flag is enabled for an organization.

        The API answers 403 with `{"ok": false}` for a disabled flag, which is
        reported as False rather than an error.

        Raises:
            PlatformAPIError: If the org is missing or cannot be read
        """
        url = f"{self._api_url}/org/{org_id}/featureflags/{flag_name}"
        try:
            body = await self._request_json("GET", url)
        except PlatformAPIError as e:
            if e.status_code == 403 and e.body.get("ok") is False:
                return False
            raise
        return bool(body.get("ok", False))

    # -------------------------------------------------------------------------
    # Request layer
    # -------------------------------------------------------------------------
    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request with retry and return the decoded JSON body."""
        max_retries = self._request_config.max_retries
        attempt = 0

        while True:
            attempt += 1
            try:
                async with self._semaphore:
                    response = await self._http.request(method, url, params=params, json=json)
            except httpx.TransportError as e:
                if attempt > max_retries:
                    raise PlatformAPIError(f"{method} {url} failed: {e}") from e
                await self._backoff(attempt, method, url, str(e))
                continue

            if response.status_code in RETRYABLE_STATUS_CODES and attempt <= max_retries:
                await self._backoff(
                    attempt,
                    method,
                    url,
                    f"HTTP {response.status_code}",
                    retry_after=_retry_after(response),
                )
                continue

            if response.is_success:
                return _decode(response)
            raise self._handle_error(response)

    async def _backoff(
        self,
        attempt: int,
        method: str,
        url: str,
        reason: str,
        retry_after: float | None = None,
    ) -> None:
        """Sleep before the next attempt using exponential backoff."""
        delay = min(self._request_config.backoff_base**attempt, 60.0)
        if retry_after is not None:
            delay = max(delay, retry_after)
        logger.warning(
            "Request {} {} failed ({}), retrying in {:.1f}s (attempt {}/{})",
            method,
            url,
            reason,
            delay,
            attempt,
            self._request_config.max_retries,
        )
        await asyncio.sleep(delay)

    def _handle_error(self, response: httpx.Response) -> PlatformAPIError:
        """Convert an error response to our custom exceptions."""
        status = response.status_code
        body = _decode(response)
        message = str(
            body.get("message")
            or body.get("userMessage")
            or body.get("error")
            or response.reason_phrase
            or "Unknown error"
        )

        if status == 401:
            return PlatformAuthenticationError(f"Invalid platform token: {message}", status, body)
        elif status == 404:
            return PlatformNotFoundError(message, status, body)
        elif status == 429:
            return PlatformRateLimitError(
                f"Platform rate limit exceeded: {message}",
                status,
                body,
                retry_after=_retry_after(response),
            )
        else:
            return PlatformAPIError(message, status, body)


def _decode(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, tolerating empty or non-JSON bodies."""
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {"data": body}


def _retry_after(response: httpx.Response) -> float | None:
    """Parse a numeric Retry-After header."""
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
