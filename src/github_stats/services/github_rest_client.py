"""GitHub REST API client."""

import logging
from typing import Any, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from github_stats import __version__
from github_stats.config import Config, get_config
from github_stats.exceptions import (
    GitHubAPIError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from github_stats.utils.pagination import get_next_page_url, get_total_pages

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


class GitHubRestClient:
    """Async client for GitHub REST API."""

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or get_config()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": f"github-stats/{__version__}",
        }
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.github_api_url,
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GitHubRestClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @retry(
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs,
    ) -> httpx.Response:
        """Make an API request with retries on connection failures."""
        client = await self._get_client()
        response = await client.request(method, endpoint, **kwargs)

        if response.status_code < 400:
            return response

        body = _json_body(response)
        message = body.get("message", "Unknown error")

        if response.status_code == 404:
            raise GitHubNotFoundError(
                f"Resource not found: {endpoint}",
                status_code=404,
                response_body=body,
            )
        elif response.status_code in (403, 429):
            # Secondary and primary limits both surface as 403/429
            if response.status_code == 429 or "rate limit" in message.lower():
                reset = response.headers.get("x-ratelimit-reset")
                raise GitHubRateLimitError(
                    "Rate limit exceeded",
                    status_code=response.status_code,
                    response_body=body,
                    reset_time=float(reset) if reset else None,
                )
            raise GitHubAPIError(
                f"Forbidden: {message}",
                status_code=403,
                response_body=body,
            )
        elif response.status_code >= 500:
            raise GitHubAPIError(
                f"Server error: {response.status_code}",
                status_code=response.status_code,
            )
        raise GitHubAPIError(
            f"API error: {message}",
            status_code=response.status_code,
            response_body=body,
        )

    async def get(self, endpoint: str, **kwargs) -> Any:
        """Make a GET request and return JSON response."""
        response = await self._request("GET", endpoint, **kwargs)
        return response.json()

    async def get_paginated(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        max_pages: Optional[int] = None,
        per_page: Optional[int] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> list[dict[str, Any]]:
        """Fetch all pages of a paginated endpoint.

        Follows the ``rel="next"`` link until it disappears or ``max_pages``
        is reached. The next link already carries the original query.

        Args:
            endpoint: API endpoint
            params: Query parameters for the first page
            max_pages: Maximum number of pages to fetch (None uses config)
            per_page: Items per page (max 100)
            headers: Extra request headers

        Returns:
            List of all items across all pages
        """
        if max_pages is None:
            max_pages = self.config.max_pages

        query = dict(params or {})
        query["per_page"] = per_page or self.config.default_per_page

        all_items: list[dict[str, Any]] = []
        page = 1
        url: Optional[str] = endpoint
        kwargs: dict[str, Any] = {"params": query, "headers": headers}

        while url and (max_pages is None or page <= max_pages):
            response = await self._request("GET", url, **kwargs)
            data = response.json()

            if isinstance(data, dict) and "items" in data:
                items = data["items"]
            elif isinstance(data, list):
                items = data
            else:
                all_items.append(data)
                break

            all_items.extend(items)

            url = get_next_page_url(response.headers.get("Link"))
            kwargs = {"headers": headers}
            page += 1

        logger.debug("Fetched %d items from %s in %d page(s)", len(all_items), endpoint, page - 1)
        return all_items

    # Endpoints used by the collectors

    async def get_rate_limit(self) -> httpx.Headers:
        """Get the current quota as x-ratelimit-* response headers."""
        response = await self._request("GET", "/rate_limit")
        return response.headers

    async def get_org_members(self, org: str) -> list[dict[str, Any]]:
        """Get members of an organization."""
        return await self.get_paginated(f"/orgs/{org}/members")

    async def get_org_repos(self, org: str) -> list[dict[str, Any]]:
        """Get repositories of an organization."""
        return await self.get_paginated(f"/orgs/{org}/repos")

    async def get_first_commit(
        self,
        owner: str,
        repo: str,
        author: str,
    ) -> Optional[dict[str, Any]]:
        """Get the oldest commit by an author in a repository.

        GitHub lists commits newest first. With one commit per page, the
        ``last`` link points at the page holding the oldest one.

        Returns:
            The commit, or None if the author has no commits there
        """
        endpoint = f"/repos/{owner}/{repo}/commits"
        params: dict[str, Any] = {"author": author, "per_page": 1}

        response = await self._request("GET", endpoint, params=params)
        commits = response.json()

        last_page = get_total_pages(response.headers.get("Link"))
        if last_page and last_page > 1:
            response = await self._request(
                "GET", endpoint, params={**params, "page": last_page}
            )
            commits = response.json()

        return commits[0] if commits else None

    async def search_first_merged_pr(
        self,
        author: str,
        org: str,
    ) -> Optional[dict[str, Any]]:
        """Search for an author's oldest merged pull request in an organization.

        Returns:
            The search item, or None if nothing matched
        """
        data = await self.get(
            "/search/issues",
            params={
                "q": f"author:{author} type:pr org:{org} is:merged",
                "sort": "created",
                "order": "asc",
                "per_page": 1,
            },
            headers={
                "If-None-Match": "",  # Bypass cache to avoid stale results
                "Accept": "application/vnd.github.v3+json",
            },
        )
        items = data.get("items", [])
        return items[0] if items else None

    async def get_audit_log(
        self,
        enterprise: str,
        phrase: str,
        include: str = "web",
    ) -> list[dict[str, Any]]:
        """Search an enterprise audit log.

        Args:
            enterprise: Enterprise slug
            phrase: Audit log search phrase (e.g., "action:org.add_member")
            include: Event sources to include ("web", "git" or "all")
        """
        return await self.get_paginated(
            f"/enterprises/{enterprise}/audit-log",
            params={"phrase": phrase, "include": include},
            headers={"X-GitHub-Api-Version": API_VERSION},
        )


def _json_body(response: httpx.Response) -> dict[str, Any]:
    """Decode an error body, tolerating empty or non-JSON responses."""
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
