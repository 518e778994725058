"""Exceptions for GitHub Stats.

Exception Hierarchy:
    GitHubStatsError (base)
    ├── GitHubAPIError (HTTP API errors with status codes)
    │   ├── GitHubRateLimitError (403/429 rate limit from API response)
    │   └── GitHubNotFoundError (404 not found)
    ├── RateLimitExceededError (upfront quota check, before collecting stats)
    ├── PortAPIError (catalog API errors with status codes)
    │   └── PortAuthenticationError (client id/secret rejected)
    └── ConfigurationError (required environment variables missing)

Usage:
    - GitHubRateLimitError: Raised when GitHub API rejects a request for rate limiting
    - RateLimitExceededError: Raised by the rate-limit guard when no requests remain,
      so a run aborts before it touches the catalog
"""

__all__ = [
    "GitHubStatsError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubNotFoundError",
    "RateLimitExceededError",
    "PortAPIError",
    "PortAuthenticationError",
    "ConfigurationError",
]


class GitHubStatsError(Exception):
    """Base exception for all GitHub Stats errors."""

    pass


class GitHubAPIError(GitHubStatsError):
    """Base exception for GitHub API errors (HTTP responses with error status codes)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub API returns a rate limit error (HTTP 403 or 429)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 403,
        response_body: dict | None = None,
        reset_time: float | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.reset_time = reset_time


class GitHubNotFoundError(GitHubAPIError):
    """Raised when a GitHub resource is not found (HTTP 404)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 404,
        response_body: dict | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)


class RateLimitExceededError(GitHubStatsError):
    """Raised when the GitHub quota has no requests remaining.

    Checked once before a command starts collecting, so nothing is fetched
    or written on a run that would be cut short by the API.
    """

    def __init__(self, message: str = "Rate limit exceeded", reset_time: float | None = None):
        super().__init__(message)
        self.reset_time = reset_time


class PortAPIError(GitHubStatsError):
    """Raised when the Port catalog API returns an error status code."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class PortAuthenticationError(PortAPIError):
    """Raised when Port rejects the client credentials."""

    pass


class ConfigurationError(GitHubStatsError):
    """Raised when required environment variables are missing."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Missing required environment variables: {', '.join(missing)}")
        self.missing = missing
