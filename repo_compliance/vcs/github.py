"""
GitHub VCS provider implementation for Repo Compliance.

This module implements the GitHub-specific provider on top of the GitHub REST
API, mapping HTTP failures onto the error taxonomy in ``vcs.base``.
"""

import os
from typing import Any
from urllib.parse import quote

import httpx
from dotenv import load_dotenv

from repo_compliance.http_client import GITHUB_REST_API, get_github_client
from repo_compliance.vcs.base import (
    BaseVCSProvider,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
    VCSError,
)

# Load environment variables
load_dotenv()


class GitHubProvider(BaseVCSProvider):
    """GitHub VCS provider using the REST API."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = GITHUB_REST_API,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize GitHub provider.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable.
            api_url: REST API base URL (GitHub Enterprise installs differ).
            transport: Optional httpx transport for the shared session.

        Raises:
            ValueError: If token is not provided and GITHUB_TOKEN env var is not set
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.api_url = api_url.rstrip("/")
        self.transport = transport
        if not self.token:
            raise ValueError(
                "GITHUB_TOKEN is required for GitHub provider.\n"
                "\n"
                "To get started:\n"
                "1. Create a GitHub Personal Access Token:\n"
                "   -> https://github.com/settings/tokens/new\n"
                "2. Select scope: 'repo' (branch protection needs admin read)\n"
                "3. Set the token:\n"
                "   export GITHUB_TOKEN='your_token_here'  # Linux/macOS\n"
                "   or add to your .env file: GITHUB_TOKEN=your_token_here\n"
            )

    def get_file_contents(self, full_name: str, path: str) -> dict[str, Any]:
        return self._get(f"/repos/{full_name}/contents/{quote(path)}")

    def get_branch_protection(self, full_name: str, branch: str) -> dict[str, Any]:
        return self._get(f"/repos/{full_name}/branches/{quote(branch)}/protection")

    def get_repository(self, full_name: str) -> dict[str, Any]:
        return self._get(f"/repos/{full_name}")

    def list_open_issues(self, full_name: str) -> list[dict[str, Any]]:
        # The issues endpoint also lists pull requests; both count as open work.
        return self._get(f"/repos/{full_name}/issues", params={"state": "open"})

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Execute a GET request against the GitHub REST API.

        Args:
            path: API path starting with '/'
            params: Query parameters

        Returns:
            Decoded JSON payload

        Raises:
            NotFoundError: On HTTP 404
            ForbiddenError: On HTTP 403 that is not a rate limit
            UnauthorizedError: On HTTP 401
            RateLimitedError: On HTTP 429 or a primary/secondary rate limit 403
            VCSError: On any other HTTP or transport failure, or a success
                response whose body is not JSON
        """
        client = get_github_client(self.token, self.api_url, self.transport)
        try:
            response = client.get(path, params=params)
        except httpx.HTTPError as e:
            raise VCSError(f"GitHub request failed for {path}: {e}") from e

        if not response.is_success:
            raise _error_for_response(path, response)

        try:
            return response.json()
        except ValueError as e:
            raise VCSError(
                f"GitHub returned invalid JSON for {path}: {e}", response.status_code
            ) from e


def _is_rate_limited(response: httpx.Response, detail: str) -> bool:
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    # Primary limit: quota exhausted. Secondary limit: retry-after and/or message.
    return (
        response.headers.get("x-ratelimit-remaining") == "0"
        or "retry-after" in response.headers
        or "rate limit" in detail.lower()
    )


def _error_for_response(path: str, response: httpx.Response) -> VCSError:
    """Translate a failed response into the matching VCSError subclass."""
    status = response.status_code
    try:
        detail = str(response.json().get("message", ""))
    except (ValueError, AttributeError):
        detail = response.text
    message = f"GitHub API returned {status} for {path}: {detail}".rstrip(": ")

    if status == 404:
        return NotFoundError(message, status)
    if status == 401:
        return UnauthorizedError(message, status)
    if _is_rate_limited(response, detail):
        return RateLimitedError(message, status)
    if status == 403:
        return ForbiddenError(message, status)
    return VCSError(message, status)
