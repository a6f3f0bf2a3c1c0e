"""
Base VCS provider interface and remote error taxonomy.
"""

from abc import ABC, abstractmethod
from typing import Any


class VCSError(Exception):
    """A remote access failure. Fatal for the repository being evaluated."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(VCSError):
    """The requested remote resource does not exist (HTTP 404)."""


class ForbiddenError(VCSError):
    """The token lacks permission for the requested resource (HTTP 403)."""


class UnauthorizedError(VCSError):
    """The token is missing, expired or invalid (HTTP 401)."""


class RateLimitedError(VCSError):
    """The API rate limit is exhausted."""


class BaseVCSProvider(ABC):
    """Abstract interface over a source-hosting API.

    Providers raise NotFoundError / ForbiddenError where those can be told
    apart from other failures; everything else is a VCSError.
    """

    @abstractmethod
    def get_file_contents(self, full_name: str, path: str) -> dict[str, Any]:
        """Fetch the contents entry of a file (raw payload, base64 content)."""

    @abstractmethod
    def get_branch_protection(self, full_name: str, branch: str) -> dict[str, Any]:
        """Fetch the protection settings of a branch."""

    @abstractmethod
    def get_repository(self, full_name: str) -> dict[str, Any]:
        """Fetch repository metadata (default branch, license, ...)."""

    @abstractmethod
    def list_open_issues(self, full_name: str) -> list[dict[str, Any]]:
        """List open issues of a repository (first page is enough)."""
