"""
Per-repository metadata client with request memoization.

Check predicates only talk to a MetadataClient, so they stay declarative and
every remote concern (caching, 404/403 handling) lives here.
"""

import base64
from typing import Any

from rich.console import Console

from repo_compliance.config import is_verbose_enabled
from repo_compliance.repository import Repository
from repo_compliance.vcs.base import BaseVCSProvider, ForbiddenError, NotFoundError

console = Console(stderr=True)

# Branch whose protection settings are inspected.
PROTECTED_BRANCH = "main"

# Named policy: when the token may not read branch protection (HTTP 403) the
# check cannot be verified and the repository is assumed to be compliant.
ASSUME_PROTECTED_WHEN_FORBIDDEN = True

# Cache marker for "fetched, and the remote said it does not exist".
MISSING: Any = object()


class MetadataClient:
    """Facade over a VCS provider for one repository.

    A client is created per repository evaluation and discarded afterwards.
    Each file path is fetched from the provider at most once.
    """

    def __init__(self, provider: BaseVCSProvider, repository: Repository):
        self.provider = provider
        self.repository = repository
        self._contents: dict[str, Any] = {}
        self._repository_data: dict[str, Any] | None = None
        self.verbose = is_verbose_enabled()

    def _trace(self, message: str) -> None:
        if self.verbose:
            console.print(f"[dim]  {self.repository.full_name}: {message}[/dim]")

    def fetch_file(self, path: str) -> dict[str, Any] | None:
        """
        Fetch the contents entry for ``path``.

        Returns:
            The provider payload, or None when the file does not exist.

        Raises:
            VCSError: Any failure other than "not found".
        """
        cached = self._contents.get(path)
        if cached is not None:
            return None if cached is MISSING else cached

        self._trace(f"fetching {path}")
        try:
            payload = self.provider.get_file_contents(self.repository.full_name, path)
        except NotFoundError:
            self._contents[path] = MISSING
            return None

        self._contents[path] = payload
        return payload

    def file_exists(self, path: str) -> bool:
        return self.fetch_file(path) is not None

    def decoded_file_content(self, path: str) -> str | None:
        """Return the UTF-8 text of ``path``, or None when it is absent."""
        payload = self.fetch_file(path)
        if payload is None:
            return None
        if not isinstance(payload, dict) or "content" not in payload:
            # Directories come back as a listing, not a file entry.
            return None
        return base64.b64decode(payload["content"]).decode("utf-8")

    def has_branch_protection(self) -> bool:
        """
        Check whether PROTECTED_BRANCH has protection rules.

        A 403 means protection cannot be read with this token; following
        ASSUME_PROTECTED_WHEN_FORBIDDEN that counts as protected. A 404 means
        the branch is not protected.
        """
        self._trace(f"fetching branch protection for {PROTECTED_BRANCH}")
        try:
            self.provider.get_branch_protection(
                self.repository.full_name, PROTECTED_BRANCH
            )
        except ForbiddenError:
            self._trace("branch protection forbidden, assuming enabled")
            return ASSUME_PROTECTED_WHEN_FORBIDDEN
        except NotFoundError:
            return False
        return True

    def _repository_metadata(self) -> dict[str, Any]:
        if self._repository_data is None:
            self._trace("fetching repository metadata")
            self._repository_data = self.provider.get_repository(
                self.repository.full_name
            )
        return self._repository_data

    def default_branch_name(self) -> str:
        return self._repository_metadata().get("default_branch", "")

    def has_license(self) -> bool:
        return self._repository_metadata().get("license") is not None

    def has_open_issues(self) -> bool:
        """
        Return True when the repository has NO open issues.

        The name is kept for the "Open issues" check, which passes on an empty
        issue list. Use issues_empty() where the meaning matters to the reader.
        """
        self._trace("listing open issues")
        issues = self.provider.list_open_issues(self.repository.full_name)
        return len(issues) == 0

    issues_empty = has_open_issues
