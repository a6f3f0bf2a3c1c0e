"""
Shared fixtures: an in-memory VCS provider and isolated configuration state.
"""

import base64
from collections import Counter

import pytest

from repo_compliance import config
from repo_compliance.http_client import close_http_client
from repo_compliance.vcs.base import BaseVCSProvider, ForbiddenError, NotFoundError


class FakeProvider(BaseVCSProvider):
    """In-memory provider that counts every remote call.

    ``branch_protection`` is one of "enabled", "disabled" (404), "forbidden"
    (403) or an exception instance to raise.
    """

    def __init__(
        self,
        files=None,
        branch_protection="enabled",
        default_branch="main",
        license="mit",
        issues=None,
        failures=None,
    ):
        self.files = dict(files or {})
        self.branch_protection = branch_protection
        self.default_branch = default_branch
        self.license = license
        self.issues = list(issues or [])
        # (method name, path-or-None) -> exception to raise
        self.failures = dict(failures or {})
        self.calls = Counter()

    def _maybe_fail(self, method, key=None):
        error = self.failures.get((method, key)) or self.failures.get((method, None))
        if error is not None:
            raise error

    def get_file_contents(self, full_name, path):
        self.calls[("contents", full_name, path)] += 1
        self._maybe_fail("contents", path)
        if path not in self.files:
            raise NotFoundError(f"{path} not found", 404)
        encoded = base64.b64encode(self.files[path].encode("utf-8")).decode("ascii")
        return {"path": path, "encoding": "base64", "content": encoded}

    def get_branch_protection(self, full_name, branch):
        self.calls[("protection", full_name, branch)] += 1
        if isinstance(self.branch_protection, Exception):
            raise self.branch_protection
        if self.branch_protection == "forbidden":
            raise ForbiddenError("Resource not accessible", 403)
        if self.branch_protection == "disabled":
            raise NotFoundError("Branch not protected", 404)
        return {"url": f"https://api.github.com/repos/{full_name}/branches/{branch}"}

    def get_repository(self, full_name):
        self.calls[("repository", full_name)] += 1
        self._maybe_fail("repository")
        license_info = {"key": self.license} if self.license else None
        return {
            "full_name": full_name,
            "default_branch": self.default_branch,
            "license": license_info,
        }

    def list_open_issues(self, full_name):
        self.calls[("issues", full_name)] += 1
        self._maybe_fail("issues")
        return list(self.issues)


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests independent of global config state and the developer's files."""
    monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
    monkeypatch.setattr(config, "_CONFIG_PATH", None)
    monkeypatch.setattr(config, "_VERBOSE", None)
    monkeypatch.setattr(config, "VERIFY_SSL", True)
    for name in (
        "REPO_COMPLIANCE_CONFIG",
        "REPO_COMPLIANCE_VERBOSE",
        "REPO_COMPLIANCE_NUM_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    close_http_client()
    yield tmp_path
    close_http_client()
