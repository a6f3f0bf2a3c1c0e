"""Checks against repository settings rather than file contents."""

from repo_compliance.checks.base import Check
from repo_compliance.client import MetadataClient

DEFAULT_BRANCH = "main"


def _branch_protection(client: MetadataClient) -> bool:
    # Passes when protection cannot be read (403), see ASSUME_PROTECTED_WHEN_FORBIDDEN.
    return client.has_branch_protection()


def _license(client: MetadataClient) -> bool:
    return client.has_license()


def _main_branch(client: MetadataClient) -> bool:
    return client.default_branch_name() == DEFAULT_BRANCH


def _open_issues(client: MetadataClient) -> bool:
    # Despite the check name, passing means there are no open issues.
    return client.has_open_issues()


BRANCH_PROTECTION = Check("Branch protection", _branch_protection)
LICENSE = Check("License", _license)
MAIN_BRANCH = Check("main branch", _main_branch)
OPEN_ISSUES = Check("Open issues", _open_issues)
