"""README badge checks."""

from repo_compliance.checks.base import Check
from repo_compliance.client import MetadataClient

README_PATH = "README.md"


def _readme_contains(client: MetadataClient, needle: str) -> bool:
    content = client.decoded_file_content(README_PATH)
    return content is not None and needle in content


def _actions_badge(client: MetadataClient) -> bool:
    repository = client.repository
    return _readme_contains(
        client, f"https://github.com/{repository.full_name}/actions"
    )


def _rubygems_badge(client: MetadataClient) -> bool:
    return _readme_contains(
        client, f"(https://rubygems.org/gems/{client.repository.name})"
    )


README_ACTIONS_BADGE = Check("README - GitHub Actions badge", _actions_badge)
README_RUBYGEMS_BADGE = Check(
    "README - rubygems.org badge", _rubygems_badge, frozenset({"gem"})
)
