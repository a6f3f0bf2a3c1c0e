"""
Dependabot configuration checks.

Each check looks for an ``updates`` entry covering one package ecosystem in
``.github/dependabot.yml``. A missing config file fails the check; content
that does not have the expected shape raises and is recorded as a failure by
the evaluator.
"""

from typing import Any

import yaml

from repo_compliance.checks.base import Check
from repo_compliance.client import MetadataClient

DEPENDABOT_CONFIG_PATH = ".github/dependabot.yml"


def load_dependabot_updates(client: MetadataClient) -> list[dict[str, Any]] | None:
    """
    Parse the ``updates`` list of the dependabot config.

    Returns:
        The update entries, or None when the config file does not exist.

    Raises:
        ValueError: If the document is not a mapping with an ``updates`` list.
        yaml.YAMLError: If the document is not valid YAML.
    """
    content = client.decoded_file_content(DEPENDABOT_CONFIG_PATH)
    if content is None:
        return None

    document = yaml.safe_load(content)
    if not isinstance(document, dict):
        raise ValueError(f"{DEPENDABOT_CONFIG_PATH} is not a mapping")

    updates = document.get("updates")
    if not isinstance(updates, list):
        raise ValueError(f"{DEPENDABOT_CONFIG_PATH} has no 'updates' list")
    return updates


def has_ecosystem(client: MetadataClient, ecosystem: str) -> bool:
    """Check whether dependabot updates ``ecosystem``."""
    updates = load_dependabot_updates(client)
    if updates is None:
        return False
    return any(
        isinstance(update, dict) and update.get("package-ecosystem") == ecosystem
        for update in updates
    )


def ecosystem_check(name: str, ecosystem: str, *tags: str) -> Check:
    def _check(client: MetadataClient) -> bool:
        return has_ecosystem(client, ecosystem)

    return Check(name, _check, frozenset(tags))


DEPENDABOT_BUNDLER = ecosystem_check("Dependabot - bundler", "bundler", "ruby")
DEPENDABOT_GITHUB_ACTIONS = ecosystem_check(
    "Dependabot - GitHub Actions", "github-actions"
)
DEPENDABOT_NPM = ecosystem_check("Dependabot - npm", "npm", "javascript")
