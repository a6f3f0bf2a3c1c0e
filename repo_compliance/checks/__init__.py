"""
Check registry.

Built-in checks are grouped into catalogue editions; third-party packages may
contribute extra checks through the ``repo_compliance.checks`` entry point
group.
"""

from importlib.metadata import entry_points

from repo_compliance.checks.base import Check, CheckResult, file_present_check
from repo_compliance.checks.dependabot import (
    DEPENDABOT_BUNDLER,
    DEPENDABOT_GITHUB_ACTIONS,
    DEPENDABOT_NPM,
)
from repo_compliance.checks.files import (
    AUTO_MERGE_WORKFLOW,
    CODE_OF_CONDUCT,
    DEPENDABOT,
    GITHUB_ACTIONS,
    README,
)
from repo_compliance.checks.readme import README_ACTIONS_BADGE, README_RUBYGEMS_BADGE
from repo_compliance.checks.ruby import (
    GEMSPEC_FILES,
    GEMSPEC_MFA,
    SYNTAX_TREE_FORMATTING,
)
from repo_compliance.checks.settings import (
    BRANCH_PROTECTION,
    LICENSE,
    MAIN_BRANCH,
    OPEN_ISSUES,
)

__all__ = [
    "CATALOGUES",
    "Check",
    "CheckResult",
    "ENTRY_POINT_GROUP",
    "file_present_check",
    "list_editions",
    "load_checks",
]

ENTRY_POINT_GROUP = "repo_compliance.checks"

DEFAULT_CATALOGUE: tuple[Check, ...] = (
    AUTO_MERGE_WORKFLOW,
    BRANCH_PROTECTION,
    CODE_OF_CONDUCT,
    DEPENDABOT,
    DEPENDABOT_BUNDLER,
    DEPENDABOT_GITHUB_ACTIONS,
    DEPENDABOT_NPM,
    GEMSPEC_MFA,
    GITHUB_ACTIONS,
    LICENSE,
    MAIN_BRANCH,
    OPEN_ISSUES,
    README,
    README_ACTIONS_BADGE,
    README_RUBYGEMS_BADGE,
    SYNTAX_TREE_FORMATTING,
)

EXTENDED_CATALOGUE: tuple[Check, ...] = (
    AUTO_MERGE_WORKFLOW,
    BRANCH_PROTECTION,
    CODE_OF_CONDUCT,
    DEPENDABOT,
    DEPENDABOT_BUNDLER,
    DEPENDABOT_NPM,
    DEPENDABOT_GITHUB_ACTIONS,
    GEMSPEC_FILES,
    GEMSPEC_MFA,
    GITHUB_ACTIONS,
    LICENSE,
    MAIN_BRANCH,
    OPEN_ISSUES,
    README,
    README_ACTIONS_BADGE,
    README_RUBYGEMS_BADGE,
    SYNTAX_TREE_FORMATTING,
)

CATALOGUES: dict[str, tuple[Check, ...]] = {
    "default": DEFAULT_CATALOGUE,
    "extended": EXTENDED_CATALOGUE,
}


def list_editions() -> list[str]:
    return sorted(CATALOGUES.keys())


def _load_entrypoint_checks() -> list[Check]:
    """Load checks registered by installed plugins.

    An entry point may name a Check or a zero-argument factory returning one;
    anything else is ignored.
    """
    checks = []
    for entry_point in entry_points(group=ENTRY_POINT_GROUP):
        loaded = entry_point.load()
        if isinstance(loaded, Check):
            checks.append(loaded)
        elif callable(loaded):
            produced = loaded()
            if isinstance(produced, Check):
                checks.append(produced)
    return checks


def load_checks(edition: str = "default", include_plugins: bool = True) -> list[Check]:
    """
    Build the ordered check list for a catalogue edition.

    Plugin checks are appended after the built-ins; a plugin cannot replace a
    built-in check of the same name.

    Raises:
        ValueError: If the edition is unknown.
    """
    if edition not in CATALOGUES:
        supported = ", ".join(list_editions())
        raise ValueError(
            f"Unknown check edition: {edition}. Available editions: {supported}"
        )

    checks = list(CATALOGUES[edition])
    if include_plugins:
        seen = {check.name for check in checks}
        for check in _load_entrypoint_checks():
            if check.name not in seen:
                checks.append(check)
                seen.add(check.name)
    return checks
