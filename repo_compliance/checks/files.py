"""Checks for the presence of community and automation files."""

from repo_compliance.checks.base import file_present_check

AUTO_MERGE_WORKFLOW = file_present_check(
    "AutoMerge workflow", ".github/workflows/auto-merge.yml"
)
CODE_OF_CONDUCT = file_present_check("Code of conduct", "CODE_OF_CONDUCT.md")
DEPENDABOT = file_present_check("Dependabot", ".github/dependabot.yml")
GITHUB_ACTIONS = file_present_check("GitHub Actions", ".github/workflows/main.yml")
README = file_present_check("README", "README.md")
