"""Ruby and gem packaging checks."""

import re

from repo_compliance.checks.base import Check
from repo_compliance.client import MetadataClient

GEMFILE_LOCK_PATH = "Gemfile.lock"

# ``spec.files = ...`` or ``s.files = ...``, but not ``spec.test_files``.
_FILES_DECLARATION = re.compile(r"\b\w+\.files\s*=")


def gemspec_path(client: MetadataClient) -> str:
    return f"{client.repository.name}.gemspec"


def _gemspec_mfa(client: MetadataClient) -> bool:
    content = client.decoded_file_content(gemspec_path(client))
    return content is not None and "rubygems_mfa_required" in content


def _gemspec_files(client: MetadataClient) -> bool:
    content = client.decoded_file_content(gemspec_path(client))
    return content is not None and _FILES_DECLARATION.search(content) is not None


def _syntax_tree(client: MetadataClient) -> bool:
    # Repositories without a lockfile have nothing to format-check.
    content = client.decoded_file_content(GEMFILE_LOCK_PATH)
    return content is None or "syntax_tree" in content


GEMSPEC_MFA = Check("Gemspec - rubygems_mfa_required", _gemspec_mfa, frozenset({"gem"}))
GEMSPEC_FILES = Check("Gemspec - files", _gemspec_files, frozenset({"gem"}))
SYNTAX_TREE_FORMATTING = Check(
    "Syntax Tree formatting", _syntax_tree, frozenset({"ruby"})
)
