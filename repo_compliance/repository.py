"""
Repository registry: the audited repositories and their applicability tags.
"""

from typing import Iterable, NamedTuple

from repo_compliance.config import get_configured_repositories


class Repository(NamedTuple):
    """A repository under audit."""

    owner: str
    name: str
    tags: frozenset[str] = frozenset()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def url(self) -> str:
        return f"https://github.com/{self.full_name}"


def _repo(owner: str, name: str, *tags: str) -> Repository:
    return Repository(owner, name, frozenset(tags))


DEFAULT_REPOSITORIES: tuple[Repository, ...] = (
    _repo("kddnewton", "active_record-union_relation", "ruby", "gem"),
    _repo("kddnewton", "attribute_extras", "ruby", "gem"),
    _repo("kddnewton", "bundler-console", "ruby", "gem"),
    _repo("kddnewton", "exreg", "ruby", "gem"),
    _repo("kddnewton", "fast_camelize", "ruby", "gem"),
    _repo("kddnewton", "fast_parameterize", "ruby", "gem"),
    _repo("kddnewton", "fast_underscore", "ruby", "gem"),
    _repo("kddnewton", "gemfilelint", "ruby", "gem"),
    _repo("kddnewton", "hollaback", "ruby", "gem"),
    _repo("kddnewton", "humidifier", "ruby", "gem"),
    _repo("kddnewton", "minitest-keyword", "ruby", "gem"),
    _repo("kddnewton", "prettier-plugin-brainfuck", "javascript"),
    _repo("kddnewton", "prettier-plugin-ini", "javascript"),
    _repo("kddnewton", "ragel-bitmap", "ruby", "gem"),
    _repo("kddnewton", "rails-pattern_matching", "ruby", "gem"),
    _repo("kddnewton", "thor-hollaback", "ruby", "gem"),
    _repo("kddnewton", "yarv", "ruby"),
    _repo("prettier", "plugin-ruby", "ruby", "javascript"),
    _repo("prettier", "plugin-xml", "javascript"),
    _repo("ruby-syntax-tree", "node-syntax-tree", "javascript"),
    _repo("ruby-syntax-tree", "prettier_print", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree-bf", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree-css", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree-haml", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree-json", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree-rbs", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree-translator", "ruby", "gem"),
    _repo("ruby-syntax-tree", "syntax_tree-xml", "ruby", "gem"),
    _repo("ruby-syntax-tree", "vscode-syntax-tree", "javascript"),
    _repo("vue-a11y", "eslint-plugin-vuejs-accessibility", "javascript"),
)


def parse_repository_entry(entry: dict) -> Repository:
    """
    Build a Repository from a config table.

    Accepts either ``owner`` + ``name`` keys or a ``full_name`` of the form
    ``owner/name``; ``tags`` is an optional array of strings.

    Raises:
        ValueError: If the entry is missing its identity or has bad tags.
    """
    if not isinstance(entry, dict):
        raise ValueError(f"Repository entry must be a table, got {entry!r}")

    owner = entry.get("owner")
    name = entry.get("name")
    full_name = entry.get("full_name")
    if full_name and not (owner or name):
        owner, _, name = str(full_name).partition("/")

    if not owner or not name:
        raise ValueError(f"Repository entry needs 'owner' and 'name': {entry!r}")

    tags = entry.get("tags", [])
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise ValueError(f"'tags' must be an array of strings for {owner}/{name}")

    return Repository(str(owner), str(name), frozenset(tags))


def load_repositories() -> list[Repository]:
    """
    Load the repository registry.

    Uses the ``repositories`` array from the config file when present and the
    built-in DEFAULT_REPOSITORIES otherwise.
    """
    entries = get_configured_repositories()
    if entries is None:
        return list(DEFAULT_REPOSITORIES)
    return [parse_repository_entry(entry) for entry in entries]


def filter_repositories(
    repositories: Iterable[Repository], substring: str | None
) -> list[Repository]:
    """
    Keep repositories whose full name contains ``substring`` (case-sensitive).

    An empty or missing filter keeps everything; relative order is preserved.
    """
    if not substring:
        return list(repositories)
    return [repo for repo in repositories if substring in repo.full_name]
