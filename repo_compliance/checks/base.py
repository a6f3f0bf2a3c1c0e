"""
Shared check types.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, NamedTuple

if TYPE_CHECKING:
    from repo_compliance.client import MetadataClient
    from repo_compliance.repository import Repository


class CheckResult(Enum):
    """Outcome of one check against one repository."""

    SUCCESS = "success"
    FAILURE = "failure"
    NOT_APPLICABLE = "not-applicable"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @property
    def css_class(self) -> str:
        return self.value


_GLYPHS = {
    CheckResult.SUCCESS: "✓",
    CheckResult.FAILURE: "✗",
    CheckResult.NOT_APPLICABLE: "-",
}


class Check(NamedTuple):
    """A named compliance check.

    ``tags`` restricts the check to repositories carrying at least one of
    them; an empty set makes it apply everywhere.
    """

    name: str
    predicate: Callable[["MetadataClient"], bool]
    tags: frozenset[str] = frozenset()

    def applies_to(self, repository: "Repository") -> bool:
        return not self.tags or not self.tags.isdisjoint(repository.tags)


def file_present_check(name: str, path: str, *tags: str) -> Check:
    """Build a check that passes when ``path`` exists in the repository."""

    def _check(client: "MetadataClient") -> bool:
        return client.file_exists(path)

    return Check(name, _check, frozenset(tags))
