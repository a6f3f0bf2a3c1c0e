"""
Core evaluation logic for Repo Compliance.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, NamedTuple

from rich.console import Console

from repo_compliance.checks.base import Check, CheckResult
from repo_compliance.client import MetadataClient
from repo_compliance.repository import Repository
from repo_compliance.vcs.base import BaseVCSProvider, VCSError

console = Console(stderr=True)


class RepositoryResult(NamedTuple):
    """Check outcomes for one repository, in check order.

    When a fatal remote error stopped the evaluation, ``results`` holds the
    outcomes computed before it and ``error`` describes the failure.
    """

    repository: Repository
    results: list[CheckResult]
    error: str | None = None

    @property
    def full_name(self) -> str:
        return self.repository.full_name

    @property
    def complete(self) -> bool:
        return self.error is None


def evaluate_check(check: Check, client: MetadataClient) -> CheckResult:
    """
    Evaluate a single check against a repository.

    The predicate is only invoked when the check applies to the repository.
    Predicate errors (malformed file contents and the like) count as FAILURE;
    remote access errors propagate.

    Raises:
        VCSError: If the remote could not be queried.
    """
    if not check.applies_to(client.repository):
        return CheckResult.NOT_APPLICABLE

    try:
        passed = check.predicate(client)
    except VCSError:
        raise
    except Exception as e:
        console.print(
            f"  [yellow]⚠️  {check.name} failed for "
            f"{client.repository.full_name}: {e}[/yellow]"
        )
        return CheckResult.FAILURE

    return CheckResult.SUCCESS if passed else CheckResult.FAILURE


def evaluate_repository(
    provider: BaseVCSProvider, repository: Repository, checks: Iterable[Check]
) -> RepositoryResult:
    """
    Run every check against one repository with a fresh MetadataClient.

    A fatal remote error ends the row early; it is recorded on the result
    instead of being folded into a FAILURE cell.
    """
    client = MetadataClient(provider, repository)
    results: list[CheckResult] = []
    for check in checks:
        try:
            results.append(evaluate_check(check, client))
        except VCSError as e:
            console.print(
                f"  [red]✗ {repository.full_name}: stopped at '{check.name}' ({e})[/red]"
            )
            return RepositoryResult(repository, results, str(e))
    return RepositoryResult(repository, results)


def evaluate_repositories(
    provider: BaseVCSProvider,
    repositories: Iterable[Repository],
    checks: Iterable[Check],
    num_workers: int = 1,
    on_complete: Callable[[RepositoryResult], None] | None = None,
) -> list[RepositoryResult]:
    """
    Evaluate repositories, sequentially or with a thread pool.

    Output order always matches the input order, whatever the worker count.

    Args:
        provider: Remote metadata provider shared by all clients
        repositories: Repositories to evaluate
        checks: Ordered check list
        num_workers: Number of repositories evaluated concurrently
        on_complete: Called once per finished repository (progress reporting)
    """
    repository_list = list(repositories)
    check_list = list(checks)

    def _run(repository: Repository) -> RepositoryResult:
        result = evaluate_repository(provider, repository, check_list)
        if on_complete is not None:
            on_complete(result)
        return result

    if num_workers <= 1 or len(repository_list) <= 1:
        return [_run(repository) for repository in repository_list]

    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        return list(executor.map(_run, repository_list))
