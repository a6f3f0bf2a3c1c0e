"""
Tests for the core evaluation logic.
"""

from unittest.mock import patch

import httpx

from repo_compliance.checks import load_checks
from repo_compliance.checks.base import Check, CheckResult
from repo_compliance.client import MetadataClient
from repo_compliance.core import (
    RepositoryResult,
    evaluate_check,
    evaluate_repositories,
    evaluate_repository,
)
from repo_compliance.repository import Repository
from repo_compliance.vcs.base import RateLimitedError, UnauthorizedError
from repo_compliance.vcs.github import GitHubProvider

GEM = Repository("acme", "widget", frozenset({"ruby", "gem"}))
JS = Repository("acme", "widget-js", frozenset({"javascript"}))


class CountingPredicate:
    """Predicate stub that records how often it was invoked."""

    def __init__(self, outcome=True):
        self.outcome = outcome
        self.calls = 0

    def __call__(self, client):
        self.calls += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _row(result: RepositoryResult, checks) -> dict[str, CheckResult]:
    return {check.name: status for check, status in zip(checks, result.results)}


# --- evaluate_check ---


def test_not_applicable_never_invokes_predicate(make_provider):
    predicate = CountingPredicate()
    check = Check("Gem only", predicate, frozenset({"gem"}))
    client = MetadataClient(make_provider(), JS)

    assert evaluate_check(check, client) == CheckResult.NOT_APPLICABLE
    assert predicate.calls == 0


def test_untagged_check_always_applies(make_provider):
    predicate = CountingPredicate(False)
    check = Check("Anything", predicate)
    client = MetadataClient(make_provider(), JS)

    assert evaluate_check(check, client) == CheckResult.FAILURE
    assert predicate.calls == 1


def test_tag_overlap_runs_predicate(make_provider):
    predicate = CountingPredicate(True)
    check = Check("Ruby or JS", predicate, frozenset({"ruby", "javascript"}))

    assert evaluate_check(check, MetadataClient(make_provider(), JS)) == (
        CheckResult.SUCCESS
    )
    assert predicate.calls == 1


def test_predicate_result_is_coerced_by_truthiness(make_provider):
    client = MetadataClient(make_provider(), GEM)
    assert evaluate_check(Check("None", lambda c: None), client) == CheckResult.FAILURE
    assert evaluate_check(Check("Text", lambda c: "yes"), client) == CheckResult.SUCCESS


def test_predicate_error_is_recorded_as_failure(make_provider):
    check = Check("Malformed", CountingPredicate(ValueError("bad yaml")))
    client = MetadataClient(make_provider(), GEM)

    assert evaluate_check(check, client) == CheckResult.FAILURE


# --- evaluate_repository ---


def test_gem_repository_scenario(make_provider):
    provider = make_provider(
        files={
            "README.md": "[![CI](https://github.com/acme/widget/actions)](https://github.com/acme/widget/actions)",
            "widget.gemspec": 'spec.metadata["rubygems_mfa_required"] = "true"',
        },
        default_branch="main",
        license="mit",
        issues=[],
    )
    checks = load_checks(include_plugins=False)

    result = evaluate_repository(provider, GEM, checks)
    row = _row(result, checks)

    assert result.complete
    assert len(result.results) == len(checks)
    assert row["Code of conduct"] == CheckResult.FAILURE
    assert row["README"] == CheckResult.SUCCESS
    assert row["README - GitHub Actions badge"] == CheckResult.SUCCESS
    assert row["Gemspec - rubygems_mfa_required"] == CheckResult.SUCCESS
    assert row["main branch"] == CheckResult.SUCCESS
    assert row["License"] == CheckResult.SUCCESS
    assert row["Open issues"] == CheckResult.SUCCESS
    assert row["Dependabot - npm"] == CheckResult.NOT_APPLICABLE


def test_javascript_repository_skips_ruby_and_gem_checks(make_provider):
    provider = make_provider(
        files={
            "widget-js.gemspec": "rubygems_mfa_required",
            "Gemfile.lock": "syntax_tree",
            "README.md": "(https://rubygems.org/gems/widget-js)",
        }
    )
    checks = load_checks(include_plugins=False)

    row = _row(evaluate_repository(provider, JS, checks), checks)

    for check in checks:
        if check.tags and check.tags <= {"ruby", "gem"}:
            assert row[check.name] == CheckResult.NOT_APPLICABLE, check.name
    assert provider.calls[("contents", "acme/widget-js", "widget-js.gemspec")] == 0
    assert provider.calls[("contents", "acme/widget-js", "Gemfile.lock")] == 0


def test_forbidden_branch_protection_is_success(make_provider):
    checks = load_checks(include_plugins=False)
    result = evaluate_repository(
        make_provider(branch_protection="forbidden"), GEM, checks
    )

    assert result.complete
    assert _row(result, checks)["Branch protection"] == CheckResult.SUCCESS


def test_missing_dependabot_config_is_never_fatal(make_provider):
    checks = load_checks(include_plugins=False)
    gem_row = _row(evaluate_repository(make_provider(), GEM, checks), checks)
    js_row = _row(evaluate_repository(make_provider(), JS, checks), checks)

    assert gem_row["Dependabot"] == CheckResult.FAILURE
    assert gem_row["Dependabot - bundler"] == CheckResult.FAILURE
    assert gem_row["Dependabot - GitHub Actions"] == CheckResult.FAILURE
    assert gem_row["Dependabot - npm"] == CheckResult.NOT_APPLICABLE
    assert js_row["Dependabot - bundler"] == CheckResult.NOT_APPLICABLE
    assert js_row["Dependabot - npm"] == CheckResult.FAILURE


def test_malformed_dependabot_config_fails_only_its_checks(make_provider):
    provider = make_provider(files={".github/dependabot.yml": "- just\n- a list\n"})
    checks = load_checks(include_plugins=False)

    result = evaluate_repository(provider, GEM, checks)
    row = _row(result, checks)

    assert result.complete
    assert row["Dependabot"] == CheckResult.SUCCESS
    assert row["Dependabot - bundler"] == CheckResult.FAILURE
    assert row["Dependabot - GitHub Actions"] == CheckResult.FAILURE
    assert row["License"] == CheckResult.SUCCESS


def test_evaluation_is_idempotent(make_provider):
    provider = make_provider(
        files={"README.md": "https://github.com/acme/widget/actions"},
        issues=[{"number": 3}],
    )
    checks = load_checks(include_plugins=False)

    first = evaluate_repository(provider, GEM, checks)
    second = evaluate_repository(provider, GEM, checks)

    assert first == second


def test_each_file_fetched_once_per_repository(make_provider):
    provider = make_provider(files={"README.md": "hello"})
    checks = load_checks(include_plugins=False)

    evaluate_repository(provider, GEM, checks)

    fetches = [
        count for key, count in provider.calls.items() if key[0] == "contents"
    ]
    assert fetches and all(count == 1 for count in fetches)


def test_fatal_error_keeps_partial_row(make_provider):
    provider = make_provider(
        failures={("repository", None): UnauthorizedError("Bad credentials", 401)}
    )
    checks = load_checks(include_plugins=False)

    result = evaluate_repository(provider, GEM, checks)

    license_index = [check.name for check in checks].index("License")
    assert not result.complete
    assert "Bad credentials" in result.error
    assert len(result.results) == license_index


def test_fatal_error_in_predicate_is_not_a_failure_cell(make_provider):
    check = Check("Rate limited", CountingPredicate(RateLimitedError("limit", 429)))
    after = CountingPredicate(True)

    result = evaluate_repository(
        make_provider(), GEM, [check, Check("After", after)]
    )

    assert result.results == []
    assert result.error == "limit"
    assert after.calls == 0


# --- evaluate_repositories ---


def _repositories():
    return [Repository("acme", f"repo{i}", frozenset({"ruby"})) for i in range(6)]


def test_evaluate_repositories_preserves_order_in_parallel(make_provider):
    provider = make_provider(files={"README.md": "x"})
    checks = load_checks(include_plugins=False)
    repositories = _repositories()

    sequential = evaluate_repositories(provider, repositories, checks)
    parallel = evaluate_repositories(provider, repositories, checks, num_workers=4)

    assert [r.repository for r in parallel] == repositories
    assert parallel == sequential


def test_evaluate_repositories_isolates_fatal_errors(make_provider):
    class PartiallyBrokenProvider(make_provider):
        def list_open_issues(self, full_name):
            if full_name == "acme/repo2":
                raise RateLimitedError("API rate limit exceeded", 403)
            return super().list_open_issues(full_name)

    seen = []
    results = evaluate_repositories(
        PartiallyBrokenProvider(),
        _repositories(),
        load_checks(include_plugins=False),
        num_workers=3,
        on_complete=seen.append,
    )

    assert [r.complete for r in results] == [True, True, False, True, True, True]
    assert len(seen) == 6


def test_evaluate_repositories_empty(make_provider):
    assert evaluate_repositories(make_provider(), [], load_checks()) == []


# --- evaluation against the GitHub REST provider ---


def _github_handler(readme=None, protection=None):
    """Serve a minimal gem repository; unknown contents paths are 404."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        requested.append(path)
        if path.endswith("/contents/README.md") and readme is not None:
            return readme
        if "/contents/" in path:
            return httpx.Response(404, json={"message": "Not Found"})
        if path.endswith("/protection"):
            return protection or httpx.Response(200, json={"enabled": True})
        if path.endswith("/issues"):
            return httpx.Response(200, json=[])
        return httpx.Response(
            200, json={"default_branch": "main", "license": {"key": "mit"}}
        )

    return handler, requested


def test_non_json_success_response_stops_the_row():
    handler, requested = _github_handler(
        readme=httpx.Response(200, text="<html>proxy login</html>")
    )
    provider = GitHubProvider(token="test_token", transport=httpx.MockTransport(handler))
    checks = load_checks(include_plugins=False)

    result = evaluate_repository(provider, GEM, checks)

    readme_index = [check.name for check in checks].index("README")
    assert not result.complete
    assert "invalid JSON" in result.error
    assert len(result.results) == readme_index
    assert requested.count("/repos/acme/widget/contents/README.md") == 1


def test_secondary_rate_limit_on_branch_protection_stops_the_row():
    handler, _ = _github_handler(
        protection=httpx.Response(
            403,
            json={"message": "You have exceeded a secondary rate limit"},
            headers={"retry-after": "60", "x-ratelimit-remaining": "4000"},
        )
    )
    provider = GitHubProvider(token="test_token", transport=httpx.MockTransport(handler))
    checks = load_checks(include_plugins=False)

    result = evaluate_repository(provider, GEM, checks)

    protection_index = [check.name for check in checks].index("Branch protection")
    assert not result.complete
    assert "secondary rate limit" in result.error
    assert len(result.results) == protection_index


def test_parallel_workers_share_one_http_client():
    handler, _ = _github_handler()
    provider = GitHubProvider(token="test_token", transport=httpx.MockTransport(handler))

    with patch(
        "repo_compliance.http_client.httpx.Client", wraps=httpx.Client
    ) as client_cls:
        results = evaluate_repositories(
            provider, _repositories(), load_checks(include_plugins=False), num_workers=4
        )

    assert client_cls.call_count == 1
    assert all(result.complete for result in results)
