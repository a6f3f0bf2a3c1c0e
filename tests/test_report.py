"""
Tests for report rendering.
"""

from rich.console import Console

from repo_compliance.checks.base import Check, CheckResult
from repo_compliance.core import RepositoryResult
from repo_compliance.report import display_results, render_html
from repo_compliance.repository import Repository

CHECKS = [
    Check("License", lambda client: True),
    Check("Gemspec <mfa>", lambda client: True, frozenset({"gem"})),
    Check("Open issues", lambda client: True),
]
REPO = Repository("acme", "widget", frozenset({"ruby"}))


def test_render_html_structure():
    result = RepositoryResult(
        REPO,
        [CheckResult.SUCCESS, CheckResult.NOT_APPLICABLE, CheckResult.FAILURE],
    )

    document = render_html(CHECKS, [result], title="acme repositories")

    assert document.startswith("<!doctype html>")
    assert "<title>acme repositories</title>" in document
    assert document.count("<table>") == 1
    assert "<th>Repository</th>" in document
    assert "<th>License</th>" in document
    assert '<a href="https://github.com/acme/widget">acme/widget</a>' in document
    assert '<td class="success" title="SUCCESS">✓</td>' in document
    assert '<td class="not-applicable" title="NOT_APPLICABLE">-</td>' in document
    assert '<td class="failure" title="FAILURE">✗</td>' in document


def test_render_html_escapes_names():
    document = render_html(CHECKS, [])
    assert "<th>Gemspec &lt;mfa&gt;</th>" in document


def test_render_html_header_follows_check_order():
    document = render_html(CHECKS, [])
    positions = [document.index(f"<th>{name}</th>") for name in ("License", "Open issues")]
    assert positions == sorted(positions)


def test_render_html_incomplete_row_is_not_rendered_as_failure():
    result = RepositoryResult(REPO, [CheckResult.SUCCESS], error="Bad credentials")

    document = render_html(CHECKS, [result])

    assert '<td class="error" colspan="2">Evaluation stopped: Bad credentials</td>' in document
    assert 'class="failure"' not in document


def test_display_results_prints_table_and_warnings():
    console = Console(record=True, width=200)
    results = [
        RepositoryResult(REPO, [CheckResult.SUCCESS] * 3),
        RepositoryResult(
            Repository("acme", "broken"), [CheckResult.FAILURE], error="rate limited"
        ),
    ]

    display_results(CHECKS, results, console)

    text = console.export_text()
    assert "Repo Compliance Report" in text
    assert "acme/widget" in text
    assert "acme/broken incomplete: rate limited" in text
