"""
Report rendering: the HTML compliance matrix and a terminal summary table.
"""

import html
from typing import Sequence

from rich.console import Console
from rich.table import Table

from repo_compliance.checks.base import Check, CheckResult
from repo_compliance.core import RepositoryResult

DEFAULT_TITLE = "Repository compliance"

_RICH_STYLES = {
    CheckResult.SUCCESS: "green",
    CheckResult.FAILURE: "red",
    CheckResult.NOT_APPLICABLE: "dim",
}

_STYLESHEET = """
      table { border-collapse: collapse; font-family: sans-serif; font-size: 14px; }
      th, td { border: 1px solid #ddd; padding: 4px 8px; text-align: center; }
      th { background: #f5f5f5; }
      td.repository { text-align: left; }
      td.success { color: #1a7f37; }
      td.failure { color: #cf222e; }
      td.not-applicable { color: #8c959f; }
      td.error { color: #9a6700; text-align: left; }
"""


def _render_row(result: RepositoryResult, column_count: int) -> str:
    h = html.escape
    repository = result.repository
    cells = [
        f'<td class="repository"><a href="{h(repository.url)}">'
        f"{h(repository.full_name)}</a></td>"
    ]
    for status in result.results:
        cells.append(
            f'<td class="{status.css_class}" title="{status.name}">{status.glyph}</td>'
        )
    if result.error is not None:
        remaining = column_count - len(result.results)
        cells.append(
            f'<td class="error" colspan="{max(remaining, 1)}">'
            f"Evaluation stopped: {h(result.error)}</td>"
        )
    joined = "\n          ".join(cells)
    return f"""        <tr>
          {joined}
        </tr>"""


def render_html(
    checks: Sequence[Check],
    results: Sequence[RepositoryResult],
    title: str = DEFAULT_TITLE,
) -> str:
    """Render the compliance matrix as a standalone HTML document."""
    h = html.escape
    header_cells = "\n".join(
        f"          <th>{h(check.name)}</th>" for check in checks
    )
    rows = "\n".join(_render_row(result, len(checks)) for result in results)

    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="initial-scale=1, maximum-scale=5">
    <title>{h(title)}</title>
    <style>{_STYLESHEET}    </style>
  </head>
  <body>
    <table>
      <thead>
        <tr>
          <th>Repository</th>
{header_cells}
        </tr>
      </thead>
      <tbody>
{rows}
      </tbody>
    </table>
  </body>
</html>
"""


def display_results(
    checks: Sequence[Check],
    results: Sequence[RepositoryResult],
    console: Console,
) -> None:
    """Display the compliance matrix in a rich table."""
    table = Table(title="Repo Compliance Report")
    table.add_column("Repository", justify="left", style="cyan", no_wrap=True)
    for check in checks:
        table.add_column(check.name, justify="center")

    for result in results:
        cells = [
            f"[{_RICH_STYLES[status]}]{status.glyph}[/{_RICH_STYLES[status]}]"
            for status in result.results
        ]
        if result.error is not None:
            cells.extend("[yellow]?[/yellow]" for _ in checks[len(result.results) :])
        table.add_row(result.full_name, *cells)

    console.print(table)

    for result in results:
        if result.error is not None:
            console.print(
                f"[yellow]⚠️  {result.full_name} incomplete: {result.error}[/yellow]"
            )
