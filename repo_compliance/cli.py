"""
Command-line interface for Repo Compliance.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from repo_compliance.checks import list_editions, load_checks
from repo_compliance.config import (
    get_edition,
    get_num_workers,
    set_config_path,
    set_verbose,
    set_verify_ssl,
)
from repo_compliance.core import RepositoryResult, evaluate_repositories
from repo_compliance.http_client import close_http_client
from repo_compliance.report import DEFAULT_TITLE, display_results, render_html
from repo_compliance.repository import filter_repositories, load_repositories
from repo_compliance.vcs import get_vcs_provider

# --- Typer App ---
app = typer.Typer(help="Audit repositories against compliance checks.")
# Status output goes to stderr so the HTML report can be piped from stdout.
console = Console(stderr=True)


def _apply_common_options(
    config: Path | None, insecure: bool, verbose: bool | None
) -> None:
    if config is not None:
        set_config_path(config)
    if insecure:
        set_verify_ssl(False)
    if verbose is not None:
        set_verbose(verbose)


def write_report(document: str, output: str | None) -> None:
    """Write the report to ``output``, or stdout when it is None or '-'."""
    if output is None or output == "-":
        typer.echo(document, nl=False)
        return
    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document, encoding="utf-8")
    console.print(f"[green]✨ Report written to {output_path}[/green]")


@app.command()
def check(
    repo_filter: str | None = typer.Argument(
        None,
        help="Only audit repositories whose full name contains this text.",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="HTML output file path (default: standard output).",
    ),
    edition: str | None = typer.Option(
        None,
        "--edition",
        "-e",
        help="Check catalogue edition. If not specified, uses config file default.",
    ),
    num_workers: int | None = typer.Option(
        None,
        "--num-workers",
        "-w",
        help="Repositories evaluated in parallel (default: 1, mind GitHub API rate limits).",
    ),
    title: str = typer.Option(DEFAULT_TITLE, "--title", help="HTML page title."),
    show_table: bool = typer.Option(
        False,
        "--show-table",
        help="Also print the matrix as a table in the terminal.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML config file with a [tool.repo-compliance] table.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Print each remote request. If not specified, uses config file default.",
    ),
) -> None:
    """
    Evaluate the compliance checks and render the HTML matrix.

    Exits with code 1 when any repository could not be fully evaluated; the
    partial report is still written.
    """
    _apply_common_options(config, insecure, verbose)

    try:
        checks = load_checks(edition or get_edition())
        repositories = filter_repositories(load_repositories(), repo_filter)
        workers = num_workers if num_workers is not None else get_num_workers()
        provider = get_vcs_provider("github")
    except ValueError as e:
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        raise typer.Exit(code=1) from None

    if not repositories:
        console.print("[yellow]No repositories match the filter.[/yellow]")

    console.print(
        f"🔍 Checking {len(repositories)} repository(ies) against "
        f"{len(checks)} check(s)..."
    )

    try:
        with Progress(console=console, transient=True) as progress:
            task = progress.add_task("Evaluating", total=len(repositories))

            def _advance(_result: RepositoryResult) -> None:
                progress.advance(task)

            results = evaluate_repositories(
                provider,
                repositories,
                checks,
                num_workers=max(1, workers),
                on_complete=_advance,
            )
    finally:
        close_http_client()

    if show_table:
        display_results(checks, results, console)

    write_report(render_html(checks, results, title=title), output)

    failed = [result for result in results if not result.complete]
    if failed:
        console.print(
            f"[red]✗ {len(failed)} repository(ies) could not be fully evaluated.[/red]"
        )
        raise typer.Exit(code=1)


@app.command("list-repositories")
def list_repositories(
    repo_filter: str | None = typer.Argument(
        None, help="Only list repositories whose full name contains this text."
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a TOML config file."
    ),
) -> None:
    """List the repositories that would be audited, with their tags."""
    _apply_common_options(config, False, None)
    try:
        repositories = filter_repositories(load_repositories(), repo_filter)
    except ValueError as e:
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        raise typer.Exit(code=1) from None

    table = Table(title="Repositories")
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("Tags")
    for repository in repositories:
        table.add_row(repository.full_name, ", ".join(sorted(repository.tags)))
    console.print(table)


@app.command("list-checks")
def list_checks(
    edition: str = typer.Option(
        "default",
        "--edition",
        "-e",
        help=f"Check catalogue edition ({', '.join(list_editions())}).",
    ),
) -> None:
    """List the checks of a catalogue edition, in evaluation order."""
    try:
        checks = load_checks(edition)
    except ValueError as e:
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        raise typer.Exit(code=1) from None

    table = Table(title=f"Checks ({edition})")
    table.add_column("#", justify="right")
    table.add_column("Check", style="cyan")
    table.add_column("Applies to")
    for index, item in enumerate(checks, start=1):
        applies_to = ", ".join(sorted(item.tags)) if item.tags else "all"
        table.add_row(str(index), item.name, applies_to)
    console.print(table)


if __name__ == "__main__":
    app()
