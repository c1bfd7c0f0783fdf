"""CLI entry point for repolint."""

import asyncio
import json
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import httpx
import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from repolint.analyzers.github import GitHubError
from repolint.analyzers.scorecard import ScorecardClient
from repolint.checks import CHECKS
from repolint.linter import Linter, RepositoryRootError
from repolint.models.schemas import LinterMode, LintReport

app = typer.Typer(help="Repository best-practice checks.")

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@app.command()
def lint(
    path: Path = typer.Argument(..., help="Path of the repository clone"),
    mode: LinterMode = typer.Option(LinterMode.LOCAL, "--mode", "-m", help="Linter mode"),
    repo_url: str | None = typer.Option(None, "--repo-url", "-u", help="GitHub repository URL (remote mode)"),
    token: str | None = typer.Option(None, "--token", help="GitHub token (defaults to GITHUB_TOKEN)"),
    scorecard_path: str = typer.Option("scorecard", "--scorecard", help="Scorecard executable"),
    scorecard_timeout: int = typer.Option(600, "--scorecard-timeout", help="Scorecard timeout in seconds"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Lint a repository against the registered checks."""
    _configure_logging(verbose)
    asyncio.run(_lint(path, mode, repo_url, token, scorecard_path, scorecard_timeout, output))


async def _lint(
    path: Path,
    mode: LinterMode,
    repo_url: str | None,
    token: str | None,
    scorecard_path: str,
    scorecard_timeout: int,
    output: Path | None,
) -> None:
    """Async implementation of lint."""
    linter = Linter(
        github_token=token,
        scorecard=ScorecardClient(executable=scorecard_path, timeout=scorecard_timeout),
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Linting {path}...", total=None)
        try:
            report = await linter.lint(path, mode=mode, repo_url=repo_url)
        except (RepositoryRootError, ValueError, GitHubError, httpx.HTTPError) as e:
            console.print(f"[red]Error linting repository: {e}[/red]")
            raise typer.Exit(1)

    _print_report(report)

    if output:
        output.write_text(json.dumps(report.model_dump(mode="json"), indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


def _print_report(report: LintReport) -> None:
    """Render the check results as a table."""
    table = Table(title=f"{report.root} ({report.mode.value})")
    table.add_column("Check", style="cyan")
    table.add_column("Sets", style="dim")
    table.add_column("Weight", justify="right", style="dim")
    table.add_column("Result")
    table.add_column("Evidence", max_width=60)

    for result in sorted(report.results, key=lambda r: r.id):
        status = "[green]passed[/green]" if result.output.passed else "[red]not passed[/red]"
        evidence = result.output.evidence_url or result.output.fail_reason or "-"
        sets = ", ".join(sorted(s.value for s in result.metadata.check_sets))
        table.add_row(result.id, sets, str(result.metadata.weight), status, evidence)

    console.print(table)

    if report.scorecard_error:
        console.print(f"[yellow]Scorecard unavailable:[/yellow] {report.scorecard_error}")

    if report.errors:
        console.print(f"[bold red]Errors:[/bold red] {len(report.errors)} checks failed")
        for check_id, error in sorted(report.errors.items()):
            console.print(f"  [red]x[/red] {check_id}: {error}")


@app.command()
def checks() -> None:
    """List the registered checks."""
    table = Table(title=f"{len(CHECKS)} Checks")
    table.add_column("Check", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Sets")
    table.add_column("Scorecard", style="dim")

    for check_id in sorted(CHECKS):
        metadata = CHECKS[check_id].metadata
        table.add_row(
            check_id,
            str(metadata.weight),
            ", ".join(sorted(s.value for s in metadata.check_sets)),
            metadata.scorecard_name or "-",
        )

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from repolint import __version__

    console.print(f"repolint v{__version__}")


if __name__ == "__main__":
    app()
