"""Main CLI entry point for quotescan command."""

import json
import mimetypes
import os
import sys
import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from typing import Optional

from .. import __version__
from ..core.lead_value import LeadTier, ProjectSize, QualificationFactors, Urgency, calculate_lead_value
from ..core.scorer import QuoteScorer, ScoreReport
from ..core.signals import QuoteSignals, SignalParseError
from ..extraction.providers import DEFAULT_MODEL_CHAIN, MockSignalProvider, ProviderError, get_provider
from ..extraction.rubric import EXTRACTION_RUBRIC, build_user_prompt

console = Console()

TIER_COLORS = {
    LeadTier.WHALE: "magenta",
    LeadTier.HOT: "red",
    LeadTier.WARM: "yellow",
    LeadTier.COLD: "blue",
    LeadTier.DISQUALIFIED: "dim",
}


def score_style(score: int) -> str:
    """Color for a 0-100 score."""
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    return "red"


@click.group()
@click.version_option(version=__version__, prog_name="quotescan")
def cli():
    """Quote Scanner - trust reports for window/door quotes.

    \b
    Quick Start:
      quotescan score signals.json --openings 12      # Score saved signals
      quotescan analyze quote.jpg --mock              # Extract + score a document
      quotescan value --homeowner yes --size entire_home --urgency asap
    """
    pass


# ============================================================================
# SCORING COMMANDS
# ============================================================================

@cli.command()
@click.argument("signals_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--openings", "-o", type=int, help="Homeowner's opening count (used when the quote has none)")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--explain", is_flag=True, help="Print a plain-text breakdown")
def score(signals_path: str, openings: Optional[int], as_json: bool, explain: bool):
    """Score a saved provider signals JSON file.

    \b
    Examples:
      quotescan score ./signals.json
      quotescan score ./signals.json --openings 12 --json
    """
    try:
        with open(signals_path, encoding="utf-8") as f:
            data = json.load(f)
        signals = QuoteSignals.from_dict(data)
    except (UnicodeDecodeError, json.JSONDecodeError, SignalParseError) as e:
        console.print(f"[red]Invalid signals file:[/red] {e}")
        sys.exit(1)

    scorer = QuoteScorer()
    report = scorer.score(signals, openings)

    if explain:
        console.print(Panel(
            scorer.explain_report(report),
            title=f"Score: {report.overall_score}/100"
        ))
        return

    _print_report(report, as_json)


@cli.command()
@click.argument("document_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--openings", "-o", type=int, help="Homeowner's opening count hint")
@click.option("--area", "-a", help="City/county the project is in")
@click.option("--mock", is_flag=True, help="Use the built-in sample signals instead of a model")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def analyze(document_path: str, openings: Optional[int], area: Optional[str], mock: bool, as_json: bool):
    """Extract signals from a quote image/PDF and score them.

    Uses Gemini when QS_GEMINI_API_KEY is set.
    """
    path = Path(document_path)
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"

    try:
        if mock:
            provider = MockSignalProvider()
        else:
            models = [m.strip() for m in os.getenv("QS_GEMINI_MODELS", "").split(",") if m.strip()]
            provider = get_provider(
                api_key=os.getenv("QS_GEMINI_API_KEY"),
                models=models or DEFAULT_MODEL_CHAIN,
                timeout=float(os.getenv("QS_PROVIDER_TIMEOUT", "60")),
            )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Analyzing {path.name} with {provider.provider_name}...", total=None)
            report = provider.analyze(path.read_bytes(), mime_type, openings, area)
    except ProviderError as e:
        console.print(f"[red]Extraction failed:[/red] {e}")
        sys.exit(1)

    _print_report(report, as_json)


@cli.command()
@click.option("--homeowner", type=click.Choice(["yes", "no", "unknown"]), default="unknown",
              help="Does the visitor own the home?")
@click.option("--size", type=click.Choice([s.value for s in ProjectSize]), help="Window/door count bucket")
@click.option("--urgency", type=click.Choice([u.value for u in Urgency]), help="Project timeline")
@click.option("--verified", is_flag=True, help="Phone verified by SMS code")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def value(homeowner: str, size: Optional[str], urgency: Optional[str], verified: bool, as_json: bool):
    """Calculate a lead's monetary value and tier.

    \b
    Examples:
      quotescan value --homeowner yes --size entire_home --urgency asap
      quotescan value --homeowner yes --size 6-10 --urgency 1_3_months --verified
    """
    factors = QualificationFactors.from_answers(
        is_homeowner=homeowner,
        window_count=size,
        timeline=urgency,
        sms_verified=verified,
    )
    result = calculate_lead_value(factors)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    color = TIER_COLORS.get(result.tier, "")
    console.print(Panel.fit(
        f"Value: [bold]${result.value}[/bold]\n"
        f"Tier: [{color}]{result.tier.value.upper()}[/{color}]\n\n"
        f"[dim]{result.reasoning}[/dim]",
        title="Lead Value"
    ))


# ============================================================================
# UTILITY COMMANDS
# ============================================================================

@cli.command()
@click.option("--openings", "-o", type=int, help="Include an opening count hint")
@click.option("--area", "-a", help="Include an area hint")
def rubric(openings: Optional[int], area: Optional[str]):
    """Print the extraction prompt sent to the vision model."""
    click.echo(EXTRACTION_RUBRIC.strip())
    click.echo("")
    click.echo(build_user_prompt(openings, area))


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _print_report(report: ScoreReport, as_json: bool):
    """Render a report as JSON or a rich panel + table."""
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        return

    if not report.is_graded:
        console.print(Panel(
            f"[yellow]{report.warnings[0]}[/yellow]\n\n{report.summary}",
            title="Not Graded"
        ))
        return

    table = Table(title=f"Price per opening: {report.price_per_opening}")
    table.add_column("Category")
    table.add_column("Weight", justify="right", style="dim")
    table.add_column("Score", justify="right", style="bold")

    rows = [
        ("Safety & code match", "30%", report.safety_score),
        ("Install & scope clarity", "25%", report.scope_score),
        ("Price fairness", "20%", report.price_score),
        ("Fine print", "15%", report.fine_print_score),
        ("Warranty", "10%", report.warranty_score),
    ]
    for name, weight, category_score in rows:
        style = score_style(category_score)
        table.add_row(name, weight, f"[{style}]{category_score}[/{style}]")

    console.print(table)

    for warning in report.warnings:
        console.print(f"[red]Warning:[/red] {warning}")
    for item in report.missing_items:
        console.print(f"[yellow]Missing:[/yellow] {item}")

    style = score_style(report.overall_score)
    console.print(Panel(
        report.summary,
        title=f"Score: [{style}]{report.overall_score}/100[/{style}]"
    ))


if __name__ == "__main__":
    cli()
