"""Scan CLI command."""

from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel

from zapctl.modules.scan import ScanOutcome, ScanSettings, summarize_alert

from .deps import cli_module
from .shared import app, configure_logging, console, err_console


@app.command()
def scan(
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="URL under test (env: BASE_URL)"
    ),
    engine_url: Optional[str] = typer.Option(
        None, "--zap-url", help="ZAP control API endpoint (env: ZAP_API_URL)"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="ZAP API key (env: ZAP_API_KEY)"
    ),
    passive_wait: Optional[float] = typer.Option(
        None, "--passive-wait", help="Seconds to let passive scanning run"
    ),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", help="Seconds between status checks"
    ),
    poll_timeout: Optional[float] = typer.Option(
        None, "--poll-timeout", help="Maximum seconds to wait for the active scan"
    ),
    max_polls: Optional[int] = typer.Option(
        None, "--max-polls", help="Maximum number of status checks"
    ),
    poll_retries: Optional[int] = typer.Option(
        None, "--poll-retries", help="Retries for a status check that cannot reach ZAP"
    ),
    threshold: Optional[str] = typer.Option(
        None, "--threshold", help="Lowest severity listed as notable (default: Medium)"
    ),
    fail_on: Optional[str] = typer.Option(
        None, "--fail-on", help="Fail the run when alerts at this severity or above exist"
    ),
    description_limit: Optional[int] = typer.Option(
        None, "--description-limit", help="Characters of alert description to show"
    ),
    report_path: Optional[Path] = typer.Option(
        None, "--report", "-o", help="Where to save the HTML report"
    ),
    json_path: Optional[Path] = typer.Option(
        None, "--json", help="Also write a JSON summary to this path"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run an active ZAP scan against the target and save the report."""
    cli = cli_module()
    configure_logging(verbose or cli.get_bool("ZAPCTL_VERBOSE"))

    try:
        settings = cli.load_settings(
            target=target,
            engine_url=engine_url,
            api_key=api_key,
            passive_wait=passive_wait,
            poll_interval=poll_interval,
            poll_timeout=poll_timeout,
            max_polls=max_polls,
            poll_retries=poll_retries,
            notable_threshold=cli.parse_severity(threshold) if threshold else None,
            fail_on=cli.parse_severity(fail_on) if fail_on else None,
            description_limit=description_limit,
            report_path=report_path,
        )
    except cli.ConfigError as e:
        err_console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(2)

    async def _run(cancel_event):
        orchestrator = cli.ScanOrchestrator(
            settings,
            progress=lambda msg: console.print(f"[dim]{msg}[/dim]"),
            cancel_event=cancel_event,
        )
        return await orchestrator.run()

    outcome = cli.run_cancellable(_run)
    print_outcome(outcome, settings)

    if json_path is not None:
        try:
            written = cli.write_summary_json(
                json_path, outcome, description_limit=settings.description_limit
            )
            console.print(f"[dim]JSON summary written to {written}[/dim]")
        except OSError as e:
            err_console.print(f"[yellow]Could not write JSON summary: {e}[/yellow]")

    raise typer.Exit(outcome.exit_code)


def print_outcome(outcome: ScanOutcome, settings: ScanSettings) -> None:
    """Print the notable alerts and the final status of a scan."""
    session = outcome.session
    classification = outcome.classification
    report = outcome.report

    if classification is not None:
        if classification.notable:
            console.print(
                f"\n[yellow]⚠️  {classification.threshold.label}+ Risk Alerts Found:[/yellow]"
            )
            for alert in classification.notable:
                console.print("\n".join(summarize_alert(alert, settings.description_limit)))
        else:
            console.print(
                f"[green]✅ No alerts at {classification.threshold.label} risk or above[/green]"
            )

    if report is not None and report.artifact_error is not None:
        err_console.print(f"[yellow]! {report.artifact_error}[/yellow]")

    if outcome.succeeded:
        counts = classification.counts if classification else {}
        count_text = ", ".join(f"{count} {severity.label}" for severity, count in counts.items())
        location = str(report.path) if report and report.path else "unavailable"
        console.print(
            Panel(
                f"[bold]Target:[/bold] {session.target}\n"
                f"[bold]Scan ID:[/bold] {session.scan_id}\n"
                f"[bold]Duration:[/bold] {outcome.duration:.1f}s\n"
                f"[bold]Notable alerts:[/bold] {len(classification.notable)}"
                f" ({count_text})\n"
                f"[bold]Report:[/bold] {location}",
                title="Security Scan Complete",
                border_style="green",
            )
        )
        return

    failure = session.failure
    phase = failure.phase if failure else session.phase.value
    message = failure.message if failure else "unknown error"
    err_console.print(f"[red]Security scan failed in phase {phase}: {message}[/red]")
