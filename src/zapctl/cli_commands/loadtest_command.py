"""Load-test CLI command."""

import asyncio
from typing import Optional

import typer

from zapctl.modules.loadtest import PROFILES, LoadTestEnv
from zapctl.utils.async_utils import cancel_on

from .deps import cli_module
from .shared import app, configure_logging, console, err_console


@app.command()
def loadtest(
    profile: str = typer.Argument("smoke", help=f"Profile: {', '.join(sorted(PROFILES))}"),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="URL under test (env: BASE_URL)"
    ),
    health_path: Optional[str] = typer.Option(
        None, "--health-path", help="Health endpoint path (env: HEALTH_PATH)"
    ),
    user_token: Optional[str] = typer.Option(
        None, "--user-token", help="Bearer token for authenticated requests (env: USER_TOKEN)"
    ),
    withdrawals: Optional[bool] = typer.Option(
        None,
        "--withdrawals/--no-withdrawals",
        help="Exercise trade placement (env: FEATURE_WITHDRAWALS=on)",
    ),
    timeout: float = typer.Option(900.0, "--timeout", help="Seconds before k6 is stopped"),
    summary: Optional[str] = typer.Option(
        None, "--summary", help="Write the k6 end-of-test summary JSON here"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run a k6 load profile against the target API."""
    cli = cli_module()
    configure_logging(verbose or cli.get_bool("ZAPCTL_VERBOSE"))

    try:
        selected = cli.get_profile(profile)
    except cli.LoadTestError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    env = LoadTestEnv(
        base_url=base_url or cli.get_target_url(),
        health_path=health_path or cli.get_config("HEALTH_PATH", default="/health"),
        user_token=user_token or cli.get_config("USER_TOKEN", default=""),
        feature_withdrawals=withdrawals
        if withdrawals is not None
        else str(cli.get_config("FEATURE_WITHDRAWALS", default="")).lower() == "on",
    )

    console.print(f"[blue]Running load profile {selected.name} against {env.base_url}...[/blue]")
    if selected.description:
        console.print(f"[dim]{selected.description}[/dim]")

    async def _run(cancel_event):
        return await cancel_on(
            cancel_event,
            cli.run_load_test(selected, env, timeout=timeout, summary_path=summary),
        )

    try:
        result = cli.run_cancellable(_run)
    except cli.LoadTestError as e:
        err_console.print(f"[red]Load test failed: {e}[/red]")
        raise typer.Exit(1)
    except asyncio.CancelledError:
        err_console.print("[yellow]Load test cancelled[/yellow]")
        raise typer.Exit(1)

    if verbose and result.stdout:
        console.print(result.stdout)
    console.print(f"[green]Load profile {selected.name} passed ({result.elapsed:.1f}s)[/green]")
