"""Configuration CLI command."""

from pathlib import Path

import typer
import yaml

from .deps import cli_module
from .shared import app, console, err_console


@app.command()
def config(
    action: str = typer.Argument("show", help="Action: show, init"),
    global_config: bool = typer.Option(
        False,
        "--global",
        help="Use the global ~/.zapctl/config.yml instead of ./.env",
    ),
) -> None:
    """Show effective settings or create a config template."""
    cli = cli_module()

    if action == "init":
        path = cli.global_config_path() if global_config else Path.cwd() / ".env"
        if path.exists():
            console.print(f"[yellow]Config already exists:[/yellow] {path}")
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_template(global_config))
        console.print(f"[green]Created config:[/green] {path}")
        return

    if action == "show":
        if global_config:
            console.print(f"[bold]Global Configuration ({cli.global_config_path()}):[/bold]")
            console.print(yaml.safe_dump(cli.load_global_config(), default_flow_style=False))
            return
        try:
            settings = cli.load_settings()
        except cli.ConfigError as e:
            err_console.print(f"[red]Invalid configuration: {e}[/red]")
            raise typer.Exit(2)
        console.print("[bold]Effective scan settings:[/bold]")
        for key, value in settings.masked().items():
            console.print(f"  {key}={value}")
        return

    err_console.print(f"[red]Unknown action: {action}. Use 'show' or 'init'.[/red]")
    raise typer.Exit(2)


def _template(global_config: bool) -> str:
    cli = cli_module()
    if global_config:
        return "# zapctl global configuration\n" + "".join(
            f"# {key}:\n" for key in cli.ENV_KEYS
        )
    return "# zapctl project configuration\n" + "".join(f"# {key}=\n" for key in cli.ENV_KEYS)
