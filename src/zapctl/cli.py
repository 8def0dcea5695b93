"""zapctl CLI - ZAP scan orchestration and k6 load tests."""

from zapctl.cli_commands import config_command, loadtest_command, scan_command  # noqa: F401
from zapctl.cli_commands.shared import app, console
from zapctl.config import (
    ENV_KEYS,
    ConfigError,
    get_bool,
    get_config,
    get_target_url,
    global_config_path,
    load_global_config,
    load_settings,
    parse_severity,
)
from zapctl.modules.loadtest import LoadTestError, get_profile, run_load_test
from zapctl.modules.report import write_summary_json
from zapctl.modules.scan import ScanOrchestrator
from zapctl.utils.async_utils import run_cancellable

__all__ = [
    "ENV_KEYS",
    "ConfigError",
    "LoadTestError",
    "ScanOrchestrator",
    "app",
    "get_bool",
    "get_config",
    "get_profile",
    "get_target_url",
    "global_config_path",
    "load_global_config",
    "load_settings",
    "main",
    "parse_severity",
    "run_cancellable",
    "run_load_test",
    "write_summary_json",
]


@app.command()
def version() -> None:
    """Show the installed zapctl version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("zapctl")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"zapctl {current_version}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
