"""Build and run k6 commands for a load profile."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .models import PROFILES, LoadProfile, LoadTestEnv
from .runtime import CommandResult, resolve_binary, run_command

logger = logging.getLogger(__name__)

# k6 exits with 99 when a threshold in the script options is crossed.
K6_THRESHOLDS_FAILED = 99

# Environment for every k6 run; disables anonymous usage reporting.
K6_ENV = {"K6_NO_USAGE_REPORT": "true"}


class LoadTestError(RuntimeError):
    """The load generator could not run or reported failure."""


def get_profile(name: str) -> LoadProfile:
    """Return a built-in profile by name."""
    try:
        return PROFILES[name]
    except KeyError:
        available = ", ".join(sorted(PROFILES))
        raise LoadTestError(f"Unknown load profile {name!r}. Available: {available}") from None


def build_k6_command(
    profile: LoadProfile,
    env: LoadTestEnv,
    k6_binary: str = "k6",
    summary_path: str | None = None,
) -> list[str]:
    """Return the ``k6 run`` argument list for ``profile``."""
    command = [k6_binary, "run"]
    if profile.stages:
        for stage in profile.stages:
            command.extend(["--stage", stage.to_flag()])
    else:
        if profile.vus is not None:
            command.extend(["--vus", str(profile.vus)])
        if profile.duration:
            command.extend(["--duration", profile.duration])
    variables = {**profile.thresholds.as_vars(), **env.as_vars()}
    for key, value in variables.items():
        command.extend(["-e", f"{key}={value}"])
    if summary_path:
        command.extend(["--summary-export", summary_path])
    command.append(str(profile.script_path))
    return command


async def run_load_test(
    profile: LoadProfile,
    env: LoadTestEnv,
    timeout: float | None = None,
    summary_path: str | None = None,
    command_runner: Callable[..., Awaitable[Any]] | None = None,
) -> CommandResult:
    """Run ``profile`` with k6 and return the captured result."""
    k6 = resolve_binary("k6")
    if not k6:
        raise LoadTestError("k6 is not installed or not on PATH")

    command = build_k6_command(profile, env, k6_binary=k6, summary_path=summary_path)
    runner = command_runner or run_command
    logger.info("Running load profile %s against %s", profile.name, env.base_url)
    try:
        result = await runner(
            command,
            timeout=timeout,
            allowed_exit_codes=(0, K6_THRESHOLDS_FAILED),
            extra_env=K6_ENV,
        )
    except RuntimeError as exc:
        raise LoadTestError(f"k6 run failed: {exc}") from exc

    if result.returncode == K6_THRESHOLDS_FAILED:
        raise LoadTestError(f"Load profile {profile.name} crossed its thresholds")
    return result
