"""Subprocess helpers for invoking the k6 load generator."""

import asyncio
import logging
import os
import shlex
import shutil
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Grace period between SIGTERM and SIGKILL when stopping a run.
STOP_GRACE_SECONDS = 3.0


@dataclass
class CommandResult:
    """Exit status and decoded output of one finished process."""

    command: list[str]
    returncode: int
    stdout: str
    stderr: str
    elapsed: float = 0.0


def resolve_binary(name: str) -> str | None:
    """Return absolute path for a binary name when available."""
    return shutil.which(name)


async def _stop(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    process.terminate()
    try:
        await asyncio.wait_for(process.wait(), timeout=STOP_GRACE_SECONDS)
    except TimeoutError:
        process.kill()
        await process.wait()


async def run_command(
    command: list[str],
    timeout: float | None = None,
    allowed_exit_codes: Iterable[int] = (0,),
    extra_env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run ``command`` to completion and capture its output.

    ``extra_env`` is layered over the current environment. The process is stopped
    when ``timeout`` expires or the awaiting task is cancelled. Exit codes outside
    ``allowed_exit_codes`` raise ``RuntimeError`` carrying the last line of output.
    """
    env = {**os.environ, **extra_env} if extra_env else None
    logger.debug("running: %s", shlex.join(command))
    started = time.perf_counter()
    process = await asyncio.create_subprocess_exec(
        *command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=env,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        await _stop(process)
        raise RuntimeError(f"{command[0]} timed out after {timeout:g}s") from None
    except asyncio.CancelledError:
        await _stop(process)
        raise

    result = CommandResult(
        command=list(command),
        returncode=process.returncode,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
        elapsed=time.perf_counter() - started,
    )
    logger.debug("%s exited %d after %.2fs", command[0], result.returncode, result.elapsed)

    if result.returncode not in set(allowed_exit_codes):
        lines = (result.stderr or result.stdout).strip().splitlines()
        detail = lines[-1] if lines else "no output"
        raise RuntimeError(f"Command failed with exit code {result.returncode}: {detail}")
    return result
