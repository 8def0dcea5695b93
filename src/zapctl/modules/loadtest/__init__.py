"""k6 load-test launcher."""

from .models import PROFILES, LoadProfile, LoadStage, LoadTestEnv, LoadThresholds
from .runner import LoadTestError, build_k6_command, get_profile, run_load_test
from .runtime import CommandResult, resolve_binary, run_command

__all__ = [
    "PROFILES",
    "CommandResult",
    "LoadProfile",
    "LoadStage",
    "LoadTestEnv",
    "LoadTestError",
    "LoadThresholds",
    "build_k6_command",
    "get_profile",
    "resolve_binary",
    "run_command",
    "run_load_test",
]
