from ._subprocess import ProcessLauncherSubprocess
from .base import (
    LaunchResult,
    ProcessDescriptor,
    ProcessLauncher,
    resolve_executable,
    wait_settle,
)

__all__ = [
    "LaunchResult",
    "ProcessDescriptor",
    "ProcessLauncher",
    "ProcessLauncherSubprocess",
    "resolve_executable",
    "wait_settle",
]
